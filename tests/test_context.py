"""Tests for host value wrappers and name resolution."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from stache import Context, HostValue, ResolutionError, SafeString, reflect, render
from stache._values import ABSENT, MappingValue, ObjectValue, ScalarValue, SequenceValue


@dataclass
class Person:
    name: str
    nickname: str | None = None


class TestReflect:
    @pytest.mark.parametrize(
        'data, cls',
        [
            (None, ScalarValue),
            (True, ScalarValue),
            (3, ScalarValue),
            (1.5, ScalarValue),
            ('text', ScalarValue),
            ([1, 2], SequenceValue),
            ((1, 2), SequenceValue),
            ({'a': 1}, MappingValue),
            (Person('Ann'), ObjectValue),
        ],
    )
    def test_variant(self, data: object, cls: type[HostValue]) -> None:
        assert type(reflect(data)) is cls

    def test_host_values_pass_through(self) -> None:
        value = reflect('x')
        assert reflect(value) is value


class TestText:
    @pytest.mark.parametrize(
        'data, text',
        [
            (None, ''),
            (True, 'true'),
            (False, 'false'),
            (42, '42'),
            (1.5, '1.5'),
            ('hi', 'hi'),
        ],
    )
    def test_scalar_text(self, data: object, text: str) -> None:
        assert reflect(data).to_text() == text

    def test_absent_text(self) -> None:
        assert ABSENT.to_text() == ''

    def test_safe_string(self) -> None:
        assert reflect(SafeString('<b>')).is_safe
        assert not reflect('<b>').is_safe


class TestTruthiness:
    @pytest.mark.parametrize('data', [None, False, 0, 0.0, '', []])
    def test_falsy(self, data: object) -> None:
        assert not reflect(data).is_truthy()
        assert reflect(data).to_list() == []

    @pytest.mark.parametrize('data', [True, 1, 'x', [0], {}, Person('Ann')])
    def test_truthy(self, data: object) -> None:
        assert reflect(data).is_truthy()

    def test_absent_is_falsy(self) -> None:
        assert not ABSENT.is_truthy()
        assert ABSENT.to_list() == []


class TestToList:
    def test_sequence_elements(self) -> None:
        assert [value.raw for value in reflect([1, 'a', None]).to_list()] == [1, 'a', None]

    def test_truthy_scalar_is_single_element(self) -> None:
        value = reflect('x')
        assert value.to_list() == [value]

    def test_mapping_is_single_element(self) -> None:
        value = reflect({'a': 1})
        assert value.to_list() == [value]


class TestMembers:
    def test_mapping(self) -> None:
        value = reflect({'a': 1})
        assert value.has('a')
        assert not value.has('b')
        assert value.lookup('a').raw == 1

    def test_sequence_index(self) -> None:
        value = reflect(['x', 'y'])
        assert value.has('1')
        assert not value.has('2')
        assert not value.has('first')
        assert value.lookup('1').raw == 'y'

    def test_object_attribute(self) -> None:
        value = reflect(Person('Ann'))
        assert value.has('name')
        assert value.lookup('name').raw == 'Ann'
        assert not value.has('age')

    def test_object_dunder_blocked(self) -> None:
        value = reflect(Person('Ann'))
        assert not value.has('__class__')
        with pytest.raises(KeyError):
            value.lookup('__class__')

    def test_scalar_has_no_members(self) -> None:
        assert not reflect('text').has('upper')

    @pytest.mark.parametrize('error', [AttributeError, KeyError, IndexError])
    def test_lookup_errors_mean_absent(self, error: type[Exception]) -> None:
        class Broken:
            @property
            def value(self) -> str:
                raise error('value')

        value = reflect(Broken())
        assert not value.has('value')
        with pytest.raises(KeyError):
            value.lookup('value')
        assert render('[{{value}}]', Broken()) == '[]'

    def test_other_host_errors_propagate(self) -> None:
        class Broken:
            @property
            def value(self) -> str:
                raise ValueError('bad value')

        with pytest.raises(ValueError, match='bad value'):
            reflect(Broken()).has('value')
        with pytest.raises(ValueError, match='bad value'):
            Context.root(Broken()).resolve('value')
        with pytest.raises(ValueError, match='bad value'):
            render('{{value}}', Broken())

    def test_single_underscore_attributes_are_reachable(self) -> None:
        class Thing:
            _hidden = 'h'

        assert reflect(Thing()).lookup('_hidden').raw == 'h'


class TestResolve:
    def test_current_value(self) -> None:
        context = Context.root({'a': 1}).extend(reflect('inner'))
        assert context.resolve('.').raw == 'inner'

    def test_bare_name(self) -> None:
        assert Context.root({'a': 1}).resolve('a').raw == 1

    def test_walks_outward(self) -> None:
        context = Context.root({'outer': 'o'}).extend(reflect({'inner': 'i'}))
        assert context.resolve('inner').raw == 'i'
        assert context.resolve('outer').raw == 'o'

    def test_innermost_wins(self) -> None:
        context = Context.root({'x': 'outer'}).extend(reflect({'x': 'inner'}))
        assert context.resolve('x').raw == 'inner'

    def test_dotted_name(self) -> None:
        context = Context.root({'a': {'b': {'c': 'deep'}}})
        assert context.resolve('a.b.c').raw == 'deep'

    def test_dotted_name_does_not_search_outward_after_first_segment(self) -> None:
        context = Context.root({'a': {'b': 'outer'}}).extend(reflect({'a': {}}))
        with pytest.raises(ResolutionError) as exc_info:
            context.resolve('a.b')
        assert exc_info.value.name == 'a.b'

    def test_unresolved(self) -> None:
        with pytest.raises(ResolutionError, match="Cannot resolve name: 'missing'"):
            Context.root({}).resolve('missing')

    def test_extend_shares_parent(self) -> None:
        root = Context.root({})
        child = root.extend(reflect(1))
        assert child.parent is root
        assert list(child.frames()) == [child, root]
