"""Tests for the anchored scanner."""

from __future__ import annotations

import pytest

from stache import LexError
from stache._scanner import Scanner


class TestMatching:
    def test_matches_is_anchored(self) -> None:
        scanner = Scanner('abc')
        assert scanner.matches('a')
        assert not scanner.matches('b')

    def test_matches_does_not_consume(self) -> None:
        scanner = Scanner('abc')
        scanner.matches('ab')
        assert scanner.position == 0


class TestScan:
    def test_scan_advances_by_match_length(self) -> None:
        scanner = Scanner('hello world')
        assert scanner.scan('hel+o') == 'hello'
        assert scanner.position == 5
        assert scanner.scan(' ') == ' '
        assert scanner.scan('world') == 'world'
        assert not scanner.has_remaining()

    def test_empty_match_does_not_advance(self) -> None:
        scanner = Scanner('abc')
        assert scanner.scan('x*') == ''
        assert scanner.position == 0

    def test_dot_matches_newlines(self) -> None:
        scanner = Scanner('a\nb')
        assert scanner.scan('.*') == 'a\nb'

    def test_failure_raises_lex_error(self) -> None:
        scanner = Scanner('ab\ncd')
        scanner.scan('ab\n')
        with pytest.raises(LexError) as exc_info:
            scanner.scan('x')
        assert exc_info.value.offset == 3
        assert exc_info.value.pattern == 'x'
        assert exc_info.value.line == 2
        assert exc_info.value.column == 1
        assert str(exc_info.value) == "Pattern 'x' failed at offset 3 at line 2, column 1"

    def test_failure_does_not_move_cursor(self) -> None:
        scanner = Scanner('abc')
        with pytest.raises(LexError):
            scanner.scan('b')
        assert scanner.position == 0


class TestFind:
    def test_find_searches_from_cursor(self) -> None:
        scanner = Scanner('a{{b{{c')
        assert scanner.find('{{') == 1
        scanner.scan_to(3)
        assert scanner.find('{{') == 4
        assert scanner.find('}}') == -1

    def test_scan_to_consumes_up_to_offset(self) -> None:
        scanner = Scanner('hello world')
        assert scanner.scan_to(5) == 'hello'
        assert scanner.position == 5
        assert scanner.scan_to(5) == ''

    def test_scan_to_never_moves_back(self) -> None:
        scanner = Scanner('abc')
        scanner.scan('ab')
        with pytest.raises(ValueError, match='Cannot move back from offset 2 to 1'):
            scanner.scan_to(1)


class TestLineStart:
    def test_start_of_source(self) -> None:
        assert Scanner('abc').at_line_start()

    def test_after_newline(self) -> None:
        scanner = Scanner('a\nb')
        scanner.scan('a')
        assert not scanner.at_line_start()
        scanner.scan('\n')
        assert scanner.at_line_start()

    def test_after_crlf(self) -> None:
        scanner = Scanner('a\r\nb')
        scanner.scan('a\r\n')
        assert scanner.at_line_start()
