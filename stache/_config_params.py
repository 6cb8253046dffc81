from __future__ import annotations as _annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, TypeVar

from typing_extensions import get_args, get_origin

from stache._exceptions import StacheConfigError

T = TypeVar('T')

MissingPolicyValues = Literal['empty', 'raise']
"""Possible values for the `missing_variables` and `missing_partials` parameters."""


@dataclass(slots=True)
class ConfigParam:
    """A parameter that can be configured for a stache environment."""

    env_vars: list[str]
    """Environment variables to check for the parameter."""
    allow_file_config: bool = False
    """Whether the parameter can be set in the config file."""
    default: Any = None
    """Default value if no other value is found."""
    tp: Any = str
    """Type of the parameter."""


# fmt: off
MISSING_VARIABLES = ConfigParam(env_vars=['STACHE_MISSING_VARIABLES'], allow_file_config=True, default='empty', tp=MissingPolicyValues)
"""Whether an unresolvable name renders as empty text or raises `ResolutionError`."""
MISSING_PARTIALS = ConfigParam(env_vars=['STACHE_MISSING_PARTIALS'], allow_file_config=True, default='empty', tp=MissingPolicyValues)
"""Whether a missing partial renders as empty text or raises `PartialNotFoundError`."""
MAX_PARTIAL_DEPTH = ConfigParam(env_vars=['STACHE_MAX_PARTIAL_DEPTH'], allow_file_config=True, default=100, tp=int)
"""How deeply partials may include other partials before `PartialDepthError` is raised."""
ESCAPE_HTML = ConfigParam(env_vars=['STACHE_ESCAPE_HTML'], allow_file_config=True, default=True, tp=bool)
"""Whether `{{name}}` tags are HTML-escaped."""
# fmt: on

CONFIG_PARAMS = {
    'missing_variables': MISSING_VARIABLES,
    'missing_partials': MISSING_PARTIALS,
    'max_partial_depth': MAX_PARTIAL_DEPTH,
    'escape_html': ESCAPE_HTML,
}


@dataclass
class ParamManager:
    """Manage parameters for a stache environment."""

    config_from_file: dict[str, Any]
    """Config loaded from the config file."""

    @classmethod
    def create(cls, config_dir: Path | None = None) -> ParamManager:
        config_dir = Path(config_dir or os.getenv('STACHE_CONFIG_DIR') or '.')
        config_from_file = _load_config_from_file(config_dir)
        return ParamManager(config_from_file=config_from_file)

    def load_param(self, name: str, runtime: Any = None) -> Any:
        """Load a parameter given its name.

        The parameter is loaded in the following order:
        1. From the runtime argument, if provided.
        2. From the environment variables.
        3. From the config file, if allowed.

        If none of the above is found, the default value is returned.

        Args:
            name: Name of the parameter.
            runtime: Value provided at runtime.

        Returns:
            The value of the parameter.
        """
        param = CONFIG_PARAMS[name]
        if runtime is not None:
            return self._cast(runtime, name, param.tp)

        for env_var in param.env_vars:
            value = os.getenv(env_var)
            # `None` (unset) and `''` (empty string) are generally considered the same
            if value:
                return self._cast(value, name, param.tp)

        if param.allow_file_config:
            value = self.config_from_file.get(name)
            if value is not None:
                return self._cast(value, name, param.tp)

        return self._cast(param.default, name, param.tp)

    def _cast(self, value: Any, name: str, tp: type[T]) -> T | None:
        if tp is str:
            return value
        if get_origin(tp) is Literal:
            return _check_literal(value, name, tp)
        if tp is bool:
            return _check_bool(value, name)  # type: ignore
        if tp is int:
            return _check_int(value, name)  # type: ignore
        raise RuntimeError(f'Unexpected type {tp}')  # pragma: no cover


def _check_literal(value: Any, name: str, tp: type[T]) -> T | None:
    if value is None:  # pragma: no cover
        return None
    literals = get_args(tp)
    if value not in literals:
        raise StacheConfigError(f'Expected {name} to be one of {literals}, got {value!r}')
    return value


def _check_bool(value: Any, name: str) -> bool | None:
    if value is None:  # pragma: no cover
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in ('1', 'true', 't'):
            return True
        if value.lower() in ('0', 'false', 'f'):
            return False
    raise StacheConfigError(f'Expected {name} to be a boolean, got {value!r}')


def _check_int(value: Any, name: str) -> int | None:
    if value is None:  # pragma: no cover
        return None
    if isinstance(value, bool):
        raise StacheConfigError(f'Expected {name} to be an integer, got {value!r}')
    try:
        result = int(value)
    except (TypeError, ValueError):
        raise StacheConfigError(f'Expected {name} to be an integer, got {value!r}') from None
    if result < 1:
        raise StacheConfigError(f'Expected {name} to be positive, got {value!r}')
    return result


def _load_config_from_file(config_dir: Path) -> dict[str, Any]:
    config_file = config_dir / 'pyproject.toml'
    if not config_file.exists():
        return {}
    try:
        data = read_toml_file(config_file)
        return data.get('tool', {}).get('stache', {})
    except Exception as exc:
        raise StacheConfigError(f'Invalid config file: {config_file}') from exc


def read_toml_file(path: Path) -> dict[str, Any]:
    """Read a TOML file and return the parsed data.

    It wraps the `tomllib.load` function from Python 3.11 or the `tomli.load` function from older versions.
    """
    if sys.version_info >= (3, 11):  # pragma: no branch
        from tomllib import load as load_toml
    else:
        from tomli import load as load_toml  # pragma: no cover

    with path.open('rb') as f:
        data = load_toml(f)
    return data
