from __future__ import annotations

import logging

from collections import ChainMap
from typing import Any, Callable, Iterable, Iterator, Optional

logger = logging.getLogger("polyread.config")


class ConfigError(Exception):
    """Exception class for Config related errors."""


class Enum:
    """Variants enumeration.

    Used to define variants for the option.
    """

    def __init__(self, *variants: str | int | bool | None):
        self.variants = variants

    def match(self, value: Any) -> bool:
        return value in self.variants

    def __repr__(self):
        variants = ', '.join(repr(v) for v in self.variants)
        return f"Enum({variants})"

    def __str__(self):
        variants = ' | '.join(str(v) for v in self.variants)
        return f"({variants})"


class Option:
    """Config option.

    Used to define the schema. Immutable.

    Parameters:
        type: Option's type or an `Enum` of allowed values.
        default: Option's default value.
        required: If the option is required and not assigned, validation
                  fails.
        check: Predicate applied to assigned values.
    """

    type: type | Enum
    default: Any
    required: bool
    check: Optional[Callable[[Any], bool]]

    def __init__(self, type, default=None, required=False, check=None):
        super().__setattr__('type', type)
        super().__setattr__('default', default)
        super().__setattr__('required', required)
        super().__setattr__('check', check)

    def __setattr__(self, name: str, value: Any):
        raise AttributeError(f"option is immutable: {name!r}")

    def __delattr__(self, name: str):
        raise AttributeError(f"option is immutable: {name!r}")

    def __repr__(self):
        tp = self.type.__name__ if type(self.type) is type else self.type
        return (f"Option({tp}, default={self.default!r}, "
                f"required={self.required})")


def _to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _to_none(value: str) -> Optional[str]:
    return None if value.lower() == 'none' else value


class Config:
    def __init__(self, schema: dict[str, Option]):
        """Initialize Config instance.

        Options that are not in the schema are rejected.

        Args:
            schema: Schema mapping.
        """
        self._config = ChainMap(schema)
        self._types: dict[type, Callable[[str], Any]] = {}

        register = self.register_type
        register(int, int)
        register(bool, _to_bool)
        register(str, str)

    @property
    def schema(self) -> dict[str, Option]:
        """Return the schema mapping."""
        return self._config.maps[-1]

    @property
    def layers(self) -> int:
        """Total number of override layers."""
        return len(self._config.maps) - 1

    def register_type(self, type_: type, convert_fn: Callable[[str], Any]):
        """Add the string conversion function for the type."""
        self._types[type_] = convert_fn

    def override(self, options: dict[str, Any]):
        """Assign options to config.

        Each call adds new option values on top of the old ones. If any
        value is rejected, the config remains unchanged.

        Raises:
            ConfigError
        """
        layer = {name: self._check(name, value, convert=False)
                 for name, value in options.items()}
        self._config.maps.insert(0, layer)

    def parse(self, it: Iterable[str]):
        """Parse and override options.

        Option string has the format `<option_name>=<value>`. Values are
        converted to the option's type.

        Raises:
            ConfigError
        """
        layer = {}
        for s in it:
            name, sep, value = s.partition('=')
            name = name.strip()
            if not sep or not name:
                raise ConfigError(f"expected <option>=<value>, got {s!r}")
            layer[name] = self._check(name, value.strip(), convert=True)
        self._config.maps.insert(0, layer)

    def validate(self) -> None:
        """Check that all required options are assigned.

        Raises:
            ConfigError
        """
        missing = [name for name, value in self._config.items()
                   if isinstance(value, Option) and value.required]
        if missing:
            opts = ', '.join(repr(n) for n in missing)
            raise ConfigError(f"required options: {opts}")

    def clear(self):
        """Remove assigned options, preserving the schema."""
        self._config.maps = self._config.maps[-1:]

    def _check(self, name: str, value: Any, convert: bool) -> Any:
        if name not in self.schema:
            raise ConfigError(f"unknown option: {name!r}")
        option = self.schema[name]
        tp = option.type

        if convert and isinstance(value, str):
            value = self._convert(name, tp, value)

        if isinstance(tp, Enum):
            if not tp.match(value):
                raise ConfigError(f"option {name!r} must be one of the "
                                  f"following: {tp}, got {value!r}")
        elif value is not None and not isinstance(value, tp):
            raise ConfigError(f"option {name!r} must be of type "
                              f"{tp.__name__}, got {type(value).__name__}: "
                              f"{value!r}")

        if value is not None and option.check and not option.check(value):
            raise ConfigError(f"invalid value of option {name!r}: {value!r}")

        logger.debug("option %s = %r", name, value)
        return value

    def _convert(self, name: str, tp: type | Enum, value: str) -> Any:
        if isinstance(tp, Enum):
            return value
        if tp is str:
            return _to_none(value)
        convert_fn = self._types.get(tp)
        if convert_fn is None:
            raise ConfigError(f"option {name!r}: no conversion for "
                              f"type {tp.__name__}")
        try:
            return convert_fn(value)
        except ValueError as e:
            raise ConfigError(f"option {name!r}: {e}") from e

    def items(self) -> Iterator[tuple[str, Any]]:
        for name in self.schema:
            yield name, getattr(self, name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        if name in self._config:
            value = self._config[name]
            if isinstance(value, Option):
                return value.default
            return value
        raise AttributeError(f"no such config value: {name!r}")

    def __getitem__(self, name: str) -> Any:
        return getattr(self, name)

    def __contains__(self, name: str) -> bool:
        return name in self._config

    def __iter__(self) -> Iterator[str]:
        yield from self.schema

    def __repr__(self):
        lines = ["Config({"]
        for name, val in self.items():
            lines.append(f"  {name!r}: {val!r},")
        lines.append("})")
        return '\n'.join(lines)


READER_OPTIONS = {
    "bufsize": Option(int, default=4096, check=lambda v: v > 0),
    "name": Option(str),
    "report": Option(Enum("log", "collect"), default="log"),
}


def reader_config(options: Iterable[str] = ()) -> Config:
    """Create the reader config from `<option>=<value>` strings."""
    cfg = Config(READER_OPTIONS)
    cfg.parse(options)
    cfg.validate()
    return cfg
