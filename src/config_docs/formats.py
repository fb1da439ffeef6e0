"""Serialization formats used for the example blocks."""

from __future__ import annotations

import abc
import enum
from typing import Any

import tomlkit

from config_docs.exceptions import UnsupportedFormatError


class ConfigFormat(enum.Enum):
    """The serialization format to display examples in.

    Only formats with a registered :class:`FormatStrategy` can be rendered.
    The remaining members are reserved names.
    """

    TOML = "toml"
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def parse(cls, text: str) -> ConfigFormat:
        """Return the format named *text* (case-insensitive)."""
        try:
            return cls(text.strip().lower())
        except ValueError as err:
            raise UnsupportedFormatError(text) from err

    def extension(self) -> str:
        """File extension for this format."""
        return get_strategy(self).extension()

    def format_scalar(self, value: Any) -> str:
        """Format a value appropriately for this format."""
        return get_strategy(self).format_scalar(value)


class FormatStrategy(abc.ABC):
    """How a format spells its example blocks."""

    name: str = ""

    @abc.abstractmethod
    def extension(self) -> str:
        """File extension of the format, without a dot."""

    def open_block(self) -> str:
        """Opening fence of an example block."""
        return f"```{self.name}"

    def close_block(self) -> str:
        """Closing fence of an example block."""
        return "```"

    @abc.abstractmethod
    def section_header(self, name: str) -> str:
        """Line introducing the section *name* inside its example block."""

    @abc.abstractmethod
    def comment(self, text: str) -> str:
        """One line of *text* as a comment."""

    @abc.abstractmethod
    def assignment(self, name: str, value: str) -> str:
        """Line setting *name* to the already formatted *value*."""

    @abc.abstractmethod
    def format_scalar(self, value: Any) -> str:
        """Literal spelling of *value* in the format."""


# TOML integers are signed 64-bit.
TOML_INT_MIN = -(2**63)
TOML_INT_MAX = 2**63 - 1


class TomlFormat(FormatStrategy):
    """TOML examples: ``[section]`` tables and ``key = value`` lines."""

    name = "toml"

    def extension(self) -> str:
        return "toml"

    def section_header(self, name: str) -> str:
        return f"[{name}]"

    def comment(self, text: str) -> str:
        return f"# {text}"

    def assignment(self, name: str, value: str) -> str:
        return f"{name} = {value}"

    def format_scalar(self, value: Any) -> str:
        if isinstance(value, int) and not isinstance(value, bool):
            if not TOML_INT_MIN <= value <= TOML_INT_MAX:
                raise ValueError(f"integer {value} does not fit in a TOML integer")
        # tomlkit spells booleans in lowercase and quotes strings.
        return tomlkit.item(value).as_string()


_REGISTRY: dict[ConfigFormat, FormatStrategy] = {
    ConfigFormat.TOML: TomlFormat(),
}


def register_format(config_format: ConfigFormat, strategy: FormatStrategy) -> None:
    """Register *strategy* as the implementation of *config_format*."""
    _REGISTRY[config_format] = strategy


def get_strategy(config_format: ConfigFormat) -> FormatStrategy:
    """Look up the strategy for *config_format*.

    Raises
    ------
    UnsupportedFormatError
        If nothing is registered for *config_format*.
    """
    try:
        return _REGISTRY[config_format]
    except (KeyError, TypeError) as err:
        raise UnsupportedFormatError(config_format) from err


def registered_formats() -> list[ConfigFormat]:
    """Formats that can currently be rendered, in declaration order."""
    return [fmt for fmt in ConfigFormat if fmt in _REGISTRY]
