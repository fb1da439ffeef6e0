"""Custom exceptions for config-docs."""

from __future__ import annotations


class ConfigDocsError(Exception):
    """Base exception for config-docs operations."""


class UnsupportedFormatError(ConfigDocsError):
    """No format strategy is registered for the requested format."""

    def __init__(self, config_format: object) -> None:
        self.config_format = config_format
        name = getattr(config_format, "value", config_format)
        super().__init__(f"unsupported config format '{name}'")


class MalformedAdapterError(ConfigDocsError):
    """A configuration type produced a schema that breaks the adapter contract."""

    def __init__(self, type_name: str, field_name: str | None, reason: str) -> None:
        self.type_name = type_name
        self.field_name = field_name
        self.reason = reason
        location = type_name if field_name is None else f"{type_name}.{field_name}"
        super().__init__(f"{location}: {reason}")


class BuilderConsumedError(ConfigDocsError, RuntimeError):
    """A schema builder was used again after ``build()``."""
