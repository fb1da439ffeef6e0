"""Schema extraction from dataclass configuration types.

A configuration type is any class offering ``schema(config_format)``. The
:func:`config_docs` decorator provides that method for dataclasses by walking
their fields::

    @config_docs(rename_all="camelCase", export=True)
    @dataclass
    class Server:
        listen_port: int = config_field(default=8080, doc="Port to bind.")

Per-field metadata is read from ``dataclasses.field(metadata=...)``:
``rename`` replaces the serialized key verbatim and ``doc`` holds the
documentation text (a string or a list of lines).

Field types are resolved with :func:`typing.get_type_hints`, which only sees
module globals. Types local to a function work when the annotations are the
classes themselves; string annotations naming such local classes (for
instance under ``from __future__ import annotations``) cannot be resolved and
raise :class:`~config_docs.exceptions.MalformedAdapterError`.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from typing import Any, Callable, Protocol, TypeVar

from config_docs.exceptions import MalformedAdapterError
from config_docs.formats import ConfigFormat, FormatStrategy, get_strategy
from config_docs.naming import apply_rename_all, is_known_style
from config_docs.schema import ConfigSchema, FieldInfo

logger = logging.getLogger(__name__)

RENAME_KEY = "rename"
DOC_KEY = "doc"
RENAME_ALL_ATTR = "__config_docs_rename_all__"

# char has no type of its own in Python; a one-character str is a str.
PRIMITIVE_TYPES: tuple[type, ...] = (bool, int, float, str)

T = TypeVar("T")

_EXPORTED: list[type] = []


class ConfigDocsStruct(Protocol):
    """Types that can describe their configuration fields."""

    @classmethod
    def schema(cls, config_format: ConfigFormat = ConfigFormat.TOML) -> ConfigSchema:
        """Generate a schema describing this type and its fields."""
        ...


def config_field(
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Callable[[], Any] | Any = dataclasses.MISSING,
    rename: str | None = None,
    doc: str | list[str] | None = None,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field carrying documentation metadata."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    if rename is not None:
        metadata[RENAME_KEY] = rename
    if doc is not None:
        metadata[DOC_KEY] = doc
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **kwargs,
    )


def config_docs(
    cls: type[T] | None = None,
    *,
    rename_all: str | None = None,
    export: bool = False,
) -> Any:
    """Class decorator adding a ``schema()`` classmethod to a dataclass.

    Parameters
    ----------
    rename_all:
        Case style applied to every field without an explicit ``rename``.
    export:
        Record the type so :func:`exported_types` returns it and the
        ``gen-docs`` command writes its document.
    """

    def wrap(klass: type[T]) -> type[T]:
        if not dataclasses.is_dataclass(klass):
            raise MalformedAdapterError(
                klass.__name__, None, "config_docs can only be applied to dataclasses"
            )
        if rename_all is not None and not is_known_style(rename_all):
            logger.warning(
                "%s: unknown rename_all style '%s', field names are kept",
                klass.__name__,
                rename_all,
            )
        setattr(klass, RENAME_ALL_ATTR, rename_all)
        setattr(klass, "schema", classmethod(_schema_method))
        if export and klass not in _EXPORTED:
            _EXPORTED.append(klass)
        return klass

    if cls is None:
        return wrap
    return wrap(cls)


def _schema_method(cls: type, config_format: ConfigFormat = ConfigFormat.TOML) -> ConfigSchema:
    return schema_for(cls, config_format)


def exported_types(module: str | None = None) -> list[type]:
    """Types decorated with ``export=True``, optionally only those of *module*."""
    if module is None:
        return list(_EXPORTED)
    return [klass for klass in _EXPORTED if klass.__module__ == module]


def schema_for(cls: type, config_format: ConfigFormat = ConfigFormat.TOML) -> ConfigSchema:
    """Build the schema of the dataclass *cls*.

    Fields are visited in declaration order. Primitive fields become leaves,
    dataclass-typed fields become sections holding the nested type's fields.

    Raises
    ------
    UnsupportedFormatError
        If *config_format* has no registered strategy.
    MalformedAdapterError
        For fields of unsupported or unresolvable types, section types that
        contain themselves, failing default factories and empty nested
        sections.
    """
    return _schema_for(cls, config_format, visiting=frozenset())


def _schema_for(
    cls: type, config_format: ConfigFormat, *, visiting: frozenset[type]
) -> ConfigSchema:
    type_name = cls.__name__
    if not dataclasses.is_dataclass(cls):
        raise MalformedAdapterError(type_name, None, "configuration types must be dataclasses")
    strategy = get_strategy(config_format)
    rename_all = getattr(cls, RENAME_ALL_ATTR, None)
    visiting = visiting | {cls}

    try:
        hints = typing.get_type_hints(cls)
    except NameError as err:
        # names local to a function are not visible; resolve field by field
        logger.debug("%s: falling back to per-field types: %s", type_name, err)
        hints = {}
    except TypeError as err:
        raise MalformedAdapterError(type_name, None, f"cannot resolve field types: {err}") from err

    builder = ConfigSchema.builder()
    for item in dataclasses.fields(cls):
        builder.add_field(
            _field_info(
                type_name,
                item,
                hints.get(item.name) or _declared_type(type_name, item),
                rename_all=rename_all,
                strategy=strategy,
                config_format=config_format,
                visiting=visiting,
            )
        )
    schema = builder.build()
    logger.debug("extracted %d fields from %s", len(schema.fields), type_name)
    return schema


def _declared_type(type_name: str, item: dataclasses.Field) -> Any:
    if not isinstance(item.type, str):
        return item.type
    for primitive in PRIMITIVE_TYPES:
        if item.type == primitive.__name__:
            return primitive
    raise MalformedAdapterError(
        type_name, item.name, f"cannot resolve field type '{item.type}'"
    )


def _field_info(
    type_name: str,
    item: dataclasses.Field,
    hint: Any,
    *,
    rename_all: str | None,
    strategy: FormatStrategy,
    config_format: ConfigFormat,
    visiting: frozenset[type],
) -> FieldInfo:
    rename = item.metadata.get(RENAME_KEY)
    final_name = rename if rename is not None else apply_rename_all(item.name, rename_all)
    info = FieldInfo.new(final_name)

    doc = _field_doc(item)
    if doc is not None:
        info.doc(doc)

    if hint in PRIMITIVE_TYPES:
        return info.default(_field_default(type_name, item, strategy)).field_type(hint.__name__)

    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        if hint in visiting:
            raise MalformedAdapterError(type_name, item.name, "recursive section type")
        nested_schema = _nested_schema(hint, config_format, visiting)
        if not nested_schema.fields:
            raise MalformedAdapterError(type_name, item.name, "nested section has no fields")
        return info.field_type(hint.__name__).nested(nested_schema.fields)

    raise MalformedAdapterError(type_name, item.name, f"unsupported field type {hint!r}")


def _nested_schema(
    nested_type: type, config_format: ConfigFormat, visiting: frozenset[type]
) -> ConfigSchema:
    # hand-written schema() methods are trusted to terminate
    schema_fn = getattr(nested_type, "schema", None)
    if callable(schema_fn) and not hasattr(nested_type, RENAME_ALL_ATTR):
        return schema_fn(config_format)
    return _schema_for(nested_type, config_format, visiting=visiting)


def _field_doc(item: dataclasses.Field) -> str | None:
    doc = item.metadata.get(DOC_KEY)
    if doc is None:
        return None
    if isinstance(doc, str):
        return doc
    return "\n".join(str(line) for line in doc)


def _field_default(type_name: str, item: dataclasses.Field, strategy: FormatStrategy) -> str | None:
    if item.default_factory is not dataclasses.MISSING:
        try:
            value = item.default_factory()
        except Exception as err:
            raise MalformedAdapterError(
                type_name, item.name, f"default factory failed: {err}"
            ) from err
    elif item.default is not dataclasses.MISSING:
        value = item.default
    else:
        return None

    try:
        return strategy.format_scalar(value)
    except (TypeError, ValueError) as err:
        raise MalformedAdapterError(
            type_name, item.name, f"cannot format default {value!r}: {err}"
        ) from err


def check_schema(schema: ConfigSchema, type_name: str) -> None:
    """Raise :class:`MalformedAdapterError` if *schema* breaks the field contract.

    Sections must hold at least one field and leaves must not hold any.
    """
    _check_fields(schema.fields, type_name, path="")


def _check_fields(fields: typing.Iterable[FieldInfo], type_name: str, path: str) -> None:
    for entry in fields:
        location = entry.name if not path else f"{path}.{entry.name}"
        if entry.is_nested:
            if not entry.nested_fields:
                raise MalformedAdapterError(type_name, location, "section has no fields")
            _check_fields(entry.nested_fields, type_name, location)
        elif entry.nested_fields:
            raise MalformedAdapterError(type_name, location, "leaf field holds nested fields")
