"""Schema model: field descriptors and the schema builder."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from config_docs.exceptions import BuilderConsumedError

if TYPE_CHECKING:
    from config_docs.codegen_markdown import MarkdownOptions

logger = logging.getLogger(__name__)


@dataclass
class FieldInfo:
    """Information about a configuration field.

    A field is either a leaf holding a scalar value or a section
    (``is_nested``) grouping further fields. The setters mutate the
    descriptor and return it so calls can be chained::

        FieldInfo.new("port").doc("Port to bind.").default("8080").field_type("int")
    """

    name: str
    doc_comments: str | None = None
    default_value: str | None = None
    type_name: str = ""
    is_nested: bool = False
    nested_fields: list[FieldInfo] = field(default_factory=list)

    @classmethod
    def new(cls, name: str) -> FieldInfo:
        """Create a leaf descriptor called *name*."""
        return cls(name=name)

    def doc(self, doc: str) -> FieldInfo:
        """Set the documentation comment for this field."""
        self.doc_comments = doc
        return self

    def default(self, default: str | None) -> FieldInfo:
        """Set the stringified default value for this field."""
        self.default_value = default
        return self

    def field_type(self, field_type: str) -> FieldInfo:
        """Set the display type of this field."""
        self.type_name = field_type
        return self

    def nested(self, nested_fields: Iterable[FieldInfo]) -> FieldInfo:
        """Make this field a section holding *nested_fields*."""
        self.is_nested = True
        self.nested_fields = list(nested_fields)
        return self

    @property
    def is_leaf(self) -> bool:
        return not self.is_nested

    def doc_lines(self) -> list[str]:
        if self.doc_comments is None:
            return []
        # only \n and \r\n end a line; other separators stay in the text
        lines = self.doc_comments.split("\n")
        if lines[-1] == "":
            lines.pop()
        return [line.removesuffix("\r") for line in lines]


@dataclass(frozen=True)
class ConfigSchema:
    """A schema describing a configuration structure."""

    fields: tuple[FieldInfo, ...] = ()

    @staticmethod
    def builder() -> ConfigSchemaBuilder:
        """Create a new builder for a config schema."""
        return ConfigSchemaBuilder()

    def generate_docs(self, options: MarkdownOptions) -> str:
        """Render this schema as Markdown with *options*."""
        from config_docs.codegen_markdown import generate_markdown

        return generate_markdown(self.fields, options)


class ConfigSchemaBuilder:
    """Append-only builder for :class:`ConfigSchema`.

    Fields keep the order they were added in, which is the order they are
    rendered in. Duplicate names are kept as they are.
    """

    def __init__(self) -> None:
        self._fields: list[FieldInfo] = []
        self._built = False

    def add_field(self, field_info: FieldInfo) -> ConfigSchemaBuilder:
        """Add a field to the schema."""
        self._check_open()
        self._fields.append(field_info)
        return self

    def build(self) -> ConfigSchema:
        """Build the schema. The builder cannot be used afterwards."""
        self._check_open()
        self._built = True
        _warn_duplicates(self._fields)
        return ConfigSchema(fields=tuple(self._fields))

    def _check_open(self) -> None:
        if self._built:
            raise BuilderConsumedError("schema builder was already built; create a new one")


def _warn_duplicates(fields: list[FieldInfo]) -> None:
    # nested sections were checked when their own schema was built
    counts = Counter(entry.name for entry in fields)
    for name, count in counts.items():
        if count > 1:
            logger.warning("field '%s' appears %d times in one schema", name, count)
