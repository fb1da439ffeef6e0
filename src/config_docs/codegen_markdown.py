"""Markdown documentation generation."""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from config_docs.adapter import ConfigDocsStruct, check_schema, exported_types
from config_docs.formats import ConfigFormat, FormatStrategy, get_strategy
from config_docs.schema import FieldInfo

logger = logging.getLogger(__name__)

_TEMPLATE_ENV = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent / "templates"),
    trim_blocks=True,
    lstrip_blocks=False,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)

# Written when a leaf has no default; not valid in any example format.
PLACEHOLDER = "..."


@dataclass
class MarkdownOptions:
    """Options to customize the structure of the output Markdown document."""

    format: ConfigFormat = ConfigFormat.TOML
    title: str | None = None

    @classmethod
    def new(cls, config_format: ConfigFormat) -> MarkdownOptions:
        """Options rendering examples in *config_format*, without a title."""
        return cls(format=config_format)

    def with_title(self, title: str | None) -> MarkdownOptions:
        """Copy of these options using *title* as the document title."""
        return dataclasses.replace(self, title=title)


def generate_markdown(fields: Iterable[FieldInfo], options: MarkdownOptions) -> str:
    """Generate markdown documentation for a list of fields.

    Sections get a header, their documentation and an example block listing
    their leaf fields. Leaf fields outside of a section are not rendered.

    Raises
    ------
    UnsupportedFormatError
        If ``options.format`` has no registered strategy.
    """
    strategy = get_strategy(options.format)
    parts: list[str] = []

    if options.title is not None:
        parts.append(f"# {options.title}\n\n")

    for entry in fields:
        _write_field_docs(parts, entry, strategy, depth=0, path="")

    return "".join(parts)


def _write_field_docs(
    parts: list[str],
    entry: FieldInfo,
    strategy: FormatStrategy,
    *,
    depth: int,
    path: str,
) -> None:
    if not entry.is_nested:
        return

    current_path = entry.name if not path else f"{path}.{entry.name}"
    logger.debug("rendering section '%s' at depth %d", current_path, depth)
    context = {
        "header": _capitalize(entry.name),
        "doc": entry.doc_comments,
        "open_block": strategy.open_block(),
        "section_header": strategy.section_header(entry.name),
        "leaves": [_leaf_context(leaf, strategy) for leaf in entry.nested_fields if leaf.is_leaf],
        "close_block": strategy.close_block(),
    }
    parts.append(_TEMPLATE_ENV.get_template("section.md.j2").render(context))

    for child in entry.nested_fields:
        if child.is_nested:
            _write_field_docs(parts, child, strategy, depth=depth + 1, path=current_path)


def _leaf_context(leaf: FieldInfo, strategy: FormatStrategy) -> dict[str, Any]:
    comments = [strategy.comment(line) for line in leaf.doc_lines()]
    if leaf.default_value is not None:
        comments.append(strategy.comment(f"Default: {leaf.default_value}"))
    value = leaf.default_value if leaf.default_value is not None else PLACEHOLDER
    return {
        "comments": comments,
        "assignment": strategy.assignment(leaf.name, value),
    }


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def generate_config_docs(config_type: type[ConfigDocsStruct], options: MarkdownOptions) -> str:
    """Generate markdown documentation for a configuration type."""
    schema = config_type.schema(options.format)
    check_schema(schema, config_type.__name__)
    return generate_markdown(schema.fields, options)


def docs_filename(type_name: str, config_format: ConfigFormat) -> str:
    """File name of the document for *type_name*: ``<TypeName>.<ext>.md``."""
    return f"{type_name}.{get_strategy(config_format).extension()}.md"


def generate_docs(
    config_type: type[ConfigDocsStruct],
    output_dir: str | Path,
    options: MarkdownOptions | None = None,
) -> Path:
    """Generate Markdown docs for *config_type* inside *output_dir*.

    The document is rendered completely before anything is written and then
    moved into place, so a failed run leaves no partial file behind.

    Returns
    -------
    Path
        Location of the written document.
    """
    if options is None:
        options = MarkdownOptions()
    rendered = generate_config_docs(config_type, options)

    output_path = Path(output_dir) / docs_filename(config_type.__name__, options.format)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    _write_atomic(output_path, rendered)
    logger.info("generated documentation: %s", output_path)
    return output_path


def export_all(
    output_dir: str | Path,
    options: MarkdownOptions | None = None,
    *,
    module: str | None = None,
) -> list[Path]:
    """Write the documents of all exported configuration types."""
    return [
        generate_docs(config_type, output_dir, options)
        for config_type in exported_types(module)
    ]


def _write_atomic(output_path: Path, text: str) -> None:
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=output_path.parent,
        prefix=f".{output_path.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        with handle:
            handle.write(text)
        os.chmod(handle.name, 0o644)
        os.replace(handle.name, output_path)
    except BaseException:
        Path(handle.name).unlink(missing_ok=True)
        raise
