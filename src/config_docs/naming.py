"""Case conversion of field identifiers."""

from __future__ import annotations

from typing import Callable

CAMEL_CASE = "camelCase"
PASCAL_CASE = "PascalCase"
SNAKE_CASE = "snake_case"
SCREAMING_SNAKE_CASE = "SCREAMING_SNAKE_CASE"
KEBAB_CASE = "kebab-case"


def _capitalize_after_underscores(name: str, *, capitalize_first: bool) -> str:
    result: list[str] = []
    capitalize_next = capitalize_first
    for char in name:
        if char == "_":
            capitalize_next = True
        elif capitalize_next:
            result.append(char.upper())
            capitalize_next = False
        else:
            result.append(char)
    return "".join(result)


def to_camel_case(name: str) -> str:
    """Convert ``snake_case`` *name* to ``camelCase``.

    Underscores are dropped and the character following them is uppercased.
    The case of the first character is left alone.
    """
    return _capitalize_after_underscores(name, capitalize_first=False)


def to_pascal_case(name: str) -> str:
    """Convert ``snake_case`` *name* to ``PascalCase``."""
    return _capitalize_after_underscores(name, capitalize_first=True)


def to_screaming_snake_case(name: str) -> str:
    """Convert ``snake_case`` *name* to ``SCREAMING_SNAKE_CASE``."""
    return name.upper()


def to_kebab_case(name: str) -> str:
    """Convert ``snake_case`` *name* to ``kebab-case``."""
    return name.replace("_", "-")


def to_snake_case(name: str) -> str:
    """Insert an underscore before every uppercase letter and lowercase it.

    This undoes :func:`to_camel_case` for identifiers without leading,
    trailing or repeated underscores.
    """
    result: list[str] = []
    for char in name:
        if char.isupper():
            result.append("_")
            result.append(char.lower())
        else:
            result.append(char)
    return "".join(result)


_STYLES: dict[str, Callable[[str], str]] = {
    CAMEL_CASE: to_camel_case,
    PASCAL_CASE: to_pascal_case,
    SNAKE_CASE: lambda name: name,
    SCREAMING_SNAKE_CASE: to_screaming_snake_case,
    KEBAB_CASE: to_kebab_case,
}


def apply_rename_all(name: str, style: str | None) -> str:
    """Apply the struct-level *style* to the field identifier *name*.

    Parameters
    ----------
    name:
        Field identifier in ``snake_case``.
    style:
        One of the serde ``rename_all`` tags. ``None`` and unknown tags leave
        *name* unchanged; callers wanting strict behaviour validate the tag
        with :func:`is_known_style` first.
    """
    if style is None:
        return name
    convert = _STYLES.get(style)
    if convert is None:
        return name
    return convert(name)


def is_known_style(style: str) -> bool:
    """Return whether *style* is a recognised ``rename_all`` tag."""
    return style in _STYLES
