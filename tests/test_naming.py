"""Tests for field name case conversion."""

from __future__ import annotations

import pytest

from config_docs.naming import (
    apply_rename_all,
    is_known_style,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_screaming_snake_case,
    to_snake_case,
)


def test_camel_case_capitalizes_after_underscores() -> None:
    assert (
        to_camel_case("disable_widget_state_duplication_warning")
        == "disableWidgetStateDuplicationWarning"
    )


def test_pascal_case_capitalizes_first_character() -> None:
    assert to_pascal_case("show_warning_on_direct_execution") == "ShowWarningOnDirectExecution"


def test_other_styles() -> None:
    assert to_screaming_snake_case("max_retries") == "MAX_RETRIES"
    assert to_kebab_case("max_retries") == "max-retries"


@pytest.mark.parametrize("convert", [to_camel_case, to_pascal_case, to_kebab_case])
def test_empty_input(convert) -> None:
    assert convert("") == ""


def test_repeated_and_edge_underscores() -> None:
    assert to_camel_case("a__b") == "aB"
    assert to_camel_case("_leading") == "Leading"
    assert to_camel_case("trailing_") == "trailing"
    assert to_pascal_case("a__b") == "AB"


@pytest.mark.parametrize(
    ("style", "expected"),
    [
        ("camelCase", "listenPort"),
        ("PascalCase", "ListenPort"),
        ("snake_case", "listen_port"),
        ("SCREAMING_SNAKE_CASE", "LISTEN_PORT"),
        ("kebab-case", "listen-port"),
        ("lowercase", "listen_port"),
        (None, "listen_port"),
    ],
)
def test_apply_rename_all(style: str | None, expected: str) -> None:
    assert apply_rename_all("listen_port", style) == expected


def test_is_known_style() -> None:
    assert is_known_style("camelCase")
    assert not is_known_style("camel_case")


@pytest.mark.parametrize(
    "name",
    ["port", "listen_port", "disable_widget_state_duplication_warning", "a_b_c"],
)
def test_camel_case_round_trip(name: str) -> None:
    assert to_snake_case(to_camel_case(name)) == name
