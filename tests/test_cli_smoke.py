"""Smoke tests for the command line interface."""

from __future__ import annotations

import importlib
import os
import subprocess
import sys
import textwrap
from pathlib import Path
from typing import Callable, Iterator

import pytest

import config_docs.cli
import config_docs.config
from config_docs.cli import main


def test_cli_help_shows_subcommands() -> None:
    root = Path(__file__).resolve().parents[1]
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(
        part for part in [str(root / "src"), env.get("PYTHONPATH", "")] if part
    )
    result = subprocess.run(
        [sys.executable, "-m", "config_docs.cli", "--help"],
        check=True,
        capture_output=True,
        text=True,
        env=env,
    )
    stdout = result.stdout
    for sub in ["gen-docs", "formats"]:
        assert sub in stdout


def test_formats_lists_toml(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["formats"]) == 0
    assert capsys.readouterr().out == "toml\t.toml.md\n"


def test_gen_docs_writes_type_document(
    tmp_path: Path, streamlit_fixture: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        [
            "gen-docs",
            "demo_config:Config",
            "--app-dir",
            str(streamlit_fixture),
            "--output-dir",
            str(tmp_path),
        ]
    )

    assert exit_code == 0
    written = tmp_path / "Config.toml.md"
    expected = (streamlit_fixture / "out" / "Config.toml.md").read_text(encoding="utf-8")
    assert written.read_text(encoding="utf-8") == expected
    assert f"Generated documentation: {written}" in capsys.readouterr().out


def test_gen_docs_module_target_to_stdout(
    streamlit_fixture: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        [
            "gen-docs",
            "demo_config",
            "--app-dir",
            str(streamlit_fixture),
            "--stdout",
            "--title",
            "Streamlit",
        ]
    )

    assert exit_code == 0
    out = capsys.readouterr().out
    assert out.startswith("# Streamlit\n\n## Global\n```toml\n[global]\n")


def test_gen_docs_rejects_unsupported_format(
    tmp_path: Path, streamlit_fixture: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        [
            "gen-docs",
            "demo_config:Config",
            "--app-dir",
            str(streamlit_fixture),
            "--output-dir",
            str(tmp_path),
            "--format",
            "json",
        ]
    )

    assert exit_code == 1
    assert "unsupported config format 'json'" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []


def test_gen_docs_reports_missing_type(
    streamlit_fixture: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        ["gen-docs", "demo_config:Missing", "--app-dir", str(streamlit_fixture), "--stdout"]
    )

    assert exit_code == 1
    assert "has no attribute 'Missing'" in capsys.readouterr().err


def test_gen_docs_reports_unknown_module(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["gen-docs", "no_such_config_module", "--stdout"])

    assert exit_code == 1
    assert "cannot import 'no_such_config_module'" in capsys.readouterr().err


@pytest.fixture
def env_cli(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[..., Callable[[list[str]], int]]]:
    """Reload the CLI with environment overrides and return its ``main``."""

    def load(**env: str) -> Callable[[list[str]], int]:
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        importlib.reload(config_docs.config)
        return importlib.reload(config_docs.cli).main

    yield load
    monkeypatch.undo()
    importlib.reload(config_docs.config)
    importlib.reload(config_docs.cli)


def test_env_format_is_the_default(
    env_cli: Callable[..., Callable[[list[str]], int]],
    tmp_path: Path,
    streamlit_fixture: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    cli_main = env_cli(CONFIG_DOCS_FORMAT="json")

    exit_code = cli_main(
        [
            "gen-docs",
            "demo_config:Config",
            "--app-dir",
            str(streamlit_fixture),
            "--output-dir",
            str(tmp_path),
        ]
    )

    assert exit_code == 1
    assert "unsupported config format 'json'" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []


def test_env_output_dir_is_the_default(
    env_cli: Callable[..., Callable[[list[str]], int]],
    tmp_path: Path,
    streamlit_fixture: Path,
) -> None:
    target_dir = tmp_path / "env-docs"
    cli_main = env_cli(CONFIG_DOCS_OUTPUT_DIR=str(target_dir))

    exit_code = cli_main(["gen-docs", "demo_config:Config", "--app-dir", str(streamlit_fixture)])

    assert exit_code == 0
    assert (target_dir / "Config.toml.md").is_file()


def test_gen_docs_names_broken_field_once(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(sys, "path", list(sys.path))
    (tmp_path / "broken_cli_config.py").write_text(
        textwrap.dedent(
            """
            from dataclasses import dataclass

            from config_docs.adapter import config_docs, config_field


            def _fail() -> int:
                raise RuntimeError("no retries today")


            @config_docs
            @dataclass
            class Broken:
                retries: int = config_field(default_factory=_fail)
            """
        ),
        encoding="utf-8",
    )

    exit_code = main(
        ["gen-docs", "broken_cli_config:Broken", "--app-dir", str(tmp_path), "--stdout"]
    )

    err = capsys.readouterr().err
    assert exit_code == 1
    assert "Broken.retries: default factory failed: no retries today" in err
    assert "Broken: Broken" not in err
