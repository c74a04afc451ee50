from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from repo_dump import __version__, cli, file_manipulation
from repo_dump.exceptions import GitCommandError, NotAGitRepositoryError

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.mark.unit
def test_parse_args_single_dash_flags() -> None:
    settings = cli.parse_args(
        [
            "-dir",
            "some/where",
            "-dry",
            "-exclude",
            "assets/,.png",
            "-include=src;.go,.md",
            "-grep",
            "TODO",
        ],
    )

    assert settings.dir == Path("some/where")
    assert settings.dry is True
    assert settings.exclude == "assets/,.png"
    assert settings.include == "src;.go,.md"
    assert settings.grep == "TODO"


@pytest.mark.unit
def test_parse_args_double_dash_and_extras() -> None:
    settings = cli.parse_args(["--dry", "--grep", "x", "--literal", "--no-word-count"])

    assert settings.dry is True
    assert settings.literal is True
    assert settings.no_word_count is True
    assert cli.renderer_options(settings) == {"word_counts": False}


@pytest.mark.unit
def test_parse_args_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.parse_args(["--version"])

    assert exc_info.value.code == 0
    captured = capsys.readouterr()
    assert __version__ in captured.out


@pytest.mark.unit
def test_main_not_a_repository_exits_1(
    tmp_path: Path,
    mocker: MockerFixture,
    caplog: pytest.LogCaptureFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    mocker.patch.object(cli, "git_ls_files", side_effect=NotAGitRepositoryError(folder=tmp_path))

    exit_code = cli.main(["-dir", str(tmp_path)])

    assert exit_code == 1
    errors = [r for r in caplog.records if r.levelname == "ERROR"]
    assert len(errors) == 1
    assert str(tmp_path) in errors[0].getMessage()
    assert not capsys.readouterr().out


@pytest.mark.unit
def test_main_ls_files_failure_exits_1(tmp_path: Path, mocker: MockerFixture, caplog: pytest.LogCaptureFixture) -> None:
    mocker.patch.object(
        cli,
        "git_ls_files",
        side_effect=GitCommandError(command="git ls-files -z", returncode=128, stdout="", stderr="fatal: bad\n"),
    )

    assert cli.main(["-dir", str(tmp_path)]) == 1
    assert "fatal: bad" in caplog.text


@pytest.mark.unit
def test_main_dump_filters_and_prints(
    tmp_path: Path,
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    (tmp_path / "a.go").write_text("// TODO\n", encoding="utf-8")
    (tmp_path / "b.go").write_text("package b\n", encoding="utf-8")
    (tmp_path / "c.md").write_text("TODO too\n", encoding="utf-8")
    mocker.patch.object(cli, "git_ls_files", return_value=["a.go", "b.go", "c.md"])

    exit_code = cli.main(["-dir", str(tmp_path), "-include", ".go", "-grep", "TODO"])

    assert exit_code == 0
    assert capsys.readouterr().out == "\n=== a.go ===\n\n// TODO\n\n"


@pytest.mark.unit
def test_main_dry_lists_with_total(
    tmp_path: Path,
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    (tmp_path / "a.go").write_text("one two\n", encoding="utf-8")
    (tmp_path / "b.md").write_text("three\n", encoding="utf-8")
    mocker.patch.object(cli, "git_ls_files", return_value=["a.go", "b.md", "assets/x.png"])

    exit_code = cli.main(["-dir", str(tmp_path), "-dry", "-exclude", "assets/"])

    assert exit_code == 0
    assert capsys.readouterr().out == "a.go (2 words)\nb.md (1 words)\n\nTotal: 3 words\n"


@pytest.mark.unit
def test_main_invalid_regex_matches_nothing(
    tmp_path: Path,
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
    caplog: pytest.LogCaptureFixture,
) -> None:
    (tmp_path / "a.go").write_text("[oops\n", encoding="utf-8")
    mocker.patch.object(cli, "git_ls_files", return_value=["a.go"])

    exit_code = cli.main(["-dir", str(tmp_path), "-grep", "[oops"])

    assert exit_code == 0
    assert not capsys.readouterr().out
    assert "Invalid grep pattern" in caplog.text


@pytest.mark.unit
def test_main_log_file(tmp_path: Path, mocker: MockerFixture) -> None:
    log_file = tmp_path / "run.log"
    mocker.patch.object(cli, "git_ls_files", side_effect=NotAGitRepositoryError(folder=tmp_path / "x"))
    setup = mocker.patch.object(cli, "setup_logging")

    assert cli.main(["-dir", str(tmp_path / "x"), "--log-file", str(log_file)]) == 1
    setup.assert_called_once_with(str(log_file))


@pytest.mark.unit
def test_parse_args_grep_value_starting_with_dash() -> None:
    assert cli.parse_args(["-grep=-foo"]).grep == "-foo"


@pytest.mark.unit
def test_main_dump_writes_raw_bytes(
    tmp_path: Path,
    mocker: MockerFixture,
    capsysbinary: pytest.CaptureFixture[bytes],
) -> None:
    raw = b"caf\xe9 \x89PNG\x00\xff\n"
    (tmp_path / "logo.png").write_bytes(raw)
    mocker.patch.object(cli, "git_ls_files", return_value=["logo.png"])

    assert cli.main(["-dir", str(tmp_path)]) == 0
    assert capsysbinary.readouterr().out == b"\n=== logo.png ===\n\n" + raw + b"\n"


@pytest.mark.unit
def test_main_dump_ignores_stdout_text_encoding(
    tmp_path: Path,
    mocker: MockerFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    raw = b"\xff\xfe not utf-8\n"
    (tmp_path / "blob.bin").write_bytes(raw)
    mocker.patch.object(cli, "git_ls_files", return_value=["blob.bin"])
    stdout = io.TextIOWrapper(io.BytesIO(), encoding="cp1252")
    monkeypatch.setattr(sys, "stdout", stdout)

    assert cli.main(["-dir", str(tmp_path)]) == 0
    assert stdout.buffer.getvalue() == b"\n=== blob.bin ===\n\n" + raw + b"\n"


@pytest.mark.unit
def test_main_missing_git_binary_logs_one_line(
    tmp_path: Path,
    mocker: MockerFixture,
    caplog: pytest.LogCaptureFixture,
) -> None:
    mocker.patch.object(file_manipulation.subprocess, "run", side_effect=FileNotFoundError("git"))

    assert cli.main(["-dir", str(tmp_path)]) == 1
    diagnostics = [r for r in caplog.records if r.levelname in {"WARNING", "ERROR"}]
    assert len(diagnostics) == 1
    assert str(tmp_path) in diagnostics[0].getMessage()
