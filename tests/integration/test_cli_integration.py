from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from repo_dump import cli, file_manipulation


@pytest.mark.integration
def test_main_runs_full_pipeline_over_tracked_files(
    tmp_path: Path,
    mocker: MockerFixture,
    capsys: pytest.CaptureFixture[str],
) -> None:
    repo = tmp_path
    files = {
        "src/app.go": "package app // TODO wire\n",
        "src/app_test.go": "package app // TODO test\n",
        "src/util.cpp": "int main() {} // TODO\n",
        "src/README.md": "TODO docs\n",
        "docs/guide.go": "package docs // TODO\n",
    }
    for rel, content in files.items():
        (repo / rel).parent.mkdir(parents=True, exist_ok=True)
        (repo / rel).write_text(content, encoding="utf-8")
    mocker.patch.object(file_manipulation, "is_git_repo", return_value=True)
    mocker.patch.object(file_manipulation.subprocess, "run").return_value.stdout = "\0".join(files) + "\0"

    exit_code = cli.main(
        [
            "-dir",
            str(repo),
            "-dry",
            "-exclude",
            "_test.go",
            "-include",
            "src/;.go,.cpp",
            "-grep",
            r"//\s*TODO",
        ],
    )

    assert exit_code == 0
    out = capsys.readouterr().out
    assert out.splitlines() == [
        "src/app.go (5 words)",
        "src/util.cpp (5 words)",
        "",
        "Total: 10 words",
    ]
