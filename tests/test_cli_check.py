"""CLI integration tests for the check command."""
from __future__ import annotations

import json
from hashlib import sha256

import pytest
from click.testing import CliRunner

from textcheck import __version__
from textcheck.checker import NO_COMMIT_MARKER
from textcheck.cli import main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _ids(entry):
    return [item["id"] for item in entry["items"]]


def test_check_single_file(workdir):
    runner = CliRunner()
    path = workdir / "a.txt"
    path.write_bytes(b"a\tb \n")

    result = runner.invoke(main, ["check", str(path)])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["tool"] == "textcheck-check"
    assert payload["textcheck_version"] == __version__
    entry = payload["files"][0]
    assert entry["path"] == str(path)
    assert entry["sha256"] == sha256(b"a\tb \n").hexdigest()
    assert entry["stopped"] is False
    assert _ids(entry) == ["TXT2", "TXT5"]


def test_check_expands_globs_and_sorts(workdir):
    runner = CliRunner()
    (workdir / "b.txt").write_bytes(b"ok\n")
    (workdir / "a.txt").write_bytes(b"ok")

    result = runner.invoke(main, ["check", str(workdir / "*.txt")])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert [entry["path"] for entry in payload["files"]] == [
        str(workdir / "a.txt"),
        str(workdir / "b.txt"),
    ]
    assert _ids(payload["files"][0]) == ["TXT4"]
    assert _ids(payload["files"][1]) == []


def test_check_unmatched_pattern_fails(workdir):
    runner = CliRunner()

    result = runner.invoke(main, ["check", str(workdir / "missing*.txt")])

    assert result.exit_code == 1
    assert "No files matched pattern" in result.output


def test_check_stdin_reports_dos_stop(workdir):
    runner = CliRunner()

    result = runner.invoke(main, ["check", "-"], input=b"x \r\ny")

    assert result.exit_code == 0
    entry = json.loads(result.output)["files"][0]
    assert entry["path"] == "stdin"
    assert entry["stopped"] is True
    assert _ids(entry) == ["TXT1"]


def test_severity_filter_and_fail_on_findings(workdir):
    runner = CliRunner()
    path = workdir / "w.txt"
    path.write_bytes(b"trailing  \n")

    result = runner.invoke(main, ["check", "--fail-on-findings", str(path)])
    assert result.exit_code == 0
    assert _ids(json.loads(result.output)["files"][0]) == ["TXT5"]

    result = runner.invoke(main, ["check", "--severity", "warning", str(path)])
    assert result.exit_code == 0
    assert _ids(json.loads(result.output)["files"][0]) == []


def test_fail_on_findings_with_errors(workdir):
    runner = CliRunner()
    path = workdir / "t.txt"
    path.write_bytes(b"\tindented\n")

    result = runner.invoke(main, ["check", "-f", str(path)])

    assert result.exit_code == 1


def test_fix_rewrites_files(workdir):
    runner = CliRunner()
    path = workdir / "fix.txt"
    path.write_bytes(b"a  \n\tb\nc")

    result = runner.invoke(main, ["check", "--fix", str(path)])

    assert result.exit_code == 0
    entry = json.loads(result.output)["files"][0]
    assert _ids(entry) == ["TXT2", "TXT4", "TXT5"]
    assert entry["fixed"] == 3
    assert path.read_bytes() == b"a\n    b\nc\n"

    again = runner.invoke(main, ["check", str(path)])
    assert _ids(json.loads(again.output)["files"][0]) == []


def test_text_format(workdir):
    runner = CliRunner()
    path = workdir / "t.txt"
    path.write_bytes(b"ab \n")

    result = runner.invoke(main, ["check", "--format", "text", str(path)])

    assert result.exit_code == 0
    assert result.output.startswith(f"{path}:1:3: autofix [TXT5] Trailing Whitespace: ")


def test_commit_hook_flag_enables_marker_check(workdir):
    runner = CliRunner()
    path = workdir / "wip.txt"
    path.write_bytes(b"# " + NO_COMMIT_MARKER + b"\n")

    plain = runner.invoke(main, ["check", str(path)])
    hooked = runner.invoke(main, ["check", "--commit-hook", str(path)])

    assert _ids(json.loads(plain.output)["files"][0]) == []
    assert _ids(json.loads(hooked.output)["files"][0]) == ["TXT6"]


def test_line_length_from_config_and_option(workdir):
    runner = CliRunner()
    config = workdir / "lint.toml"
    config.write_text("[textcheck]\nmaxlinelength = 5\n")
    path = workdir / "l.txt"
    path.write_bytes(b"abcdefg\n")

    default = runner.invoke(main, ["check", str(path)])
    configured = runner.invoke(main, ["check", "--config", str(config), str(path)])
    overridden = runner.invoke(
        main, ["check", "--config", str(config), "--max-line-length", "10", str(path)]
    )

    assert _ids(json.loads(default.output)["files"][0]) == []
    assert _ids(json.loads(configured.output)["files"][0]) == ["TXT3"]
    assert _ids(json.loads(overridden.output)["files"][0]) == []


def test_project_config_is_discovered(workdir):
    runner = CliRunner()
    (workdir / "pyproject.toml").write_text("[tool.textcheck]\ndisabled = ['TXT4']\n")
    path = workdir / "n.txt"
    path.write_bytes(b"no newline")

    result = runner.invoke(main, ["check", str(path)])

    assert _ids(json.loads(result.output)["files"][0]) == []


def test_invalid_config_is_reported(workdir):
    runner = CliRunner()
    config = workdir / "bad.toml"
    config.write_text("maxlinelength = 'wide'\n")
    path = workdir / "x.txt"
    path.write_bytes(b"x\n")

    result = runner.invoke(main, ["check", "--config", str(config), str(path)])

    assert result.exit_code == 1
    assert "maxlinelength must be an integer" in result.output


def test_output_file_and_verbose_summary(workdir):
    runner = CliRunner()
    path = workdir / "v.txt"
    path.write_bytes(b"x\t\n")
    out = workdir / "out.json"

    result = runner.invoke(main, ["check", "-v", "-o", str(out), str(path)])

    assert result.exit_code == 0
    assert "Processing 1 file(s)..." in result.output
    assert "Summary: autofix=0 warning=0 error=1" in result.output
    payload = json.loads(out.read_text())
    assert _ids(payload["files"][0]) == ["TXT2"]


def test_malformed_pyproject_is_reported(workdir):
    runner = CliRunner()
    (workdir / "pyproject.toml").write_text('tool = "x"\n')
    path = workdir / "x.txt"
    path.write_bytes(b"x\n")

    result = runner.invoke(main, ["check", str(path)])

    assert result.exit_code == 1
    assert "tool must be a table" in result.output
