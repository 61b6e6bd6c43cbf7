"""Unit tests for utility functions (create_fullstack.utils).

Tests cover:
- run_command (success, failure, cwd, env vars, capture=False, missing binary, timeout)
- load_json / save_json
- ensure_dir / is_empty_dir / format_location
- format_duration
- STEP_NAMES / STEP_COLORS constants
- Rich output helpers
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from create_fullstack.utils import (
    STEP_COLORS,
    STEP_NAMES,
    create_progress,
    ensure_dir,
    format_duration,
    format_location,
    is_empty_dir,
    load_json,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
    save_json,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "print('hello')"]
        )
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    async def test_failed_command(self):
        returncode, _, _ = await run_command(
            [sys.executable, "-c", "import sys; sys.exit(3)"]
        )
        assert returncode == 3

    @pytest.mark.unit
    async def test_stderr_captured(self):
        _, _, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('oops')"]
        )
        assert stderr == "oops"

    @pytest.mark.unit
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    async def test_extra_env(self):
        _, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.environ['CFA_TEST_VAR'])"],
            env={"CFA_TEST_VAR": "present"},
        )
        assert stdout == "present"

    @pytest.mark.unit
    async def test_no_capture_returns_empty_strings(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "pass"], capture=False
        )
        assert returncode == 0
        assert stdout == ""
        assert stderr == ""

    @pytest.mark.unit
    async def test_missing_executable(self):
        returncode, _, stderr = await run_command(["definitely-not-a-real-binary-xyz"])
        assert returncode == 127
        assert "definitely-not-a-real-binary-xyz" in stderr

    @pytest.mark.unit
    async def test_timeout(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import time; time.sleep(5)"], timeout=1
        )
        assert returncode == -1
        assert "timed out" in stderr


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


class TestJson:
    @pytest.mark.unit
    async def test_save_then_load(self, tmp_path: Path):
        path = tmp_path / "nested" / "package.json"
        await save_json({"name": "demo", "scripts": {"dev": "node index.js"}}, path)
        assert load_json(path) == {"name": "demo", "scripts": {"dev": "node index.js"}}

    @pytest.mark.unit
    async def test_save_uses_two_space_indent_and_newline(self, tmp_path: Path):
        path = tmp_path / "package.json"
        await save_json({"a": 1}, path)
        assert path.read_text(encoding="utf-8") == '{\n  "a": 1\n}\n'

    @pytest.mark.unit
    def test_load_non_object_rejected(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            load_json(path)

    @pytest.mark.unit
    def test_load_missing_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "missing.json")

    @pytest.mark.unit
    def test_load_invalid_raises(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_json(path)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


class TestFileSystem:
    @pytest.mark.unit
    def test_ensure_dir_creates_parents(self, tmp_path: Path):
        target = tmp_path / "a" / "b"
        result = ensure_dir(target)
        assert target.is_dir()
        assert result == target.resolve()

    @pytest.mark.unit
    def test_is_empty_dir(self, tmp_path: Path):
        assert is_empty_dir(tmp_path) is True
        (tmp_path / "file.txt").write_text("x", encoding="utf-8")
        assert is_empty_dir(tmp_path) is False

    @pytest.mark.unit
    def test_is_empty_dir_missing(self, tmp_path: Path):
        assert is_empty_dir(tmp_path / "missing") is False

    @pytest.mark.unit
    def test_format_location_inside_base(self, tmp_path: Path):
        assert format_location(tmp_path / "apps" / "demo", base=tmp_path) == "apps/demo"
        assert format_location(tmp_path, base=tmp_path) == "."

    @pytest.mark.unit
    def test_format_location_outside_base(self, tmp_path: Path):
        target = tmp_path / "elsewhere" / "demo"
        assert format_location(target, base=tmp_path / "cwd") == str(target.resolve())

    @pytest.mark.unit
    def test_format_location_defaults_to_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert format_location(tmp_path / "demo") == "demo"


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "seconds,expected",
        [(3.7, "3.7s"), (0, "0.0s"), (65.2, "1m 5s"), (-1, "0.0s"), (600, "10m 0s")],
    )
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_step_tables_align(self):
        assert set(STEP_NAMES) == set(STEP_COLORS)
        assert STEP_NAMES[1] == "BACKEND"
        assert STEP_NAMES[5] == "INSTALL"

    @pytest.mark.unit
    def test_helpers_print(self, capsys):
        print_step_header(1, STEP_NAMES[1])
        print_success("all good")
        print_warning("careful")
        print_error("broken")
        print_summary_table({"Project": "demo"}, title="Summary")
        out = capsys.readouterr().out
        assert "BACKEND" in out
        assert "all good" in out
        assert "careful" in out
        assert "broken" in out
        assert "demo" in out

    @pytest.mark.unit
    def test_create_progress(self):
        progress = create_progress()
        with progress:
            task = progress.add_task("working", total=None)
            assert task is not None
