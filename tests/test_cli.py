"""Tests for prism_router.cli — CLI entrypoint and the compile command."""

from pathlib import Path

import pytest

from prism_router.cli import main

CONFIG = """\
import re

config = {
    "outputDir": "generated",
    "name": "ApiClient",
    "baseUrl": "http://localhost:8000",
    "routes": {"directory": %r, "pattern": r"\\.py$"},
}
"""


class TestCLIHelp:
    def test_help_flag_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_help_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["help"])
        assert exc_info.value.code == 0
        assert "compile" in capsys.readouterr().out

    def test_compile_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["compile", "--help"])
        assert exc_info.value.code == 0


class TestCLIUsageErrors:
    def test_no_command_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "No command specified" in capsys.readouterr().err

    def test_unknown_command_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["frobnicate"])
        assert exc_info.value.code == 1
        assert "prism-router help" in capsys.readouterr().err


class TestCLICompile:
    def test_compile(
        self,
        tmp_path: Path,
        fixtures_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "prism.config.py").write_text(CONFIG % str(fixtures_dir / "api"))
        monkeypatch.chdir(tmp_path)

        main(["compile"])

        output = tmp_path / "generated" / "ApiClient.generated.ts"
        assert output.is_file()
        out = capsys.readouterr().out
        assert "API client generated: generated/ApiClient.generated.ts" in out
        assert "import { createApiClient } from './generated/ApiClient.generated';" in out
        assert "const client = createApiClient('http://localhost:8000');" in out

    def test_missing_config(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            main(["compile"])

        assert exc_info.value.code == 1
        assert "Error: No configuration file found" in capsys.readouterr().err

    def test_compile_failure_exits_one(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        (tmp_path / "routes").mkdir()
        (tmp_path / "prism.config.py").write_text(CONFIG % "routes")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            main(["compile"])

        assert exc_info.value.code == 1
        assert "Error: Compilation failed:" in capsys.readouterr().err
        assert not (tmp_path / "generated" / "ApiClient.generated.ts").exists()
