"""
scaffold/__main__.py 單元測試

直接呼叫 main(argv)，檢查回傳碼與 stdout。
"""

import json
import logging
import zipfile

import pytest

from config.config import Config
from scaffold.__main__ import EXAMPLE_SNAPSHOT, main
from scaffold.schema import ConfigurationSnapshot
from utils.logger import logger, set_console_level


@pytest.fixture
def spec_file(tmp_path):
    path = tmp_path / "playwright.json"
    path.write_text(json.dumps(EXAMPLE_SNAPSHOT), encoding="utf-8")
    return path


@pytest.mark.unit
class TestCLI:
    """CLI 入口"""

    @pytest.mark.unit
    def test_example(self, capsys):
        assert main(["--example"]) == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed == EXAMPLE_SNAPSHOT

    @pytest.mark.unit
    def test_example_is_loadable(self):
        snapshot = ConfigurationSnapshot.from_dict(EXAMPLE_SNAPSHOT)
        assert [w.slug for w in snapshot.ci.workflows] == ["pr-checks", "nightly"]

    @pytest.mark.unit
    def test_generate_to_output(self, tmp_path, spec_file, capsys):
        target = tmp_path / "build" / "framework.zip"
        assert main(["--spec", str(spec_file), "--output", str(target)]) == 0
        with zipfile.ZipFile(target) as zf:
            names = zf.namelist()
        assert ".github/workflows/nightly.yml" in names
        assert "共產生" in capsys.readouterr().out

    @pytest.mark.unit
    def test_default_output_name(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main([]) == 0
        assert (tmp_path / f"{Config.PROJECT_NAME}.zip").is_file()

    @pytest.mark.unit
    def test_validate(self, spec_file, capsys):
        assert main(["--spec", str(spec_file), "--validate"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["is_valid"] is True
        assert set(report["workflows"]) == {"pr-checks", "nightly"}
        assert "total_cost" in report["workflows"]["nightly"]["cost"]

    @pytest.mark.unit
    def test_validate_invalid(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"browsers": []}), encoding="utf-8")
        assert main(["--spec", str(path), "--validate"]) == 1
        report = json.loads(capsys.readouterr().out)
        assert "No browsers selected for testing" in report["errors"]

    @pytest.mark.unit
    def test_preview(self, spec_file, capsys):
        assert main(["--spec", str(spec_file), "--preview"]) == 0
        info = json.loads(capsys.readouterr().out)
        assert info["stats"]["total_files"] > 0

    @pytest.mark.unit
    def test_missing_spec_returns_1(self, tmp_path):
        assert main(["--spec", str(tmp_path / "nope.json")]) == 1

    @pytest.mark.unit
    def test_precondition_failure_returns_1(self, tmp_path):
        path = tmp_path / "nolang.json"
        path.write_text(json.dumps({"language": None}), encoding="utf-8")
        assert main(["--spec", str(path), "--output", str(tmp_path / "x.zip")]) == 1
        assert not (tmp_path / "x.zip").exists()

    @pytest.mark.unit
    def test_bad_settings_return_1(self, monkeypatch):
        monkeypatch.setattr(Config, "ARCHIVE_COMPRESSION_LEVEL", 42)
        assert main([]) == 1

    @pytest.mark.unit
    def test_quiet_lowers_console(self):
        try:
            assert main(["-q", "--example"]) == 0
            consoles = [h for h in logger.handlers if type(h) is logging.StreamHandler]
            assert consoles[0].level == logging.ERROR
        finally:
            set_console_level(logging.INFO)
