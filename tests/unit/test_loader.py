"""
scaffold/loader.py 單元測試

驗證 JSON / YAML 設定檔讀寫與各種錯誤情況。
"""

import json

import pytest
import yaml

from core.exceptions import InvalidConfigError, SnapshotFileError
from scaffold.loader import load_data, load_snapshot, save_snapshot
from scaffold.schema import Browser, Language


@pytest.mark.unit
class TestLoad:
    """讀取"""

    @pytest.mark.unit
    def test_load_json(self, tmp_path):
        path = tmp_path / "playwright.json"
        path.write_text(json.dumps({"language": "javascript", "browsers": ["webkit"]}),
                        encoding="utf-8")
        snapshot = load_snapshot(path)
        assert snapshot.language is Language.JAVASCRIPT
        assert snapshot.browsers == (Browser.WEBKIT,)

    @pytest.mark.unit
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "playwright.yml"
        path.write_text(
            "browsers:\n  - chromium\n  - firefox\n"
            "docker:\n  enabled: true\n  base_image: node-playwright\n",
            encoding="utf-8",
        )
        snapshot = load_snapshot(path)
        assert len(snapshot.browsers) == 2
        assert snapshot.docker.enabled

    @pytest.mark.unit
    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "playwright.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(SnapshotFileError, match="unsupported format"):
            load_data(path)

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotFileError, match="file not found"):
            load_data(tmp_path / "missing.json")

    @pytest.mark.unit
    def test_bad_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotFileError, match="parse error") as exc_info:
            load_data(path)
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    @pytest.mark.unit
    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("browsers: [chromium\n", encoding="utf-8")
        with pytest.raises(SnapshotFileError) as exc_info:
            load_data(path)
        assert isinstance(exc_info.value.__cause__, yaml.YAMLError)

    @pytest.mark.unit
    def test_top_level_list(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(SnapshotFileError, match="mapping"):
            load_data(path)

    @pytest.mark.unit
    def test_invalid_value_passes_through(self, tmp_path):
        path = tmp_path / "opera.json"
        path.write_text(json.dumps({"browsers": ["opera"]}), encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            load_snapshot(path)

    @pytest.mark.unit
    def test_invalid_structure(self, tmp_path):
        path = tmp_path / "shape.json"
        path.write_text(json.dumps({"ci": {"workflows": [1]}}), encoding="utf-8")
        with pytest.raises(SnapshotFileError, match="invalid structure"):
            load_snapshot(path)


@pytest.mark.unit
class TestSave:
    """存檔後可讀回"""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["snapshot.json", "snapshot.yaml"])
    def test_save_and_load(self, tmp_path, full_snapshot, name):
        path = save_snapshot(full_snapshot, tmp_path / name)
        assert load_snapshot(path) == full_snapshot
