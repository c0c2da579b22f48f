"""
設定快照載入器
支援從 JSON / YAML 檔載入 ConfigurationSnapshot，依副檔名自動選擇格式。

用法：
    from scaffold.loader import load_snapshot, save_snapshot

    snapshot = load_snapshot("playwright.json")
    snapshot = load_snapshot("playwright.yaml")
    save_snapshot(snapshot, "backup.json")
"""

import json
from pathlib import Path

import yaml

from core.exceptions import ScaffoldError, SnapshotFileError
from scaffold.schema import ConfigurationSnapshot


def _read_json(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _read_yaml(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


_READERS = {
    ".json": _read_json,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
}


def load_data(path) -> dict:
    """
    讀取設定檔內容 (巢狀 dict)。

    Raises:
        SnapshotFileError: 檔案不存在、格式不支援、解析失敗或頂層不是物件
    """
    path = Path(path)
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise SnapshotFileError(
            str(path), f"unsupported format {path.suffix or '(none)'}; "
                       f"expected one of: {', '.join(_READERS)}")
    if not path.is_file():
        raise SnapshotFileError(str(path), "file not found")
    try:
        data = reader(path)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise SnapshotFileError(str(path), f"parse error: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotFileError(str(path), "top-level value must be a mapping")
    return data


def load_snapshot(path) -> ConfigurationSnapshot:
    """
    載入並建立快照。

    Raises:
        SnapshotFileError: 讀檔失敗
        InvalidConfigError: 內容有無效的列舉值或欄位
    """
    data = load_data(path)
    try:
        return ConfigurationSnapshot.from_dict(data)
    except ScaffoldError:
        raise
    except (TypeError, ValueError, AttributeError) as e:
        raise SnapshotFileError(str(path), f"invalid structure: {e}") from e


def save_snapshot(snapshot: ConfigurationSnapshot, path) -> Path:
    """依副檔名存成 JSON 或 YAML"""
    path = Path(path)
    data = snapshot.to_dict()
    if path.suffix.lower() in (".yaml", ".yml"):
        text = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
    else:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    path.write_text(text, encoding="utf-8")
    return path
