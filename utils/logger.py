"""
日誌模組

產生器只有一個 logger ("scaffold")，各模組 `from utils.logger import logger`。
console 走 stderr，stdout 留給 CLI 輸出 JSON / 結果。

環境變數:
    LOG_LEVEL: console 日誌等級 (預設 INFO)
    LOG_DIR:   設定後才寫 scaffold.log 到該目錄
    LOG_JSON:  設為 "1" 且有 LOG_DIR 時另寫 scaffold.json.log

engine 記錄時會帶 extra={"stage": ...}，JSON 日誌會多一個 stage 欄位，
方便從日誌系統篩出某個產生階段。
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

LOGGER_NAME = "scaffold"
CONSOLE_FORMAT = "[%(asctime)s] %(levelname)-7s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """一筆紀錄一行 JSON，給 ELK / Loki 這類日誌系統收"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        stage = getattr(record, "stage", None)
        if stage:
            entry["stage"] = stage
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _level_from_env() -> int:
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handlers(log_dir: Path, with_json: bool) -> list[logging.Handler]:
    log_dir.mkdir(parents=True, exist_ok=True)
    plain = logging.FileHandler(log_dir / f"{LOGGER_NAME}.log", encoding="utf-8")
    plain.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    handlers: list[logging.Handler] = [plain]
    if with_json:
        structured = logging.FileHandler(log_dir / f"{LOGGER_NAME}.json.log", encoding="utf-8")
        structured.setFormatter(JsonFormatter())
        handlers.append(structured)
    for handler in handlers:
        handler.setLevel(logging.DEBUG)
    return handlers


def _create_logger() -> logging.Logger:
    # 不掛在 logging 樹上，避免呼叫端的 root 設定重複輸出
    _logger = logging.Logger(LOGGER_NAME)
    _logger.setLevel(logging.DEBUG)
    _logger.addHandler(_console_handler(_level_from_env()))

    log_dir = os.getenv("LOG_DIR", "").strip()
    if log_dir:
        for handler in _file_handlers(Path(log_dir), os.getenv("LOG_JSON", "").strip() == "1"):
            _logger.addHandler(handler)
    return _logger


def set_console_level(level: int, target: logging.Logger | None = None) -> None:
    """調整 console 等級 (CLI 的 --verbose / --quiet)，檔案日誌不受影響"""
    for handler in (target or logger).handlers:
        if type(handler) is logging.StreamHandler:
            handler.setLevel(level)


logger = _create_logger()
