"""
自訂 Exception 體系

統一的錯誤處理階層，讓每種失敗都有明確的分類與訊息。
上層可以 catch 大類別 (如 ScaffoldError)，
也可以精準 catch 子類別 (如 NoBrowsersSelectedError)。

訊息字串是對外穩定的英文字串，呼叫端可以直接顯示。

Exception 樹：
    ScaffoldError
    ├── ConfigurationError
    │   ├── NoLanguageSelectedError
    │   ├── NoBrowsersSelectedError
    │   ├── CustomImageMissingError
    │   └── InvalidConfigError
    ├── GenerationError
    │   └── PathCollisionError
    ├── WorkflowError
    └── SnapshotFileError
"""

GENERATION_FAILED = "Failed to generate framework"


class ScaffoldError(Exception):
    """產生器所有例外的基底，catch 這個就能攔截一切產生器錯誤"""

    def __init__(self, message: str = "", context: dict | None = None):
        self.context = context or {}
        super().__init__(message)


# ── 設定相關 (產生前檢查，致命) ──

class ConfigurationError(ScaffoldError):
    """設定快照不完整或無效"""


class NoLanguageSelectedError(ConfigurationError):
    """未選擇程式語言"""

    def __init__(self, message: str = "No programming language selected"):
        super().__init__(message)


class NoBrowsersSelectedError(ConfigurationError):
    """未選擇任何瀏覽器"""

    def __init__(self, message: str = "No browsers selected for testing"):
        super().__init__(message)


class CustomImageMissingError(ConfigurationError):
    """容器選了 custom base image 但沒填映像名稱"""

    def __init__(
        self,
        message: str = "Custom image name is required when using custom base image",
    ):
        super().__init__(message)


class InvalidConfigError(ConfigurationError):
    """設定值無效"""

    def __init__(self, key: str = "", value: object = "", reason: str = ""):
        msg = f"Invalid configuration value: {key}={value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, context={"key": key, "value": value})


# ── 產生相關 (管線中途，致命) ──

class GenerationError(ScaffoldError):
    """產生過程失敗，對外一律是同一個訊息"""

    def __init__(
        self,
        message: str = GENERATION_FAILED,
        stage: str = "",
        context: dict | None = None,
    ):
        self.stage = stage
        ctx = dict(context or {})
        if stage:
            ctx["stage"] = stage
        super().__init__(message, context=ctx)


class PathCollisionError(GenerationError):
    """兩個模組輸出同一個路徑"""

    def __init__(self, path: str = "", first: str = "", second: str = ""):
        self.path = path
        super().__init__(
            f"Path collision: {path} (emitted by {first} and {second})",
            context={"path": path, "first": first, "second": second},
        )


# ── Workflow 編輯 ──

class WorkflowError(ScaffoldError):
    """CI workflow 編輯操作失敗"""

    def __init__(self, message: str = "", workflow_id: str = ""):
        super().__init__(message, context={"workflow_id": workflow_id})


# ── 快照檔案 ──

class SnapshotFileError(ScaffoldError):
    """設定快照檔無法讀取或格式錯誤"""

    def __init__(self, path: str = "", reason: str = ""):
        msg = f"Cannot load configuration snapshot: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, context={"path": path})
