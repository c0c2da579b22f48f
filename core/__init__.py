"""
core: 產生器共用的錯誤處理

用法：
    from core import ScaffoldError, ConfigurationError, GenerationError
"""

from core.exceptions import (
    GENERATION_FAILED,
    ConfigurationError,
    CustomImageMissingError,
    GenerationError,
    InvalidConfigError,
    NoBrowsersSelectedError,
    NoLanguageSelectedError,
    PathCollisionError,
    ScaffoldError,
    SnapshotFileError,
    WorkflowError,
)

__all__ = [
    "GENERATION_FAILED",
    "ScaffoldError",
    "ConfigurationError",
    "NoLanguageSelectedError",
    "NoBrowsersSelectedError",
    "CustomImageMissingError",
    "InvalidConfigError",
    "GenerationError",
    "PathCollisionError",
    "WorkflowError",
    "SnapshotFileError",
]
