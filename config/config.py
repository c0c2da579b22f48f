"""
設定管理模組
統一管理產生器本身的設定：產出專案名稱、Playwright 版本、封存檔參數等。
支援透過環境變數覆蓋預設值，方便 CI/CD 整合。
"""

import os
import zipfile
from datetime import datetime


class ConfigValidationError(Exception):
    """產生器設定驗證失敗"""

    def __init__(self, errors: list[str]):
        self.errors = errors
        msg = "Scaffold 設定驗證失敗:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class Config:
    """產生器全域設定"""

    # 產出專案
    PROJECT_NAME = os.getenv("SCAFFOLD_PROJECT_NAME", "playwright-framework")
    PROJECT_VERSION = os.getenv("SCAFFOLD_PROJECT_VERSION", "1.1.0")
    PLAYWRIGHT_VERSION = os.getenv("PLAYWRIGHT_VERSION", "v1.40.0")

    # 封存檔：固定時間戳讓同樣的輸入產出同樣的 bytes
    ARCHIVE_TIMESTAMP = os.getenv("ARCHIVE_TIMESTAMP", "1980-01-01T00:00:00")
    ARCHIVE_COMPRESSION_LEVEL = int(os.getenv("ARCHIVE_COMPRESSION_LEVEL", "6"))

    # 驗證引擎
    MAX_RECOMMENDATIONS = int(os.getenv("MAX_RECOMMENDATIONS", "5"))

    @classmethod
    def archive_date_time(cls) -> tuple:
        """
        把 ARCHIVE_TIMESTAMP 轉成 zipfile 需要的 (Y, M, D, h, m, s)。

        Raises:
            ConfigValidationError: 格式錯誤或早於 1980 (zip 格式下限)
        """
        try:
            stamp = datetime.fromisoformat(cls.ARCHIVE_TIMESTAMP)
        except ValueError:
            raise ConfigValidationError(
                [f"ARCHIVE_TIMESTAMP 格式錯誤: {cls.ARCHIVE_TIMESTAMP}"]
            ) from None
        if stamp.year < 1980:
            raise ConfigValidationError(
                [f"ARCHIVE_TIMESTAMP 不可早於 1980: {cls.ARCHIVE_TIMESTAMP}"]
            )
        return (stamp.year, stamp.month, stamp.day,
                stamp.hour, stamp.minute, stamp.second)

    @classmethod
    def playwright_image(cls) -> str:
        return f"mcr.microsoft.com/playwright:{cls.PLAYWRIGHT_VERSION}-jammy"

    @classmethod
    def validate_settings(cls) -> list[str]:
        """
        驗證產生器設定。

        Returns:
            警告訊息列表

        Raises:
            ConfigValidationError: 有設定值無法使用時拋出
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not cls.PROJECT_NAME.strip():
            errors.append("SCAFFOLD_PROJECT_NAME 不可為空")

        if not 0 <= cls.ARCHIVE_COMPRESSION_LEVEL <= 9:
            errors.append(
                f"ARCHIVE_COMPRESSION_LEVEL 必須在 0-9: {cls.ARCHIVE_COMPRESSION_LEVEL}"
            )

        if cls.MAX_RECOMMENDATIONS < 1:
            errors.append(f"MAX_RECOMMENDATIONS 必須 >= 1: {cls.MAX_RECOMMENDATIONS}")

        try:
            cls.archive_date_time()
        except ConfigValidationError as e:
            errors.extend(e.errors)

        if not cls.PLAYWRIGHT_VERSION.startswith("v"):
            warnings.append(
                f"PLAYWRIGHT_VERSION 建議以 v 開頭: {cls.PLAYWRIGHT_VERSION}"
            )

        if errors:
            raise ConfigValidationError(errors)

        return warnings

    @classmethod
    def compression(cls) -> int:
        return zipfile.ZIP_DEFLATED if cls.ARCHIVE_COMPRESSION_LEVEL else zipfile.ZIP_STORED
