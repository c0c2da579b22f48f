"""
Archive Builder
把合併後的檔案打包成 zip bytes。

同一份檔案清單打包兩次必須得到完全相同的 bytes：
- entry 依路徑排序
- 時間戳固定 (Config.ARCHIVE_TIMESTAMP)
- 權限固定：一般檔 0644，標記 executable 的檔案 0755
"""

from __future__ import annotations

import hashlib
import io
import zipfile
from dataclasses import dataclass
from pathlib import Path

from config.config import Config
from core.exceptions import GenerationError
from scaffold.contribution import FileRecord
from scaffold.progress import ProgressCallback, ProgressReporter
from utils.logger import logger

_FILE_MODE = 0o100644
_EXEC_MODE = 0o100755
_UNIX = 3


@dataclass(frozen=True)
class Archive:
    data: bytes
    names: tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def sha256(self) -> str:
        return hashlib.sha256(self.data).hexdigest()

    def write_to(self, path) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.data)
        logger.info(f"封存檔已寫入: {target} ({self.size} bytes)")
        return target


class ArchiveBuilder:
    """打包檔案並回報一次結束進度"""

    def __init__(self, on_progress: ProgressCallback | ProgressReporter | None = None):
        if isinstance(on_progress, ProgressReporter):
            self.reporter = on_progress
        else:
            self.reporter = ProgressReporter(on_progress)

    def pack(self, files) -> Archive:
        """
        Raises:
            GenerationError: 路徑重複或寫入失敗
        """
        try:
            archive = self._pack(list(files))
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"打包失敗: {e}")
            raise GenerationError(stage="archive") from e
        self.reporter.emit(100, f"Archive ready ({len(archive.names)} files)")
        return archive

    @staticmethod
    def _entry(record: FileRecord) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(record.path, date_time=Config.archive_date_time())
        info.create_system = _UNIX
        info.external_attr = (_EXEC_MODE if record.executable else _FILE_MODE) << 16
        info.compress_type = Config.compression()
        return info

    def _pack(self, files: list[FileRecord]) -> Archive:
        ordered = sorted(files, key=lambda r: r.path)
        names = tuple(r.path for r in ordered)
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            logger.error(f"封存檔路徑重複: {', '.join(duplicates)}")
            raise GenerationError(stage="archive", context={"duplicates": duplicates})

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            for record in ordered:
                zf.writestr(
                    self._entry(record),
                    record.content.encode("utf-8"),
                    compress_type=Config.compression(),
                    compresslevel=Config.ARCHIVE_COMPRESSION_LEVEL,
                )
        logger.debug(f"打包 {len(names)} 個檔案")
        return Archive(data=buffer.getvalue(), names=names)
