"""
產出記錄與合併 (fold)

每個 writer 回傳一份不可變的 Contribution：
    files / dependencies / dev_dependencies / scripts

engine 用 merge() 依序把 Contribution 折疊進 MergedOutput：
- 路徑重複 → PathCollisionError (致命)
- 依賴名稱 → 保留先出現的順序去重
- script 名稱相同但指令不同 → 保留先定義的，記一筆警告
"""

from __future__ import annotations

import dataclasses
import functools
from dataclasses import dataclass, field
from enum import Enum

from core.exceptions import GenerationError, PathCollisionError
from utils.logger import logger


class FileCategory(Enum):
    CONFIG = "config"
    TEST = "test"
    PAGE = "page"
    FIXTURE = "fixture"
    UTIL = "util"
    CI = "ci"
    DOCKER = "docker"
    DOCS = "docs"


@dataclass(frozen=True)
class FileRecord:
    """單一產出檔案，path 在整次產出中唯一"""
    path: str
    content: str
    category: FileCategory
    language: str | None = None
    description: str = ""
    executable: bool = False

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))


@dataclass(frozen=True)
class Contribution:
    """單一 writer 的產出"""
    module: str
    files: tuple[FileRecord, ...] = ()
    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()
    scripts: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class MergedOutput:
    """折疊後的累積結果；origins 與 files 一一對應，記錄是哪個模組產的"""
    files: tuple[FileRecord, ...] = ()
    origins: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()
    scripts: tuple[tuple[str, str], ...] = ()
    warnings: tuple[str, ...] = field(default=())

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(f.path for f in self.files)

    @property
    def script_map(self) -> dict:
        return dict(self.scripts)

    def get(self, path: str) -> FileRecord | None:
        for record in self.files:
            if record.path == path:
                return record
        return None


def _dedupe(names) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))


def merge(acc: MergedOutput, contribution: Contribution) -> MergedOutput:
    """把一份 Contribution 併入累積結果，回傳新的 MergedOutput"""
    owners = dict(zip(acc.paths, acc.origins))
    for record in contribution.files:
        if record.path in owners:
            raise PathCollisionError(record.path, owners[record.path], contribution.module)
        owners[record.path] = contribution.module

    scripts = dict(acc.scripts)
    warnings = list(acc.warnings)
    for name, command in contribution.scripts:
        existing = scripts.get(name)
        if existing is None:
            scripts[name] = command
        elif existing != command:
            msg = (f"Script '{name}' from {contribution.module} ignored: "
                   f"already defined as '{existing}'")
            logger.warning(msg)
            warnings.append(msg)

    return MergedOutput(
        files=acc.files + contribution.files,
        origins=acc.origins + (contribution.module,) * len(contribution.files),
        dependencies=_dedupe(acc.dependencies + contribution.dependencies),
        dev_dependencies=_dedupe(acc.dev_dependencies + contribution.dev_dependencies),
        scripts=tuple(scripts.items()),
        warnings=tuple(warnings),
    )


def fold(contributions, initial: MergedOutput | None = None) -> MergedOutput:
    return functools.reduce(merge, contributions, initial or MergedOutput())


def replace_file(acc: MergedOutput, record: FileRecord) -> MergedOutput:
    """
    以新內容取代既有路徑的檔案 (manifest 收尾用)。

    Raises:
        GenerationError: 路徑不存在
    """
    if record.path not in acc.paths:
        raise GenerationError(f"Cannot finalize missing file: {record.path}",
                              context={"path": record.path})
    files = tuple(record if f.path == record.path else f for f in acc.files)
    return dataclasses.replace(acc, files=files)
