"""
Structure Writer
在所有其他 writer 之後執行，看得到合併後的檔案清單：
- 目錄清單 = 每個路徑的所有上層目錄 + 慣例目錄
- 目錄樹
- README.md (含專案統計)
"""

from dataclasses import dataclass, field

from config.config import Config
from scaffold import catalogs
from scaffold.base_writer import BaseWriter
from scaffold.contribution import Contribution, FileCategory, FileRecord, MergedOutput
from scaffold.templates import docs

README_PATH = "README.md"


@dataclass(frozen=True)
class ProjectStats:
    total_files: int = 0
    total_directories: int = 0
    by_category: dict = field(default_factory=dict)
    by_language: dict = field(default_factory=dict)
    average_size: int = 0
    largest: tuple | None = None            # (path, bytes)
    smallest: tuple | None = None

    def to_dict(self) -> dict:
        return {
            "total_files": self.total_files,
            "total_directories": self.total_directories,
            "files_by_category": dict(self.by_category),
            "files_by_language": dict(self.by_language),
            "average_file_size": self.average_size,
            "largest_file": self.largest[0] if self.largest else None,
            "smallest_file": self.smallest[0] if self.smallest else None,
        }


def directories_for(paths) -> list[str]:
    """所有檔案路徑的真前綴目錄，加上慣例目錄，排序去重"""
    dirs = set(catalogs.CONVENTIONAL_DIRECTORIES)
    for path in paths:
        parts = path.split("/")
        for i in range(1, len(parts)):
            dirs.add("/".join(parts[:i]))
    return sorted(dirs)


def project_stats(files: tuple[FileRecord, ...], directories: list[str]) -> ProjectStats:
    by_category: dict = {}
    by_language: dict = {}
    for record in files:
        by_category[record.category.value] = by_category.get(record.category.value, 0) + 1
        if record.language:
            by_language[record.language] = by_language.get(record.language, 0) + 1

    if not files:
        return ProjectStats(total_directories=len(directories))

    # 同大小時取先出現的檔案
    largest = max(files, key=lambda r: r.size)
    smallest = min(files, key=lambda r: r.size)
    return ProjectStats(
        total_files=len(files),
        total_directories=len(directories),
        by_category=by_category,
        by_language=by_language,
        average_size=round(sum(r.size for r in files) / len(files)),
        largest=(largest.path, largest.size),
        smallest=(smallest.path, smallest.size),
    )


def group_by_category(files) -> dict:
    groups = {c.value: [] for c in FileCategory}
    for record in files:
        groups[record.category.value].append(record)
    return groups


class StructureWriter(BaseWriter):
    """產生 README.md；目錄清單與統計也由這裡提供給 engine"""

    module = "structure"

    def __init__(self, snapshot, merged: MergedOutput):
        super().__init__(snapshot)
        self.merged = merged
        self.directories = directories_for(merged.paths + (README_PATH,))

    def tree(self) -> str:
        return docs.directory_tree(Config.PROJECT_NAME, self.directories)

    def stats(self) -> ProjectStats:
        return project_stats(self.merged.files, self.directories)

    def build(self) -> Contribution:
        content = docs.readme(
            Config.PROJECT_NAME,
            self.tree(),
            self.stats(),
            group_by_category(self.merged.files),
            self.merged.script_map,
        )
        return self._contribution([
            self._plain(README_PATH, content, FileCategory.DOCS, "Project documentation"),
        ])
