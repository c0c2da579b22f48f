"""
Writer 基底類別

每個 writer 收到同一份唯讀快照，build() 回傳一份 Contribution。
writer 不寫磁碟、不互相呼叫，彼此的產出只在 engine 的 fold 裡相遇。
"""

from scaffold.contribution import Contribution, FileCategory, FileRecord
from scaffold.schema import ConfigurationSnapshot


class BaseWriter:
    """子類別設定 module 名稱並實作 build()"""

    module = "base"

    def __init__(self, snapshot: ConfigurationSnapshot):
        self.snapshot = snapshot
        self.language = snapshot.language
        self.ext = snapshot.extension

    def build(self) -> Contribution:
        raise NotImplementedError

    def _source(self, path: str, content: str, category: FileCategory,
                description: str = "") -> FileRecord:
        """產出專案語言的原始碼檔"""
        return FileRecord(
            path=path,
            content=content,
            category=category,
            language=self.language.value,
            description=description,
        )

    @staticmethod
    def _plain(path: str, content: str, category: FileCategory,
               description: str = "", executable: bool = False) -> FileRecord:
        """設定 / 文件這類非原始碼檔"""
        return FileRecord(
            path=path,
            content=content,
            category=category,
            description=description,
            executable=executable,
        )

    def _contribution(self, files, dependencies=(), dev_dependencies=(),
                      scripts=()) -> Contribution:
        return Contribution(
            module=self.module,
            files=tuple(files),
            dependencies=tuple(dependencies),
            dev_dependencies=tuple(dev_dependencies),
            scripts=tuple(scripts),
        )
