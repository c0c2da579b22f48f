"""
Util Writer
helpers / waitUtils / stringUtils / dateUtils 必產，Faker 開啟時加 fakerUtils。
"""

from scaffold.base_writer import BaseWriter
from scaffold.contribution import Contribution, FileCategory
from scaffold.templates import helpers

_ALWAYS = (
    ("helpers", helpers.generic_helpers, "Generic test helpers"),
    ("waitUtils", helpers.wait_utils, "Wait helpers"),
    ("stringUtils", helpers.string_utils, "String helpers"),
    ("dateUtils", helpers.date_utils, "Date helpers"),
)


class UtilWriter(BaseWriter):
    """產生工具函式檔"""

    module = "utils"

    def build(self) -> Contribution:
        files = [
            self._source(f"tests/utils/{name}.{self.ext}", render(self.language),
                         FileCategory.UTIL, description)
            for name, render, description in _ALWAYS
        ]
        dev_deps = []
        faker = self.snapshot.integrations.faker
        if faker.enabled:
            files.append(self._source(
                f"tests/utils/fakerUtils.{self.ext}",
                helpers.faker_utils(self.language, faker.locale, faker.seed),
                FileCategory.UTIL, f"Fake data generators ({faker.locale})",
            ))
            dev_deps.append("@faker-js/faker")
        return self._contribution(files, dev_dependencies=dev_deps)
