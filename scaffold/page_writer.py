"""
Page Object Writer
BasePage / HomePage / LoginPage 必產，ecommerce 開啟時加 ProductPage。
"""

from scaffold.base_writer import BaseWriter
from scaffold.contribution import Contribution, FileCategory
from scaffold.templates import pages


def page_names(snapshot) -> list[str]:
    """會產出的具體頁面 (不含 BasePage)，fixture writer 也用這份清單"""
    names = ["HomePage", "LoginPage"]
    if snapshot.capabilities.ecommerce:
        names.append("ProductPage")
    return names


class PageWriter(BaseWriter):
    """產生 Page Object 檔"""

    module = "pages"

    _RENDERERS = {
        "HomePage": pages.home_page,
        "LoginPage": pages.login_page,
        "ProductPage": pages.product_page,
    }

    def build(self) -> Contribution:
        fluent = self.snapshot.fixtures.is_enabled("fluent-interface")
        files = [self._source(f"tests/pages/BasePage.{self.ext}",
                              pages.base_page(self.language, fluent=fluent),
                              FileCategory.PAGE, "Shared page object behaviour")]
        for name in page_names(self.snapshot):
            files.append(self._source(f"tests/pages/{name}.{self.ext}",
                                      self._RENDERERS[name](self.language),
                                      FileCategory.PAGE, f"{name} page object"))
        return self._contribution(files)
