"""
Fixture Writer
- tests/fixtures/base (必產，把 page object 包成 fixture)
- auth / database / api / device (對應的 fixture 啟用時)
- test-data/testData (必產，依測試資料策略)

每個啟用中的 fixture 在 FIXTURE_DEPENDENCIES 登記的套件都會列為 devDependencies。
"""

from scaffold import catalogs
from scaffold.base_writer import BaseWriter
from scaffold.contribution import Contribution, FileCategory
from scaffold.page_writer import page_names
from scaffold.schema import AuthMethod
from scaffold.templates import fixtures


class FixtureWriter(BaseWriter):
    """產生 fixture 與測試資料檔"""

    module = "fixtures"

    def __init__(self, snapshot):
        super().__init__(snapshot)
        self.config = snapshot.fixtures

    def build(self) -> Contribution:
        cfg = self.config
        files = [self._source(
            f"tests/fixtures/base.{self.ext}",
            fixtures.base_fixture(self.language, page_names(self.snapshot), cfg.fixture_timeout),
            FileCategory.FIXTURE, "Page object fixtures",
        )]

        auth = [a for a in cfg.authentication if a.enabled]
        if auth:
            files.append(self._source(
                f"tests/fixtures/auth.{self.ext}",
                fixtures.auth_fixture(self.language, self._auth_method(auth),
                                      roles=cfg.is_enabled("role-fixtures")),
                FileCategory.FIXTURE, "Authentication fixtures",
            ))
        if cfg.is_enabled("database-fixture"):
            files.append(self._source(
                f"tests/fixtures/database.{self.ext}",
                fixtures.database_fixture(self.language, cleanup=cfg.test_data.cleanup),
                FileCategory.FIXTURE, "Database connection fixture",
            ))
        if cfg.is_enabled("api-token"):
            files.append(self._source(f"tests/fixtures/api.{self.ext}",
                                      fixtures.api_fixture(self.language),
                                      FileCategory.FIXTURE, "Authenticated API context"))
        if cfg.is_enabled("mobile-fixture"):
            files.append(self._source(f"tests/fixtures/device.{self.ext}",
                                      fixtures.device_fixture(self.language),
                                      FileCategory.FIXTURE, "Mobile device emulation"))

        files.append(self._source(
            f"test-data/testData.{self.ext}",
            fixtures.static_data(self.language, cfg.test_data.strategy),
            FileCategory.FIXTURE,
            catalogs.TEST_DATA_STRATEGIES[cfg.test_data.strategy.value],
        ))
        return self._contribution(files, dev_dependencies=self._dev_dependencies())

    @staticmethod
    def _auth_method(enabled) -> AuthMethod:
        """第一個啟用的 session 以外方法優先，否則用 session"""
        for entry in enabled:
            if entry.method is not AuthMethod.SESSION:
                return entry.method
        return AuthMethod.SESSION

    def _dev_dependencies(self) -> list[str]:
        deps = []
        enabled = self.config.enabled_ids()
        for fixture_id in catalogs.canonical_fixture_order():
            if fixture_id in enabled:
                deps.extend(catalogs.FIXTURE_DEPENDENCIES.get(fixture_id, ()))
        return deps
