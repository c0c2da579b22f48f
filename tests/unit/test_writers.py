"""
各 writer 單元測試

每個 writer 單獨呼叫 build()，檢查依開關產出的路徑、依賴與 scripts。
"""

import dataclasses

import pytest

from scaffold import catalogs
from scaffold.ci_writer import CIWriter
from scaffold.config_writer import ConfigWriter
from scaffold.contribution import FileCategory, fold
from scaffold.docker_writer import ENTRYPOINT_PATH, DockerWriter
from scaffold.editing import update_fixture
from scaffold.fixture_writer import FixtureWriter
from scaffold.page_writer import PageWriter
from scaffold.schema import ConfigurationSnapshot
from scaffold.structure_writer import StructureWriter, directories_for, project_stats
from scaffold.test_writer import TestWriter
from scaffold.util_writer import UtilWriter


def snapshot_from(**data):
    return ConfigurationSnapshot.from_dict(data)


def _paths(contribution):
    return [f.path for f in contribution.files]


@pytest.mark.unit
class TestConfigWriter:
    """設定檔"""

    @pytest.mark.unit
    def test_typescript_outputs(self, minimal_snapshot):
        c = ConfigWriter(minimal_snapshot).build()
        assert _paths(c) == ["playwright.config.ts", "package.json", ".env.example",
                             "tsconfig.json"]
        assert "typescript" in c.dev_dependencies
        assert dict(c.scripts)["test:chromium"] == "playwright test --project=chromium"
        assert "test:parallel" not in dict(c.scripts)

    @pytest.mark.unit
    def test_javascript_multi_env(self, full_snapshot):
        c = ConfigWriter(full_snapshot).build()
        paths = _paths(c)
        assert "playwright.config.js" in paths
        assert "tsconfig.json" not in paths
        assert ".env.local" in paths and ".env.staging" in paths
        assert "allure-playwright" in c.dev_dependencies
        assert "test:parallel" in dict(c.scripts)

    @pytest.mark.unit
    def test_config_lists_browsers_and_reporters(self, full_snapshot):
        config = ConfigWriter(full_snapshot).build().files[0]
        for browser in ("chromium", "firefox", "webkit"):
            assert browser in config.content
        assert "junit" in config.content
        assert "allure-playwright" in config.content
        assert config.language == "javascript"

    @pytest.mark.unit
    def test_env_example_lines(self, minimal_snapshot):
        env = next(f for f in ConfigWriter(minimal_snapshot).build().files
                   if f.path == ".env.example")
        assert "BASE_URL=http://localhost:3000" in env.content

    @pytest.mark.unit
    @pytest.mark.parametrize("names, expected", [
        (["local", "example"], [".env.local", ".env.example-2"]),
        (["QA", "qa"], [".env.qa", ".env.qa-2"]),
        (["dev 1", "dev-1", "dev_1"], [".env.dev-1", ".env.dev-1-2", ".env.dev-1-3"]),
    ])
    def test_env_file_names_stay_unique(self, names, expected):
        snapshot = snapshot_from(environments={
            "environments": [{"name": n, "base_url": "https://app.test"} for n in names],
            "selected": names,
        })
        paths = _paths(ConfigWriter(snapshot).build())
        env_files = [p for p in paths if p.startswith(".env.") and p != ".env.example"]
        assert env_files == expected
        assert paths.count(".env.example") == 1


@pytest.mark.unit
class TestTestWriter:
    """測試檔"""

    @pytest.mark.unit
    def test_minimal_only_example(self, minimal_snapshot):
        c = TestWriter(minimal_snapshot).build()
        assert _paths(c) == ["tests/example.spec.ts"]
        assert c.dev_dependencies == ()

    @pytest.mark.unit
    def test_capability_files(self, full_snapshot):
        paths = _paths(TestWriter(full_snapshot).build())
        for expected in ("tests/api/api.spec.js", "tests/visual/visual.spec.js",
                         "tests/accessibility/a11y.spec.js",
                         "tests/performance/performance.spec.js",
                         "tests/mobile/mobile.spec.js"):
            assert expected in paths

    @pytest.mark.unit
    @pytest.mark.parametrize("flag, path", [
        ("api_testing", "tests/api/api.spec.ts"),
        ("visual_testing", "tests/visual/visual.spec.ts"),
        ("accessibility_testing", "tests/accessibility/a11y.spec.ts"),
        ("performance_testing", "tests/performance/performance.spec.ts"),
        ("mobile_testing", "tests/mobile/mobile.spec.ts"),
    ])
    def test_each_capability_alone(self, minimal_snapshot, flag, path):
        """一次只切一個開關，其餘維持不變"""
        def build(value):
            caps = dataclasses.replace(minimal_snapshot.capabilities, **{flag: value})
            return _paths(TestWriter(dataclasses.replace(minimal_snapshot, capabilities=caps)).build())

        on, off = build(True), build(False)
        assert path in on
        assert path not in off
        assert sorted(set(on) - set(off)) == [path]

    @pytest.mark.unit
    def test_browser_specific(self, full_snapshot):
        paths = _paths(TestWriter(full_snapshot).build())
        specific = [p for p in paths if p.startswith("tests/browser-specific/")]
        assert specific == [f"tests/browser-specific/{b}-specific.spec.js"
                            for b in catalogs.BROWSER_SPECIFIC_TESTS]

    @pytest.mark.unit
    def test_cucumber(self, full_snapshot):
        c = TestWriter(full_snapshot).build()
        assert "features/sample.feature" in _paths(c)
        assert "@cucumber/cucumber" in c.dev_dependencies
        assert ("test:bdd", "cucumber-js") in c.scripts

    @pytest.mark.unit
    def test_accessibility_dependency(self, full_snapshot):
        assert "@axe-core/playwright" in TestWriter(full_snapshot).build().dev_dependencies


@pytest.mark.unit
class TestPageWriter:
    """Page Object"""

    @pytest.mark.unit
    def test_default_pages(self, minimal_snapshot):
        assert _paths(PageWriter(minimal_snapshot).build()) == [
            "tests/pages/BasePage.ts", "tests/pages/HomePage.ts", "tests/pages/LoginPage.ts",
        ]

    @pytest.mark.unit
    def test_ecommerce_adds_product_page(self, full_snapshot):
        paths = _paths(PageWriter(full_snapshot).build())
        assert "tests/pages/ProductPage.js" in paths
        assert all(f.category is FileCategory.PAGE for f in PageWriter(full_snapshot).build().files)


@pytest.mark.unit
class TestFixtureWriter:
    """fixture 檔"""

    @pytest.mark.unit
    def test_default_fixtures(self, minimal_snapshot):
        c = FixtureWriter(minimal_snapshot).build()
        assert _paths(c) == ["tests/fixtures/base.ts", "tests/fixtures/auth.ts",
                             "test-data/testData.ts"]
        assert c.dev_dependencies == ()

    @pytest.mark.unit
    def test_optional_fixtures(self, minimal_snapshot):
        fixtures = minimal_snapshot.fixtures
        for fixture_id in ("database-fixture", "api-token", "mobile-fixture", "visual-fixture"):
            fixtures = update_fixture(fixtures, fixture_id, enabled=True)
        snapshot = dataclasses.replace(minimal_snapshot, fixtures=fixtures)
        c = FixtureWriter(snapshot).build()
        paths = _paths(c)
        assert "tests/fixtures/database.ts" in paths
        assert "tests/fixtures/api.ts" in paths
        assert "tests/fixtures/device.ts" in paths
        assert c.dev_dependencies == ("pg", "@types/pg", "pixelmatch")

    @pytest.mark.unit
    def test_no_auth_file_when_auth_disabled(self, minimal_snapshot):
        fixtures = update_fixture(minimal_snapshot.fixtures, "login-fixture", enabled=False)
        snapshot = dataclasses.replace(minimal_snapshot, fixtures=fixtures)
        assert "tests/fixtures/auth.ts" not in _paths(FixtureWriter(snapshot).build())

    @pytest.mark.unit
    def test_test_data_described_by_strategy(self):
        snapshot = snapshot_from(fixtures={"test_data": {"strategy": "factory"}})
        data = FixtureWriter(snapshot).build().files[-1]
        assert data.description == catalogs.TEST_DATA_STRATEGIES["factory"]


@pytest.mark.unit
class TestUtilWriter:

    @pytest.mark.unit
    def test_always_four_files(self, minimal_snapshot):
        assert len(UtilWriter(minimal_snapshot).build().files) == 4

    @pytest.mark.unit
    def test_faker(self, full_snapshot):
        c = UtilWriter(full_snapshot).build()
        faker = next(f for f in c.files if f.path == "tests/utils/fakerUtils.js")
        assert "de" in faker.description
        assert c.dev_dependencies == ("@faker-js/faker",)


@pytest.mark.unit
class TestCIWriter:
    """CI 檔案路徑"""

    @pytest.mark.unit
    def test_nothing_when_disabled(self, minimal_snapshot):
        assert CIWriter(minimal_snapshot).build().files == ()

    @pytest.mark.unit
    def test_default_provider_per_workflow(self, ci_snapshot):
        assert _paths(CIWriter(ci_snapshot).build()) == [
            ".github/workflows/pr-checks.yml", ".github/workflows/nightly.yml",
        ]

    @pytest.mark.unit
    def test_every_provider(self, full_snapshot):
        writer = CIWriter(full_snapshot)
        assert writer.providers() == ["github_actions", "gitlab_ci", "jenkins", "azure_devops"]
        paths = _paths(writer.build())
        assert paths == [
            ".github/workflows/playwright-tests.yml",
            ".gitlab/ci/playwright-tests.yml",
            "jenkins/playwright-tests.Jenkinsfile",
            ".azure/pipelines/playwright-tests.yml",
        ]

    @pytest.mark.unit
    def test_primary_files_when_ci_off(self):
        snapshot = snapshot_from(integrations={"gitlab_ci": True, "jenkins": True})
        assert _paths(CIWriter(snapshot).build()) == [".gitlab-ci.yml", "Jenkinsfile"]

    @pytest.mark.unit
    def test_schedule_in_workflow(self, ci_snapshot):
        nightly = CIWriter(ci_snapshot).build().files[1]
        assert "0 3 * * *" in nightly.content
        assert nightly.category is FileCategory.CI


@pytest.mark.unit
class TestDockerWriter:
    """容器檔案"""

    @pytest.mark.unit
    def test_nothing_when_disabled(self, minimal_snapshot):
        assert DockerWriter(minimal_snapshot).build().files == ()

    @pytest.mark.unit
    def test_files_and_executable(self, ci_snapshot):
        c = DockerWriter(ci_snapshot).build()
        records = {f.path: f for f in c.files}
        assert "Dockerfile" in records and ".dockerignore" in records
        assert records[ENTRYPOINT_PATH].executable
        assert not records["Dockerfile"].executable
        assert "docker-compose.yml" in records
        assert dict(c.scripts)["docker:build"].startswith("docker build")

    @pytest.mark.unit
    def test_compose_file_without_compose_feature(self):
        """主 compose 檔一律產出，只有 dev / test 變體看 compose 開關"""
        snapshot = snapshot_from(docker={"enabled": True, "features": {"compose": False}})
        paths = _paths(DockerWriter(snapshot).build())
        assert "docker-compose.yml" in paths
        assert "docker/.env.docker" in paths
        assert "docker/docker-compose.dev.yml" not in paths
        assert "docker/docker-compose.test.yml" not in paths

    @pytest.mark.unit
    def test_compose_variants(self, ci_snapshot):
        paths = _paths(DockerWriter(ci_snapshot).build())
        assert "docker/docker-compose.dev.yml" in paths
        assert "docker/docker-compose.test.yml" in paths

    @pytest.mark.unit
    def test_custom_image_verbatim(self):
        snapshot = snapshot_from(docker={"enabled": True, "base_image": "custom",
                                         "custom_image": "registry.local/e2e:2.1"})
        dockerfile = DockerWriter(snapshot).build().files[0]
        assert "FROM registry.local/e2e:2.1" in dockerfile.content


@pytest.mark.unit
class TestStructureWriter:
    """目錄結構與 README"""

    @pytest.mark.unit
    def test_directories_for(self):
        dirs = directories_for(["a/b/c.ts", "x.md"])
        assert "a" in dirs and "a/b" in dirs
        assert "x.md" not in dirs
        assert "test-results" in dirs
        assert dirs == sorted(dirs)

    @pytest.mark.unit
    def test_readme_and_stats(self, minimal_snapshot):
        merged = fold([ConfigWriter(minimal_snapshot).build(),
                       PageWriter(minimal_snapshot).build()])
        writer = StructureWriter(minimal_snapshot, merged)
        readme = writer.build().files[0]
        assert readme.path == "README.md"
        assert readme.category is FileCategory.DOCS
        assert "npm run test" in readme.content or "npx playwright test" in readme.content
        stats = writer.stats()
        assert stats.total_files == len(merged.files)
        assert stats.by_category["page"] == 3

    @pytest.mark.unit
    def test_empty_stats(self):
        stats = project_stats((), [])
        assert stats.total_files == 0
        assert stats.to_dict()["largest_file"] is None
