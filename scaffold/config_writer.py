"""
Config Writer
產生專案層級設定檔：
- playwright.config.<ext>
- package.json (engine 收尾時會依合併後的依賴重寫)
- .env.example / .env.<環境> (多環境時；檔名撞名時加序號)
- tsconfig.json (僅 TypeScript)
"""

from config.config import Config
from scaffold.base_writer import BaseWriter
from scaffold.contribution import Contribution, FileCategory
from scaffold.templates import project

MANIFEST_PATH = "package.json"
ENV_TEMPLATE_SLUG = "example"

BASE_SCRIPTS = (
    ("test", "playwright test"),
    ("test:ui", "playwright test --ui"),
    ("test:headed", "playwright test --headed"),
    ("test:debug", "playwright test --debug"),
    ("report", "playwright show-report"),
    ("install-browsers", "playwright install --with-deps"),
)


def render_manifest(dependencies, dev_dependencies, scripts: dict) -> str:
    """package.json 內容；engine 收尾時用合併後的宣告再呼叫一次"""
    return project.package_json(
        name=Config.PROJECT_NAME,
        version=Config.PROJECT_VERSION,
        scripts=scripts,
        dependencies=tuple(dependencies),
        dev_dependencies=tuple(dev_dependencies),
    )


def env_file_paths(environments) -> list[str]:
    """
    每個環境對應的 .env 檔名，與 environments 同順序

    slug 與範本 (.env.example) 或前面的環境相同時改用 <slug>-2、<slug>-3 ...
    """
    taken = {ENV_TEMPLATE_SLUG}
    paths = []
    for env in environments:
        slug, n = env.slug, 2
        while slug in taken:
            slug = f"{env.slug}-{n}"
            n += 1
        taken.add(slug)
        paths.append(f".env.{slug}")
    return paths


class ConfigWriter(BaseWriter):
    """產生設定檔"""

    module = "config"

    def __init__(self, snapshot):
        super().__init__(snapshot)
        self.environments = snapshot.environments.active()
        self.integrations = snapshot.integrations

    def build(self) -> Contribution:
        scripts = self._scripts()
        dev_deps = self._dev_dependencies()

        files = [
            self._playwright_config(),
            self._plain(MANIFEST_PATH,
                        render_manifest((), dev_deps, dict(scripts)),
                        FileCategory.CONFIG, "Project manifest"),
            self._plain(".env.example", project.env_example(self.environments),
                        FileCategory.CONFIG, "Environment variable template"),
        ]
        if self.language.is_typed:
            files.append(self._plain("tsconfig.json", project.tsconfig(),
                                     FileCategory.CONFIG, "TypeScript compiler options"))
        if len(self.environments) > 1:
            for env, path in zip(self.environments, env_file_paths(self.environments)):
                files.append(self._plain(
                    path,
                    project.env_file(project.env_variables(env), header=f"{env.name} environment"),
                    FileCategory.CONFIG,
                    f"Variables for the {env.name} environment",
                ))

        return self._contribution(files, dev_dependencies=dev_deps, scripts=scripts)

    def _reporters(self) -> list[str]:
        reporters = ["html"]
        if self.integrations.junit.enabled:
            reporters.append("junit")
        if self.integrations.allure.enabled:
            reporters.append("allure-playwright")
        return reporters

    def _playwright_config(self):
        primary = self.environments[0] if self.environments else None
        content = project.playwright_config(
            self.language,
            self.snapshot.browsers,
            self.environments,
            self._reporters(),
            timeout=primary.timeout if primary else 30000,
            retries=primary.retries if primary else 1,
        )
        return self._source(f"playwright.config.{self.ext}", content,
                            FileCategory.CONFIG, "Playwright test runner configuration")

    def _scripts(self) -> list[tuple[str, str]]:
        scripts = list(BASE_SCRIPTS)
        for browser in self.snapshot.browsers:
            scripts.append((f"test:{browser.value}", f"playwright test --project={browser.value}"))
        if len(self.snapshot.browsers) > 1:
            scripts.append(("test:parallel", "playwright test --workers=4"))
        if self.integrations.allure.enabled:
            scripts.append(("allure:generate", "allure generate allure-results --clean -o allure-report"))
            scripts.append(("allure:open", "allure open allure-report"))
        return scripts

    def _dev_dependencies(self) -> list[str]:
        deps = ["@playwright/test", "dotenv"]
        if self.language.is_typed:
            deps += ["typescript", "@types/node"]
        if self.integrations.allure.enabled:
            deps += ["allure-playwright", "allure-commandline"]
        return deps
