"""
專案層級設定檔：playwright.config、tsconfig.json、package.json、.env 範本
"""

import json

from scaffold import catalogs
from scaffold.schema import Browser, Environment, Language
from scaffold.templates import import_from


def playwright_config(
    language: Language,
    browsers: tuple[Browser, ...],
    environments: tuple[Environment, ...],
    reporters: list[str],
    timeout: int = 30000,
    retries: int = 1,
) -> str:
    """主設定檔；每個瀏覽器一組 project，環境切換走 BASE_URL"""
    lines = [import_from(language, ["defineConfig", "devices"], "@playwright/test"), ""]
    lines.append("/**")
    lines.append(" * @see https://playwright.dev/docs/test-configuration")
    lines.append(" */")
    prefix = "export default" if language.is_typed else "module.exports ="
    lines.append(f"{prefix} defineConfig({{")
    lines.append("  testDir: './tests',")
    lines.append(f"  timeout: {timeout},")
    lines.append("  fullyParallel: true,")
    lines.append("  forbidOnly: !!process.env.CI,")
    lines.append(f"  retries: process.env.CI ? {max(retries, 2)} : {retries},")
    lines.append("  workers: process.env.CI ? 1 : undefined,")

    if len(reporters) == 1:
        lines.append(f"  reporter: '{reporters[0]}',")
    else:
        lines.append("  reporter: [")
        for reporter in reporters:
            if reporter == "junit":
                lines.append("    ['junit', { outputFile: 'test-results/junit.xml' }],")
            elif reporter == "allure-playwright":
                lines.append("    ['allure-playwright', { outputFolder: 'allure-results' }],")
            else:
                lines.append(f"    ['{reporter}'],")
        lines.append("  ],")

    primary = environments[0] if environments else None
    base_url = primary.base_url if primary else "http://localhost:3000"
    lines.append("  use: {")
    lines.append(f"    baseURL: process.env.BASE_URL || '{base_url}',")
    lines.append("    trace: 'on-first-retry',")
    lines.append("    screenshot: 'only-on-failure',")
    lines.append("    video: 'retain-on-failure',")
    lines.append("  },")

    if len(environments) > 1:
        names = ", ".join(e.name for e in environments)
        lines.append(f"  // Environments: {names} (load .env.<name> to switch BASE_URL)")
    lines.append("  projects: [")
    for browser in browsers:
        lines.append("    {")
        lines.append(f"      name: '{browser.value}',")
        lines.append(f"      use: {{ ...devices['{browser.device}'] }},")
        lines.append("    },")
    lines.append("  ],")
    lines.append("});")
    return "\n".join(lines) + "\n"


def tsconfig() -> str:
    config = {
        "compilerOptions": {
            "target": "ESNext",
            "lib": ["ESNext", "DOM", "DOM.Iterable"],
            "module": "ESNext",
            "moduleResolution": "bundler",
            "resolveJsonModule": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "strict": True,
            "noEmit": True,
            "baseUrl": ".",
            "paths": {
                "@/pages/*": ["./tests/pages/*"],
                "@/fixtures/*": ["./tests/fixtures/*"],
                "@/utils/*": ["./tests/utils/*"],
            },
        },
        "include": ["tests/**/*", "playwright.config.ts"],
    }
    return json.dumps(config, indent=2) + "\n"


def package_json(
    name: str,
    version: str,
    scripts: dict,
    dependencies: tuple[str, ...],
    dev_dependencies: tuple[str, ...],
) -> str:
    """依賴版本查 catalogs.PACKAGE_VERSIONS，查不到就是 latest"""

    def versions(names):
        return {n: catalogs.PACKAGE_VERSIONS.get(n, "latest") for n in names}

    dev_only = tuple(n for n in dev_dependencies if n not in dependencies)
    manifest = {
        "name": name,
        "version": version,
        "description": "Generated Playwright testing framework",
        "private": True,
        "scripts": scripts,
        "keywords": ["playwright", "testing", "e2e", "automation"],
        "license": "MIT",
        "dependencies": versions(dependencies),
        "devDependencies": versions(dev_only),
    }
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def env_variables(env: Environment | None) -> list[tuple[str, str]]:
    """單一環境的 KEY=value 組"""
    if env is None:
        env = Environment(name="local", base_url="http://localhost:3000",
                          api_url="http://localhost:3001/api")
    return [
        ("BASE_URL", env.base_url),
        ("API_BASE_URL", env.api_url or f"{env.base_url.rstrip('/')}/api"),
        ("TEST_USERNAME", "testuser"),
        ("TEST_PASSWORD", "testpass123"),
        ("TEST_EMAIL", "test@example.com"),
        ("API_KEY", "your_api_key_here"),
        ("HEADLESS", str(env.headless).lower()),
        ("TIMEOUT", str(env.timeout)),
        ("RETRIES", str(env.retries)),
        ("NODE_ENV", "test"),
    ]


def env_file(pairs: list[tuple[str, str]], header: str = "") -> str:
    lines = [f"# {header}"] if header else []
    lines.extend(f"{key}={value}" for key, value in pairs)
    return "\n".join(lines) + "\n"


def env_example(environments: tuple[Environment, ...]) -> str:
    """.env.example：第一個環境的值，多環境時附上各環境 URL"""
    pairs = env_variables(environments[0] if environments else None)
    if len(environments) > 1:
        for env in environments:
            pairs.append((f"{env.env_prefix}_BASE_URL", env.base_url))
    return env_file(pairs, header="Environment Configuration")
