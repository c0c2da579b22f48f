"""
Fixture 範本：base / auth / database / api / device fixture 與靜態測試資料
"""

import json

from scaffold.schema import AuthMethod, DataStrategy, Language
from scaffold.templates import export_kw, import_from, module_exports, typed


def base_fixture(language: Language, page_names: list[str], timeout: int) -> str:
    """把每個 page object 包成 fixture，測試直接從參數拿"""
    lines = [import_from(language, ["test as base", "expect"], "@playwright/test")]
    for name in page_names:
        lines.append(import_from(language, [name], f"../pages/{name}"))
    lines.append("")
    if language.is_typed:
        lines.append("type PageFixtures = {")
        for name in page_names:
            lines.append(f"  {name[0].lower() + name[1:]}: {name};")
        lines.append("};")
        lines.append("")
        lines.append(f"export const test = base.extend<PageFixtures>({{")
    else:
        lines.append("const test = base.extend({")
    for name in page_names:
        fixture = name[0].lower() + name[1:]
        lines.append(f"  {fixture}: async ({{ page }}, use) => {{")
        lines.append(f"    await use(new {name}(page));")
        lines.append("  },")
    lines.append("});")
    lines.append("")
    lines.append(f"test.setTimeout({timeout});")
    lines.append("")
    if language.is_typed:
        lines.append("export { expect };")
    else:
        lines.append("module.exports = { test, expect };")
    return "\n".join(lines) + "\n"


def auth_fixture(language: Language, method: AuthMethod, roles: bool = False) -> str:
    s = typed(language, ": string")
    header = import_from(language, ["test as base"], "@playwright/test")
    if method is AuthMethod.TOKEN:
        body = """
  authToken: async ({ request }, use) => {
    const response = await request.post('/api/auth/token', {
      data: { email: process.env.TEST_EMAIL, password: process.env.TEST_PASSWORD },
    });
    const { token } = await response.json();
    await use(token);
  },"""
    elif method is AuthMethod.COOKIE:
        body = """
  storageState: async ({}, use) => {
    await use('playwright/.auth/user.json');
  },"""
    else:
        body = """
  authenticatedPage: async ({ page }, use) => {
    await page.goto('/login');
    await page.fill('#email', process.env.TEST_EMAIL || 'test@example.com');
    await page.fill('#password', process.env.TEST_PASSWORD || 'testpass123');
    await page.click('button[type="submit"]');
    await page.waitForURL('**/dashboard');
    await use(page);
  },"""
    role_block = ""
    if roles:
        role_block = f"""

{export_kw(language)}const ROLES = {{
  admin: {{ email: process.env.ADMIN_EMAIL, password: process.env.ADMIN_PASSWORD }},
  user: {{ email: process.env.TEST_EMAIL, password: process.env.TEST_PASSWORD }},
}};

{export_kw(language)}function credentialsFor(role{s}) {{
  return ROLES[role{' as keyof typeof ROLES' if language.is_typed else ''}];
}}"""
    generic = "<any>" if language.is_typed else ""
    exports = ["test"] + (["ROLES", "credentialsFor"] if roles else [])
    return (f"{header}\n\n{export_kw(language)}const test = base.extend{generic}({{{body}\n}});"
            f"{role_block}\n{module_exports(language, exports)}")


def database_fixture(language: Language, cleanup: bool) -> str:
    header = import_from(language, ["test as base"], "@playwright/test")
    pg = "import { Client } from 'pg';" if language.is_typed else "const { Client } = require('pg');"
    cleanup_line = "    await client.query('ROLLBACK');\n" if cleanup else ""
    generic = "<{ db: Client }>" if language.is_typed else ""
    return f"""{header}
{pg}

{export_kw(language)}const test = base.extend{generic}({{
  db: async ({{}}, use) => {{
    const client = new Client({{ connectionString: process.env.DATABASE_URL }});
    await client.connect();
    await client.query('BEGIN');
    await use(client);
{cleanup_line}    await client.end();
  }},
}});
{module_exports(language, ["test"])}"""


def api_fixture(language: Language) -> str:
    header = import_from(language, ["test as base", "request"], "@playwright/test")
    generic = "<{ api: import('@playwright/test').APIRequestContext }>" if language.is_typed else ""
    return f"""{header}

{export_kw(language)}const test = base.extend{generic}({{
  api: async ({{}}, use) => {{
    const context = await request.newContext({{
      baseURL: process.env.API_BASE_URL,
      extraHTTPHeaders: {{ Authorization: `Bearer ${{process.env.API_KEY}}` }},
    }});
    await use(context);
    await context.dispose();
  }},
}});
{module_exports(language, ["test"])}"""


def device_fixture(language: Language) -> str:
    header = import_from(language, ["test as base", "devices"], "@playwright/test")
    return f"""{header}

{export_kw(language)}const test = base.extend({{
  mobilePage: async ({{ browser }}, use) => {{
    const context = await browser.newContext({{ ...devices['iPhone 13'] }});
    const page = await context.newPage();
    await use(page);
    await context.close();
  }},
}});
{module_exports(language, ["test"])}"""


def static_data(language: Language, strategy: DataStrategy) -> str:
    """靜態測試資料模組；factory 策略另外附上產生函式"""
    data = {
        "users": {
            "valid": {"email": "test@example.com", "password": "testpass123"},
            "invalid": {"email": "invalid@example.com", "password": "wrong"},
        },
        "products": [
            {"id": 1, "name": "Sample product", "price": 19.99},
            {"id": 2, "name": "Another product", "price": 5.5},
        ],
    }
    body = json.dumps(data, indent=2)
    lines = [f"// Test data strategy: {strategy.value}",
             f"{export_kw(language)}const testData = {body};"]
    names = ["testData"]
    if strategy is DataStrategy.FACTORY:
        lines.append("")
        lines.append(f"{export_kw(language)}function buildUser(overrides = {{}}) {{")
        lines.append("  const id = Date.now();")
        lines.append("  return { email: `user${id}@example.com`, password: 'testpass123', ...overrides };")
        lines.append("}")
        names.append("buildUser")
    return "\n".join(lines) + "\n" + module_exports(language, names)
