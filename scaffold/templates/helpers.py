"""
工具函式範本：helpers / waitUtils / stringUtils / dateUtils / fakerUtils
"""

from scaffold.schema import Language
from scaffold.templates import export_kw, import_from, module_exports, typed


def generic_helpers(language: Language) -> str:
    ex = export_kw(language)
    page = typed(language, ": Page")
    header = "import type { Page } from '@playwright/test';\n\n" if language.is_typed else ""
    return header + f"""{ex}async function takeNamedScreenshot(page{page}, name{typed(language, ': string')}) {{
  await page.screenshot({{ path: `screenshots/${{name}}-${{Date.now()}}.png`, fullPage: true }});
}}

{ex}async function clearCookies(page{page}) {{
  await page.context().clearCookies();
}}

{ex}function envValue(key{typed(language, ': string')}, fallback = ''){typed(language, ': string')} {{
  return process.env[key] ?? fallback;
}}
{module_exports(language, ["takeNamedScreenshot", "clearCookies", "envValue"])}"""


def wait_utils(language: Language) -> str:
    ex = export_kw(language)
    page = typed(language, ": Page")
    num = typed(language, ": number")
    header = "import type { Page } from '@playwright/test';\n\n" if language.is_typed else ""
    return header + f"""{ex}async function waitForNetworkIdle(page{page}, timeout{num} = 10000) {{
  await page.waitForLoadState('networkidle', {{ timeout }});
}}

{ex}async function waitForCondition(
  condition{typed(language, ': () => Promise<boolean>')},
  timeout{num} = 10000,
  interval{num} = 250,
) {{
  const deadline = Date.now() + timeout;
  while (Date.now() < deadline) {{
    if (await condition()) return;
    await new Promise((resolve) => setTimeout(resolve, interval));
  }}
  throw new Error(`Condition not met within ${{timeout}}ms`);
}}
{module_exports(language, ["waitForNetworkIdle", "waitForCondition"])}"""


def string_utils(language: Language) -> str:
    ex = export_kw(language)
    s = typed(language, ": string")
    return f"""{ex}function randomString(length = 8){s} {{
  return Math.random().toString(36).slice(2, 2 + length);
}}

{ex}function slugify(text{s}){s} {{
  return text.toLowerCase().replace(/[^a-z0-9]+/g, '-').replace(/^-|-$/g, '');
}}

{ex}function uniqueEmail(prefix = 'user'){s} {{
  return `${{prefix}}+${{Date.now()}}@example.com`;
}}
{module_exports(language, ["randomString", "slugify", "uniqueEmail"])}"""


def date_utils(language: Language) -> str:
    ex = export_kw(language)
    d = typed(language, ": Date")
    return f"""{ex}function formatDate(date{d}){typed(language, ': string')} {{
  return date.toISOString().slice(0, 10);
}}

{ex}function addDays(date{d}, days{typed(language, ': number')}){d} {{
  const copy = new Date(date);
  copy.setDate(copy.getDate() + days);
  return copy;
}}

{ex}function today(){typed(language, ': string')} {{
  return formatDate(new Date());
}}
{module_exports(language, ["formatDate", "addDays", "today"])}"""


def faker_utils(language: Language, locale: str, seed: int | None = None) -> str:
    ex = export_kw(language)
    module = f"@faker-js/faker/locale/{locale}" if locale != "en" else "@faker-js/faker"
    seed_line = f"faker.seed({seed});\n\n" if seed is not None else ""
    return f"""{import_from(language, ["faker"], module)}

{seed_line}{ex}function fakeUser() {{
  return {{
    firstName: faker.person.firstName(),
    lastName: faker.person.lastName(),
    email: faker.internet.email(),
    password: faker.internet.password({{ length: 12 }}),
  }};
}}

{ex}function fakeAddress() {{
  return {{
    street: faker.location.streetAddress(),
    city: faker.location.city(),
    zip: faker.location.zipCode(),
  }};
}}
{module_exports(language, ["fakeUser", "fakeAddress"])}"""
