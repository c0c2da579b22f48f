"""
Page Object 範本：BasePage + 範例頁面

fluent-interface 開啟時 action 方法回傳 this，可以串接呼叫。
"""

from scaffold.schema import Language
from scaffold.templates import export_kw, import_from, module_exports, typed


def base_page(language: Language, fluent: bool = False) -> str:
    ret = "this" if fluent else ""
    ret_type = typed(language, ": Promise<this>" if fluent else ": Promise<void>")
    page_type = typed(language, ": Page")
    lines = [
        import_from(language, ["expect"] + (["Page", "Locator"] if language.is_typed else []),
                    "@playwright/test"),
        "",
        f"{export_kw(language)}class BasePage {{",
    ]
    if language.is_typed:
        lines.append("  readonly page: Page;")
        lines.append("  readonly path: string = '/';")
        lines.append("")
    lines.append(f"  constructor(page{page_type}) {{")
    lines.append("    this.page = page;")
    if not language.is_typed:
        lines.append("    this.path = '/';")
    lines.append("  }")
    lines.append("")
    lines.append(f"  async open(){ret_type} {{")
    lines.append("    await this.page.goto(this.path);")
    lines.append("    await this.page.waitForLoadState('domcontentloaded');")
    if ret:
        lines.append(f"    return {ret};")
    lines.append("  }")
    lines.append("")
    lines.append(f"  async click(selector{typed(language, ': string')}){ret_type} {{")
    lines.append("    await this.page.locator(selector).click();")
    if ret:
        lines.append(f"    return {ret};")
    lines.append("  }")
    lines.append("")
    lines.append(f"  async fill(selector{typed(language, ': string')}, "
                 f"value{typed(language, ': string')}){ret_type} {{")
    lines.append("    await this.page.locator(selector).fill(value);")
    if ret:
        lines.append(f"    return {ret};")
    lines.append("  }")
    lines.append("")
    lines.append(f"  locator(selector{typed(language, ': string')}){typed(language, ': Locator')} {{")
    lines.append("    return this.page.locator(selector);")
    lines.append("  }")
    lines.append("")
    lines.append(f"  async expectUrl(pattern{typed(language, ': RegExp')}) {{")
    lines.append("    await expect(this.page).toHaveURL(pattern);")
    lines.append("  }")
    lines.append("}")
    return "\n".join(lines) + "\n" + module_exports(language, ["BasePage"])


def _page(language: Language, name: str, path: str, locators: dict, methods: str) -> str:
    page_type = typed(language, ": Page")
    lines = [import_from(language, ["BasePage"], "./BasePage")]
    if language.is_typed:
        lines.append("import type { Page } from '@playwright/test';")
    lines.append("")
    lines.append(f"{export_kw(language)}class {name} extends BasePage {{")
    lines.append(f"  constructor(page{page_type}) {{")
    lines.append("    super(page);")
    lines.append(f"    this.path = '{path}';")
    lines.append("  }")
    for prop, selector in locators.items():
        lines.append("")
        lines.append(f"  get {prop}() {{")
        lines.append(f"    return this.page.locator('{selector}');")
        lines.append("  }")
    lines.append(methods.rstrip("\n"))
    lines.append("}")
    return "\n".join(lines) + "\n" + module_exports(language, [name])


def home_page(language: Language) -> str:
    return _page(language, "HomePage", "/", {
        "navigation": "nav",
        "searchInput": "input[type=\"search\"]",
    }, f"""
  async search(term{typed(language, ': string')}) {{
    await this.searchInput.fill(term);
    await this.searchInput.press('Enter');
  }}
""")


def login_page(language: Language) -> str:
    s = typed(language, ": string")
    return _page(language, "LoginPage", "/login", {
        "emailInput": "#email",
        "passwordInput": "#password",
        "submitButton": "button[type=\"submit\"]",
        "errorMessage": "[role=\"alert\"]",
    }, f"""
  async login(email{s}, password{s}) {{
    await this.emailInput.fill(email);
    await this.passwordInput.fill(password);
    await this.submitButton.click();
  }}
""")


def product_page(language: Language) -> str:
    return _page(language, "ProductPage", "/products", {
        "productCards": "[data-testid=\"product-card\"]",
        "addToCartButton": "[data-testid=\"add-to-cart\"]",
        "cartCount": "[data-testid=\"cart-count\"]",
    }, f"""
  async addFirstProductToCart() {{
    await this.productCards.first().click();
    await this.addToCartButton.click();
  }}

  async cartItemCount(){typed(language, ': Promise<number>')} {{
    return Number(await this.cartCount.textContent());
  }}
""")
