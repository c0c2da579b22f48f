"""
測試檔範本：範例 E2E、各測試能力的專屬測試、瀏覽器專屬測試、BDD feature
"""

from scaffold.schema import Language
from scaffold.templates import import_from, join_blocks, typed


def _header(language: Language, extra_imports: str = "", names=("test", "expect")) -> str:
    return join_blocks(import_from(language, list(names), "@playwright/test"), extra_imports)


def example_spec(language: Language) -> str:
    pages = import_from(language, ["HomePage"], "./pages/HomePage")
    return _header(language, pages) + """
test.describe('Example suite', () => {
  test('home page loads', async ({ page }) => {
    const home = new HomePage(page);
    await home.open();
    await expect(page).toHaveTitle(/.+/);
  });

  test('navigation is visible', async ({ page }) => {
    const home = new HomePage(page);
    await home.open();
    await expect(home.navigation).toBeVisible();
  });
});
"""


def api_spec(language: Language) -> str:
    return _header(language) + """
const API_BASE_URL = process.env.API_BASE_URL || 'http://localhost:3001/api';

test.describe('API', () => {
  test('health endpoint responds', async ({ request }) => {
    const response = await request.get(`${API_BASE_URL}/health`);
    expect(response.ok()).toBeTruthy();
  });

  test('creates a resource', async ({ request }) => {
    const response = await request.post(`${API_BASE_URL}/items`, {
      data: { name: 'generated item' },
    });
    expect(response.status()).toBe(201);
  });
});
"""


def visual_spec(language: Language) -> str:
    return _header(language) + """
test.describe('Visual regression', () => {
  test('home page matches snapshot', async ({ page }) => {
    await page.goto('/');
    await expect(page).toHaveScreenshot('home.png', { fullPage: true });
  });
});
"""


def accessibility_spec(language: Language) -> str:
    if language.is_typed:
        axe = "import AxeBuilder from '@axe-core/playwright';"
    else:
        axe = "const AxeBuilder = require('@axe-core/playwright').default;"
    return _header(language, axe) + """
test.describe('Accessibility', () => {
  test('home page has no detectable violations', async ({ page }) => {
    await page.goto('/');
    const results = await new AxeBuilder({ page }).analyze();
    expect(results.violations).toEqual([]);
  });
});
"""


def performance_spec(language: Language) -> str:
    metrics = typed(language, ": PerformanceNavigationTiming")
    return _header(language) + f"""
test.describe('Performance', () => {{
  test('page load stays under budget', async ({{ page }}) => {{
    await page.goto('/');
    const timing = await page.evaluate(() => {{
      const [entry] = performance.getEntriesByType('navigation'){' as PerformanceNavigationTiming[]' if language.is_typed else ''};
      return entry;
    }});
    const nav{metrics} = timing;
    expect(nav.loadEventEnd - nav.startTime).toBeLessThan(3000);
  }});
}});
"""


def mobile_spec(language: Language) -> str:
    return _header(language, names=("test", "expect", "devices")) + """
test.use({ ...devices['Pixel 5'] });

test.describe('Mobile', () => {
  test('renders the mobile menu', async ({ page }) => {
    await page.goto('/');
    await expect(page.getByRole('button', { name: /menu/i })).toBeVisible();
  });
});
"""


def browser_specific_spec(language: Language, browser: str) -> str:
    return _header(language) + f"""
test.describe('{browser} specific', () => {{
  test.skip(({{ browserName }}) => browserName !== '{browser}', '{browser} only');

  test('date inputs render natively', async ({{ page }}) => {{
    await page.goto('/');
    await page.setContent('<input type="date" id="d">');
    await expect(page.locator('#d')).toBeVisible();
  }});
}});
"""


def feature_file() -> str:
    return """Feature: User login

  Scenario: Successful login
    Given I am on the login page
    When I sign in with valid credentials
    Then I should see the dashboard
"""


def step_definitions(language: Language) -> str:
    cucumber = import_from(language, ["Given", "When", "Then"], "@cucumber/cucumber")
    return cucumber + """

Given('I am on the login page', async function () {
  await this.page.goto('/login');
});

When('I sign in with valid credentials', async function () {
  await this.page.fill('#email', process.env.TEST_EMAIL);
  await this.page.fill('#password', process.env.TEST_PASSWORD);
  await this.page.click('button[type="submit"]');
});

Then('I should see the dashboard', async function () {
  await this.page.waitForURL('**/dashboard');
});
"""
