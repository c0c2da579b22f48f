"""
選項目錄 (Option Catalogs)
純資料表：可用的瀏覽器、容器映像、CI 矩陣選項、fixture 衝突 / 協同 / 複雜度。

這裡不 import 任何 scaffold 型別，只放字串 key 的靜態資料，
schema / validator / writer 都從這裡查表。
"""

# ── 語言 / 瀏覽器 ──

LANGUAGE_EXTENSIONS = {
    "typescript": "ts",
    "javascript": "js",
}

BROWSER_DEVICES = {
    "chromium": "Desktop Chrome",
    "firefox": "Desktop Firefox",
    "webkit": "Desktop Safari",
}

# 需要額外寫瀏覽器專屬測試的引擎
BROWSER_SPECIFIC_TESTS = ("webkit",)

# ── 容器 ──

BASE_IMAGES = {
    "playwright": "mcr.microsoft.com/playwright:v1.40.0-jammy",
    "node-playwright": "node:18-alpine",
}

MEMORY_LIMITS = ("1g", "2g", "4g", "8g")
CPU_LIMITS = ("1", "2", "4", "8")

# ── CI 矩陣 ──

NODE_VERSIONS = ("16.x", "18.x", "20.x", "21.x")
OPERATING_SYSTEMS = ("ubuntu-latest", "windows-latest", "macos-latest")
REPORT_FORMATS = ("html", "junit", "coverage", "allure")
PERMISSION_LEVELS = ("restricted", "permissive")

# 各 OS 每分鐘費用 (USD，GitHub Actions 概估)
RUNNER_COST_PER_MINUTE = {
    "ubuntu": 0.008,
    "windows": 0.016,
    "macos": 0.08,
}

PERMISSION_PRESETS = {
    "restricted": {"contents": "read", "checks": "write", "pull-requests": "write"},
    "permissive": {"contents": "write", "checks": "write", "pull-requests": "write",
                   "issues": "write", "pages": "write", "id-token": "write"},
}

# ── Fixtures ──

DEFAULT_PAGE_OBJECT_PATTERNS = (
    {"id": "base-page", "name": "Base Page Class", "enabled": True,
     "description": "Abstract base class with common page functionality"},
    {"id": "component-page", "name": "Component-based Pages", "enabled": True,
     "description": "Reusable page components for complex UIs"},
    {"id": "fluent-interface", "name": "Fluent Interface", "enabled": False,
     "description": "Chainable page actions"},
    {"id": "page-factory", "name": "Page Factory", "enabled": False,
     "description": "Lazy page object creation"},
)

DEFAULT_SETUP_TEARDOWN_PATTERNS = (
    {"id": "global-setup", "name": "Global Setup", "enabled": True, "scope": "global",
     "description": "One-time setup before all tests"},
    {"id": "test-isolation", "name": "Test Isolation", "enabled": True, "scope": "test",
     "description": "Fresh context for every test"},
    {"id": "data-cleanup", "name": "Data Cleanup", "enabled": True, "scope": "test",
     "description": "Remove created data after each test"},
    {"id": "browser-reset", "name": "Browser Reset", "enabled": False, "scope": "worker",
     "description": "Reset browser state between tests"},
    {"id": "parallel-hooks", "name": "Parallel Hooks", "enabled": False, "scope": "worker",
     "description": "Worker-scoped hooks for parallel runs"},
)

DEFAULT_AUTHENTICATION_FIXTURES = (
    {"id": "login-fixture", "name": "Login Fixture", "enabled": True, "method": "session",
     "description": "Reusable logged-in page"},
    {"id": "role-fixtures", "name": "Role-based Fixtures", "enabled": False, "method": "session",
     "description": "One fixture per user role"},
    {"id": "api-token", "name": "API Token", "enabled": False, "method": "token",
     "description": "Authenticated API request context"},
    {"id": "session-storage", "name": "Session Storage", "enabled": False, "method": "cookie",
     "description": "Persist storage state between runs"},
)

DEFAULT_CUSTOM_FIXTURES = (
    {"id": "database-fixture", "name": "Database Fixture", "enabled": False,
     "category": "data", "description": "Database connection and seeding"},
    {"id": "email-fixture", "name": "Email Fixture", "enabled": False,
     "category": "integration", "description": "Inbox access for email flows"},
    {"id": "file-upload", "name": "File Upload", "enabled": False,
     "category": "utility", "description": "Temporary files for upload tests"},
    {"id": "mobile-fixture", "name": "Mobile Device Fixture", "enabled": False,
     "category": "device", "description": "Mobile viewport emulation"},
    {"id": "performance-fixture", "name": "Performance Fixture", "enabled": False,
     "category": "monitoring", "description": "Web vitals collection"},
    {"id": "visual-fixture", "name": "Visual Fixture", "enabled": False,
     "category": "monitoring", "description": "Screenshot comparison helpers"},
)

TEST_DATA_STRATEGIES = {
    "isolated": "Each test gets its own isolated copy of test data",
    "shared": "Multiple tests share the same test data set",
    "persistent": "Test data persists across test runs",
    "factory": "Dynamic test data generation using factories",
}

# 互斥：啟用 key 時不可同時啟用 value 內任何 id
FIXTURE_CONFLICTS = {
    "isolated": ("shared", "persistent"),
    "shared": ("isolated", "persistent"),
    "persistent": ("isolated", "shared"),
    "fluent-interface": ("page-factory",),
    "page-factory": ("fluent-interface",),
}

# 協同：啟用 key 時建議一起啟用的 id
FIXTURE_SYNERGIES = {
    "base-page": ("component-page", "fluent-interface"),
    "component-page": ("base-page", "reusable-components"),
    "login-fixture": ("role-fixtures", "session-storage"),
    "database-fixture": ("data-cleanup", "test-isolation"),
    "performance-fixture": ("global-setup", "browser-reset"),
    "visual-fixture": ("browser-reset", "test-isolation"),
}

FIXTURE_COMPLEXITY = {
    "base-page": "simple",
    "component-page": "moderate",
    "fluent-interface": "advanced",
    "page-factory": "advanced",
    "test-isolation": "simple",
    "global-setup": "simple",
    "data-cleanup": "moderate",
    "browser-reset": "moderate",
    "parallel-hooks": "advanced",
    "login-fixture": "simple",
    "role-fixtures": "moderate",
    "api-token": "moderate",
    "session-storage": "moderate",
    "database-fixture": "advanced",
    "email-fixture": "moderate",
    "file-upload": "simple",
    "mobile-fixture": "moderate",
    "performance-fixture": "advanced",
    "visual-fixture": "moderate",
}

# fixture id -> 產出專案需要的 devDependencies
FIXTURE_DEPENDENCIES = {
    "database-fixture": ("pg", "@types/pg"),
    "email-fixture": ("nodemailer", "@types/nodemailer"),
    "performance-fixture": ("web-vitals", "lighthouse"),
    "visual-fixture": ("pixelmatch",),
    "file-upload": ("tmp",),
}

# 非 "latest" 的固定版本
PACKAGE_VERSIONS = {
    "@playwright/test": "^1.40.0",
    "pg": "^8.11.3",
    "@types/pg": "^8.10.9",
    "nodemailer": "^6.9.7",
    "@types/nodemailer": "^6.4.14",
    "web-vitals": "^3.5.0",
    "lighthouse": "^11.4.0",
    "pixelmatch": "^5.3.0",
    "tmp": "^0.2.1",
}

# ── 整合 ──

FAKER_LOCALES = ("en", "en_US", "en_GB", "de", "fr", "es", "ja", "zh_CN", "zh_TW")

# 產出專案的慣例空目錄
CONVENTIONAL_DIRECTORIES = (
    "tests",
    "tests/pages",
    "tests/fixtures",
    "tests/utils",
    "test-data",
    "test-results",
    "playwright-report",
    "screenshots",
    "videos",
    "allure-results",
    "allure-report",
)


def canonical_fixture_order() -> tuple:
    """
    所有已知 fixture / 策略 id 的固定順序。

    validator 依這個順序走訪已啟用的 id，
    讓診斷結果不受呼叫端列表順序影響。
    """
    order = []
    for group in (
        DEFAULT_PAGE_OBJECT_PATTERNS,
        DEFAULT_SETUP_TEARDOWN_PATTERNS,
        DEFAULT_AUTHENTICATION_FIXTURES,
        DEFAULT_CUSTOM_FIXTURES,
    ):
        order.extend(entry["id"] for entry in group)
    order.extend(TEST_DATA_STRATEGIES)
    return tuple(order)
