"""
pytest 全域 fixtures

提供：
- 各種常用設定快照 (預設 / 最小 / 全功能 / CI / 容器)
- 產生結果 fixture，測試直接檢查檔案清單與內容
- 進度事件收集器
"""

import pytest

from scaffold.engine import FrameworkGenerator
from scaffold.schema import ConfigurationSnapshot


def snapshot_from(**data) -> ConfigurationSnapshot:
    return ConfigurationSnapshot.from_dict(data)


@pytest.fixture
def default_snapshot():
    """所有欄位都用預設值"""
    return ConfigurationSnapshot()


@pytest.fixture
def minimal_snapshot():
    """TypeScript + chromium，其他都沒開"""
    return snapshot_from(language="typescript", browsers=["chromium"])


@pytest.fixture
def ci_snapshot():
    """CI 開啟，兩個 workflow，容器用 Playwright 官方映像"""
    return snapshot_from(
        language="typescript",
        browsers=["chromium", "firefox"],
        ci={
            "enabled": True,
            "workflows": [
                {"id": "pr-checks", "name": "pr-checks"},
                {"id": "nightly", "name": "nightly",
                 "triggers": {"schedule": {"enabled": True, "cron": "0 3 * * *"}}},
            ],
        },
        docker={"enabled": True, "base_image": "playwright"},
    )


@pytest.fixture
def full_snapshot():
    """JavaScript、三個瀏覽器、所有能力與整合全開"""
    return snapshot_from(
        language="javascript",
        browsers=["chromium", "firefox", "webkit"],
        capabilities={
            "ui_testing": True,
            "api_testing": True,
            "visual_testing": True,
            "accessibility_testing": True,
            "performance_testing": True,
            "mobile_testing": True,
            "cross_browser_testing": True,
            "ecommerce": True,
        },
        environments={
            "environments": [
                {"name": "local", "base_url": "http://localhost:3000"},
                {"name": "staging", "base_url": "https://staging.example.com"},
            ],
            "selected": ["local", "staging"],
        },
        ci={"enabled": True},
        docker={"enabled": True, "base_image": "node-playwright",
                "features": {"compose": True, "multi_stage": True, "health_checks": True}},
        integrations={
            "github_actions": True,
            "gitlab_ci": True,
            "jenkins": True,
            "azure_devops": True,
            "allure": True,
            "junit": True,
            "cucumber": True,
            "faker": {"enabled": True, "locale": "de"},
        },
    )


@pytest.fixture
def generate_files():
    """回傳 callable：snapshot -> {path: FileRecord} (不打包)"""

    def _generate(snapshot):
        result = FrameworkGenerator(snapshot).generate(pack=False)
        return {f.path: f for f in result.files}

    return _generate


@pytest.fixture
def progress_events():
    """收集進度事件的 list 與 callback"""
    events = []
    return events, events.append
