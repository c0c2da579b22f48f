"""
CLI 入口

用法:
    # 用預設設定產生 playwright-framework.zip
    python -m scaffold

    # 從 JSON / YAML 設定檔產生
    python -m scaffold --spec playwright.json --output build/framework.zip

    # 只檢查設定 (衝突 / 警告 / 建議)
    python -m scaffold --spec playwright.yaml --validate

    # 預覽會產生的檔案與統計，不打包
    python -m scaffold --spec playwright.json --preview

    # 印出範例設定檔
    python -m scaffold --example > playwright.json
"""

import argparse
import dataclasses
import json
import logging
import sys

from config.config import Config, ConfigValidationError
from core.exceptions import ScaffoldError
from scaffold import validator
from scaffold.engine import FrameworkGenerator, preview
from scaffold.loader import load_snapshot
from scaffold.schema import ConfigurationSnapshot
from utils.logger import logger, set_console_level

EXAMPLE_SNAPSHOT = {
    "language": "typescript",
    "browsers": ["chromium", "firefox"],
    "capabilities": {
        "ui_testing": True,
        "api_testing": True,
        "accessibility_testing": True,
    },
    "environments": {
        "environments": [
            {"name": "local", "base_url": "http://localhost:3000",
             "api_url": "http://localhost:3001/api"},
            {"name": "staging", "base_url": "https://staging.example.com",
             "api_url": "https://staging.example.com/api", "retries": 2},
        ],
        "selected": ["local", "staging"],
    },
    "ci": {
        "enabled": True,
        "workflows": [
            {
                "id": "pr-checks",
                "name": "pr-checks",
                "description": "Fast checks on every pull request",
                "triggers": {"push": {"enabled": False}, "pull_request": {"branches": ["main"]}},
                "matrix": {"browsers": ["chromium"], "node_versions": ["20.x"]},
            },
            {
                "id": "nightly",
                "name": "nightly",
                "description": "Full cross-browser run",
                "triggers": {
                    "push": {"enabled": False},
                    "pull_request": {"enabled": False},
                    "schedule": {"enabled": True, "cron": "0 3 * * *"},
                },
                "execution": {"mode": "sharded", "shards": 4, "timeout": 60},
                "reporting": {"allure": True},
                "notifications": {"slack": {"enabled": True, "target": "#qa-alerts"}},
            },
        ],
    },
    "docker": {
        "enabled": True,
        "base_image": "playwright",
        "features": {"compose": True, "health_checks": True},
        "resources": {"memory_limit": "4g", "cpu_limit": "2"},
    },
    "fixtures": {
        "test_data": {"strategy": "factory"},
    },
    "integrations": {
        "github_actions": True,
        "junit": True,
        "faker": {"enabled": True, "locale": "en"},
    },
}


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _validate(snapshot: ConfigurationSnapshot) -> int:
    result = validator.validate(snapshot)
    _print_json({
        **result.to_dict(),
        "conflicts": [dataclasses.asdict(c) for c in validator.conflicts(snapshot)],
        "recommendations": [dataclasses.asdict(r) for r in validator.recommendations(snapshot)],
        "workflows": {
            w.name: {
                "jobs": validator.workflow_job_count(w),
                "estimated_minutes": validator.estimated_duration(w),
                "complexity": validator.workflow_complexity(w),
                "cost": validator.workflow_cost_estimation(w),
                "recommendations": validator.workflow_recommendations(w),
            }
            for w in snapshot.ci.workflows
        } if snapshot.ci.enabled else {},
    })
    return 0 if result.is_valid else 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m scaffold",
        description="Playwright 測試專案產生器",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
範例:
  python -m scaffold --spec playwright.json              # 產生 zip
  python -m scaffold --spec playwright.json --validate   # 只檢查
  python -m scaffold --example                           # 印出範例設定
""",
    )
    parser.add_argument("--spec", help="設定快照檔 (.json / .yaml / .yml)")
    parser.add_argument("--output", help="輸出 zip 路徑 (預設 <專案名稱>.zip)")
    parser.add_argument("--example", action="store_true", help="印出範例設定檔")
    parser.add_argument("--validate", action="store_true", help="只輸出驗證結果")
    parser.add_argument("--preview", action="store_true", help="輸出檔案清單與統計，不打包")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="顯示 DEBUG 日誌")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="只顯示錯誤")

    args = parser.parse_args(argv)
    if args.verbose:
        set_console_level(logging.DEBUG)
    elif args.quiet:
        set_console_level(logging.ERROR)

    if args.example:
        _print_json(EXAMPLE_SNAPSHOT)
        return 0

    try:
        for warning in Config.validate_settings():
            logger.warning(warning)
        snapshot = load_snapshot(args.spec) if args.spec else ConfigurationSnapshot()

        if args.validate:
            return _validate(snapshot)
        if args.preview:
            _print_json(preview(snapshot))
            return 0

        result = FrameworkGenerator(snapshot).generate(
            on_progress=lambda e: logger.info(f"[{e.progress:3d}%] {e.message}")
        )
        target = result.archive.write_to(args.output or f"{Config.PROJECT_NAME}.zip")
    except (ScaffoldError, ConfigValidationError) as e:
        logger.error(str(e))
        if e.__cause__ is not None:
            logger.error(f"原因: {e.__cause__}")
        return 1

    print(f"共產生 {len(result.files)} 個檔案 -> {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
