"""
Validation & Conflict Engine

對設定快照做靜態檢查，結果僅供參考，不會阻擋產生：
- validate()        → errors (互斥選項、缺少必要選擇) + warnings (軟性問題)
- conflicts()       → 互斥的 fixture 組合，每個無序對一筆
- recommendations() → 協同建議，最多 Config.MAX_RECOMMENDATIONS 筆

已啟用的 id 一律依 catalogs.canonical_fixture_order() 走訪，
同一組啟用集合不論呼叫端列表順序為何，都得到相同的診斷結果。

另外提供 workflow 指標：job 數、預估時間、複雜度、建議、費用估算。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from urllib.parse import urlparse

from config.config import Config
from core.exceptions import (
    CustomImageMissingError, NoBrowsersSelectedError, NoLanguageSelectedError,
)
from scaffold import catalogs
from scaffold.config_writer import ENV_TEMPLATE_SLUG
from scaffold.schema import (
    BaseImage, ConfigurationSnapshot, DataStrategy, ExecutionMode,
    FixtureScope, FixturesConfig, Workflow,
)

FIXTURE_TIMEOUT_RANGE = (5000, 300000)         # ms
ENVIRONMENT_TIMEOUT_RANGE = (1000, 300000)     # ms
ENVIRONMENT_RETRIES_RANGE = (0, 10)
FACTORY_THRESHOLD = 8                          # 啟用的 fixture 超過這個數量才建議 factory
LONG_TIMEOUT_MINUTES = 60


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def summary(self) -> str:
        lines = [f"驗證結果: {len(self.errors)} 個錯誤, {len(self.warnings)} 個警告"]
        lines.extend(f"  [ERROR] {e}" for e in self.errors)
        lines.extend(f"  [WARN]  {w}" for w in self.warnings)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {"is_valid": self.is_valid, "errors": list(self.errors),
                "warnings": list(self.warnings)}


@dataclass(frozen=True)
class Conflict:
    fixture_id: str
    conflict_with: str
    reason: str
    resolution: str


@dataclass(frozen=True)
class Recommendation:
    type: str                  # enable / configure
    fixture_id: str
    reason: str
    impact: str                # low / medium / high


# ── fixture 走訪 ──

def ordered_enabled_ids(fixtures: FixturesConfig) -> list[str]:
    """啟用中的 id，依目錄固定順序；目錄外的自訂 id 依字母排在最後"""
    enabled = fixtures.enabled_ids()
    canonical = catalogs.canonical_fixture_order()
    ordered = [i for i in canonical if i in enabled]
    ordered.extend(sorted(enabled - set(canonical)))
    return ordered


def _display_name(fixtures: FixturesConfig, fixture_id: str) -> str:
    entry = fixtures.find(fixture_id)
    if entry:
        return entry.name
    return fixture_id.replace("-", " ").title()


def _conflict_pairs(fixtures: FixturesConfig) -> list[tuple[str, str]]:
    ordered = ordered_enabled_ids(fixtures)
    enabled = set(ordered)
    seen = set()
    pairs = []
    for fixture_id in ordered:
        for other in catalogs.FIXTURE_CONFLICTS.get(fixture_id, ()):
            key = frozenset((fixture_id, other))
            if other in enabled and key not in seen:
                seen.add(key)
                pairs.append((fixture_id, other))
    return pairs


def conflicts(snapshot: ConfigurationSnapshot) -> list[Conflict]:
    fixtures = snapshot.fixtures
    result = []
    for first, second in _conflict_pairs(fixtures):
        a, b = _display_name(fixtures, first), _display_name(fixtures, second)
        result.append(Conflict(
            fixture_id=first,
            conflict_with=second,
            reason=f"{a} and {b} use incompatible patterns",
            resolution=f"Disable either {a} or {b}",
        ))
    return result


def recommendations(snapshot: ConfigurationSnapshot) -> list[Recommendation]:
    fixtures = snapshot.fixtures
    enabled_entries = [i for i in ordered_enabled_ids(fixtures)
                       if fixtures.find(i) is not None]
    enabled = set(enabled_entries)
    known = fixtures.known_ids()

    result: list[Recommendation] = []
    suggested = set()
    for fixture_id in enabled_entries:
        for target in catalogs.FIXTURE_SYNERGIES.get(fixture_id, ()):
            if target in known and target not in enabled and target not in suggested:
                suggested.add(target)
                result.append(Recommendation(
                    type="enable",
                    fixture_id=target,
                    reason=f"Works well with {fixture_id} for improved functionality",
                    impact="medium",
                ))

    advanced = any(catalogs.FIXTURE_COMPLEXITY.get(i) == "advanced" for i in enabled_entries)
    if advanced and not fixtures.is_enabled("test-isolation"):
        result.append(Recommendation(
            type="enable",
            fixture_id="test-isolation",
            reason="Advanced fixtures work better with proper test isolation",
            impact="high",
        ))

    if (len(enabled_entries) > FACTORY_THRESHOLD
            and fixtures.test_data.strategy is DataStrategy.ISOLATED):
        result.append(Recommendation(
            type="configure",
            fixture_id="test-data-strategy",
            reason="Factory pattern provides better flexibility for complex test setups",
            impact="medium",
        ))

    return result[:Config.MAX_RECOMMENDATIONS]


# ── 各區塊檢查 ──

def _precondition_errors(snapshot: ConfigurationSnapshot) -> list[str]:
    errors = []
    if snapshot.language is None:
        errors.append(str(NoLanguageSelectedError()))
    if not snapshot.browsers:
        errors.append(str(NoBrowsersSelectedError()))
    docker = snapshot.docker
    if docker.enabled and docker.base_image is BaseImage.CUSTOM and not docker.custom_image.strip():
        errors.append(str(CustomImageMissingError()))
    return errors


def _fixture_warnings(fixtures: FixturesConfig) -> list[str]:
    warnings = []
    if fixtures.reusable_components and not any(p.enabled for p in fixtures.page_objects):
        warnings.append("Reusable components are enabled but no page object patterns are selected")
    if fixtures.is_enabled("fluent-interface") and not fixtures.is_enabled("base-page"):
        warnings.append("Fluent interface pattern works best with Base Page Class enabled")
    low, high = FIXTURE_TIMEOUT_RANGE
    if not low <= fixtures.fixture_timeout <= high:
        warnings.append("Fixture timeout should be between 5 and 300 seconds")
    if fixtures.parallel_safe and not any(
        p.enabled and p.id == "global-setup" and p.scope is FixtureScope.GLOBAL
        for p in fixtures.setup_teardown
    ):
        warnings.append("Parallel-safe mode is enabled but no global setup patterns are configured")
    return warnings


def is_valid_cron(cron: str) -> bool:
    return 5 <= len(cron.split()) <= 6


def workflow_problems(workflow: Workflow) -> list[str]:
    """單一 workflow 的問題，訊息前綴 workflow 名稱"""
    label = f"Workflow '{workflow.name or workflow.id}'"
    problems = []
    if not workflow.name.strip():
        problems.append(f"{label}: name is required")
    t = workflow.triggers
    if not t.enabled_names():
        problems.append(f"{label}: no triggers are enabled")
    if t.push.enabled and not t.push.branches:
        problems.append(f"{label}: push trigger has no branches")
    if t.pull_request.enabled and not t.pull_request.branches:
        problems.append(f"{label}: pull request trigger has no branches")
    if t.schedule.enabled and not is_valid_cron(t.schedule.cron):
        problems.append(f"{label}: invalid cron expression '{t.schedule.cron}'")

    ex = workflow.execution
    if ex.timeout <= 0:
        problems.append(f"{label}: timeout must be positive")
    if ex.mode is ExecutionMode.PARALLEL and ex.parallelism < 1:
        problems.append(f"{label}: parallelism must be at least 1")
    if ex.mode is ExecutionMode.SHARDED and ex.shards < 1:
        problems.append(f"{label}: shard count must be at least 1")
    if workflow.retry.max_retries < 0:
        problems.append(f"{label}: retry count cannot be negative")

    m = workflow.matrix
    if not (m.node_versions and m.operating_systems and m.browsers):
        problems.append(f"{label}: matrix needs at least one node version, "
                        f"operating system and browser")
    return problems


def _ci_warnings(snapshot: ConfigurationSnapshot) -> list[str]:
    ci = snapshot.ci
    if not ci.enabled:
        return []
    warnings = []
    if not ci.workflows:
        warnings.append("CI is enabled but no workflows are configured")
    slugs = {}
    for workflow in ci.workflows:
        warnings.extend(workflow_problems(workflow))
        if workflow.slug in slugs:
            warnings.append(f"Workflows '{slugs[workflow.slug]}' and '{workflow.name}' "
                            f"produce the same file name '{workflow.slug}'")
        slugs.setdefault(workflow.slug, workflow.name)
    if ci.settings.default_timeout <= 0:
        warnings.append("Global CI timeout must be positive")
    if not ci.settings.concurrency_group.strip():
        warnings.append("Concurrency group cannot be empty")
    return warnings


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _environment_warnings(snapshot: ConfigurationSnapshot) -> list[str]:
    settings = snapshot.environments
    warnings = []
    if not settings.environments:
        warnings.append("At least one environment is required")
    names = [e.name for e in settings.environments]
    for name in sorted({n for n in names if names.count(n) > 1}):
        warnings.append(f"Duplicate environment name: {name}")
    slugs = {}
    for env in settings.environments:
        if env.slug == ENV_TEMPLATE_SLUG:
            warnings.append(f"Environment '{env.name}' uses the reserved file name "
                            f"'.env.{ENV_TEMPLATE_SLUG}'")
        elif env.slug in slugs and slugs[env.slug] != env.name:
            warnings.append(f"Environments '{slugs[env.slug]}' and '{env.name}' "
                            f"produce the same file name '.env.{env.slug}'")
        slugs.setdefault(env.slug, env.name)
    for name in settings.selected:
        if name not in names:
            warnings.append(f"Selected environment does not exist: {name}")

    t_low, t_high = ENVIRONMENT_TIMEOUT_RANGE
    r_low, r_high = ENVIRONMENT_RETRIES_RANGE
    for env in settings.environments:
        if not env.base_url.strip():
            warnings.append(f"Environment '{env.name}': base URL is required")
        elif not is_valid_url(env.base_url):
            warnings.append(f"Environment '{env.name}': invalid base URL '{env.base_url}'")
        if env.api_url and not is_valid_url(env.api_url):
            warnings.append(f"Environment '{env.name}': invalid API URL '{env.api_url}'")
        if not t_low <= env.timeout <= t_high:
            warnings.append(f"Environment '{env.name}': timeout should be between "
                            f"{t_low} and {t_high} ms")
        if not r_low <= env.retries <= r_high:
            warnings.append(f"Environment '{env.name}': retries should be between "
                            f"{r_low} and {r_high}")
    return warnings


def _integration_warnings(snapshot: ConfigurationSnapshot) -> list[str]:
    faker = snapshot.integrations.faker
    if not faker.enabled:
        return []
    if not faker.locale.strip():
        return ["Faker locale cannot be empty"]
    if faker.locale not in catalogs.FAKER_LOCALES:
        return [f"Unsupported Faker locale: {faker.locale}"]
    return []


def validate(snapshot: ConfigurationSnapshot) -> ValidationResult:
    fixtures = snapshot.fixtures
    errors = _precondition_errors(snapshot)
    for first, second in _conflict_pairs(fixtures):
        errors.append(f"{first} conflicts with {second}")

    warnings = (_fixture_warnings(fixtures)
                + _ci_warnings(snapshot)
                + _environment_warnings(snapshot)
                + _integration_warnings(snapshot))
    return ValidationResult(errors=errors, warnings=warnings)


# ── workflow 指標 ──

def workflow_job_count(workflow: Workflow) -> int:
    """matrix 模式才展開 node × os × browser，其他模式視為單一 job"""
    m = workflow.matrix
    if workflow.execution.mode is ExecutionMode.MATRIX:
        return len(m.node_versions) * len(m.operating_systems) * len(m.browsers)
    return 1


def estimated_duration(workflow: Workflow) -> int:
    """預估分鐘數"""
    ex = workflow.execution
    jobs = workflow_job_count(workflow)
    if ex.mode is ExecutionMode.PARALLEL:
        return ex.timeout * math.ceil(jobs / max(ex.parallelism, 1))
    if ex.mode is ExecutionMode.SEQUENTIAL:
        return ex.timeout * jobs
    return ex.timeout


def workflow_complexity(workflow: Workflow) -> int:
    """1-10 分"""
    score = 1 + len(workflow.triggers.enabled_names()) * 0.5
    jobs = workflow_job_count(workflow)
    if jobs > 10:
        score += 3
    elif jobs > 5:
        score += 2
    elif jobs > 1:
        score += 1
    n = workflow.notifications
    s = workflow.security
    score += 0.5 * sum([
        workflow.retry.enabled,
        workflow.reporting.allure,
        n.slack.enabled or n.teams.enabled,
        s.secret_scanning or s.dependency_check,
    ])
    return min(math.ceil(score), 10)


def workflow_recommendations(workflow: Workflow) -> list[str]:
    recs = []
    if not workflow.retry.enabled:
        recs.append("Enable retry strategy to handle flaky tests")
    if not workflow.artifacts.screenshots and not workflow.artifacts.videos:
        recs.append("Enable screenshot/video capture for debugging failures")
    if workflow.execution.mode is ExecutionMode.SEQUENTIAL and workflow_job_count(workflow) > 3:
        recs.append("Consider using parallel execution to reduce build time")
    if not workflow.triggers.pull_request.enabled:
        recs.append("Enable PR triggers to catch issues before merging")
    if workflow.execution.timeout > LONG_TIMEOUT_MINUTES:
        recs.append("Consider reducing timeout or optimizing tests for better performance")
    if not workflow.reporting.html:
        recs.append("Enable HTML reports for better test result visibility")
    if workflow.matrix.operating_systems == ("ubuntu-latest",):
        recs.append("Consider testing on multiple operating systems for broader compatibility")
    return recs


def workflow_cost_estimation(workflow: Workflow) -> dict:
    """GitHub Actions 分鐘數與概估費用 (USD)"""
    duration = estimated_duration(workflow)
    minutes = {family: 0 for family in catalogs.RUNNER_COST_PER_MINUTE}
    for os_name in workflow.matrix.operating_systems:
        for family in minutes:
            if family in os_name:
                minutes[family] += duration
                break
    total = sum(minutes[f] * rate for f, rate in catalogs.RUNNER_COST_PER_MINUTE.items())
    return {
        "linux_minutes": minutes["ubuntu"],
        "windows_minutes": minutes["windows"],
        "macos_minutes": minutes["macos"],
        "total_cost": round(total, 2),
    }
