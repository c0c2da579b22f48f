"""
資料結構定義
設定快照 (Configuration Snapshot) 的統一格式。

所有型別都是 frozen dataclass，集合一律用 tuple，
產生流程拿到的快照無法被任何 writer 修改。
外部 (UI / JSON / YAML) 一律以巢狀 dict 傳入，透過 from_dict 建立。
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from enum import Enum

from config.config import Config
from core.exceptions import InvalidConfigError
from scaffold import catalogs


class Language(Enum):
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"

    @property
    def extension(self) -> str:
        return catalogs.LANGUAGE_EXTENSIONS[self.value]

    @property
    def is_typed(self) -> bool:
        return self is Language.TYPESCRIPT


class Browser(Enum):
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"

    @property
    def device(self) -> str:
        return catalogs.BROWSER_DEVICES[self.value]


class BaseImage(Enum):
    PLAYWRIGHT = "playwright"
    NODE_PLAYWRIGHT = "node-playwright"
    CUSTOM = "custom"


class ExecutionMode(Enum):
    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"
    SHARDED = "sharded"
    MATRIX = "matrix"


class PermissionLevel(Enum):
    RESTRICTED = "restricted"
    PERMISSIVE = "permissive"


class FixtureScope(Enum):
    TEST = "test"
    WORKER = "worker"
    GLOBAL = "global"


class AuthMethod(Enum):
    SESSION = "session"
    TOKEN = "token"
    COOKIE = "cookie"
    BASIC = "basic"


class DataStrategy(Enum):
    ISOLATED = "isolated"
    SHARED = "shared"
    PERSISTENT = "persistent"
    FACTORY = "factory"


def slugify(text: str) -> str:
    """workflow / 環境名稱轉成檔名：小寫、非英數字轉為 '-'"""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "workflow"


def _enum(enum_cls, value, key: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidConfigError(key, value, f"expected one of: {allowed}") from None


def _build(cls, data: dict | None, **converted):
    """只取 cls 認得的欄位，其餘忽略；converted 覆蓋已轉型的欄位"""
    data = dict(data or {})
    names = {f.name for f in dataclasses.fields(cls)}
    kwargs = {k: v for k, v in data.items() if k in names}
    kwargs.update({k: v for k, v in converted.items() if v is not None})
    return cls(**kwargs)


# ── 測試能力 / 環境 ──

@dataclass(frozen=True)
class Capabilities:
    """測試能力開關，彼此獨立"""
    ui_testing: bool = True
    api_testing: bool = False
    visual_testing: bool = False
    accessibility_testing: bool = False
    performance_testing: bool = False
    mobile_testing: bool = False
    cross_browser_testing: bool = False
    ecommerce: bool = False


@dataclass(frozen=True)
class Environment:
    """單一測試環境"""
    name: str
    base_url: str
    api_url: str = ""
    timeout: int = 30000                  # ms
    retries: int = 1
    headless: bool = True

    @property
    def slug(self) -> str:
        return slugify(self.name)

    @property
    def env_prefix(self) -> str:
        """STAGING_BASE_URL 這類變數名的前綴"""
        return re.sub(r"[^A-Z0-9]+", "_", self.name.upper()).strip("_")


@dataclass(frozen=True)
class EnvironmentSettings:
    environments: tuple[Environment, ...] = (
        Environment(name="local", base_url="http://localhost:3000",
                    api_url="http://localhost:3001/api"),
    )
    selected: tuple[str, ...] = ()

    def active(self) -> tuple[Environment, ...]:
        """選取中的環境 (依定義順序)；都沒選時第一個環境就是 active"""
        chosen = tuple(e for e in self.environments if e.name in self.selected)
        if chosen:
            return chosen
        return self.environments[:1]

    @classmethod
    def from_dict(cls, data: dict | None) -> EnvironmentSettings:
        if data is None:
            return cls()
        if "environments" not in data:
            return cls(selected=tuple(data.get("selected", ())))
        envs = []
        for raw in data["environments"]:
            if not raw.get("name"):
                raise InvalidConfigError("environments.name", raw.get("name", ""),
                                         "environment name is required")
            envs.append(_build(Environment, {"base_url": "", **raw}))
        return cls(
            environments=tuple(envs),
            selected=tuple(data.get("selected", ())),
        )


# ── CI ──

@dataclass(frozen=True)
class BranchTrigger:
    enabled: bool = True
    branches: tuple[str, ...] = ("main", "master")


@dataclass(frozen=True)
class ScheduleTrigger:
    enabled: bool = False
    cron: str = "0 2 * * *"


@dataclass(frozen=True)
class ManualTrigger:
    enabled: bool = True
    inputs: tuple[str, ...] = ("environment",)


@dataclass(frozen=True)
class ReleaseTrigger:
    enabled: bool = False
    types: tuple[str, ...] = ("published",)


@dataclass(frozen=True)
class TriggerConfig:
    push: BranchTrigger = field(default_factory=BranchTrigger)
    pull_request: BranchTrigger = field(default_factory=BranchTrigger)
    schedule: ScheduleTrigger = field(default_factory=ScheduleTrigger)
    manual: ManualTrigger = field(default_factory=ManualTrigger)
    release: ReleaseTrigger = field(default_factory=ReleaseTrigger)

    def enabled_names(self) -> list[str]:
        return [f.name for f in dataclasses.fields(self)
                if getattr(self, f.name).enabled]

    @classmethod
    def from_dict(cls, data: dict | None) -> TriggerConfig:
        data = data or {}

        def branch(key):
            raw = data.get(key)
            if raw is None:
                return BranchTrigger()
            return _build(BranchTrigger, raw, branches=_tuple(raw.get("branches")))

        manual = data.get("manual") or {}
        release = data.get("release") or {}
        return cls(
            push=branch("push"),
            pull_request=branch("pull_request"),
            schedule=_build(ScheduleTrigger, data.get("schedule")),
            manual=_build(ManualTrigger, manual, inputs=_tuple(manual.get("inputs"))),
            release=_build(ReleaseTrigger, release, types=_tuple(release.get("types"))),
        )


@dataclass(frozen=True)
class ExecutionStrategy:
    mode: ExecutionMode = ExecutionMode.PARALLEL
    parallelism: int = 4
    shards: int = 1
    timeout: int = 30                      # 分鐘
    fail_fast: bool = False
    continue_on_error: bool = False


@dataclass(frozen=True)
class RetryStrategy:
    enabled: bool = True
    max_retries: int = 2
    backoff: str = "linear"                # linear / exponential / fixed
    delay: int = 30                        # 秒


@dataclass(frozen=True)
class EnvironmentMatrix:
    node_versions: tuple[str, ...] = ("18.x", "20.x")
    operating_systems: tuple[str, ...] = ("ubuntu-latest",)
    browsers: tuple[Browser, ...] = (Browser.CHROMIUM, Browser.FIREFOX, Browser.WEBKIT)
    environments: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReportingConfig:
    html: bool = True
    junit: bool = True
    coverage: bool = False
    allure: bool = False


@dataclass(frozen=True)
class ArtifactConfig:
    screenshots: bool = True
    videos: bool = True
    traces: bool = True
    retention_days: int = 30


@dataclass(frozen=True)
class NotificationChannel:
    enabled: bool = False
    target: str = ""                       # channel / webhook secret / 收件人
    on: str = "failure"                    # always / failure / success


@dataclass(frozen=True)
class NotificationConfig:
    slack: NotificationChannel = field(default_factory=NotificationChannel)
    teams: NotificationChannel = field(default_factory=NotificationChannel)
    email: NotificationChannel = field(default_factory=NotificationChannel)
    github: NotificationChannel = field(
        default_factory=lambda: NotificationChannel(enabled=True, on="always")
    )

    def enabled_channels(self) -> list[str]:
        return [f.name for f in dataclasses.fields(self)
                if getattr(self, f.name).enabled]


@dataclass(frozen=True)
class SecurityConfig:
    secret_scanning: bool = False
    dependency_check: bool = False
    code_analysis: bool = False
    permissions: tuple[tuple[str, str], ...] = (
        ("contents", "read"),
        ("checks", "write"),
        ("pull-requests", "write"),
    )

    @property
    def permissions_map(self) -> dict:
        return dict(self.permissions)


DEFAULT_WORKFLOW_ID = "main-workflow"
DEFAULT_WORKFLOW_DESCRIPTION = "Main Playwright test workflow"

# workflow 裡可以做局部更新的區塊 -> 型別
WORKFLOW_SECTIONS = {
    "triggers": TriggerConfig,
    "execution": ExecutionStrategy,
    "retry": RetryStrategy,
    "matrix": EnvironmentMatrix,
    "reporting": ReportingConfig,
    "artifacts": ArtifactConfig,
    "notifications": NotificationConfig,
    "security": SecurityConfig,
}


@dataclass(frozen=True)
class Workflow:
    """一條具名的 CI pipeline 定義"""
    id: str = DEFAULT_WORKFLOW_ID
    name: str = "Playwright Tests"
    description: str = DEFAULT_WORKFLOW_DESCRIPTION
    triggers: TriggerConfig = field(default_factory=TriggerConfig)
    execution: ExecutionStrategy = field(default_factory=ExecutionStrategy)
    retry: RetryStrategy = field(default_factory=RetryStrategy)
    matrix: EnvironmentMatrix = field(default_factory=EnvironmentMatrix)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    artifacts: ArtifactConfig = field(default_factory=ArtifactConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)

    @property
    def slug(self) -> str:
        return slugify(self.name)

    @classmethod
    def from_dict(cls, data: dict) -> Workflow:
        matrix = data.get("matrix") or {}
        execution = data.get("execution") or {}
        notifications = data.get("notifications") or {}
        security = data.get("security") or {}
        permissions = security.get("permissions")
        if isinstance(permissions, dict):
            permissions = tuple(permissions.items())
        elif permissions is not None:
            permissions = tuple(tuple(p) for p in permissions)

        return _build(
            cls, data,
            triggers=TriggerConfig.from_dict(data.get("triggers")),
            execution=_build(
                ExecutionStrategy, execution,
                mode=_enum(ExecutionMode, execution["mode"], "execution.mode")
                if "mode" in execution else None,
            ),
            retry=_build(RetryStrategy, data.get("retry")),
            matrix=_build(
                EnvironmentMatrix, matrix,
                node_versions=_tuple(matrix.get("node_versions")),
                operating_systems=_tuple(matrix.get("operating_systems")),
                browsers=tuple(_enum(Browser, b, "matrix.browsers")
                               for b in matrix["browsers"])
                if "browsers" in matrix else None,
                environments=_tuple(matrix.get("environments")),
            ),
            reporting=_build(ReportingConfig, data.get("reporting")),
            artifacts=_build(ArtifactConfig, data.get("artifacts")),
            notifications=NotificationConfig(**{
                name: _build(NotificationChannel, notifications[name])
                for name in ("slack", "teams", "email", "github")
                if name in notifications
            }),
            security=_build(SecurityConfig, security, permissions=permissions),
        )


def default_workflow(**overrides) -> Workflow:
    """新增 workflow 時的範本"""
    return dataclasses.replace(Workflow(), **overrides)


@dataclass(frozen=True)
class GlobalCISettings:
    default_timeout: int = 30              # 分鐘
    concurrency_group: str = "ci-${{ github.ref }}"
    cancel_in_progress: bool = True
    permission_level: PermissionLevel = PermissionLevel.RESTRICTED
    debug_logging: bool = False


@dataclass(frozen=True)
class CIConfig:
    enabled: bool = False
    workflows: tuple[Workflow, ...] = field(default_factory=lambda: (default_workflow(),))
    selected_index: int = 0
    settings: GlobalCISettings = field(default_factory=GlobalCISettings)

    @property
    def selected_workflow(self) -> Workflow | None:
        if not self.workflows:
            return None
        return self.workflows[min(self.selected_index, len(self.workflows) - 1)]

    @classmethod
    def from_dict(cls, data: dict | None) -> CIConfig:
        if data is None:
            return cls()
        settings = data.get("settings") or {}
        workflows = data.get("workflows")
        return cls(
            enabled=data.get("enabled", False),
            workflows=tuple(Workflow.from_dict(w) for w in workflows)
            if workflows is not None else (default_workflow(),),
            selected_index=data.get("selected_index", 0),
            settings=_build(
                GlobalCISettings, settings,
                permission_level=_enum(PermissionLevel, settings["permission_level"],
                                       "ci.settings.permission_level")
                if "permission_level" in settings else None,
            ),
        )


# ── 容器 ──

@dataclass(frozen=True)
class DockerFeatures:
    compose: bool = True
    multi_stage: bool = False
    health_checks: bool = False


@dataclass(frozen=True)
class DockerResources:
    memory_limit: str = "2g"
    cpu_limit: str = "2"


@dataclass(frozen=True)
class DockerConfig:
    enabled: bool = False
    base_image: BaseImage = BaseImage.PLAYWRIGHT
    custom_image: str = ""
    features: DockerFeatures = field(default_factory=DockerFeatures)
    resources: DockerResources = field(default_factory=DockerResources)

    @property
    def image(self) -> str:
        """實際寫進 FROM 的映像字串"""
        if self.base_image is BaseImage.CUSTOM:
            return self.custom_image.strip()
        if self.base_image is BaseImage.PLAYWRIGHT:
            return Config.playwright_image()
        return catalogs.BASE_IMAGES[self.base_image.value]

    @property
    def installs_playwright(self) -> bool:
        return self.base_image is not BaseImage.PLAYWRIGHT

    @classmethod
    def from_dict(cls, data: dict | None) -> DockerConfig:
        if data is None:
            return cls()
        resources = data.get("resources") or {}
        memory = resources.get("memory_limit", DockerResources.memory_limit)
        cpu = str(resources.get("cpu_limit", DockerResources.cpu_limit))
        if memory not in catalogs.MEMORY_LIMITS:
            raise InvalidConfigError("docker.resources.memory_limit", memory,
                                     f"expected one of: {', '.join(catalogs.MEMORY_LIMITS)}")
        if cpu not in catalogs.CPU_LIMITS:
            raise InvalidConfigError("docker.resources.cpu_limit", cpu,
                                     f"expected one of: {', '.join(catalogs.CPU_LIMITS)}")
        return _build(
            cls, data,
            base_image=_enum(BaseImage, data["base_image"], "docker.base_image")
            if "base_image" in data else None,
            features=_build(DockerFeatures, data.get("features")),
            resources=DockerResources(memory_limit=memory, cpu_limit=cpu),
        )


# ── Fixtures ──

@dataclass(frozen=True)
class FixtureOption:
    """fixture / 選項條目，身分以 id 為準，不看列表位置"""
    id: str
    name: str
    enabled: bool = False
    description: str = ""


@dataclass(frozen=True)
class PageObjectPattern(FixtureOption):
    pass


@dataclass(frozen=True)
class SetupTeardownPattern(FixtureOption):
    scope: FixtureScope = FixtureScope.TEST


@dataclass(frozen=True)
class AuthenticationFixture(FixtureOption):
    method: AuthMethod = AuthMethod.SESSION


@dataclass(frozen=True)
class CustomFixture(FixtureOption):
    category: str = "custom"


@dataclass(frozen=True)
class DataSettings:
    strategy: DataStrategy = DataStrategy.ISOLATED
    file_format: str = "json"
    cleanup: bool = True


# FixturesConfig 欄位 -> 條目型別
FIXTURE_CATALOGS = {
    "page_objects": PageObjectPattern,
    "setup_teardown": SetupTeardownPattern,
    "authentication": AuthenticationFixture,
    "custom": CustomFixture,
}


def _fixture_entry(cls, raw: dict):
    if "scope" in raw and cls is SetupTeardownPattern:
        return _build(cls, raw, scope=_enum(FixtureScope, raw["scope"], "fixtures.scope"))
    if "method" in raw and cls is AuthenticationFixture:
        return _build(cls, raw, method=_enum(AuthMethod, raw["method"], "fixtures.method"))
    return _build(cls, raw)


def _default_entries(cls, rows) -> tuple:
    return tuple(_fixture_entry(cls, row) for row in rows)


@dataclass(frozen=True)
class FixturesConfig:
    page_objects: tuple[PageObjectPattern, ...] = field(
        default_factory=lambda: _default_entries(
            PageObjectPattern, catalogs.DEFAULT_PAGE_OBJECT_PATTERNS))
    setup_teardown: tuple[SetupTeardownPattern, ...] = field(
        default_factory=lambda: _default_entries(
            SetupTeardownPattern, catalogs.DEFAULT_SETUP_TEARDOWN_PATTERNS))
    authentication: tuple[AuthenticationFixture, ...] = field(
        default_factory=lambda: _default_entries(
            AuthenticationFixture, catalogs.DEFAULT_AUTHENTICATION_FIXTURES))
    custom: tuple[CustomFixture, ...] = field(
        default_factory=lambda: _default_entries(
            CustomFixture, catalogs.DEFAULT_CUSTOM_FIXTURES))
    test_data: DataSettings = field(default_factory=DataSettings)
    reusable_components: bool = True
    global_fixtures: bool = True
    fixture_timeout: int = 30000           # ms
    parallel_safe: bool = False

    def entries(self) -> tuple[FixtureOption, ...]:
        return self.page_objects + self.setup_teardown + self.authentication + self.custom

    def find(self, fixture_id: str) -> FixtureOption | None:
        for entry in self.entries():
            if entry.id == fixture_id:
                return entry
        return None

    def is_enabled(self, fixture_id: str) -> bool:
        entry = self.find(fixture_id)
        return bool(entry and entry.enabled)

    def enabled_ids(self) -> frozenset[str]:
        """所有啟用條目的 id，加上目前的測試資料策略"""
        ids = {e.id for e in self.entries() if e.enabled}
        ids.add(self.test_data.strategy.value)
        return frozenset(ids)

    def known_ids(self) -> frozenset[str]:
        return frozenset(e.id for e in self.entries())

    @classmethod
    def from_dict(cls, data: dict | None) -> FixturesConfig:
        if data is None:
            return cls()
        lists = {
            key: tuple(_fixture_entry(entry_cls, raw) for raw in data[key])
            for key, entry_cls in FIXTURE_CATALOGS.items()
            if key in data
        }
        test_data = data.get("test_data") or {}
        return _build(
            cls, data,
            test_data=_build(
                DataSettings, test_data,
                strategy=_enum(DataStrategy, test_data["strategy"], "fixtures.test_data.strategy")
                if "strategy" in test_data else None,
            ),
            **lists,
        )


# ── 整合 ──

@dataclass(frozen=True)
class Integration:
    enabled: bool = False


@dataclass(frozen=True)
class AllureIntegration(Integration):
    publish_to_pages: bool = True


@dataclass(frozen=True)
class FakerIntegration(Integration):
    locale: str = "en"
    seed: int | None = None


@dataclass(frozen=True)
class Integrations:
    github_actions: Integration = field(default_factory=Integration)
    gitlab_ci: Integration = field(default_factory=Integration)
    jenkins: Integration = field(default_factory=Integration)
    azure_devops: Integration = field(default_factory=Integration)
    allure: AllureIntegration = field(default_factory=AllureIntegration)
    junit: Integration = field(default_factory=Integration)
    cucumber: Integration = field(default_factory=Integration)
    faker: FakerIntegration = field(default_factory=FakerIntegration)

    def enabled_names(self) -> list[str]:
        return [f.name for f in dataclasses.fields(self)
                if getattr(self, f.name).enabled]

    @classmethod
    def from_dict(cls, data: dict | None) -> Integrations:
        data = data or {}
        kwargs = {}
        for f in dataclasses.fields(cls):
            raw = data.get(f.name)
            if raw is None:
                continue
            if isinstance(raw, bool):
                raw = {"enabled": raw}
            entry_cls = {"allure": AllureIntegration, "faker": FakerIntegration}.get(
                f.name, Integration)
            kwargs[f.name] = _build(entry_cls, raw)
        return cls(**kwargs)


# ── 快照 ──

@dataclass(frozen=True)
class ConfigurationSnapshot:
    """一次產生所需的完整、不可變設定"""
    language: Language | None = Language.TYPESCRIPT
    browsers: tuple[Browser, ...] = (Browser.CHROMIUM,)
    capabilities: Capabilities = field(default_factory=Capabilities)
    environments: EnvironmentSettings = field(default_factory=EnvironmentSettings)
    ci: CIConfig = field(default_factory=CIConfig)
    docker: DockerConfig = field(default_factory=DockerConfig)
    fixtures: FixturesConfig = field(default_factory=FixturesConfig)
    integrations: Integrations = field(default_factory=Integrations)

    @property
    def extension(self) -> str:
        return self.language.extension

    def to_dict(self) -> dict:
        """轉為 dict (存檔 / 傳遞用)，所有 Enum 轉為 .value、tuple 轉為 list"""

        def _convert(obj):
            if isinstance(obj, Enum):
                return obj.value
            if isinstance(obj, dict):
                return {k: _convert(v) for k, v in obj.items()}
            if isinstance(obj, (list, tuple)):
                return [_convert(i) for i in obj]
            return obj

        raw = dataclasses.asdict(self)
        for workflow in raw["ci"]["workflows"]:
            workflow["security"]["permissions"] = dict(workflow["security"]["permissions"])
        return _convert(raw)

    @classmethod
    def from_dict(cls, data: dict) -> ConfigurationSnapshot:
        """從 dict 建立（讀取 JSON / YAML 設定檔用）"""
        language = data.get("language", Language.TYPESCRIPT.value)
        return cls(
            language=_enum(Language, language, "language") if language else None,
            browsers=tuple(_enum(Browser, b, "browsers")
                           for b in data.get("browsers", ["chromium"])),
            capabilities=_build(Capabilities, data.get("capabilities")),
            environments=EnvironmentSettings.from_dict(data.get("environments")),
            ci=CIConfig.from_dict(data.get("ci")),
            docker=DockerConfig.from_dict(data.get("docker")),
            fixtures=FixturesConfig.from_dict(data.get("fixtures")),
            integrations=Integrations.from_dict(data.get("integrations")),
        )


def _tuple(value) -> tuple | None:
    return tuple(value) if value is not None else None
