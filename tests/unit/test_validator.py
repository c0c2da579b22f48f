"""
scaffold/validator.py 單元測試

驗證：
- 互斥 fixture 每個無序對只報一次，且與列表順序無關
- 協同建議去重、數量上限
- CI / 環境 / Faker 警告
- workflow 指標
"""

import dataclasses

import pytest

from config.config import Config
from scaffold import validator
from scaffold.editing import update_fixture
from scaffold.schema import ConfigurationSnapshot, ExecutionMode, Workflow


def _with_fixtures(snapshot, **enabled):
    fixtures = snapshot.fixtures
    for fixture_id, value in enabled.items():
        fixtures = update_fixture(fixtures, fixture_id.replace("_", "-"), enabled=value)
    return dataclasses.replace(snapshot, fixtures=fixtures)


@pytest.mark.unit
class TestValidate:
    """validate() 主流程"""

    @pytest.mark.unit
    def test_default_snapshot_is_valid(self, default_snapshot):
        result = validator.validate(default_snapshot)
        assert result.is_valid
        assert result.errors == []

    @pytest.mark.unit
    def test_preconditions_are_errors(self):
        snapshot = ConfigurationSnapshot.from_dict({"language": None, "browsers": []})
        result = validator.validate(snapshot)
        assert "No programming language selected" in result.errors
        assert "No browsers selected for testing" in result.errors
        assert not result.is_valid

    @pytest.mark.unit
    def test_custom_image_missing(self):
        snapshot = ConfigurationSnapshot.from_dict(
            {"docker": {"enabled": True, "base_image": "custom", "custom_image": " "}})
        assert ("Custom image name is required when using custom base image"
                in validator.validate(snapshot).errors)

    @pytest.mark.unit
    def test_summary_and_dict(self, default_snapshot):
        result = validator.validate(default_snapshot)
        assert result.summary.startswith("驗證結果: 0 個錯誤")
        assert result.to_dict()["is_valid"] is True


@pytest.mark.unit
class TestConflicts:
    """互斥 fixture"""

    @pytest.mark.unit
    def test_one_conflict_per_pair(self, default_snapshot):
        snapshot = _with_fixtures(default_snapshot, fluent_interface=True, page_factory=True)
        found = validator.conflicts(snapshot)
        assert len(found) == 1
        assert (found[0].fixture_id, found[0].conflict_with) == ("fluent-interface", "page-factory")
        assert "fluent-interface conflicts with page-factory" in validator.validate(snapshot).errors

    @pytest.mark.unit
    def test_order_independent(self, default_snapshot):
        """條目順序反過來，結果一樣"""
        snapshot = _with_fixtures(default_snapshot, fluent_interface=True, page_factory=True)
        reversed_fixtures = dataclasses.replace(
            snapshot.fixtures, page_objects=tuple(reversed(snapshot.fixtures.page_objects)))
        flipped = dataclasses.replace(snapshot, fixtures=reversed_fixtures)
        assert validator.conflicts(flipped) == validator.conflicts(snapshot)
        assert validator.validate(flipped).errors == validator.validate(snapshot).errors

    @pytest.mark.unit
    def test_strategy_conflicts_with_custom_entry(self):
        snapshot = ConfigurationSnapshot.from_dict({"fixtures": {
            "custom": [{"id": "shared", "name": "Shared Data", "enabled": True}],
            "test_data": {"strategy": "persistent"},
        }})
        found = validator.conflicts(snapshot)
        assert len(found) == 1
        assert {found[0].fixture_id, found[0].conflict_with} == {"shared", "persistent"}
        assert "Shared Data" in found[0].reason

    @pytest.mark.unit
    def test_no_conflicts_by_default(self, default_snapshot):
        assert validator.conflicts(default_snapshot) == []


@pytest.mark.unit
class TestRecommendations:
    """協同建議"""

    @pytest.mark.unit
    def test_default_recommendations(self, default_snapshot):
        targets = [r.fixture_id for r in validator.recommendations(default_snapshot)]
        assert targets == ["fluent-interface", "role-fixtures", "session-storage"]

    @pytest.mark.unit
    def test_enabled_targets_not_recommended(self, default_snapshot):
        snapshot = _with_fixtures(default_snapshot, role_fixtures=True)
        targets = [r.fixture_id for r in validator.recommendations(snapshot)]
        assert "role-fixtures" not in targets

    @pytest.mark.unit
    def test_target_recommended_once(self, default_snapshot):
        """visual-fixture 與 database-fixture 都推薦 test-isolation，只出現一次"""
        snapshot = _with_fixtures(default_snapshot, test_isolation=False,
                                  visual_fixture=True, database_fixture=True)
        targets = [r.fixture_id for r in validator.recommendations(snapshot)]
        assert len(targets) == len(set(targets))

    @pytest.mark.unit
    def test_advanced_fixture_needs_isolation(self, default_snapshot, monkeypatch):
        monkeypatch.setattr(Config, "MAX_RECOMMENDATIONS", 20)
        snapshot = _with_fixtures(default_snapshot, test_isolation=False, parallel_hooks=True)
        high = [r for r in validator.recommendations(snapshot) if r.impact == "high"]
        assert [r.fixture_id for r in high] == ["test-isolation"]

    @pytest.mark.unit
    def test_factory_suggestion_for_many_fixtures(self, default_snapshot, monkeypatch):
        monkeypatch.setattr(Config, "MAX_RECOMMENDATIONS", 20)
        snapshot = _with_fixtures(
            default_snapshot, fluent_interface=True, browser_reset=True,
            role_fixtures=True, session_storage=True, api_token=True)
        configure = [r for r in validator.recommendations(snapshot) if r.type == "configure"]
        assert [r.fixture_id for r in configure] == ["test-data-strategy"]

    @pytest.mark.unit
    def test_capped(self, default_snapshot, monkeypatch):
        monkeypatch.setattr(Config, "MAX_RECOMMENDATIONS", 2)
        assert len(validator.recommendations(default_snapshot)) == 2


@pytest.mark.unit
class TestWarnings:
    """軟性警告"""

    @pytest.mark.unit
    def test_fluent_without_base_page(self, default_snapshot):
        snapshot = _with_fixtures(default_snapshot, fluent_interface=True, base_page=False)
        warnings = validator.validate(snapshot).warnings
        assert "Fluent interface pattern works best with Base Page Class enabled" in warnings

    @pytest.mark.unit
    def test_fixture_timeout_range(self, default_snapshot):
        fixtures = dataclasses.replace(default_snapshot.fixtures, fixture_timeout=1000)
        snapshot = dataclasses.replace(default_snapshot, fixtures=fixtures)
        assert ("Fixture timeout should be between 5 and 300 seconds"
                in validator.validate(snapshot).warnings)

    @pytest.mark.unit
    def test_ci_checks_only_when_enabled(self):
        data = {"ci": {"workflows": [{"id": "w", "name": "w",
                                      "triggers": {"schedule": {"enabled": True, "cron": "bad"}}}]}}
        assert validator.validate(ConfigurationSnapshot.from_dict(data)).warnings == []
        data["ci"]["enabled"] = True
        warnings = validator.validate(ConfigurationSnapshot.from_dict(data)).warnings
        assert "Workflow 'w': invalid cron expression 'bad'" in warnings

    @pytest.mark.unit
    def test_duplicate_workflow_slug(self):
        snapshot = ConfigurationSnapshot.from_dict({"ci": {"enabled": True, "workflows": [
            {"id": "a", "name": "Smoke Tests"}, {"id": "b", "name": "smoke tests"}]}})
        warnings = validator.validate(snapshot).warnings
        assert any("same file name 'smoke-tests'" in w for w in warnings)

    @pytest.mark.unit
    def test_environment_checks(self):
        snapshot = ConfigurationSnapshot.from_dict({"environments": {
            "environments": [
                {"name": "dev", "base_url": "localhost:3000", "retries": 20},
                {"name": "dev", "base_url": "https://dev.example.com", "api_url": "ftp://x"},
            ],
            "selected": ["prod"],
        }})
        warnings = validator.validate(snapshot).warnings
        assert "Duplicate environment name: dev" in warnings
        assert "Selected environment does not exist: prod" in warnings
        assert "Environment 'dev': invalid base URL 'localhost:3000'" in warnings
        assert "Environment 'dev': invalid API URL 'ftp://x'" in warnings
        assert "Environment 'dev': retries should be between 0 and 10" in warnings

    @pytest.mark.unit
    def test_environment_file_name_clashes(self):
        snapshot = ConfigurationSnapshot.from_dict({"environments": {"environments": [
            {"name": "example", "base_url": "https://a.test"},
            {"name": "QA", "base_url": "https://b.test"},
            {"name": "qa", "base_url": "https://c.test"},
            {"name": "dev 1", "base_url": "https://d.test"},
            {"name": "dev-1", "base_url": "https://e.test"},
        ]}})
        warnings = validator.validate(snapshot).warnings
        assert "Environment 'example' uses the reserved file name '.env.example'" in warnings
        assert "Environments 'QA' and 'qa' produce the same file name '.env.qa'" in warnings
        assert "Environments 'dev 1' and 'dev-1' produce the same file name '.env.dev-1'" in warnings

    @pytest.mark.unit
    def test_duplicate_environment_name_warned_once(self):
        snapshot = ConfigurationSnapshot.from_dict({"environments": {"environments": [
            {"name": "dev", "base_url": "https://a.test"},
            {"name": "dev", "base_url": "https://b.test"},
        ]}})
        warnings = validator.validate(snapshot).warnings
        assert not any("same file name" in w for w in warnings)

    @pytest.mark.unit
    def test_faker_locale(self):
        snapshot = ConfigurationSnapshot.from_dict(
            {"integrations": {"faker": {"enabled": True, "locale": "xx"}}})
        assert "Unsupported Faker locale: xx" in validator.validate(snapshot).warnings


@pytest.mark.unit
class TestHelpers:

    @pytest.mark.unit
    @pytest.mark.parametrize("cron,expected", [
        ("0 2 * * *", True),
        ("0 0 2 * * 1", True),
        ("* * *", False),
        ("", False),
    ])
    def test_is_valid_cron(self, cron, expected):
        assert validator.is_valid_cron(cron) is expected

    @pytest.mark.unit
    @pytest.mark.parametrize("url,expected", [
        ("https://staging.example.com", True),
        ("http://localhost:3000", True),
        ("localhost:3000", False),
        ("ftp://example.com", False),
    ])
    def test_is_valid_url(self, url, expected):
        assert validator.is_valid_url(url) is expected


@pytest.mark.unit
class TestWorkflowMetrics:
    """workflow 指標"""

    @pytest.mark.unit
    def test_job_count_only_expands_matrix(self):
        parallel = Workflow()
        matrix = Workflow.from_dict({"execution": {"mode": "matrix"}})
        assert validator.workflow_job_count(parallel) == 1
        assert validator.workflow_job_count(matrix) == 2 * 1 * 3

    @pytest.mark.unit
    def test_estimated_duration(self):
        sequential = Workflow.from_dict({"execution": {"mode": "sequential", "timeout": 10}})
        assert sequential.execution.mode is ExecutionMode.SEQUENTIAL
        assert validator.estimated_duration(sequential) == 10
        sharded = Workflow.from_dict({"execution": {"mode": "sharded", "timeout": 45}})
        assert validator.estimated_duration(sharded) == 45

    @pytest.mark.unit
    def test_complexity_bounds(self):
        busy = Workflow.from_dict({
            "execution": {"mode": "matrix"},
            "matrix": {"node_versions": ["18.x", "20.x", "21.x"],
                       "operating_systems": ["ubuntu-latest", "windows-latest"]},
            "triggers": {"schedule": {"enabled": True}, "release": {"enabled": True}},
            "reporting": {"allure": True},
            "notifications": {"slack": {"enabled": True}},
            "security": {"secret_scanning": True},
        })
        assert 1 <= validator.workflow_complexity(Workflow()) <= 10
        assert validator.workflow_complexity(busy) == 9

    @pytest.mark.unit
    def test_recommendations(self):
        workflow = Workflow.from_dict({
            "retry": {"enabled": False},
            "triggers": {"pull_request": {"enabled": False}},
            "execution": {"timeout": 90},
        })
        recs = validator.workflow_recommendations(workflow)
        assert "Enable retry strategy to handle flaky tests" in recs
        assert "Enable PR triggers to catch issues before merging" in recs
        assert any("reducing timeout" in r for r in recs)

    @pytest.mark.unit
    def test_cost_estimation(self):
        workflow = Workflow.from_dict({
            "execution": {"mode": "sharded", "timeout": 10},
            "matrix": {"operating_systems": ["ubuntu-latest", "macos-latest"]},
        })
        cost = validator.workflow_cost_estimation(workflow)
        assert cost["linux_minutes"] == 10
        assert cost["macos_minutes"] == 10
        assert cost["windows_minutes"] == 0
        assert cost["total_cost"] > 0
