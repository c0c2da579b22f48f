"""
core/exceptions.py 單元測試

驗證自訂例外體系的繼承關係、訊息格式、context 欄位。
"""

import pytest

from core.exceptions import (
    GENERATION_FAILED,
    ConfigurationError,
    CustomImageMissingError,
    GenerationError,
    InvalidConfigError,
    NoBrowsersSelectedError,
    NoLanguageSelectedError,
    PathCollisionError,
    ScaffoldError,
    SnapshotFileError,
    WorkflowError,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """測試例外繼承關係"""

    @pytest.mark.unit
    def test_all_inherit_from_base(self):
        classes = [
            ConfigurationError, NoLanguageSelectedError, NoBrowsersSelectedError,
            CustomImageMissingError, InvalidConfigError, GenerationError,
            PathCollisionError, WorkflowError, SnapshotFileError,
        ]
        for cls in classes:
            assert issubclass(cls, ScaffoldError), f"{cls.__name__} 未繼承 ScaffoldError"

    @pytest.mark.unit
    def test_precondition_errors_are_configuration_errors(self):
        for cls in (NoLanguageSelectedError, NoBrowsersSelectedError,
                    CustomImageMissingError, InvalidConfigError):
            assert issubclass(cls, ConfigurationError)

    @pytest.mark.unit
    def test_path_collision_is_generation_error(self):
        assert issubclass(PathCollisionError, GenerationError)

    @pytest.mark.unit
    def test_catch_base_catches_all(self):
        with pytest.raises(ScaffoldError):
            raise PathCollisionError("a", "x", "y")


@pytest.mark.unit
class TestExceptionMessages:
    """對外穩定的訊息字串"""

    @pytest.mark.unit
    def test_precondition_messages(self):
        assert str(NoLanguageSelectedError()) == "No programming language selected"
        assert str(NoBrowsersSelectedError()) == "No browsers selected for testing"
        assert str(CustomImageMissingError()) == (
            "Custom image name is required when using custom base image"
        )

    @pytest.mark.unit
    def test_generation_error_default_message(self):
        assert str(GenerationError()) == GENERATION_FAILED == "Failed to generate framework"

    @pytest.mark.unit
    def test_invalid_config_message(self):
        e = InvalidConfigError("browsers", "opera", "expected one of: chromium")
        assert str(e) == "Invalid configuration value: browsers='opera' (expected one of: chromium)"
        assert e.context == {"key": "browsers", "value": "opera"}

    @pytest.mark.unit
    def test_path_collision_message(self):
        e = PathCollisionError("package.json", "config", "docker")
        assert "package.json" in str(e)
        assert "config" in str(e) and "docker" in str(e)
        assert e.path == "package.json"

    @pytest.mark.unit
    def test_snapshot_file_error_message(self):
        e = SnapshotFileError("spec.toml", "unsupported format")
        assert str(e) == "Cannot load configuration snapshot: spec.toml (unsupported format)"


@pytest.mark.unit
class TestExceptionContext:
    """context 欄位"""

    @pytest.mark.unit
    def test_default_context_is_empty_dict(self):
        assert ScaffoldError("x").context == {}

    @pytest.mark.unit
    def test_generation_error_stage(self):
        e = GenerationError(stage="archive")
        assert e.stage == "archive"
        assert e.context["stage"] == "archive"

    @pytest.mark.unit
    def test_workflow_error_context(self):
        e = WorkflowError("Cannot remove the last workflow", workflow_id="main-workflow")
        assert e.context["workflow_id"] == "main-workflow"
