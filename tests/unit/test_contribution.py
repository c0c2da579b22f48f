"""
scaffold/contribution.py 單元測試

驗證 merge 的路徑衝突、依賴去重、script 衝突警告與 manifest 取代。
"""

import pytest

from core.exceptions import GenerationError, PathCollisionError
from scaffold.contribution import (
    Contribution, FileCategory, FileRecord, MergedOutput, fold, merge, replace_file,
)


def _file(path, content="x", category=FileCategory.CONFIG):
    return FileRecord(path=path, content=content, category=category)


@pytest.mark.unit
class TestFileRecord:

    @pytest.mark.unit
    def test_size_is_utf8_bytes(self):
        assert _file("a.md", "測試").size == 6


@pytest.mark.unit
class TestMerge:
    """Contribution 折疊"""

    @pytest.mark.unit
    def test_files_keep_order_and_origin(self):
        merged = fold([
            Contribution("config", files=(_file("package.json"),)),
            Contribution("tests", files=(_file("tests/a.spec.ts"), _file("tests/b.spec.ts"))),
        ])
        assert merged.paths == ("package.json", "tests/a.spec.ts", "tests/b.spec.ts")
        assert merged.origins == ("config", "tests", "tests")

    @pytest.mark.unit
    def test_path_collision_raises(self):
        first = merge(MergedOutput(), Contribution("config", files=(_file("Dockerfile"),)))
        with pytest.raises(PathCollisionError) as exc_info:
            merge(first, Contribution("docker", files=(_file("Dockerfile"),)))
        assert exc_info.value.path == "Dockerfile"
        assert exc_info.value.context["first"] == "config"
        assert exc_info.value.context["second"] == "docker"

    @pytest.mark.unit
    def test_collision_inside_one_contribution(self):
        with pytest.raises(PathCollisionError):
            merge(MergedOutput(), Contribution("tests", files=(_file("a"), _file("a"))))

    @pytest.mark.unit
    def test_dependencies_deduped_in_first_seen_order(self):
        merged = fold([
            Contribution("config", dev_dependencies=("@playwright/test", "dotenv")),
            Contribution("tests", dev_dependencies=("@axe-core/playwright", "dotenv")),
            Contribution("utils", dependencies=("lodash",), dev_dependencies=("@playwright/test",)),
        ])
        assert merged.dev_dependencies == ("@playwright/test", "dotenv", "@axe-core/playwright")
        assert merged.dependencies == ("lodash",)

    @pytest.mark.unit
    def test_same_script_same_command_is_silent(self):
        merged = fold([
            Contribution("config", scripts=(("test", "playwright test"),)),
            Contribution("tests", scripts=(("test", "playwright test"),)),
        ])
        assert merged.script_map == {"test": "playwright test"}
        assert merged.warnings == ()

    @pytest.mark.unit
    def test_script_clash_keeps_first_and_warns(self):
        merged = fold([
            Contribution("config", scripts=(("test", "playwright test"),)),
            Contribution("docker", scripts=(("test", "docker compose up"),)),
        ])
        assert merged.script_map["test"] == "playwright test"
        assert len(merged.warnings) == 1
        assert "docker" in merged.warnings[0]

    @pytest.mark.unit
    def test_merge_does_not_mutate_accumulator(self):
        acc = MergedOutput()
        merge(acc, Contribution("config", files=(_file("a"),)))
        assert acc.files == ()


@pytest.mark.unit
class TestReplaceFile:

    @pytest.mark.unit
    def test_replace_keeps_position(self):
        merged = fold([Contribution("config", files=(_file("a"), _file("b"), _file("c")))])
        updated = replace_file(merged, _file("b", "new"))
        assert updated.paths == ("a", "b", "c")
        assert updated.get("b").content == "new"
        assert merged.get("b").content == "x"

    @pytest.mark.unit
    def test_replace_missing_raises(self):
        with pytest.raises(GenerationError):
            replace_file(MergedOutput(), _file("package.json"))
