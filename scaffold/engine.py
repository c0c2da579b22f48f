"""
Generator Engine (核心引擎)
串接所有 writer，一次產生完整的 Playwright 測試專案封存檔。

使用方式：
    1. 程式化呼叫：
        result = FrameworkGenerator(snapshot).generate(on_progress=print)
        result.archive.write_to("playwright-framework.zip")

    2. 只要 bytes：
        archive = generate(snapshot)

    3. 預覽 (不打包)：
        info = preview(snapshot)

流程：
    前置檢查 (致命，發生在任何進度事件之前)
    → config → tests → pages → fixtures → utils → ci → docker (每個 writer 回傳 Contribution)
    → fold 合併 (路徑重複致命、依賴去重、script 先定義者勝)
    → 依合併後的依賴 / scripts 重寫 package.json
    → README / 目錄結構
    → 打包

前置檢查之後的任何失敗一律包成 GenerationError("Failed to generate framework")，
原始例外放在 __cause__，不會回傳任何 bytes。
"""

from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field

from core.exceptions import (
    CustomImageMissingError, GenerationError, NoBrowsersSelectedError,
    NoLanguageSelectedError,
)
from scaffold.archive import Archive, ArchiveBuilder
from scaffold.ci_writer import CIWriter
from scaffold.config_writer import MANIFEST_PATH, ConfigWriter, render_manifest
from scaffold.contribution import FileCategory, FileRecord, MergedOutput, merge, replace_file
from scaffold.docker_writer import DockerWriter
from scaffold.fixture_writer import FixtureWriter
from scaffold.page_writer import PageWriter
from scaffold.progress import ProgressCallback, ProgressEvent, ProgressReporter
from scaffold.schema import BaseImage, ConfigurationSnapshot
from scaffold.structure_writer import ProjectStats, StructureWriter, project_stats
from scaffold.test_writer import TestWriter
from scaffold.util_writer import UtilWriter
from scaffold.validator import ValidationResult, validate
from utils.logger import logger

# (stage, writer, 完成後的進度, 訊息)
STAGES = (
    ("config", ConfigWriter, 10, "Generating configuration files"),
    ("tests", TestWriter, 20, "Generating test files"),
    ("pages", PageWriter, 30, "Generating page objects"),
    ("fixtures", FixtureWriter, 40, "Generating fixtures"),
    ("utils", UtilWriter, 50, "Generating utilities"),
    ("ci", CIWriter, 60, "Generating CI/CD workflows"),
    ("docker", DockerWriter, 70, "Generating Docker configuration"),
)


@dataclass(frozen=True)
class GenerationResult:
    archive: Archive | None
    files: tuple[FileRecord, ...]
    directories: tuple[str, ...]
    dependencies: tuple[str, ...]
    dev_dependencies: tuple[str, ...]
    scripts: tuple[tuple[str, str], ...]
    stats: ProjectStats
    tree: str = ""
    validation: ValidationResult = field(default_factory=ValidationResult)
    warnings: tuple[str, ...] = ()
    events: tuple[ProgressEvent, ...] = ()

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(f.path for f in self.files)


def check_preconditions(snapshot: ConfigurationSnapshot) -> None:
    """
    Raises:
        NoLanguageSelectedError / NoBrowsersSelectedError / CustomImageMissingError
    """
    if snapshot.language is None:
        raise NoLanguageSelectedError()
    if not snapshot.browsers:
        raise NoBrowsersSelectedError()
    docker = snapshot.docker
    if docker.enabled and docker.base_image is BaseImage.CUSTOM and not docker.custom_image.strip():
        raise CustomImageMissingError()


class FrameworkGenerator:
    """Playwright 測試專案產生引擎；每次執行都有自己的快照副本與累積器"""

    def __init__(self, snapshot: ConfigurationSnapshot):
        self.snapshot = snapshot

    def generate(self, on_progress: ProgressCallback | None = None,
                 pack: bool = True) -> GenerationResult:
        """
        產生完整專案。

        Args:
            on_progress: 每個進度事件呼叫一次，參數是 ProgressEvent
            pack: False 時不打包 (預覽用)，也不送出 100 的事件

        Raises:
            ConfigurationError: 前置檢查失敗 (尚未送出任何進度)
            GenerationError: 之後任何步驟失敗
        """
        check_preconditions(self.snapshot)
        snapshot = copy.deepcopy(self.snapshot)
        reporter = ProgressReporter(on_progress)
        validation = validate(snapshot)
        for warning in validation.warnings:
            logger.warning(f"設定警告: {warning}")
        for error in validation.errors:
            logger.warning(f"設定衝突: {error}")

        stage = "start"
        try:
            reporter.emit(0, "Starting framework generation")
            acc = MergedOutput()
            for stage, writer_cls, progress, message in STAGES:
                contribution = writer_cls(snapshot).build()
                acc = merge(acc, contribution)
                logger.debug(f"[{stage}] {len(contribution.files)} 個檔案", extra={"stage": stage})
                reporter.emit(progress, message)

            stage = "manifest"
            acc = self._finalize_manifest(acc)
            reporter.emit(80, "Finalizing package manifest")

            stage = "structure"
            structure = StructureWriter(snapshot, acc)
            acc = merge(acc, structure.build())
            directories = tuple(structure.directories)
            tree = structure.tree()
            reporter.emit(90, "Generating project structure")

            archive = None
            if pack:
                stage = "archive"
                reporter.emit(95, "Packaging archive")
                archive = ArchiveBuilder(reporter).pack(acc.files)
        except Exception as e:
            logger.error(f"產生失敗 [{stage}]: {e}", extra={"stage": stage})
            raise GenerationError(stage=stage) from e

        result = GenerationResult(
            archive=archive,
            files=acc.files,
            directories=directories,
            dependencies=acc.dependencies,
            dev_dependencies=acc.dev_dependencies,
            scripts=acc.scripts,
            stats=project_stats(acc.files, list(directories)),
            tree=tree,
            validation=validation,
            warnings=acc.warnings,
            events=tuple(reporter.events),
        )
        logger.info(f"產生完成: {len(result.files)} 個檔案, {len(directories)} 個目錄")
        return result

    @staticmethod
    def _finalize_manifest(acc: MergedOutput) -> MergedOutput:
        """用所有模組宣告的依賴與 scripts 重寫 package.json"""
        record = acc.get(MANIFEST_PATH)
        if record is None:
            raise GenerationError(f"Missing {MANIFEST_PATH}", stage="manifest")
        content = render_manifest(acc.dependencies, acc.dev_dependencies, acc.script_map)
        return replace_file(acc, dataclasses.replace(record, content=content))


def generate(snapshot: ConfigurationSnapshot,
             on_progress: ProgressCallback | None = None) -> Archive:
    """產生並打包，只回傳封存檔"""
    return FrameworkGenerator(snapshot).generate(on_progress).archive


# ── 預覽 ──

def key_files(files) -> list[str]:
    picks = [
        next((f for f in files if "playwright.config" in f.path), None),
        next((f for f in files if f.category is FileCategory.TEST), None),
        next((f for f in files if "BasePage" in f.path), None),
        next((f for f in files if f.category is FileCategory.FIXTURE and "auth" in f.path), None),
        next((f for f in files if f.path == "Dockerfile"), None),
    ]
    return [f.path for f in picks if f is not None]


def important_features(snapshot: ConfigurationSnapshot) -> list[str]:
    features = [f"{snapshot.language.value.capitalize()} support"]
    if len(snapshot.browsers) > 1:
        features.append(f"Cross-browser testing ({len(snapshot.browsers)} browsers)")
    if snapshot.capabilities.ui_testing:
        features.append("UI Testing capabilities")
    if snapshot.capabilities.api_testing:
        features.append("API Testing capabilities")
    environments = snapshot.environments.active()
    if len(environments) > 1:
        features.append(f"Multi-environment support ({len(environments)} environments)")
    integrations = snapshot.integrations.enabled_names()
    if integrations:
        features.append(f"{len(integrations)} integrations enabled")
    if any(e.enabled for e in snapshot.fixtures.entries()):
        features.append("Advanced fixture patterns")
    if snapshot.docker.enabled:
        features.append("Docker containerization")
    return features


def preview_recommendations(snapshot: ConfigurationSnapshot, limit: int = 3) -> list[str]:
    recs = []
    if not snapshot.language.is_typed:
        recs.append("Consider upgrading to TypeScript for better type safety")
    if len(snapshot.browsers) == 1:
        recs.append("Add more browsers for comprehensive cross-browser testing")
    if not snapshot.capabilities.api_testing:
        recs.append("Enable API testing for full-stack test coverage")
    if not snapshot.integrations.enabled_names():
        recs.append("Consider adding CI/CD integration for automated testing")
    if not snapshot.docker.enabled:
        recs.append("Docker support can improve test consistency across environments")
    return recs[:limit]


def preview(snapshot: ConfigurationSnapshot) -> dict:
    """
    跑完整管線但不打包。

    Returns:
        {"structure": {...}, "highlights": {...}, "stats": {...}, "validation": {...}}
    """
    result = FrameworkGenerator(snapshot).generate(pack=False)
    return {
        "structure": {
            "files": [
                {"path": f.path, "category": f.category.value, "size": f.size,
                 "description": f.description}
                for f in result.files
            ],
            "directories": list(result.directories),
            "tree": result.tree,
        },
        "highlights": {
            "key_files": key_files(result.files),
            "important_features": important_features(snapshot),
            "recommendations": preview_recommendations(snapshot),
        },
        "stats": {
            **result.stats.to_dict(),
            "dependencies": len(result.dependencies) + len(result.dev_dependencies),
            "scripts": len(result.scripts),
        },
        "validation": result.validation.to_dict(),
        "warnings": list(result.warnings),
    }
