"""
快照編輯操作

CI workflow 與 fixture 列表的新增 / 修改 / 複製 / 刪除。
全部是純函式：輸入一份設定、回傳新的設定，原物件不變。
條目一律以 id 比對，列表位置只是顯示順序。

用法：
    ci = add_workflow(snapshot.ci, name="Nightly")
    ci = update_workflow_section(ci, "workflow-2", "execution", timeout=60)
    snapshot = dataclasses.replace(snapshot, ci=ci)
"""

from __future__ import annotations

import dataclasses

from core.exceptions import InvalidConfigError, WorkflowError
from scaffold.schema import (
    DEFAULT_WORKFLOW_DESCRIPTION, FIXTURE_CATALOGS, WORKFLOW_SECTIONS,
    CIConfig, FixturesConfig, Workflow, default_workflow,
)
from utils.logger import logger


# ── Workflows ──

def _index_of(ci: CIConfig, workflow_id: str) -> int:
    for i, workflow in enumerate(ci.workflows):
        if workflow.id == workflow_id:
            return i
    raise WorkflowError(f"Unknown workflow: {workflow_id}", workflow_id=workflow_id)


def _new_id(ci: CIConfig) -> str:
    """workflow-N，N 從目前數量 + 1 往上找第一個沒被用過的"""
    taken = {w.id for w in ci.workflows}
    n = len(ci.workflows) + 1
    while f"workflow-{n}" in taken:
        n += 1
    return f"workflow-{n}"


def _replace_at(ci: CIConfig, index: int, workflow: Workflow) -> CIConfig:
    workflows = ci.workflows[:index] + (workflow,) + ci.workflows[index + 1:]
    return dataclasses.replace(ci, workflows=workflows)


def get_workflow(ci: CIConfig, workflow_id: str) -> Workflow:
    return ci.workflows[_index_of(ci, workflow_id)]


def add_workflow(ci: CIConfig, **overrides) -> CIConfig:
    """以預設範本建立新 workflow，自動選取"""
    overrides.setdefault("id", _new_id(ci))
    overrides.setdefault("name", f"Workflow {len(ci.workflows) + 1}")
    if any(w.id == overrides["id"] for w in ci.workflows):
        raise WorkflowError(f"Workflow id already exists: {overrides['id']}",
                            workflow_id=overrides["id"])
    workflow = default_workflow(**overrides)
    logger.debug(f"新增 workflow: {workflow.id} ({workflow.name})")
    return dataclasses.replace(
        ci,
        workflows=ci.workflows + (workflow,),
        selected_index=len(ci.workflows),
    )


def update_workflow(ci: CIConfig, workflow_id: str, **fields) -> CIConfig:
    """整個欄位替換 (name / description / 任一區塊物件)"""
    index = _index_of(ci, workflow_id)
    if "id" in fields and fields["id"] != workflow_id:
        raise WorkflowError("Workflow id cannot be changed", workflow_id=workflow_id)
    try:
        workflow = dataclasses.replace(ci.workflows[index], **fields)
    except TypeError as e:
        raise WorkflowError(f"Invalid workflow field: {e}", workflow_id=workflow_id) from e
    return _replace_at(ci, index, workflow)


def update_workflow_section(ci: CIConfig, workflow_id: str, section: str, **changes) -> CIConfig:
    """局部更新某個區塊，例如 update_workflow_section(ci, id, "retry", max_retries=3)"""
    if section not in WORKFLOW_SECTIONS:
        raise WorkflowError(f"Unknown workflow section: {section}", workflow_id=workflow_id)
    index = _index_of(ci, workflow_id)
    workflow = ci.workflows[index]
    try:
        updated = dataclasses.replace(getattr(workflow, section), **changes)
    except TypeError as e:
        raise WorkflowError(f"Invalid {section} field: {e}", workflow_id=workflow_id) from e
    return _replace_at(ci, index, dataclasses.replace(workflow, **{section: updated}))


def duplicate_workflow(ci: CIConfig, workflow_id: str) -> CIConfig:
    """複製一份：新 id、名稱加 (Copy)，預設說明不沿用；複本自動選取"""
    source = get_workflow(ci, workflow_id)
    description = "" if source.description == DEFAULT_WORKFLOW_DESCRIPTION else source.description
    copy = dataclasses.replace(
        source,
        id=_new_id(ci),
        name=f"{source.name} (Copy)",
        description=description,
    )
    return dataclasses.replace(
        ci,
        workflows=ci.workflows + (copy,),
        selected_index=len(ci.workflows),
    )


def remove_workflow(ci: CIConfig, workflow_id: str) -> CIConfig:
    """
    刪除 workflow；選取位置超出範圍時夾到最後一個。

    Raises:
        WorkflowError: 只剩一個 workflow 或 id 不存在
    """
    index = _index_of(ci, workflow_id)
    if len(ci.workflows) == 1:
        raise WorkflowError("Cannot remove the last workflow", workflow_id=workflow_id)
    workflows = ci.workflows[:index] + ci.workflows[index + 1:]
    return dataclasses.replace(
        ci,
        workflows=workflows,
        selected_index=min(ci.selected_index, len(workflows) - 1),
    )


def select_workflow(ci: CIConfig, workflow_id: str) -> CIConfig:
    return dataclasses.replace(ci, selected_index=_index_of(ci, workflow_id))


def update_global_settings(ci: CIConfig, **changes) -> CIConfig:
    try:
        settings = dataclasses.replace(ci.settings, **changes)
    except TypeError as e:
        raise InvalidConfigError("ci.settings", changes, str(e)) from e
    return dataclasses.replace(ci, settings=settings)


# ── Fixtures ──

def _locate_fixture(fixtures: FixturesConfig, fixture_id: str) -> tuple[str, int]:
    for catalog in FIXTURE_CATALOGS:
        for i, entry in enumerate(getattr(fixtures, catalog)):
            if entry.id == fixture_id:
                return catalog, i
    raise InvalidConfigError("fixtures.id", fixture_id, "unknown fixture")


def update_fixture(fixtures: FixturesConfig, fixture_id: str, **changes) -> FixturesConfig:
    """依 id 找到條目 (不論在哪個目錄) 並更新欄位；id 本身不可改"""
    if "id" in changes and changes["id"] != fixture_id:
        raise InvalidConfigError("fixtures.id", changes["id"], "fixture id cannot be changed")
    catalog, index = _locate_fixture(fixtures, fixture_id)
    entries = getattr(fixtures, catalog)
    try:
        updated = dataclasses.replace(entries[index], **changes)
    except TypeError as e:
        raise InvalidConfigError(f"fixtures.{fixture_id}", changes, str(e)) from e
    return dataclasses.replace(
        fixtures,
        **{catalog: entries[:index] + (updated,) + entries[index + 1:]},
    )


def toggle_fixture(fixtures: FixturesConfig, fixture_id: str) -> FixturesConfig:
    entry = fixtures.find(fixture_id)
    if entry is None:
        raise InvalidConfigError("fixtures.id", fixture_id, "unknown fixture")
    return update_fixture(fixtures, fixture_id, enabled=not entry.enabled)
