"""
CI Writer

provider 來源是已啟用的 CI 整合；CI 開啟但沒有任何 provider 整合時預設 GitHub Actions。

- CI 開啟且有 workflow：每個 provider、每個 workflow 各一個檔案，檔名是 workflow 名稱的 slug
- 其他情況：每個 provider 一個主要檔案，用預設 workflow 加上快照的瀏覽器
"""

import dataclasses

from scaffold.base_writer import BaseWriter
from scaffold.contribution import Contribution, FileCategory
from scaffold.schema import Workflow, default_workflow
from scaffold.templates.ci import PROVIDER_RENDERERS, PipelineContext
from utils.logger import logger

DEFAULT_PROVIDER = "github_actions"

# provider -> workflow 檔路徑樣板
WORKFLOW_PATHS = {
    "github_actions": ".github/workflows/{slug}.yml",
    "gitlab_ci": ".gitlab/ci/{slug}.yml",
    "jenkins": "jenkins/{slug}.Jenkinsfile",
    "azure_devops": ".azure/pipelines/{slug}.yml",
}

# provider -> 單一主要檔案
PRIMARY_PATHS = {
    "github_actions": ".github/workflows/playwright.yml",
    "gitlab_ci": ".gitlab-ci.yml",
    "jenkins": "Jenkinsfile",
    "azure_devops": "azure-pipelines.yml",
}


class CIWriter(BaseWriter):
    """產生 CI pipeline 檔"""

    module = "ci"

    def __init__(self, snapshot):
        super().__init__(snapshot)
        self.ci = snapshot.ci
        self.integrations = snapshot.integrations

    def providers(self) -> list[str]:
        enabled = [name for name in PROVIDER_RENDERERS
                   if getattr(self.integrations, name).enabled]
        if not enabled and self.ci.enabled:
            enabled = [DEFAULT_PROVIDER]
        return enabled

    def build(self) -> Contribution:
        providers = self.providers()
        if not providers:
            return self._contribution([])

        files = []
        if self.ci.enabled and self.ci.workflows:
            for provider in providers:
                for workflow in self.ci.workflows:
                    path = WORKFLOW_PATHS[provider].format(slug=workflow.slug)
                    logger.debug(f"CI: {provider} workflow '{workflow.name}' -> {path}")
                    files.append(self._render(provider, workflow, path))
        else:
            workflow = self._primary_workflow()
            for provider in providers:
                files.append(self._render(provider, workflow, PRIMARY_PATHS[provider]))
        return self._contribution(files)

    def _primary_workflow(self) -> Workflow:
        base = default_workflow()
        matrix = dataclasses.replace(base.matrix, browsers=self.snapshot.browsers)
        return dataclasses.replace(base, matrix=matrix)

    def _context(self, workflow: Workflow) -> PipelineContext:
        environments = workflow.matrix.environments or tuple(
            env.name for env in self.snapshot.environments.active()
        )
        allure = self.integrations.allure
        allure_on = allure.enabled or workflow.reporting.allure
        return PipelineContext(
            workflow=workflow,
            settings=self.ci.settings,
            environments=environments,
            allure=allure_on,
            publish_to_pages=allure_on and allure.publish_to_pages,
            junit=self.integrations.junit.enabled or workflow.reporting.junit,
        )

    def _render(self, provider: str, workflow: Workflow, path: str):
        content = PROVIDER_RENDERERS[provider](self._context(workflow))
        return self._plain(path, content, FileCategory.CI,
                           f"{workflow.name} ({provider})")
