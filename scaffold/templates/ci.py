"""
CI 範本：GitHub Actions / GitLab CI / Jenkins / Azure Pipelines

每個 provider 一個 render 函式，輸入同一份 PipelineContext：
- workflow 的瀏覽器是主要 build matrix
- environments 超過一個時多一個環境 matrix stage
- allure 開啟時多一個報告後處理 stage
"""

from __future__ import annotations

from dataclasses import dataclass

from config.config import Config
from scaffold import catalogs
from scaffold.schema import ExecutionMode, GlobalCISettings, Workflow


@dataclass(frozen=True)
class PipelineContext:
    workflow: Workflow
    settings: GlobalCISettings
    environments: tuple[str, ...] = ()
    allure: bool = False
    publish_to_pages: bool = False
    junit: bool = False

    @property
    def browsers(self) -> list[str]:
        return [b.value for b in self.workflow.matrix.browsers]

    @property
    def multi_env(self) -> bool:
        return len(self.environments) > 1

    @property
    def node_version(self) -> str:
        versions = self.workflow.matrix.node_versions
        return versions[0].replace(".x", "") if versions else "18"

    @property
    def timeout(self) -> int:
        return self.workflow.execution.timeout or self.settings.default_timeout

    @property
    def shards(self) -> int:
        execution = self.workflow.execution
        return max(execution.shards, 1) if execution.mode is ExecutionMode.SHARDED else 1


def _env_prefix(name: str) -> str:
    return "".join(c if c.isalnum() else "_" for c in name.upper())


def _title(name: str) -> str:
    return name[:1].upper() + name[1:]


def _flow(items) -> str:
    return "[ " + ", ".join(f"'{i}'" for i in items) + " ]"


# ── GitHub Actions ──

def github_actions(ctx: PipelineContext) -> str:
    wf = ctx.workflow
    lines = [f"name: {wf.name}"]
    if wf.description:
        lines.append(f"# {wf.description}")
    lines.append("")
    lines.extend(_github_triggers(wf))
    lines.append("")

    # 全域權限等級當底，workflow 自己的設定覆蓋
    permissions = {**catalogs.PERMISSION_PRESETS[ctx.settings.permission_level.value],
                   **wf.security.permissions_map}
    if permissions:
        lines.append("permissions:")
        lines.extend(f"  {key}: {value}" for key, value in permissions.items())
        lines.append("")

    if ctx.settings.concurrency_group:
        lines.append("concurrency:")
        lines.append(f"  group: {ctx.settings.concurrency_group}")
        lines.append(f"  cancel-in-progress: {str(ctx.settings.cancel_in_progress).lower()}")
        lines.append("")

    if ctx.settings.debug_logging:
        lines.append("env:")
        lines.append("  ACTIONS_STEP_DEBUG: true")
        lines.append("  DEBUG: pw:api")
        lines.append("")

    lines.append("jobs:")
    lines.extend(_github_test_job(ctx))
    if ctx.multi_env:
        lines.extend(_github_env_job(ctx))
    if wf.security.secret_scanning or wf.security.dependency_check or wf.security.code_analysis:
        lines.extend(_github_security_job(wf))
    if ctx.allure:
        lines.extend(_github_allure_job(ctx))
    lines.extend(_github_notify_job(wf))
    return "\n".join(lines).rstrip("\n") + "\n"


def _github_triggers(wf: Workflow) -> list[str]:
    t = wf.triggers
    lines = ["on:"]
    if t.push.enabled:
        lines += ["  push:", f"    branches: {_flow(t.push.branches)}"]
    if t.pull_request.enabled:
        lines += ["  pull_request:", f"    branches: {_flow(t.pull_request.branches)}"]
    if t.schedule.enabled:
        lines += ["  schedule:", f"    - cron: '{t.schedule.cron}'"]
    if t.manual.enabled:
        lines.append("  workflow_dispatch:")
        if t.manual.inputs:
            lines.append("    inputs:")
            for name in t.manual.inputs:
                lines += [f"      {name}:",
                          f"        description: '{name}'",
                          "        required: false",
                          "        type: string"]
    if t.release.enabled:
        lines += ["  release:", f"    types: {_flow(t.release.types)}"]
    return lines


def _github_test_job(ctx: PipelineContext) -> list[str]:
    wf = ctx.workflow
    execution = wf.execution
    lines = [
        "  test:",
        "    name: Test (${{ matrix.browser }}, node ${{ matrix.node }}, ${{ matrix.os }})",
        f"    timeout-minutes: {ctx.timeout}",
        "    runs-on: ${{ matrix.os }}",
    ]
    if execution.continue_on_error:
        lines.append("    continue-on-error: true")
    lines.append("    strategy:")
    lines.append(f"      fail-fast: {str(execution.fail_fast).lower()}")
    if execution.mode is ExecutionMode.PARALLEL:
        lines.append(f"      max-parallel: {execution.parallelism}")
    elif execution.mode is ExecutionMode.SEQUENTIAL:
        lines.append("      max-parallel: 1")
    lines.append("      matrix:")
    lines.append(f"        browser: {_flow(ctx.browsers)}")
    lines.append(f"        node: {_flow(wf.matrix.node_versions)}")
    lines.append(f"        os: {_flow(wf.matrix.operating_systems)}")
    if ctx.shards > 1:
        lines.append(f"        shard: [ {', '.join(str(i) for i in range(1, ctx.shards + 1))} ]")

    command = "npx playwright test --project=${{ matrix.browser }}"
    if ctx.shards > 1:
        command += f" --shard=${{{{ matrix.shard }}}}/{ctx.shards}"

    lines += [
        "    steps:",
        "      - uses: actions/checkout@v4",
        "      - uses: actions/setup-node@v4",
        "        with:",
        "          node-version: ${{ matrix.node }}",
        "          cache: npm",
        "      - name: Install dependencies",
        "        run: npm ci",
        "      - name: Install Playwright Browsers",
        "        run: npx playwright install --with-deps ${{ matrix.browser }}",
    ]
    if wf.retry.enabled and wf.retry.max_retries > 0:
        lines += [
            "      - name: Run Playwright tests",
            "        uses: nick-fields/retry@v3",
            "        with:",
            f"          max_attempts: {wf.retry.max_retries + 1}",
            f"          retry_wait_seconds: {wf.retry.delay}",
            f"          timeout_minutes: {ctx.timeout}",
            f"          command: {command}",
        ]
    else:
        lines += ["      - name: Run Playwright tests", f"        run: {command}"]
    lines += [
        "        env:",
        "          BASE_URL: ${{ secrets.BASE_URL }}",
        "          API_BASE_URL: ${{ secrets.API_BASE_URL }}",
        "          TEST_EMAIL: ${{ secrets.TEST_EMAIL }}",
        "          TEST_PASSWORD: ${{ secrets.TEST_PASSWORD }}",
    ]

    report_paths = []
    if wf.reporting.html:
        report_paths.append("playwright-report/")
    if wf.artifacts.screenshots or wf.artifacts.videos or wf.artifacts.traces:
        report_paths.append("test-results/")
    if ctx.allure:
        report_paths.append("allure-results/")
    if report_paths:
        lines += [
            "      - uses: actions/upload-artifact@v4",
            "        if: always()",
            "        with:",
            "          name: results-${{ matrix.browser }}-${{ matrix.os }}-${{ matrix.node }}",
            "          path: |",
        ]
        lines += [f"            {p}" for p in report_paths]
        lines.append(f"          retention-days: {wf.artifacts.retention_days}")
    if wf.reporting.junit or ctx.junit:
        lines += [
            "      - name: Publish JUnit results",
            "        if: always()",
            "        uses: mikepenz/action-junit-report@v4",
            "        with:",
            "          report_paths: test-results/junit.xml",
        ]
    if wf.reporting.coverage:
        lines += [
            "      - name: Upload coverage",
            "        if: always()",
            "        uses: codecov/codecov-action@v4",
        ]
    lines.append("")
    return lines


def _github_env_job(ctx: PipelineContext) -> list[str]:
    lines = [
        "  test-environments:",
        "    needs: [test]",
        f"    timeout-minutes: {ctx.timeout}",
        "    runs-on: ubuntu-latest",
        "    strategy:",
        "      matrix:",
        f"        environment: {_flow(ctx.environments)}",
        "    environment: ${{ matrix.environment }}",
        "    steps:",
        "      - uses: actions/checkout@v4",
        "      - uses: actions/setup-node@v4",
        "        with:",
        f"          node-version: '{ctx.node_version}'",
        "          cache: npm",
        "      - run: npm ci",
        "      - run: npx playwright install --with-deps",
        "      - name: Run tests against ${{ matrix.environment }}",
        "        run: npx playwright test",
        "        env:",
        "          BASE_URL: ${{ secrets.BASE_URL }}",
        "          API_BASE_URL: ${{ secrets.API_BASE_URL }}",
        "",
    ]
    return lines


def _github_security_job(wf: Workflow) -> list[str]:
    lines = [
        "  security:",
        "    runs-on: ubuntu-latest",
        "    steps:",
        "      - uses: actions/checkout@v4",
    ]
    if wf.security.secret_scanning:
        lines += ["      - name: Secret scanning", "        uses: trufflesecurity/trufflehog@main",
                  "        with:", "          extra_args: --only-verified"]
    if wf.security.dependency_check:
        lines += ["      - name: Dependency audit", "        run: npm audit --audit-level=high"]
    if wf.security.code_analysis:
        lines += ["      - uses: github/codeql-action/init@v3", "        with:",
                  "          languages: javascript",
                  "      - uses: github/codeql-action/analyze@v3"]
    lines.append("")
    return lines


def _github_allure_job(ctx: PipelineContext) -> list[str]:
    lines = [
        "  generate-report:",
        "    if: always()",
        "    needs: [test]",
        "    runs-on: ubuntu-latest",
        "    steps:",
        "      - uses: actions/checkout@v4",
        "      - name: Download all artifacts",
        "        uses: actions/download-artifact@v4",
        "        with:",
        "          path: artifacts",
        "          merge-multiple: true",
        "      - name: Generate Allure Report",
        "        uses: simple-elf/allure-report-action@v1.7",
        "        with:",
        "          allure_results: artifacts/allure-results",
        "          allure_report: allure-report",
    ]
    if ctx.publish_to_pages:
        lines += [
            "      - name: Deploy to GitHub Pages",
            "        uses: peaceiris/actions-gh-pages@v3",
            "        with:",
            "          github_token: ${{ secrets.GITHUB_TOKEN }}",
            "          publish_dir: allure-report",
        ]
    lines.append("")
    return lines


def _github_condition(on: str) -> str:
    return {"always": "always()", "success": "success()"}.get(on, "failure()")


def _github_notify_job(wf: Workflow) -> list[str]:
    n = wf.notifications
    channels = [c for c in ("slack", "teams", "email") if getattr(n, c).enabled]
    if not channels:
        return []
    lines = [
        "  notify:",
        "    needs: [test]",
        "    if: always()",
        "    runs-on: ubuntu-latest",
        "    steps:",
    ]
    if n.slack.enabled:
        lines += [
            "      - name: Notify Slack",
            f"        if: ${{{{ {_github_condition(n.slack.on)} }}}}",
            "        uses: slackapi/slack-github-action@v1.25.0",
            "        with:",
            f"          channel-id: '{n.slack.target or 'test-results'}'",
            f"          slack-message: '{wf.name}: ${{{{ needs.test.result }}}}'",
            "        env:",
            "          SLACK_BOT_TOKEN: ${{ secrets.SLACK_BOT_TOKEN }}",
        ]
    if n.teams.enabled:
        lines += [
            "      - name: Notify Microsoft Teams",
            f"        if: ${{{{ {_github_condition(n.teams.on)} }}}}",
            "        uses: jdcargile/ms-teams-notification@v1.4",
            "        with:",
            "          github-token: ${{ github.token }}",
            f"          ms-teams-webhook-uri: ${{{{ secrets.{n.teams.target or 'MS_TEAMS_WEBHOOK_URI'} }}}}",
            f"          notification-summary: '{wf.name}: ${{{{ needs.test.result }}}}'",
        ]
    if n.email.enabled:
        recipients = n.email.target or "${{ secrets.NOTIFY_EMAIL }}"
        lines += [
            "      - name: Send email",
            f"        if: ${{{{ {_github_condition(n.email.on)} }}}}",
            "        uses: dawidd6/action-send-mail@v3",
            "        with:",
            "          server_address: ${{ secrets.SMTP_SERVER }}",
            "          username: ${{ secrets.SMTP_USERNAME }}",
            "          password: ${{ secrets.SMTP_PASSWORD }}",
            f"          subject: '{wf.name}: ${{{{ needs.test.result }}}}'",
            f"          to: {recipients}",
            "          from: CI",
        ]
    lines.append("")
    return lines


# ── GitLab CI ──

def gitlab_ci(ctx: PipelineContext) -> str:
    wf = ctx.workflow
    t = wf.triggers
    stages = ["test"]
    if ctx.multi_env:
        stages.append("environments")
    if ctx.allure:
        stages.append("report")

    lines = [f"# {wf.name}", f"image: {Config.playwright_image()}", "", "stages:"]
    lines += [f"  - {s}" for s in stages]
    lines += ["", "workflow:", "  rules:"]
    if t.push.enabled:
        for branch in t.push.branches:
            lines.append(f"    - if: $CI_COMMIT_BRANCH == \"{branch}\"")
    if t.pull_request.enabled:
        lines.append("    - if: $CI_PIPELINE_SOURCE == \"merge_request_event\"")
    if t.schedule.enabled:
        lines.append("    - if: $CI_PIPELINE_SOURCE == \"schedule\"")
    if t.manual.enabled:
        lines.append("    - if: $CI_PIPELINE_SOURCE == \"web\"")
    if t.release.enabled:
        lines.append("    - if: $CI_COMMIT_TAG")

    lines += [
        "",
        "variables:",
        "  npm_config_cache: \"$CI_PROJECT_DIR/.npm\"",
        "  PLAYWRIGHT_BROWSERS_PATH: \"$CI_PROJECT_DIR/.playwright\"",
    ]
    if ctx.settings.debug_logging:
        lines.append("  DEBUG: \"pw:api\"")
    lines += [
        "",
        "default:",
        f"  timeout: {ctx.timeout}m",
    ]
    if wf.retry.enabled:
        lines.append(f"  retry: {min(wf.retry.max_retries, 2)}")
    if ctx.settings.cancel_in_progress:
        lines.append("  interruptible: true")
    lines += [
        "",
        "cache:",
        "  key: ${CI_COMMIT_REF_SLUG}",
        "  paths:",
        "    - .npm/",
        "    - node_modules/",
        "",
        "before_script:",
        "  - npm ci",
        "  - npx playwright install --with-deps",
        "",
    ]
    for browser in ctx.browsers:
        lines += [
            f"test:{browser}:",
            "  stage: test",
            "  script:",
        ]
        if ctx.shards > 1:
            lines.append(
                f"    - npx playwright test --project={browser} "
                "--shard=$CI_NODE_INDEX/$CI_NODE_TOTAL"
            )
        else:
            lines.append(f"    - npx playwright test --project={browser}")
        if wf.execution.continue_on_error:
            lines.append("  allow_failure: true")
        lines += [
            "  artifacts:",
            "    when: always",
            "    paths:",
            "      - playwright-report/",
            "      - test-results/",
        ]
        if wf.reporting.junit or ctx.junit:
            lines += ["    reports:", "      junit: test-results/junit.xml"]
        lines.append(f"    expire_in: {wf.artifacts.retention_days} days")
        if ctx.shards > 1:
            lines.append(f"  parallel: {ctx.shards}")
        lines.append("")

    if ctx.multi_env:
        for env in ctx.environments:
            prefix = _env_prefix(env)
            lines += [
                f"test:{env}:",
                "  stage: environments",
                "  script:",
                "    - npx playwright test",
                "  variables:",
                f"    BASE_URL: ${prefix}_BASE_URL",
                f"    API_BASE_URL: ${prefix}_API_BASE_URL",
                "",
            ]

    if ctx.allure:
        lines += [
            "generate_report:",
            "  stage: report",
            "  when: always",
            "  needs:",
        ]
        lines += [f"    - test:{browser}" for browser in ctx.browsers]
        lines += [
            "  script:",
            "    - npm install -g allure-commandline",
            "    - allure generate allure-results --clean -o allure-report",
            "  artifacts:",
            "    paths:",
            "      - allure-report/",
            f"    expire_in: {wf.artifacts.retention_days} days",
            "",
        ]
    return "\n".join(lines).rstrip("\n") + "\n"


# ── Jenkins ──

def jenkinsfile(ctx: PipelineContext) -> str:
    wf = ctx.workflow
    t = wf.triggers
    lines = [
        f"// {wf.name}",
        "pipeline {",
        "    agent {",
        "        docker {",
        f"            image '{Config.playwright_image()}'",
        "            args '-u root'",
        "        }",
        "    }",
        "",
        "    options {",
        f"        timeout(time: {ctx.timeout}, unit: 'MINUTES')",
    ]
    if wf.retry.enabled:
        lines.append(f"        retry({wf.retry.max_retries})")
    if ctx.settings.cancel_in_progress:
        lines.append("        disableConcurrentBuilds(abortPrevious: true)")
    lines.append("    }")
    if t.schedule.enabled:
        lines += ["", "    triggers {", f"        cron('{t.schedule.cron}')", "    }"]
    lines += [
        "",
        "    environment {",
        "        BASE_URL = credentials('base-url')",
        "        API_BASE_URL = credentials('api-base-url')",
        "        TEST_EMAIL = credentials('test-email')",
        "        TEST_PASSWORD = credentials('test-password')",
        "    }",
        "",
        "    stages {",
        "        stage('Install Dependencies') {",
        "            steps {",
        "                sh 'npm ci'",
        "                sh 'npx playwright install --with-deps'",
        "            }",
        "        }",
        "",
        "        stage('Run Tests') {",
    ]
    if wf.execution.fail_fast:
        lines.append("            failFast true")
    lines.append("            parallel {")
    for browser in ctx.browsers:
        lines += [
            f"                stage('Test {_title(browser)}') {{",
            "                    steps {",
            f"                        sh 'npx playwright test --project={browser}'",
            "                    }",
            "                }",
        ]
    lines += ["            }", "        }"]

    if ctx.multi_env:
        lines += ["", "        stage('Environment Tests') {", "            parallel {"]
        for env in ctx.environments:
            lines += [
                f"                stage('Test {_title(env)}') {{",
                "                    environment {",
                f"                        BASE_URL = credentials('{env}-base-url')",
                f"                        API_BASE_URL = credentials('{env}-api-base-url')",
                "                    }",
                "                    steps {",
                "                        sh 'npx playwright test'",
                "                    }",
                "                }",
            ]
        lines += ["            }", "        }"]
    lines += ["    }", "", "    post {", "        always {"]
    if wf.reporting.junit or ctx.junit:
        lines.append("            junit 'test-results/junit.xml'")
    if wf.reporting.html:
        lines += [
            "            publishHTML([",
            "                allowMissing: true,",
            "                keepAll: true,",
            "                reportDir: 'playwright-report',",
            "                reportFiles: 'index.html',",
            "                reportName: 'Playwright Report'",
            "            ])",
        ]
    if ctx.allure:
        lines += [
            "            allure([",
            "                includeProperties: false,",
            "                reportBuildPolicy: 'ALWAYS',",
            "                results: [[path: 'allure-results']]",
            "            ])",
        ]
    lines.append("            archiveArtifacts artifacts: 'test-results/**/*', allowEmptyArchive: true")
    lines.append("        }")
    n = wf.notifications
    if n.slack.enabled or n.email.enabled:
        lines.append("        failure {")
        if n.slack.enabled:
            lines.append(
                f"            slackSend channel: '{n.slack.target or '#test-results'}', "
                f"color: 'danger', message: \"{wf.name} failed: ${{env.BUILD_URL}}\""
            )
        if n.email.enabled:
            recipients = n.email.target or "${env.CHANGE_AUTHOR_EMAIL}"
            lines += [
                "            emailext(",
                f"                subject: \"{wf.name} failed: ${{currentBuild.displayName}}\",",
                "                body: \"See ${env.BUILD_URL}\",",
                f"                to: \"{recipients}\"",
                "            )",
            ]
        lines.append("        }")
    lines += ["    }", "}"]
    return "\n".join(lines) + "\n"


# ── Azure Pipelines ──

def azure_pipelines(ctx: PipelineContext) -> str:
    wf = ctx.workflow
    t = wf.triggers
    lines = [f"# {wf.name}"]
    if t.push.enabled:
        lines += ["trigger:", "  branches:", "    include:"]
        lines += [f"    - {b}" for b in t.push.branches]
    else:
        lines.append("trigger: none")
    lines.append("")
    if t.pull_request.enabled:
        lines += ["pr:", "  branches:", "    include:"]
        lines += [f"    - {b}" for b in t.pull_request.branches]
    else:
        lines.append("pr: none")
    if t.schedule.enabled:
        lines += [
            "",
            "schedules:",
            f"- cron: '{t.schedule.cron}'",
            "  displayName: Scheduled run",
            "  always: true",
            "  branches:",
            "    include:",
        ]
        lines += [f"    - {b}" for b in (t.push.branches or ("main",))]
    os_image = wf.matrix.operating_systems[0] if wf.matrix.operating_systems else "ubuntu-latest"
    lines += [
        "",
        "pool:",
        f"  vmImage: '{os_image}'",
        "",
        "variables:",
        "  npm_config_cache: $(Pipeline.Workspace)/.npm",
    ]
    if ctx.settings.debug_logging:
        lines.append("  system.debug: true")
    lines += [
        "",
        "stages:",
        "- stage: Test",
        "  displayName: 'Run Playwright Tests'",
        "  jobs:",
    ]
    for browser in ctx.browsers:
        lines += [
            f"  - job: Test_{_title(browser)}",
            f"    displayName: 'Test on {_title(browser)}'",
            f"    timeoutInMinutes: {ctx.timeout}",
        ]
        if wf.execution.continue_on_error:
            lines.append("    continueOnError: true")
        lines += [
            "    steps:",
            "    - task: NodeTool@0",
            "      inputs:",
            f"        versionSpec: '{ctx.node_version}'",
            "      displayName: 'Install Node.js'",
            "    - script: |",
            "        npm ci",
            f"        npx playwright install --with-deps {browser}",
            "      displayName: 'Install dependencies'",
            f"    - script: npx playwright test --project={browser}",
            f"      displayName: 'Run {browser} tests'",
        ]
        if wf.retry.enabled:
            lines.append(f"      retryCountOnTaskFailure: {wf.retry.max_retries}")
        lines += [
            "      env:",
            "        BASE_URL: $(BASE_URL)",
            "        API_BASE_URL: $(API_BASE_URL)",
        ]
        if wf.reporting.junit or ctx.junit:
            lines += [
                "    - task: PublishTestResults@2",
                "      condition: always()",
                "      inputs:",
                "        testResultsFormat: 'JUnit'",
                "        testResultsFiles: 'test-results/junit.xml'",
                f"        testRunTitle: '{_title(browser)} Test Results'",
            ]
        lines += [
            "    - task: PublishPipelineArtifact@1",
            "      condition: always()",
            "      inputs:",
            "        targetPath: 'playwright-report'",
            f"        artifact: 'playwright-report-{browser}'",
        ]

    if ctx.multi_env:
        lines += [
            "",
            "- stage: EnvironmentTests",
            "  displayName: 'Environment-specific Tests'",
            "  dependsOn: Test",
            "  jobs:",
        ]
        for env in ctx.environments:
            prefix = _env_prefix(env)
            lines += [
                f"  - job: Test_{prefix}",
                f"    displayName: 'Test {_title(env)} Environment'",
                "    steps:",
                "    - script: |",
                "        npm ci",
                "        npx playwright install --with-deps",
                "      displayName: 'Install dependencies'",
                "    - script: npx playwright test",
                f"      displayName: 'Run {env} tests'",
                "      env:",
                f"        BASE_URL: $({prefix}_BASE_URL)",
                f"        API_BASE_URL: $({prefix}_API_BASE_URL)",
            ]

    if ctx.allure:
        lines += [
            "",
            "- stage: Report",
            "  displayName: 'Generate Reports'",
            "  dependsOn: Test",
            "  condition: always()",
            "  jobs:",
            "  - job: AllureReport",
            "    displayName: 'Generate Allure Report'",
            "    steps:",
            "    - script: |",
            "        npm install -g allure-commandline",
            "        allure generate allure-results --clean -o allure-report",
            "      displayName: 'Generate Allure Report'",
            "    - task: PublishPipelineArtifact@1",
            "      inputs:",
            "        targetPath: 'allure-report'",
            "        artifact: 'allure-report'",
        ]
    return "\n".join(lines) + "\n"


PROVIDER_RENDERERS = {
    "github_actions": github_actions,
    "gitlab_ci": gitlab_ci,
    "jenkins": jenkinsfile,
    "azure_devops": azure_pipelines,
}
