"""
容器範本：Dockerfile / .dockerignore / compose / entrypoint

Dockerfile 依選項以程式組合段落：
- multi-stage: builder + runner 兩段
- custom:      使用者的映像，額外安裝 Playwright
- basic:       單段
playwright 官方映像以外都要補 `npx playwright install --with-deps`。
"""

from scaffold.schema import BaseImage, DockerConfig, Language
from scaffold.templates import join_blocks

ENTRYPOINT_COMMANDS = (
    ("test", "Run all tests", "exec npx playwright test"),
    ("test:ui", "Run tests in UI mode", "exec npx playwright test --ui --ui-host=0.0.0.0"),
    ("test:debug", "Run tests in debug mode", "exec npx playwright test --debug"),
    ("test:headed", "Run tests in headed mode", "HEADLESS=false exec npx playwright test --headed"),
    ("report", "Start report server", "exec npx playwright show-report --host=0.0.0.0"),
    ("install", "Install Playwright browsers", "exec npx playwright install --with-deps"),
    ("shell", "Start interactive shell", "exec /bin/bash"),
)


def _install_section(docker: DockerConfig) -> str:
    if not docker.installs_playwright:
        return ""
    return "# Install Playwright browsers\nRUN npx playwright install --with-deps"


def _healthcheck_section(docker: DockerConfig) -> str:
    if not docker.features.health_checks:
        return ""
    return ("HEALTHCHECK --interval=30s --timeout=10s --start-period=5s --retries=3 \\\n"
            "  CMD node -e \"process.exit(0)\" || exit 1")


def _runtime_tail() -> str:
    return join_blocks(
        "ENV NODE_ENV=test",
        "RUN mkdir -p test-results playwright-report screenshots videos",
        "COPY docker-entrypoint.sh /docker-entrypoint.sh\nRUN chmod +x /docker-entrypoint.sh",
        "# HTML report server\nEXPOSE 9323",
        'ENTRYPOINT ["/docker-entrypoint.sh"]\nCMD ["test"]',
    )


def dockerfile(docker: DockerConfig, language: Language) -> str:
    """三種範本擇一；image 一律逐字寫入 FROM"""
    ext = language.extension
    tsconfig = "COPY tsconfig.json ./" if language.is_typed else ""

    if docker.features.multi_stage:
        builder = join_blocks(
            "# Build stage\nFROM node:18-alpine AS builder",
            "WORKDIR /app",
            "COPY package*.json ./\nRUN npm ci",
            "COPY . .",
        )
        runner = join_blocks(
            f"# Runtime stage\nFROM {docker.image} AS runner",
            "WORKDIR /app",
            "\n".join(filter(None, [
                "COPY --from=builder /app/node_modules ./node_modules",
                "COPY --from=builder /app/package*.json ./",
                f"COPY --from=builder /app/playwright.config.{ext} ./",
                "COPY --from=builder /app/tsconfig.json ./" if language.is_typed else "",
                "COPY --from=builder /app/tests ./tests",
                "COPY --from=builder /app/test-data ./test-data",
            ])),
            _install_section(docker),
            _healthcheck_section(docker),
            _runtime_tail(),
        )
        return builder + "\n" + runner

    if docker.base_image is BaseImage.CUSTOM:
        return join_blocks(
            f"FROM {docker.image}",
            "WORKDIR /app",
            "COPY package*.json ./\nRUN npm ci",
            "# Install Playwright test runner\nRUN npm install @playwright/test",
            _install_section(docker),
            "COPY . .",
            _healthcheck_section(docker),
            _runtime_tail(),
        )

    return join_blocks(
        f"FROM {docker.image}",
        "WORKDIR /app",
        "COPY package*.json ./\nRUN npm ci",
        _install_section(docker),
        "\n".join(filter(None, [
            "COPY tests/ tests/",
            "COPY test-data/ test-data/",
            f"COPY playwright.config.{ext} ./",
            tsconfig,
            "COPY .env.example .env",
        ])),
        _healthcheck_section(docker),
        _runtime_tail(),
    )


def dockerignore() -> str:
    return """# Dependencies
node_modules/
npm-debug.log*

# Test output
test-results/
playwright-report/
screenshots/
videos/
allure-results/
allure-report/

# Environment files
.env
.env.local

# Editor / OS
.vscode/
.idea/
.DS_Store

# VCS / CI
.git/
.github/
.gitlab/
.azure/
jenkins/
"""


def compose(docker: DockerConfig, api_service: bool) -> str:
    """主 compose 檔，含資源限制與可選 healthcheck"""
    lines = [
        "services:",
        "  playwright-tests:",
        "    build:",
        "      context: .",
        "      dockerfile: Dockerfile",
        "    container_name: playwright-framework",
        "    env_file:",
        "      - docker/.env.docker",
        "    environment:",
        "      - BASE_URL=${BASE_URL:-http://app:3000}",
        "      - API_BASE_URL=${API_BASE_URL:-http://api:3001}",
        "      - HEADLESS=${HEADLESS:-true}",
        "      - CI=${CI:-false}",
        "    volumes:",
        "      - ./test-results:/app/test-results",
        "      - ./playwright-report:/app/playwright-report",
        "      - ./screenshots:/app/screenshots",
        "      - ./videos:/app/videos",
        "    deploy:",
        "      resources:",
        "        limits:",
        f"          memory: {docker.resources.memory_limit}",
        f"          cpus: '{docker.resources.cpu_limit}'",
        "    shm_size: 1gb",
    ]
    if docker.features.health_checks:
        lines += [
            "    healthcheck:",
            "      test: [\"CMD\", \"node\", \"-e\", \"process.exit(0)\"]",
            "      interval: 30s",
            "      timeout: 10s",
            "      retries: 3",
        ]
    lines += ["    depends_on:", "      - app"]
    if api_service:
        lines.append("      - api")
    lines += [
        "    networks:",
        "      - test-network",
        "    command: [\"test\"]",
        "",
        "  app:",
        "    image: nginx:alpine",
        "    ports:",
        "      - \"3000:80\"",
        "    networks:",
        "      - test-network",
    ]
    if api_service:
        lines += [
            "",
            "  api:",
            "    image: node:18-alpine",
            "    working_dir: /app",
            "    command: [\"npm\", \"start\"]",
            "    ports:",
            "      - \"3001:3001\"",
            "    networks:",
            "      - test-network",
        ]
    lines += [
        "",
        "  report-server:",
        "    image: nginx:alpine",
        "    ports:",
        "      - \"9323:80\"",
        "    volumes:",
        "      - ./playwright-report:/usr/share/nginx/html:ro",
        "    networks:",
        "      - test-network",
        "",
        "networks:",
        "  test-network:",
        "    driver: bridge",
    ]
    return "\n".join(lines) + "\n"


def compose_dev() -> str:
    return """services:
  playwright-tests:
    build:
      context: ..
      dockerfile: Dockerfile
    environment:
      - HEADLESS=false
      - DEBUG=pw:api
    volumes:
      - ../tests:/app/tests
      - ../test-data:/app/test-data
    command: ["test:debug"]
"""


def compose_test() -> str:
    return """services:
  playwright-tests:
    build:
      context: ..
      dockerfile: Dockerfile
    environment:
      - CI=true
      - HEADLESS=true
    volumes:
      - ../test-results:/app/test-results
      - ../playwright-report:/app/playwright-report
    command: ["test"]
"""


def docker_env(browsers: list[str]) -> str:
    return "\n".join([
        "# Container environment",
        "NODE_ENV=test",
        "CI=true",
        "HEADLESS=true",
        "BASE_URL=http://app:3000",
        "API_BASE_URL=http://api:3001",
        f"BROWSERS={','.join(browsers)}",
    ]) + "\n"


def entrypoint(browsers: list[str], wait_for_api: bool) -> str:
    """每個瀏覽器一個 test:<browser> 子命令；其他參數原樣 exec"""
    per_browser = [
        (f"test:{b}", f"Run tests on {b}", f"exec npx playwright test --project={b}")
        for b in browsers
    ]
    ordered = list(ENTRYPOINT_COMMANDS[:4]) + per_browser + list(ENTRYPOINT_COMMANDS[4:])

    lines = [
        "#!/bin/bash",
        "set -e",
        "",
        "log() {",
        "    echo \"[$(date +'%Y-%m-%d %H:%M:%S')] $1\"",
        "}",
        "",
        "BASE_URL=${BASE_URL:-http://app:3000}",
        "API_BASE_URL=${API_BASE_URL:-http://api:3001}",
        "log \"BASE_URL: $BASE_URL\"",
    ]
    if wait_for_api:
        lines += [
            "",
            "for i in $(seq 1 30); do",
            "    if curl -fs \"$API_BASE_URL/health\" > /dev/null; then",
            "        break",
            "    fi",
            "    log \"Waiting for API... ($i/30)\"",
            "    sleep 2",
            "done",
        ]
    lines += ["", "case \"$1\" in"]
    for name, description, command in ordered:
        lines += [
            f"    {name})",
            f"        log \"{description}...\"",
            f"        {command}",
            "        ;;",
        ]
    lines += [
        "    *)",
        "        log \"Available commands:\"",
    ]
    for name, description, _ in ordered:
        lines.append(f"        log \"  {name:<16}{description}\"")
    lines += [
        "        log \"Running custom command: $*\"",
        "        exec \"$@\"",
        "        ;;",
        "esac",
    ]
    return "\n".join(lines) + "\n"
