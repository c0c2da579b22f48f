"""
Docker Writer
只在容器化開啟時產出：
- Dockerfile / .dockerignore / docker-entrypoint.sh (可執行)
- docker-compose.yml 與它引用的 docker/.env.docker
- docker/ 底下的 dev / test 變體 (compose 開啟時)
"""

from scaffold.base_writer import BaseWriter
from scaffold.contribution import Contribution, FileCategory
from scaffold.templates import docker as templates

ENTRYPOINT_PATH = "docker-entrypoint.sh"


class DockerWriter(BaseWriter):
    """產生容器相關檔案"""

    module = "docker"

    def __init__(self, snapshot):
        super().__init__(snapshot)
        self.docker = snapshot.docker

    def build(self) -> Contribution:
        if not self.docker.enabled:
            return self._contribution([])

        browsers = [b.value for b in self.snapshot.browsers]
        api_service = self.snapshot.capabilities.api_testing
        files = [
            self._plain("Dockerfile", templates.dockerfile(self.docker, self.language),
                        FileCategory.DOCKER, f"Test image based on {self.docker.image}"),
            self._plain(".dockerignore", templates.dockerignore(), FileCategory.DOCKER),
            self._plain("docker-compose.yml", templates.compose(self.docker, api_service),
                        FileCategory.DOCKER, "Test stack"),
            self._plain(ENTRYPOINT_PATH, templates.entrypoint(browsers, wait_for_api=api_service),
                        FileCategory.DOCKER, "Container entrypoint", executable=True),
            self._plain("docker/.env.docker", templates.docker_env(browsers),
                        FileCategory.DOCKER, "Container environment"),
        ]
        scripts = [
            ("docker:build", "docker build -t playwright-tests ."),
            ("docker:test", "docker compose up --build --abort-on-container-exit"),
        ]

        if self.docker.features.compose:
            files += [
                self._plain("docker/docker-compose.dev.yml", templates.compose_dev(),
                            FileCategory.DOCKER, "Local debugging overrides"),
                self._plain("docker/docker-compose.test.yml", templates.compose_test(),
                            FileCategory.DOCKER, "CI overrides"),
            ]
        return self._contribution(files, scripts=scripts)
