"""Docker artifact generation for the scaffolded project.

Renders the Jinja2 templates under ``templates/docker/`` into per-directory
Dockerfiles and ignore files, the nginx config for statically built clients,
the root ``docker-compose.yml`` and the ``DOCKER.md`` quick reference.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from create_fullstack.config import ImageConfig
from create_fullstack.models import (
    BACKEND_PORT,
    FRONTEND_PORT,
    DatabaseKind,
    ProjectConfig,
    database_profile,
    frontend_profile,
)

from .templates import TemplateRenderer


class DockerGenerator:
    """Generates Dockerfiles, compose file and docs for a project."""

    # Template name -> output path relative to the server directory
    _SERVER_FILES: dict[str, str] = {
        "docker/server/Dockerfile.j2": "Dockerfile",
        "docker/server/dockerignore.j2": ".dockerignore",
    }

    _CLIENT_FILES: dict[str, str] = {
        "docker/client/Dockerfile.j2": "Dockerfile",
        "docker/client/dockerignore.j2": ".dockerignore",
    }

    _ROOT_FILES: dict[str, str] = {
        "docker/docker-compose.yml.j2": "docker-compose.yml",
        "docker/DOCKER.md.j2": "DOCKER.md",
    }

    def __init__(self, renderer: TemplateRenderer, images: ImageConfig | None = None) -> None:
        self.renderer = renderer
        self.images = images or ImageConfig()

    def build_context(self, config: ProjectConfig) -> dict[str, Any]:
        """Template context shared by every Docker template."""
        return {
            "project_name": config.project_name,
            "language": config.backend_language.value,
            "frontend": frontend_profile(config.frontend, config.react_setup_tool),
            "database": database_profile(config.database),
            "is_postgres": config.database is DatabaseKind.POSTGRESQL,
            "is_mongo": config.database is DatabaseKind.MONGODB,
            "images": self.images,
            "backend_port": BACKEND_PORT,
            "frontend_port": FRONTEND_PORT,
        }

    async def generate_all(self, root: Path, config: ProjectConfig) -> dict[str, list[Path]]:
        """Generate every Docker artifact under *root*.

        Returns:
            Mapping of ``"server"``, ``"client"`` and ``"root"`` to the files
            written there.
        """
        context = self.build_context(config)
        return {
            "server": await self.generate_backend_files(root / "server", context),
            "client": await self.generate_frontend_files(root / "client", context),
            "root": await self.generate_compose(root, context),
        }

    async def generate_backend_files(
        self, server_dir: Path, context: dict[str, Any]
    ) -> list[Path]:
        """Generate ``server/Dockerfile`` and ``server/.dockerignore``."""
        return await self.renderer.render_files(self._SERVER_FILES, server_dir, context)

    async def generate_frontend_files(
        self, client_dir: Path, context: dict[str, Any]
    ) -> list[Path]:
        """Generate the client Dockerfile, ignore file and, unless Next.js, nginx.conf.

        Next.js runs its own production server, so only statically built
        clients get the nginx configuration.
        """
        files = dict(self._CLIENT_FILES)
        if not context["frontend"].is_nextjs:
            files["docker/client/nginx.conf.j2"] = "nginx.conf"
        return await self.renderer.render_files(files, client_dir, context)

    async def generate_compose(self, root: Path, context: dict[str, Any]) -> list[Path]:
        """Generate ``docker-compose.yml`` and ``DOCKER.md`` at the project root."""
        return await self.renderer.render_files(self._ROOT_FILES, root, context)
