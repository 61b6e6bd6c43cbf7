"""Express backend synthesis.

Creates ``server/``, initialises its manifest with npm, installs the
dependency set computed from the ``ProjectConfig`` and renders the entry
point, ``.env`` and (for PostgreSQL) the Prisma files.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from create_fullstack.errors import BackendSetupError, DirectoryCreationError
from create_fullstack.models import (
    BACKEND_PORT,
    BackendLanguage,
    DatabaseKind,
    DatabaseProfile,
    ProjectConfig,
    database_profile,
)
from create_fullstack.utils import CommandRunner, load_json, run_command, save_json

from .lint_gen import LintEnvironment, add_lint_dependencies, write_lint_configs
from .templates import TemplateRenderer


BASE_RUNTIME_DEPS: tuple[str, ...] = ("express", "cors")

TYPESCRIPT_DEV_DEPS: tuple[str, ...] = (
    "typescript",
    "ts-node-dev",
    "@types/node",
    "@types/express",
    "@types/cors",
)

PRISMA_SCRIPTS: dict[str, str] = {
    "prisma:generate": "npx prisma generate",
    "prisma:push": "npx prisma db push",
}

TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "target": "ES2020",
        "module": "commonjs",
        "esModuleInterop": True,
        "strict": True,
        "skipLibCheck": True,
        "outDir": "dist",
    },
    "include": ["*.ts"],
}

GREETINGS: dict[BackendLanguage, str] = {
    BackendLanguage.JAVASCRIPT: "Hello from Express!",
    BackendLanguage.TYPESCRIPT: "Hello from TypeScript Express!",
}


def compute_dependencies(config: ProjectConfig) -> tuple[list[str], list[str]]:
    """Return ``(runtime_deps, dev_deps)`` for the backend.

    The order is stable and free of duplicates so the npm invocations are
    deterministic.
    """
    profile = database_profile(config.database)
    runtime = list(dict.fromkeys([*BASE_RUNTIME_DEPS, *profile.runtime_deps]))
    dev: list[str] = []
    if config.backend_language is BackendLanguage.TYPESCRIPT:
        dev = list(dict.fromkeys([*TYPESCRIPT_DEV_DEPS, *profile.typescript_dev_deps]))
    return runtime, dev


class BackendGenerator:
    """Generates the ``server/`` directory of a new project."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        runner: CommandRunner = run_command,
    ) -> None:
        self.renderer = renderer
        self.runner = runner

    async def generate(self, root: Path, config: ProjectConfig) -> Path:
        """Synthesize the backend under ``root / "server"``.

        Returns:
            Path to the created server directory.

        Raises:
            DirectoryCreationError: If ``server/`` cannot be created.
            BackendSetupError: If npm fails or a file cannot be written.
        """
        server_dir = root / "server"
        try:
            await asyncio.to_thread(server_dir.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryCreationError(server_dir, str(exc)) from exc

        profile = database_profile(config.database)
        manifest_path = server_dir / "package.json"

        await self._npm(["npm", "init", "-y"], server_dir)
        manifest = self._load(manifest_path)
        manifest["dependencies"] = {}
        manifest["devDependencies"] = {}
        await self._save(manifest, manifest_path)

        runtime_deps, dev_deps = compute_dependencies(config)
        await self._npm(["npm", "install", *runtime_deps], server_dir)
        if dev_deps:
            await self._npm(["npm", "install", "-D", *dev_deps], server_dir)

        # npm rewrites the manifest while installing.
        manifest = self._load(manifest_path)

        try:
            await self._render_sources(server_dir, config, profile)
        except OSError as exc:
            raise BackendSetupError(f"Could not write backend sources: {exc}") from exc

        scripts = manifest.setdefault("scripts", {})
        scripts.pop("test", None)
        scripts["dev"] = config.backend_language.dev_command
        if config.database is DatabaseKind.POSTGRESQL:
            scripts.update(PRISMA_SCRIPTS)

        if config.install_linting:
            add_lint_dependencies(manifest)
            try:
                await write_lint_configs(server_dir, LintEnvironment.NODE)
            except OSError as exc:
                raise BackendSetupError(f"Could not write lint config: {exc}") from exc

        await self._save(manifest, manifest_path)
        return server_dir

    # -- Rendering ----------------------------------------------------------

    def build_context(self, config: ProjectConfig, profile: DatabaseProfile) -> dict[str, Any]:
        """Template context for the entry point, ``.env`` and Prisma files."""
        return {
            "project_name": config.project_name,
            "typescript": config.backend_language is BackendLanguage.TYPESCRIPT,
            "language": config.backend_language.value,
            "database": profile,
            "greeting": GREETINGS[config.backend_language],
            "port": BACKEND_PORT,
        }

    async def _render_sources(
        self, server_dir: Path, config: ProjectConfig, profile: DatabaseProfile
    ) -> None:
        ctx = self.build_context(config, profile)
        await self.renderer.render_to_file(
            "server/index.j2", server_dir / config.backend_language.entry_file, ctx
        )
        await self.renderer.render_to_file(profile.env_template, server_dir / ".env", ctx)

        if config.database is DatabaseKind.POSTGRESQL:
            await self.renderer.render_to_file(
                "prisma/schema.prisma.j2", server_dir / "prisma" / "schema.prisma", ctx
            )
            await self.renderer.render_to_file(
                "prisma/prisma.config.ts.j2", server_dir / "prisma.config.ts", ctx
            )

        if config.backend_language is BackendLanguage.TYPESCRIPT:
            await save_json(TSCONFIG, server_dir / "tsconfig.json")

    # -- Helpers ------------------------------------------------------------

    async def _npm(self, cmd: list[str], cwd: Path) -> None:
        returncode, _, stderr = await self.runner(cmd, cwd=cwd)
        if returncode != 0:
            raise BackendSetupError.from_command(cmd, returncode, stderr)

    def _load(self, path: Path) -> dict[str, Any]:
        try:
            return load_json(path)
        except (OSError, ValueError) as exc:
            raise BackendSetupError(f"Could not read {path}: {exc}") from exc

    async def _save(self, manifest: dict[str, Any], path: Path) -> None:
        try:
            await save_json(manifest, path)
        except OSError as exc:
            raise BackendSetupError(f"Could not write {path}: {exc}") from exc
