"""Root ``package.json`` with the combined ``dev`` script."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from create_fullstack.errors import RootInstallError
from create_fullstack.models import ProjectConfig
from create_fullstack.utils import CommandRunner, run_command, save_json

from .lint_gen import LintEnvironment, add_lint_dependencies, write_lint_configs


CONCURRENTLY_VERSION = "^8.2.0"


def dev_script(client_run_script: str) -> str:
    """Command that runs the server and client dev scripts side by side.

    ``--kill-others`` stops the remaining process as soon as either exits.
    """
    return (
        'npx concurrently --kill-others '
        '"npm --prefix server run dev" '
        f'"npm --prefix client run {client_run_script}"'
    )


def build_root_manifest(config: ProjectConfig, client_run_script: str) -> dict[str, Any]:
    """Return the root manifest as a dict."""
    manifest: dict[str, Any] = {
        "name": config.project_name,
        "version": "1.0.0",
        "private": True,
        "scripts": {
            "dev": dev_script(client_run_script),
        },
        "devDependencies": {
            "concurrently": CONCURRENTLY_VERSION,
        },
    }
    if config.install_linting:
        # Root lint scripts would recurse into server/ and client/.
        add_lint_dependencies(manifest, scripts=False)
    return manifest


class RootGenerator:
    """Writes the root manifest and installs the root dev dependencies."""

    def __init__(self, runner: CommandRunner = run_command) -> None:
        self.runner = runner

    async def generate(
        self, root: Path, config: ProjectConfig, client_run_script: str
    ) -> Path:
        """Write ``package.json`` (and lint configs) at *root*."""
        manifest_path = root / "package.json"
        await save_json(build_root_manifest(config, client_run_script), manifest_path)
        if config.install_linting:
            await write_lint_configs(root, LintEnvironment.UNIVERSAL)
        return manifest_path

    async def install(self, root: Path) -> None:
        """Run ``npm install`` at *root*.

        Raises:
            RootInstallError: If npm exits non-zero.
        """
        cmd = ["npm", "install"]
        returncode, _, stderr = await self.runner(cmd, cwd=root)
        if returncode != 0:
            raise RootInstallError.from_command(cmd, returncode, stderr)
