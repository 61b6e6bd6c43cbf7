"""Frontend synthesis by delegating to the framework's own generator.

``client/`` is owned entirely by the external generator; this module only
runs it, installs dependencies where the generator does not, and layers the
optional Tailwind and lint configuration on top.
"""

from __future__ import annotations

from pathlib import Path

from create_fullstack.errors import FrontendSetupError
from create_fullstack.models import Frontend, FrontendProfile, ProjectConfig, frontend_profile
from create_fullstack.utils import (
    CommandRunner,
    load_json,
    print_success,
    print_warning,
    run_command,
    save_json,
)

from .lint_gen import LintEnvironment, add_lint_dependencies, write_lint_configs
from .styling import StylingError, apply_tailwind


class FrontendGenerator:
    """Generates the ``client/`` directory of a new project."""

    def __init__(self, runner: CommandRunner = run_command) -> None:
        self.runner = runner

    async def generate(self, root: Path, config: ProjectConfig) -> str:
        """Run the generator for ``config.frontend`` inside *root*.

        Returns:
            The client's run-script name (``start`` or ``dev``), used by the
            root ``dev`` script.

        Raises:
            FrontendSetupError: If the generator or the follow-up install fails.
        """
        profile = frontend_profile(config.frontend, config.react_setup_tool)
        client_dir = root / "client"

        # Generators prompt on their own, so they keep the terminal.
        await self._run(list(profile.command), root, capture=False)
        if not client_dir.is_dir():
            raise FrontendSetupError(
                f"{profile.label} generator finished but {client_dir} was not created",
                cmd=list(profile.command),
            )

        if profile.install_after_generate:
            await self._run(["npm", "install"], client_dir, capture=False)

        if config.install_tailwind and config.frontend is not Frontend.ANGULAR:
            await self._add_tailwind(client_dir, profile)

        if config.install_linting:
            await self._add_linting(client_dir)

        return profile.run_script

    async def _add_tailwind(self, client_dir: Path, profile: FrontendProfile) -> None:
        try:
            applied = await apply_tailwind(client_dir, profile, self.runner)
        except (StylingError, OSError) as exc:
            print_warning(f"  Tailwind CSS setup failed, continuing without it: {exc}")
            return
        if applied:
            print_success("  Tailwind CSS configured")

    async def _add_linting(self, client_dir: Path) -> None:
        manifest_path = client_dir / "package.json"
        try:
            manifest = load_json(manifest_path)
            add_lint_dependencies(manifest)
            await save_json(manifest, manifest_path)
            await write_lint_configs(client_dir, LintEnvironment.BROWSER)
        except (OSError, ValueError) as exc:
            raise FrontendSetupError(f"Could not add lint config to {client_dir}: {exc}") from exc

    async def _run(self, cmd: list[str], cwd: Path, *, capture: bool) -> None:
        returncode, _, stderr = await self.runner(cmd, cwd=cwd, capture=capture)
        if returncode != 0:
            raise FrontendSetupError.from_command(cmd, returncode, stderr)
