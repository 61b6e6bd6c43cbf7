"""create-fullstack-app pipeline orchestrator.

Implements the scaffolding flow after the questions have been answered:

Step 1: BACKEND       -- ``server/`` with npm, entry point, ``.env``.
Step 2: FRONTEND      -- ``client/`` via the framework generator.
Step 3: ROOT MANIFEST -- root ``package.json`` running both halves.
Step 4: DOCKER        -- optional container artifacts (never fatal).
Step 5: INSTALL       -- root ``npm install``.

Usage::

    create-fullstack-app
    python -m create_fullstack
"""

from __future__ import annotations

import asyncio
import sys
import time
import traceback
from pathlib import Path
from typing import Optional

from rich.markup import escape
from rich.panel import Panel

from create_fullstack.config import Settings
from create_fullstack.errors import DirectoryCreationError, ProjectExistsError, ScaffoldError
from create_fullstack.models import ProjectConfig, frontend_profile
from create_fullstack.prompts import DefaultsAsker, RichAsker, collect_config
from create_fullstack.scaffolder import (
    BackendGenerator,
    DockerGenerator,
    FrontendGenerator,
    RootGenerator,
    TemplateRenderer,
)
from create_fullstack.utils import (
    STEP_NAMES,
    CommandRunner,
    console,
    create_progress,
    ensure_dir,
    format_duration,
    format_location,
    is_empty_dir,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)


BANNER = (
    "[bold bright_cyan]Create Fullstack App[/bold bright_cyan]\n"
    "Frontend + Express backend + one command to run both"
)


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives the scaffolding steps for one ``ProjectConfig``.

    Steps run strictly one after another; each subprocess is awaited before
    the next one starts.

    Attributes:
        settings: Non-interactive settings (output dir, images).
        runner: Coroutine used for every subprocess call.
    """

    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner = run_command,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.settings = settings
        self.runner = runner
        self.renderer = renderer or TemplateRenderer()
        self.backend_gen = BackendGenerator(self.renderer, runner)
        self.frontend_gen = FrontendGenerator(runner)
        self.root_gen = RootGenerator(runner)
        self.docker_gen = DockerGenerator(self.renderer, settings.images)

    # ------------------------------------------------------------------
    # Root directory
    # ------------------------------------------------------------------

    def prepare_root(self, config: ProjectConfig) -> Path:
        """Create the project root, refusing to reuse a non-empty directory.

        Raises:
            ProjectExistsError: If the directory exists and has entries.
            DirectoryCreationError: If it cannot be created.
        """
        root = self.settings.project_root(config.project_name)
        if root.exists() and not is_empty_dir(root):
            raise ProjectExistsError(root)
        try:
            return ensure_dir(root)
        except OSError as exc:
            raise DirectoryCreationError(root, str(exc)) from exc

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self, config: ProjectConfig) -> bool:
        """Scaffold the project described by *config*.

        Returns:
            ``True`` if every fatal step succeeded.
        """
        started = time.monotonic()
        try:
            root = self.prepare_root(config)
            await self._scaffold(root, config)
        except ScaffoldError as exc:
            print_error(f"{exc.step} failed: {exc}")
            return False
        except Exception as exc:
            print_error(f"Unexpected error: {exc}")
            console.print(f"[dim]{traceback.format_exc()}[/dim]")
            return False

        self._print_final_summary(config, root, time.monotonic() - started)
        return True

    async def _scaffold(self, root: Path, config: ProjectConfig) -> None:
        print_step_header(1, STEP_NAMES[1])
        with create_progress() as progress:
            progress.add_task("Setting up Express backend...", total=None)
            await self.backend_gen.generate(root, config)
        print_success(
            f"  Backend ready ({config.backend_language.value}, database: {config.database.value})"
        )

        print_step_header(2, STEP_NAMES[2])
        profile = frontend_profile(config.frontend, config.react_setup_tool)
        console.print(f"  Creating {profile.label} client...")
        client_run_script = await self.frontend_gen.generate(root, config)
        print_success(f"  Frontend ready (npm run {client_run_script})")

        print_step_header(3, STEP_NAMES[3])
        await self.root_gen.generate(root, config, client_run_script)
        print_success("  Root package.json written")

        if config.enable_docker:
            print_step_header(4, STEP_NAMES[4])
            await self._generate_docker(root, config)

        print_step_header(5, STEP_NAMES[5])
        with create_progress() as progress:
            progress.add_task("Installing root dependencies...", total=None)
            await self.root_gen.install(root)
        print_success("  Root dependencies installed")

    async def _generate_docker(self, root: Path, config: ProjectConfig) -> None:
        """Docker artifacts are optional; a failure only warns."""
        try:
            await self.docker_gen.generate_all(root, config)
        except Exception as exc:
            print_warning(f"  Docker setup failed, skipping it: {exc}")
            return
        print_success("  Docker configuration generated (see DOCKER.md)")

    def _print_final_summary(self, config: ProjectConfig, root: Path, elapsed: float) -> None:
        """Print the success panel with next steps."""
        print_summary_table(
            {
                "Project": config.project_name,
                "Location": str(root),
                "Frontend": frontend_profile(config.frontend, config.react_setup_tool).label,
                "Backend": config.backend_language.value,
                "Database": config.database.value,
                "Tailwind": "yes" if config.install_tailwind else "no",
                "Linting": "yes" if config.install_linting else "no",
                "Docker": "yes" if config.enable_docker else "no",
                "Duration": format_duration(elapsed),
            },
            title="Project Summary",
        )

        steps = [f"  cd {escape(format_location(root))}", "  npm run dev"]
        if config.enable_docker:
            steps.append("  # or, with Docker:")
            steps.append("  docker compose up --build")

        console.print(
            Panel(
                "[bold green]Fullstack app created successfully![/bold green]\n\n"
                "Next steps:\n" + "\n".join(steps),
                title="[bold]Done[/bold]",
                border_style="bold green",
            )
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point for ``create-fullstack-app``."""
    settings = Settings.from_env()
    console.print(Panel(BANNER, title="[bold]Welcome[/bold]", border_style="bright_cyan"))

    asker = DefaultsAsker() if settings.assume_defaults else RichAsker(console)
    try:
        config = collect_config(asker)
    except (KeyboardInterrupt, EOFError):
        console.print()
        print_error("Aborted.")
        sys.exit(1)

    ok = asyncio.run(Pipeline(settings).run(config))
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
