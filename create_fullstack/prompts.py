"""Interactive collection of the ``ProjectConfig``.

Questions are asked through an :class:`Asker`, so the order and branching
live here while the terminal rendering stays swappable: ``RichAsker`` for a
real terminal, ``DefaultsAsker`` for non-interactive runs, scripted fakes in
tests.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, TypeVar

from rich.console import Console
from rich.prompt import Confirm, Prompt

from create_fullstack.models import (
    DEFAULT_PROJECT_NAME,
    BackendLanguage,
    DatabaseKind,
    Frontend,
    ProjectConfig,
    ReactSetupTool,
)
from create_fullstack.utils import print_error

E = TypeVar("E", bound=Enum)

EMPTY_NAME_MESSAGE = "Project name cannot be empty"


class Asker(Protocol):
    """The three question shapes the collector needs."""

    def text(self, message: str, default: str) -> str: ...

    def choice(self, message: str, choices: list[str], default: str) -> str: ...

    def confirm(self, message: str, default: bool) -> bool: ...


class RichAsker:
    """Asks questions on the terminal with ``rich.prompt``."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console

    def text(self, message: str, default: str) -> str:
        return Prompt.ask(message, default=default, console=self.console)

    def choice(self, message: str, choices: list[str], default: str) -> str:
        return Prompt.ask(message, choices=choices, default=default, console=self.console)

    def confirm(self, message: str, default: bool) -> bool:
        return Confirm.ask(message, default=default, console=self.console)


class DefaultsAsker:
    """Answers every question with its default."""

    def text(self, message: str, default: str) -> str:
        return default

    def choice(self, message: str, choices: list[str], default: str) -> str:
        return default

    def confirm(self, message: str, default: bool) -> bool:
        return default


def _ask_enum(asker: Asker, message: str, enum_cls: type[E]) -> E:
    """Ask a closed-choice question over an enum; the first member is the default."""
    members = list(enum_cls)
    answer = asker.choice(message, [m.value for m in members], members[0].value)
    return enum_cls(answer)


def ask_project_name(asker: Asker) -> str:
    """Ask until a non-blank project name is given."""
    while True:
        name = asker.text("Enter your project name", DEFAULT_PROJECT_NAME).strip()
        if name:
            return name
        print_error(EMPTY_NAME_MESSAGE)


def collect_config(asker: Asker) -> ProjectConfig:
    """Ask every question in order and return the resulting ``ProjectConfig``.

    Order: project name, frontend, backend language, database, React setup
    tool (React only), Tailwind (not for Angular), linting, Docker.
    """
    project_name = ask_project_name(asker)
    frontend = _ask_enum(asker, "Choose a frontend framework", Frontend)
    backend_language = _ask_enum(asker, "Backend language", BackendLanguage)
    database = _ask_enum(asker, "Choose a database", DatabaseKind)

    react_setup_tool: Optional[ReactSetupTool] = None
    if frontend is Frontend.REACT:
        react_setup_tool = _ask_enum(asker, "Choose React setup", ReactSetupTool)

    install_tailwind = False
    if frontend is not Frontend.ANGULAR:
        install_tailwind = asker.confirm("Add Tailwind CSS?", False)

    install_linting = asker.confirm("Add ESLint and Prettier?", False)
    enable_docker = asker.confirm("Generate Docker configuration?", False)

    return ProjectConfig(
        project_name=project_name,
        frontend=frontend,
        react_setup_tool=react_setup_tool,
        backend_language=backend_language,
        database=database,
        install_tailwind=install_tailwind,
        install_linting=install_linting,
        enable_docker=enable_docker,
    )
