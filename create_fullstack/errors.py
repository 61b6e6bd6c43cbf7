"""Exception hierarchy for the scaffolding pipeline.

Every fatal step raises a subclass of :class:`ScaffoldError`; the pipeline
catches the base class, reports it, and exits non-zero.  Best-effort steps
(Tailwind patching, Docker artifacts) never raise these.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all fatal scaffolding failures.

    Attributes:
        step: Human-readable label of the phase that failed, used in the
            failure message printed by the pipeline.
        cmd: The subprocess argument list, when the failure came from one.
        returncode: Exit status of that subprocess.
    """

    step = "Scaffold"

    def __init__(
        self,
        message: str,
        cmd: list[str] | None = None,
        returncode: int | None = None,
    ) -> None:
        self.cmd = cmd
        self.returncode = returncode
        super().__init__(message)

    @classmethod
    def from_command(
        cls, cmd: list[str], returncode: int, stderr: str = ""
    ) -> "ScaffoldError":
        """Build an error describing a subprocess that exited non-zero."""
        message = f"`{' '.join(cmd)}` exited with code {returncode}"
        tail = _tail(stderr)
        if tail:
            message = f"{message}\n{tail}"
        return cls(message, cmd=cmd, returncode=returncode)


class ProjectExistsError(ScaffoldError):
    """Raised when the target project directory already holds files."""

    step = "Project directory"

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"{path} already exists and is not empty")


class DirectoryCreationError(ScaffoldError):
    """Raised when a project directory cannot be created."""

    step = "Project directory"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Could not create {path}: {reason}")


class BackendSetupError(ScaffoldError):
    step = "Backend setup"


class FrontendSetupError(ScaffoldError):
    step = "Frontend setup"


class RootInstallError(ScaffoldError):
    step = "Root dependency install"


def _tail(text: str, lines: int = 10) -> str:
    """Return the last *lines* lines of *text*."""
    return "\n".join(text.strip().splitlines()[-lines:])
