"""Tailwind CSS injection into generator-owned client files.

Frontend generators own ``client/``; Tailwind is attached afterwards by
installing its packages and textually patching the build configuration and
the global stylesheet the generator produced.  The patches match the
generators' default output, so they are best-effort: callers get a
``PatchOutcome`` instead of an exception when a file or anchor is missing.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Optional

from create_fullstack.models import FrontendProfile, StylingKind
from create_fullstack.utils import CommandRunner, print_warning, run_command


class PatchOutcome(str, Enum):
    """Result of a single textual patch."""
    APPLIED = "applied"
    NOT_FOUND = "not_found"


class StylingError(Exception):
    """Raised when a Tailwind install command fails."""


TAILWIND_DEV_DEPS: dict[StylingKind, tuple[str, ...]] = {
    StylingKind.VITE_PLUGIN: ("tailwindcss", "@tailwindcss/vite"),
    StylingKind.POSTCSS_PLUGIN: ("tailwindcss", "@tailwindcss/postcss", "postcss"),
    StylingKind.TAILWIND_V3: ("tailwindcss@3", "postcss", "autoprefixer"),
}

TAILWIND_V3_INIT: tuple[str, ...] = ("npx", "tailwindcss", "init")

STYLESHEET_DIRECTIVES: dict[StylingKind, str] = {
    StylingKind.VITE_PLUGIN: '@import "tailwindcss";\n',
    StylingKind.POSTCSS_PLUGIN: '@import "tailwindcss";\n',
    StylingKind.TAILWIND_V3: "@tailwind base;\n@tailwind components;\n@tailwind utilities;\n",
}

VITE_PLUGIN_IMPORT = "import tailwindcss from '@tailwindcss/vite'"

POSTCSS_CONFIG = """const config = {
  plugins: {
    '@tailwindcss/postcss': {},
  },
};

export default config;
"""

CRA_CONTENT_GLOBS = 'content: ["./src/**/*.{js,jsx,ts,tsx}"]'

_VITE_IMPORT_RE = re.compile(
    r"^import\s*\{\s*defineConfig\s*\}\s*from\s*['\"]vite['\"];?[ \t]*$", re.MULTILINE
)
_PLUGINS_ARRAY_RE = re.compile(r"plugins:\s*\[")
_PLUGINS_OBJECT_RE = re.compile(r"plugins:\s*\{")
_EMPTY_CONTENT_RE = re.compile(r"content:\s*\[\s*\]")


# ---------------------------------------------------------------------------
# Narrow patch interface
# ---------------------------------------------------------------------------

def find_first(client_dir: Path, candidates: tuple[str, ...]) -> Optional[Path]:
    """Return the first candidate path that exists under *client_dir*."""
    for candidate in candidates:
        path = client_dir / candidate
        if path.is_file():
            return path
    return None


def patch_build_config_for_styling(
    client_dir: Path, frontend: FrontendProfile
) -> PatchOutcome:
    """Register Tailwind in the build configuration of a generated client."""
    if frontend.styling is None:
        return PatchOutcome.NOT_FOUND

    path = find_first(client_dir, frontend.build_configs)

    if frontend.styling is StylingKind.POSTCSS_PLUGIN:
        if path is None:
            (client_dir / "postcss.config.mjs").write_text(POSTCSS_CONFIG, encoding="utf-8")
            return PatchOutcome.APPLIED
        return _patch_postcss_config(path)

    if path is None:
        return PatchOutcome.NOT_FOUND
    if frontend.styling is StylingKind.VITE_PLUGIN:
        return _patch_vite_config(path)
    return _patch_tailwind_v3_config(path)


def patch_stylesheet_for_styling(
    client_dir: Path, frontend: FrontendProfile
) -> PatchOutcome:
    """Prepend the Tailwind directives to the generated global stylesheet."""
    if frontend.styling is None:
        return PatchOutcome.NOT_FOUND
    path = find_first(client_dir, frontend.stylesheets)
    if path is None:
        return PatchOutcome.NOT_FOUND

    directives = STYLESHEET_DIRECTIVES[frontend.styling]
    content = path.read_text(encoding="utf-8")
    if content.startswith(directives):
        return PatchOutcome.APPLIED
    path.write_text(f"{directives}\n{content}", encoding="utf-8")
    return PatchOutcome.APPLIED


def _patch_vite_config(path: Path) -> PatchOutcome:
    content = path.read_text(encoding="utf-8")
    if "@tailwindcss/vite" in content:
        return PatchOutcome.APPLIED
    if not _PLUGINS_ARRAY_RE.search(content):
        return PatchOutcome.NOT_FOUND

    content = _PLUGINS_ARRAY_RE.sub("plugins: [tailwindcss(), ", content, count=1)
    match = _VITE_IMPORT_RE.search(content)
    if match:
        end = match.end()
        content = f"{content[:end]}\n{VITE_PLUGIN_IMPORT}{content[end:]}"
    else:
        content = f"{VITE_PLUGIN_IMPORT}\n{content}"
    path.write_text(content, encoding="utf-8")
    return PatchOutcome.APPLIED


def _patch_postcss_config(path: Path) -> PatchOutcome:
    content = path.read_text(encoding="utf-8")
    if "@tailwindcss/postcss" in content:
        return PatchOutcome.APPLIED
    if _PLUGINS_OBJECT_RE.search(content):
        content = _PLUGINS_OBJECT_RE.sub(
            "plugins: {\n    '@tailwindcss/postcss': {},", content, count=1
        )
    elif _PLUGINS_ARRAY_RE.search(content):
        content = _PLUGINS_ARRAY_RE.sub(
            "plugins: ['@tailwindcss/postcss', ", content, count=1
        )
    else:
        return PatchOutcome.NOT_FOUND
    path.write_text(content, encoding="utf-8")
    return PatchOutcome.APPLIED


def _patch_tailwind_v3_config(path: Path) -> PatchOutcome:
    content = path.read_text(encoding="utf-8")
    if not _EMPTY_CONTENT_RE.search(content):
        return PatchOutcome.NOT_FOUND
    path.write_text(_EMPTY_CONTENT_RE.sub(CRA_CONTENT_GLOBS, content, count=1), encoding="utf-8")
    return PatchOutcome.APPLIED


# ---------------------------------------------------------------------------
# Install + patch
# ---------------------------------------------------------------------------

async def apply_tailwind(
    client_dir: Path,
    frontend: FrontendProfile,
    runner: CommandRunner = run_command,
) -> bool:
    """Install Tailwind into *client_dir* and patch the generated files.

    Returns:
        ``True`` when both patches applied.  Missing files are reported as
        warnings.

    Raises:
        StylingError: If an install command exits non-zero.
    """
    if frontend.styling is None:
        return False

    commands: list[list[str]] = [
        ["npm", "install", "-D", *TAILWIND_DEV_DEPS[frontend.styling]],
    ]
    if frontend.styling is StylingKind.TAILWIND_V3:
        commands.append(list(TAILWIND_V3_INIT))

    for cmd in commands:
        returncode, _, stderr = await runner(cmd, cwd=client_dir)
        if returncode != 0:
            raise StylingError(f"`{' '.join(cmd)}` exited with code {returncode}: {stderr}")

    config_outcome = patch_build_config_for_styling(client_dir, frontend)
    if config_outcome is PatchOutcome.NOT_FOUND:
        print_warning(
            "  Could not find the build config to register Tailwind; add the plugin manually."
        )
    sheet_outcome = patch_stylesheet_for_styling(client_dir, frontend)
    if sheet_outcome is PatchOutcome.NOT_FOUND:
        print_warning(
            "  Could not find the global stylesheet; add the Tailwind directives manually."
        )
    return config_outcome is PatchOutcome.APPLIED and sheet_outcome is PatchOutcome.APPLIED
