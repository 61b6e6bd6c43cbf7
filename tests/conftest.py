"""Shared pytest fixtures for the create-fullstack-app test suite.

Provides reusable fixtures for:
- A fake npm/npx runner that records calls and simulates generator output
- Template renderer
- Settings pointing at a temporary output directory
- Ready-made ProjectConfig values
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from create_fullstack.config import Settings
from create_fullstack.models import (
    BackendLanguage,
    DatabaseKind,
    Frontend,
    ProjectConfig,
    ReactSetupTool,
)
from create_fullstack.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Default generator output
# ---------------------------------------------------------------------------

VITE_REACT_CONFIG = """import { defineConfig } from 'vite'
import react from '@vitejs/plugin-react'

// https://vite.dev/config/
export default defineConfig({
  plugins: [react()],
})
"""

VITE_VUE_CONFIG = """import { defineConfig } from 'vite'
import vue from '@vitejs/plugin-vue'

// https://vite.dev/config/
export default defineConfig({
  plugins: [vue()],
})
"""

TAILWIND_V3_CONFIG = """/** @type {import('tailwindcss').Config} */
module.exports = {
  content: [],
  theme: {
    extend: {},
  },
  plugins: [],
}
"""

DEFAULT_CSS = ":root {\n  font-family: system-ui, sans-serif;\n}\n"


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _write_manifest(path: Path, manifest: dict[str, Any]) -> None:
    _write(path, json.dumps(manifest, indent=2) + "\n")


# ---------------------------------------------------------------------------
# Fake npm runner
# ---------------------------------------------------------------------------


class FakeNpm:
    """Stand-in for ``run_command`` that mimics npm and the generators.

    Every call is recorded as ``(cmd, cwd, capture)``.  A command fails with
    exit code 1 when it starts with any prefix in ``fail_on``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Optional[Path], bool]] = []
        self.fail_on: list[tuple[str, ...]] = []

    @property
    def commands(self) -> list[list[str]]:
        return [cmd for cmd, _, _ in self.calls]

    async def __call__(
        self,
        cmd: list[str],
        cwd: Any = None,
        timeout: Optional[int] = None,
        capture: bool = True,
        env: Optional[dict[str, str]] = None,
    ) -> tuple[int, str, str]:
        cwd_path = Path(cwd) if cwd is not None else None
        self.calls.append((list(cmd), cwd_path, capture))

        for prefix in self.fail_on:
            if tuple(cmd[: len(prefix)]) == prefix:
                return (1, "", f"simulated failure: {' '.join(cmd)}")

        assert cwd_path is not None
        self._simulate(list(cmd), cwd_path)
        return (0, "", "")

    def _simulate(self, cmd: list[str], cwd: Path) -> None:
        if cmd[:3] == ["npm", "init", "-y"]:
            _write_manifest(cwd / "package.json", {
                "name": cwd.name,
                "version": "1.0.0",
                "main": "index.js",
                "scripts": {"test": 'echo "Error: no test specified" && exit 1'},
                "license": "ISC",
            })
        elif cmd[:2] == ["npm", "install"]:
            self._install(cmd[2:], cwd)
        elif cmd[:2] == ["npx", "create-react-app"]:
            client = cwd / cmd[2]
            _write_manifest(client / "package.json", {
                "name": "client", "scripts": {"start": "react-scripts start"},
            })
            _write(client / "src" / "index.css", DEFAULT_CSS)
        elif cmd[:3] == ["npm", "create", "vite@latest"]:
            client = cwd / cmd[3]
            template = cmd[-1]
            _write_manifest(client / "package.json", {
                "name": "client", "scripts": {"dev": "vite", "build": "vite build"},
            })
            if template == "vue":
                _write(client / "vite.config.js", VITE_VUE_CONFIG)
                _write(client / "src" / "style.css", DEFAULT_CSS)
            else:
                _write(client / "vite.config.js", VITE_REACT_CONFIG)
                _write(client / "src" / "index.css", DEFAULT_CSS)
        elif cmd[:2] == ["npx", "create-next-app@latest"]:
            client = cwd / cmd[2]
            _write_manifest(client / "package.json", {
                "name": "client",
                "scripts": {"dev": "next dev", "build": "next build", "lint": "next lint"},
            })
            _write(client / "app" / "globals.css", DEFAULT_CSS)
        elif cmd[:2] == ["npx", "@angular/cli"]:
            client = cwd / cmd[3]
            _write_manifest(client / "package.json", {
                "name": "client", "scripts": {"start": "ng serve"},
            })
            _write(client / "angular.json", "{}\n")
            _write(client / "src" / "styles.css", DEFAULT_CSS)
        elif cmd[:3] == ["npx", "tailwindcss", "init"]:
            _write(cwd / "tailwind.config.js", TAILWIND_V3_CONFIG)

    def _install(self, args: list[str], cwd: Path) -> None:
        manifest_path = cwd / "package.json"
        if not manifest_path.exists():
            return
        dev = "-D" in args
        packages = [a for a in args if not a.startswith("-")]
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        section = manifest.setdefault("devDependencies" if dev else "dependencies", {})
        for package in packages:
            section[package] = "^1.0.0"
        _write_manifest(manifest_path, manifest)


@pytest.fixture
def fake_npm() -> FakeNpm:
    """A recording fake for ``run_command``."""
    return FakeNpm()


# ---------------------------------------------------------------------------
# Renderer & settings
# ---------------------------------------------------------------------------


@pytest.fixture
def renderer() -> TemplateRenderer:
    """The real renderer over the packaged templates."""
    return TemplateRenderer()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings that create projects under a temporary directory."""
    return Settings(output_dir=tmp_path)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """An empty project root directory."""
    root = tmp_path / "demo"
    root.mkdir()
    return root


# ---------------------------------------------------------------------------
# ProjectConfig fixtures
# ---------------------------------------------------------------------------


def make_config(**overrides: Any) -> ProjectConfig:
    """Build a ProjectConfig with React + Vite, JavaScript and no database."""
    values: dict[str, Any] = {
        "project_name": "demo",
        "frontend": Frontend.REACT,
        "react_setup_tool": ReactSetupTool.VITE,
        "backend_language": BackendLanguage.JAVASCRIPT,
        "database": DatabaseKind.NONE,
        "install_tailwind": False,
        "install_linting": False,
        "enable_docker": False,
    }
    values.update(overrides)
    return ProjectConfig(**values)


@pytest.fixture
def basic_config() -> ProjectConfig:
    """React + Vite, JavaScript, no database, no add-ons."""
    return make_config()


@pytest.fixture
def mongo_ts_config() -> ProjectConfig:
    """React + Vite, TypeScript, MongoDB."""
    return make_config(
        backend_language=BackendLanguage.TYPESCRIPT,
        database=DatabaseKind.MONGODB,
    )


@pytest.fixture
def postgres_config() -> ProjectConfig:
    """React + Vite, JavaScript, PostgreSQL."""
    return make_config(database=DatabaseKind.POSTGRESQL)


@pytest.fixture
def config_factory():
    """Return ``make_config`` so tests can build variants inline."""
    return make_config
