"""ESLint / Prettier configuration shared by root, server and client.

Each directory gets the same pair of fixed-content files; only the ESLint
environment differs (Node for the server, browser for the client, both for
the root, which has no single runtime).
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from create_fullstack.utils import save_json


ESLINT_CONFIG_FILE = ".eslintrc.json"
PRETTIER_CONFIG_FILE = ".prettierrc"

LINT_DEV_DEPENDENCIES: dict[str, str] = {
    "eslint": "^8.57.0",
    "prettier": "^3.3.3",
}

LINT_SCRIPTS: dict[str, str] = {
    "lint": "eslint .",
    "format": "prettier --write .",
}

PRETTIER_CONFIG: dict[str, Any] = {
    "semi": True,
    "singleQuote": True,
    "tabWidth": 2,
    "trailingComma": "es5",
}


class LintEnvironment(str, Enum):
    """Which globals ESLint should assume."""
    NODE = "node"
    BROWSER = "browser"
    UNIVERSAL = "universal"


def eslint_config(environment: LintEnvironment) -> dict[str, Any]:
    """Return the ESLint ruleset for *environment*."""
    env: dict[str, bool] = {"es2021": True}
    if environment in (LintEnvironment.BROWSER, LintEnvironment.UNIVERSAL):
        env["browser"] = True
    if environment in (LintEnvironment.NODE, LintEnvironment.UNIVERSAL):
        env["node"] = True

    return {
        "root": True,
        "env": env,
        "extends": ["eslint:recommended"],
        "parserOptions": {
            "ecmaVersion": "latest",
            "sourceType": "module",
        },
        "rules": {
            "no-unused-vars": "warn",
            "no-console": "off",
        },
    }


def add_lint_dependencies(manifest: dict[str, Any], *, scripts: bool = True) -> dict[str, Any]:
    """Add the fixed lint/format dev dependencies (and scripts) to *manifest*.

    Existing scripts with the same name are kept; generators such as
    create-next-app already define ``lint``.
    """
    dev_deps = manifest.setdefault("devDependencies", {})
    dev_deps.update(LINT_DEV_DEPENDENCIES)
    if scripts:
        manifest_scripts = manifest.setdefault("scripts", {})
        for name, command in LINT_SCRIPTS.items():
            manifest_scripts.setdefault(name, command)
    return manifest


async def write_lint_configs(directory: Path, environment: LintEnvironment) -> list[Path]:
    """Write ``.eslintrc.json`` and ``.prettierrc`` into *directory*."""
    eslint_path = directory / ESLINT_CONFIG_FILE
    prettier_path = directory / PRETTIER_CONFIG_FILE
    await save_json(eslint_config(environment), eslint_path)
    await save_json(PRETTIER_CONFIG, prettier_path)
    return [eslint_path, prettier_path]
