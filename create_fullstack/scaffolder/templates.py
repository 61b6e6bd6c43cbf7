"""Jinja2 rendering of the packaged project templates.

Every file the scaffolder writes itself (server entry point, ``.env``,
Prisma schema, Docker artifacts) comes from a ``.j2`` file under
``create_fullstack/scaffolder/templates/``.  Generated clients are the
exception: those belong to the framework generators.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from create_fullstack.utils import write_text


TEMPLATE_ROOT = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Loads ``.j2`` templates and renders them to strings or files.

    Rendering is strict: a variable missing from the context raises
    ``jinja2.UndefinedError`` rather than producing a silently broken file.
    Output is never HTML-escaped since none of the targets are HTML.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir) if template_dir is not None else TEMPLATE_ROOT
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["slugify"] = _slugify_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render *template_path* (relative to the template root) to a string."""
        return self.env.get_template(template_path).render(**context)

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template into *output_path*, creating parent directories."""
        out = Path(output_path)
        await asyncio.to_thread(write_text, out, self.render(template_path, context))
        return out

    async def render_files(
        self,
        files: dict[str, str],
        output_dir: Path,
        context: dict[str, Any],
    ) -> list[Path]:
        """Render each ``template -> relative output name`` pair into *output_dir*.

        Files are written in mapping order; the written paths are returned in
        the same order.
        """
        written: list[Path] = []
        for template_path, output_name in files.items():
            written.append(
                await self.render_to_file(template_path, output_dir / output_name, context)
            )
        return written


FALLBACK_SLUG = "app"


def _slugify_filter(value: str) -> str:
    """Lower-case *value* and collapse anything but ``[a-z0-9]`` into dashes.

    Compose project names only accept that alphabet.  Names with nothing
    left after that (``应用``, ``___``) become ``FALLBACK_SLUG``.
    """
    return re.sub(r"[^a-z0-9]+", "-", value.lower().strip()).strip("-") or FALLBACK_SLUG
