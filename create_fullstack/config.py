"""Runtime settings for the scaffolder.

These are the knobs that are *not* asked interactively: where projects are
created, whether to accept every default without prompting, and which base
images the generated Docker artifacts pin.  All settings use a Pydantic v2
model so they are validated at construction time.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


_TRUTHY = {"1", "true", "yes", "on"}


class ImageConfig(BaseModel):
    """Container base images used in generated Dockerfiles and compose files."""

    node: str = Field(default="node:20-alpine")
    nginx: str = Field(default="nginx:alpine")
    postgres: str = Field(default="postgres:16-alpine")
    mongo: str = Field(default="mongo:7")


class Settings(BaseModel):
    """Global scaffolder settings.

    Created once by the CLI entry point and passed to the ``Pipeline``.
    """

    output_dir: Path = Field(default=Path("."))
    assume_defaults: bool = Field(
        default=False, description="Answer every prompt with its default"
    )
    images: ImageConfig = Field(default_factory=ImageConfig)

    def project_root(self, project_name: str) -> Path:
        """Absolute path of the directory a project named *project_name* goes in."""
        return (self.output_dir / project_name).resolve()

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            CFA_OUTPUT_DIR, CFA_ASSUME_DEFAULTS, CFA_NODE_IMAGE,
            CFA_NGINX_IMAGE, CFA_POSTGRES_IMAGE, CFA_MONGO_IMAGE.
        """
        image_kwargs: dict[str, Any] = {}
        for key in ("node", "nginx", "postgres", "mongo"):
            value = os.environ.get(f"CFA_{key.upper()}_IMAGE")
            if value:
                image_kwargs[key] = value

        return cls(
            output_dir=Path(os.environ.get("CFA_OUTPUT_DIR", ".")),
            assume_defaults=os.environ.get("CFA_ASSUME_DEFAULTS", "").strip().lower()
            in _TRUTHY,
            images=ImageConfig(**image_kwargs),
        )
