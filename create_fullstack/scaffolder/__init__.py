"""Project scaffolder -- generates the server, client and root of a fullstack app.

Each generator handles one directory of the output and receives the
immutable ``ProjectConfig`` explicitly.

Quick usage::

    from create_fullstack.scaffolder import BackendGenerator, TemplateRenderer

    backend = BackendGenerator(TemplateRenderer())
    server_dir = await backend.generate(Path("/tmp/my-app"), config)
"""

from create_fullstack.scaffolder.backend_gen import BackendGenerator
from create_fullstack.scaffolder.docker_gen import DockerGenerator
from create_fullstack.scaffolder.frontend_gen import FrontendGenerator
from create_fullstack.scaffolder.root_gen import RootGenerator
from create_fullstack.scaffolder.templates import TemplateRenderer

__all__ = [
    "BackendGenerator",
    "DockerGenerator",
    "FrontendGenerator",
    "RootGenerator",
    "TemplateRenderer",
]
