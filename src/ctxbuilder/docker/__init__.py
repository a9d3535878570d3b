"""
Context Builder Docker Module

- Workspace: Disposable base/integration build roots
- BuildContextAssembler: Copies dependencies, routes and property files into a workspace
- DockerfileGenerator: Base and integration Dockerfiles
- CommandRunner: Builder subprocess with echo and cancellation
- ImageBuilder: Base image -> integration image pipeline, plus image run

Usage:
    from ctxbuilder.docker import ImageBuilder
    from ctxbuilder.datacls import BuildRequest

    builder = ImageBuilder(config.builder)
    builder.build(BuildRequest(registry="example.io", image_name="demo"))
"""

from .workspace import Workspace
from .assembler import BuildContextAssembler, container_run_command
from .dockerfile import DockerfileGenerator
from .runner import CommandRunner
from .orchestrator import ImageBuilder
from .args import full_image_name

__all__ = [
    'Workspace',
    'BuildContextAssembler',
    'container_run_command',
    'DockerfileGenerator',
    'CommandRunner',
    'ImageBuilder',
    'full_image_name',
]
