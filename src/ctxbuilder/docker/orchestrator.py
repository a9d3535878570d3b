import logging
import shlex
from typing import List, Optional

from ..config import BuilderSettings
from ..datacls import BuildRequest
from ..exceptions import BuildFailedError
from ..utils.cancel import CancelToken
from . import args as builder_args
from .assembler import BuildContextAssembler, container_run_command
from .dockerfile import DockerfileGenerator
from .runner import CommandRunner
from .workspace import Workspace

logger = logging.getLogger(__name__)


class ImageBuilder:
    """
    Drives the external builder through the image pipeline.

    Stage 1 builds the base image, stage 2 the integration image derived from
    it (skipped for base-only requests). Running an image is a separate entry
    point and is never chained after a build. Each stage works in a freshly
    created workspace root, so there is no build cache inside this class.
    """

    def __init__(self, settings: BuilderSettings, runner: Optional[CommandRunner] = None,
                 assembler: Optional[BuildContextAssembler] = None,
                 generator: Optional[DockerfileGenerator] = None,
                 workspace_root: Optional[str] = None):
        self.settings = settings
        self.runner = runner or CommandRunner(settings.binary)
        self.assembler = assembler or BuildContextAssembler()
        self.generator = generator or DockerfileGenerator(settings)
        self.workspace_root = workspace_root

    def build(self, request: BuildRequest, tag: str = "",
              cancel: Optional[CancelToken] = None) -> str:
        """Run the pipeline in a workspace owned by this call; return the produced image."""
        with Workspace(tag or request.image_name, root=self.workspace_root) as workspace:
            return self.build_integration_image(request, workspace, cancel=cancel)

    def build_base_image(self, request: BuildRequest, workspace: Workspace,
                         cancel: Optional[CancelToken] = None) -> str:
        logger.info(f"[Stage 1] Building base image for registry '{request.registry}'...")
        base_dir = workspace.create_base()
        self.generator.create_base_image_dockerfile(base_dir)
        args = builder_args.build_base_image_args(self.settings, request.registry, base_dir)
        self._execute(args, "base image containerization", cancel)
        image = builder_args.full_image_name(request.registry, self.settings.base_image_name, self.settings.tag)
        logger.info(f"[Stage 1] Base image '{image}' built.")
        return image

    def build_integration_image(self, request: BuildRequest, workspace: Workspace,
                                cancel: Optional[CancelToken] = None) -> str:
        base_image = self.build_base_image(request, workspace, cancel=cancel)
        if request.just_base_image:
            logger.info("[Stage 2] Skipped: base image only requested.")
            return base_image

        logger.info(f"[Stage 2] Building integration image '{request.image_name}'...")
        integration_dir = workspace.create_integration()
        self.assembler.copy_dependencies(integration_dir, request.dependencies)
        self.assembler.copy_routes(integration_dir, request.routes)
        self.assembler.copy_property_files(integration_dir, request.property_files)

        command = container_run_command(request.property_files, request.dependencies, request.routes)
        logger.debug(f"[Stage 2] Container command: {command.shell()} env={command.env}")
        self.generator.create_integration_image_dockerfile(integration_dir, request.registry, command)

        args = builder_args.build_integration_image_args(
            self.settings, request.registry, request.image_name, integration_dir
        )
        self._execute(args, "integration image containerization", cancel)
        image = builder_args.full_image_name(request.registry, request.image_name, self.settings.tag)
        logger.info(f"[Stage 2] Integration image '{image}' built.")
        return image

    def run_integration_image(self, registry: str, image_name: str,
                              cancel: Optional[CancelToken] = None):
        args = builder_args.run_integration_image_args(self.settings, registry, image_name)
        self._execute(args, "integration image run", cancel)

    def _execute(self, args: List[str], what: str, cancel: Optional[CancelToken]):
        returncode = self.runner.run(args, cancel=cancel)
        if returncode != 0:
            argv = self.runner.command(args)
            raise BuildFailedError(
                f"{what} did not run successfully: '{shlex.join(argv)}' exited with status {returncode}",
                argv=argv,
                returncode=returncode,
            )
