import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict

from .. import constants
from ..config import BuilderSettings
from ..datacls import RunCommand
from ..exceptions import BuildError, WorkspaceError
from .args import full_image_name

logger = logging.getLogger(__name__)


class DockerfileGenerator:
    """
    Writes base and integration Dockerfiles from the packaged templates.
    """

    def __init__(self, settings: BuilderSettings):
        self.settings = settings

    def _render(self, template_name: str, template_vars: Dict[str, Any]) -> str:
        try:
            template = resources.files('ctxbuilder.resources.templates').joinpath(template_name).read_text(encoding='utf-8')
        except FileNotFoundError:
            raise BuildError(f"Dockerfile template '{template_name}' not found.")
        return template.format(**template_vars)

    def _write(self, directory: Path, content: str) -> Path:
        if directory is None:
            raise WorkspaceError("Cannot write a Dockerfile before the workspace is created.")
        dockerfile_path = Path(directory) / constants.DOCKERFILE_NAME
        try:
            dockerfile_path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise WorkspaceError(f"Failed to write '{dockerfile_path}': {e}") from e
        logger.info(f"Dockerfile written to {dockerfile_path}")
        return dockerfile_path

    def base_dockerfile(self) -> str:
        return self._render('base', {
            "base_image": self.settings.base_image,
            "workdir": constants.CONTAINER_INTEGRATIONS_DIR,
        })

    def integration_dockerfile(self, registry: str, command: RunCommand) -> str:
        env_lines = "".join(f"ENV {key}={json.dumps(value)}\n" for key, value in command.env.items())
        return self._render('integration', {
            "base_image": full_image_name(registry, self.settings.base_image_name, self.settings.tag),
            "workdir": constants.CONTAINER_INTEGRATIONS_DIR,
            "dependencies_dir": constants.CONTAINER_DEPENDENCIES_DIR,
            "routes_dir": constants.CONTAINER_ROUTES_DIR,
            "properties_dir": constants.CONTAINER_PROPERTIES_DIR,
            "dependencies_src": constants.DEPENDENCIES_DIR_NAME,
            "routes_src": constants.ROUTES_DIR_NAME,
            "properties_src": constants.PROPERTIES_DIR_NAME,
            "env_lines": env_lines,
            "command": json.dumps(command.shell()),
        })

    def create_base_image_dockerfile(self, directory: Path) -> Path:
        return self._write(directory, self.base_dockerfile())

    def create_integration_image_dockerfile(self, directory: Path, registry: str, command: RunCommand) -> Path:
        # COPY fails on missing sources, so the local dirs must exist even when empty
        for name in (constants.DEPENDENCIES_DIR_NAME, constants.ROUTES_DIR_NAME, constants.PROPERTIES_DIR_NAME):
            try:
                (Path(directory) / name).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise WorkspaceError(f"Failed to create '{name}' under '{directory}': {e}") from e
        return self._write(directory, self.integration_dockerfile(registry, command))
