import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError
from typing_extensions import override

from .base import ResourceStore
from .. import constants
from ..datacls import IntegrationContext, IntegrationPlatform
from ..exceptions import ConfigParsingError, ResourceDefinitionError, StoreError
from ..utils.cancel import CancelToken

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def load_resource(path: Path, model: Type[M]) -> M:
    """Read one YAML resource document and validate it against `model`."""
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Error parsing resource file '{path}': {e}")
    except OSError as e:
        raise StoreError(f"Failed to read resource file '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ConfigParsingError(f"Resource file '{path}' must contain a YAML mapping.")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResourceDefinitionError(f"Invalid {model.__name__} in '{path}':\n{e}")


def dump_resource(resource: BaseModel) -> str:
    data: Dict[str, Any] = resource.model_dump(mode="json")
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


class YamlResourceStore(ResourceStore):
    """
    Store resources as YAML files under a root directory:

        <root>/<namespace>/contexts/<name>.yaml
        <root>/<namespace>/platforms/<name>.yaml
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _dir(self, namespace: str, kind: str) -> Path:
        return self.root / namespace / kind

    def _list(self, namespace: str, kind: str, model: Type[M]) -> List[M]:
        directory = self._dir(namespace, kind)
        if not directory.is_dir():
            return []
        resources = []
        for path in sorted(directory.glob("*.yaml")):
            try:
                resources.append(load_resource(path, model))
            except (ConfigParsingError, ResourceDefinitionError, StoreError) as e:
                logger.warning(f"Skipping unreadable {kind[:-1]} file: {e}")
        return resources

    @override
    def _load_context(self, namespace: str, name: str) -> Optional[IntegrationContext]:
        path = self._dir(namespace, constants.CONTEXTS_DIR_NAME) / f"{name}.yaml"
        if not path.is_file():
            return None
        return load_resource(path, IntegrationContext)

    @override
    def _save_context(self, ctx: IntegrationContext):
        directory = self._dir(ctx.namespace, constants.CONTEXTS_DIR_NAME)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            # write-then-rename so readers never see a partial document
            fd, tmp = tempfile.mkstemp(dir=directory, prefix=f".{ctx.name}-", suffix=".yaml")
        except OSError as e:
            raise StoreError(f"Failed to save context '{ctx.key()}': {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(dump_resource(ctx))
            os.replace(tmp, directory / f"{ctx.name}.yaml")
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise StoreError(f"Failed to save context '{ctx.key()}': {e}") from e

    @override
    def list_contexts(self, namespace: str, cancel: Optional[CancelToken] = None) -> List[IntegrationContext]:
        if cancel:
            cancel.raise_if_cancelled("list contexts")
        return self._list(namespace, constants.CONTEXTS_DIR_NAME, IntegrationContext)

    @override
    def list_platforms(self, namespace: str, cancel: Optional[CancelToken] = None) -> List[IntegrationPlatform]:
        if cancel:
            cancel.raise_if_cancelled("list platforms")
        return self._list(namespace, constants.PLATFORMS_DIR_NAME, IntegrationPlatform)

    @override
    def create_platform(self, platform: IntegrationPlatform) -> IntegrationPlatform:
        directory = self._dir(platform.metadata.namespace, constants.PLATFORMS_DIR_NAME)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            (directory / f"{platform.metadata.name}.yaml").write_text(dump_resource(platform), encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Failed to save platform '{platform.metadata.name}': {e}") from e
        logger.debug(f"Created platform '{platform.metadata.namespace}/{platform.metadata.name}'")
        return platform.deep_copy()
