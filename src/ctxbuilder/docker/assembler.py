"""
Populates an integration workspace and builds the in-container run command.

Files are copied under `dependencies/`, `routes/` and `properties/` of the
integration root; the Dockerfile then copies those directories to their
container counterparts. The run command therefore only ever refers to
container paths derived from file basenames, never to host paths.
"""

import logging
import posixpath
from pathlib import Path, PurePath
from typing import Dict, List, Sequence

import fsspec

from .. import constants
from ..datacls import RunCommand
from ..exceptions import AssemblyError

logger = logging.getLogger(__name__)


class BuildContextAssembler:

    def __init__(self, fs=None):
        self.fs = fs or fsspec.filesystem("file")

    def copy_dependencies(self, root: Path, files: Sequence[str]) -> List[Path]:
        return self._copy_all(root, constants.DEPENDENCIES_DIR_NAME, files)

    def copy_routes(self, root: Path, files: Sequence[str]) -> List[Path]:
        return self._copy_all(root, constants.ROUTES_DIR_NAME, files)

    def copy_property_files(self, root: Path, files: Sequence[str]) -> List[Path]:
        return self._copy_all(root, constants.PROPERTIES_DIR_NAME, files)

    def _copy_all(self, root: Path, subdir: str, files: Sequence[str]) -> List[Path]:
        target_dir = Path(root) / subdir
        try:
            self.fs.makedirs(str(target_dir), exist_ok=True)
        except OSError as e:
            raise AssemblyError(f"Failed to create '{target_dir}': {e}") from e

        copied = []
        for src in files:
            src_path = Path(src).expanduser()
            if not self.fs.isfile(str(src_path)):
                raise AssemblyError(f"Cannot copy '{src}' into {subdir}: not a file")
            dst = target_dir / src_path.name
            try:
                self.fs.copy(str(src_path), str(dst))
            except OSError as e:
                raise AssemblyError(f"Failed to copy '{src}' to '{dst}': {e}") from e
            logger.debug(f"Copied '{src}' -> '{dst}'")
            copied.append(dst)
        logger.info(f"Copied {len(copied)} file(s) into '{subdir}'")
        return copied


def container_path(container_dir: str, host_path: str) -> str:
    """Translate a host path to where the file lives inside the container."""
    return posixpath.join(container_dir, PurePath(host_path).name)


def route_uri(host_path: str) -> str:
    name = PurePath(host_path).name
    language = PurePath(name).suffix.lstrip(".") or "xml"
    return f"file:{container_path(constants.CONTAINER_ROUTES_DIR, host_path)}?language={language}"


def container_run_command(property_files: Sequence[str], dependencies: Sequence[str],
                          routes: Sequence[str]) -> RunCommand:
    """Compose the integration command as it must run inside the container."""
    classpath = [container_path(constants.CONTAINER_DEPENDENCIES_DIR, d) for d in dependencies]
    classpath.append(posixpath.join(constants.CONTAINER_DEPENDENCIES_DIR, "*"))

    env: Dict[str, str] = {}
    if routes:
        env[constants.ENV_ROUTES] = ",".join(route_uri(r) for r in routes)
    if property_files:
        env[constants.ENV_CONF] = container_path(constants.CONTAINER_PROPERTIES_DIR, property_files[0])
        env[constants.ENV_CONF_D] = constants.CONTAINER_PROPERTIES_DIR

    args = [
        constants.JAVA_BINARY,
        "-cp", ":".join(classpath),
        constants.INTEGRATION_MAIN_CLASS,
    ]
    return RunCommand(args=args, env=env)
