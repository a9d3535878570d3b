import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .. import constants
from ..exceptions import WorkspaceError

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r'[^A-Za-z0-9_.-]+')


class Workspace:
    """
    Disposable build roots for one build attempt.

    A workspace owns two independent directories: the `base` root holding the
    base image Dockerfile, and the `integration` root holding the integration
    Dockerfile plus copied dependencies, routes and property files. Each is
    created on demand and removed unconditionally; deleting one never touches
    the other.

    Used as a context manager, both roots are removed on every exit path.
    """

    def __init__(self, tag: str = "", root: Optional[str] = None):
        self.tag = _UNSAFE.sub("-", tag).strip("-")
        self.root = root
        self.base: Optional[Path] = None
        self.integration: Optional[Path] = None

    def _prefix(self, prefix: str) -> str:
        return f"{prefix}{self.tag}-" if self.tag else prefix

    def _mkdtemp(self, prefix: str) -> Path:
        try:
            return Path(tempfile.mkdtemp(prefix=self._prefix(prefix), dir=self.root))
        except OSError as e:
            raise WorkspaceError(f"Failed to allocate workspace directory under '{self.root or tempfile.gettempdir()}': {e}") from e

    def create_base(self) -> Path:
        if self.base is not None:
            self.delete_base()
        self.base = self._mkdtemp(constants.BASE_WORKSPACE_PREFIX)
        logger.debug(f"Created base workspace '{self.base}'")
        return self.base

    def create_integration(self) -> Path:
        if self.integration is not None:
            self.delete_integration()
        self.integration = self._mkdtemp(constants.INTEGRATION_WORKSPACE_PREFIX)
        logger.debug(f"Created integration workspace '{self.integration}'")
        return self.integration

    def delete_base(self):
        self.base = _remove(self.base)

    def delete_integration(self):
        self.integration = _remove(self.integration)

    def delete(self):
        self.delete_base()
        self.delete_integration()

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.delete()
        return False


def _remove(path: Optional[Path]) -> None:
    if path is None:
        return None
    try:
        shutil.rmtree(path)
        logger.debug(f"Removed workspace '{path}'")
    except FileNotFoundError:
        logger.debug(f"Workspace '{path}' already removed")
    except OSError as e:
        raise WorkspaceError(f"Failed to remove workspace '{path}': {e}") from e
    return None
