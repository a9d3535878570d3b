class CtxBuilderError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to loading and parsing the configuration file ---
class ConfigurationError(CtxBuilderError):
    """Base class for errors encountered while finding, reading, or parsing config files."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when the configuration file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML configuration or resource file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the configuration fails structural validation (e.g., Pydantic)."""

    pass


# --- 2. Errors related to the logical definition of resources ---
class DefinitionError(CtxBuilderError):
    """Base class for errors in the logical definition of contexts and platforms."""

    pass


class ResourceDefinitionError(DefinitionError):
    """Raised when a context or platform document fails validation."""

    pass


# --- 3. Errors that occur while building images ---
class BuildError(CtxBuilderError):
    """Base class for errors that occur while producing container images."""

    pass


class WorkspaceError(BuildError, OSError):
    """Raised when a build workspace cannot be allocated or removed."""

    pass


class AssemblyError(BuildError, OSError):
    """Raised when dependency, route or property files cannot be copied into a workspace."""

    pass


class BuildFailedError(BuildError):
    """Raised when the external image builder exits with a non-zero status."""

    def __init__(self, message: str, argv: list | None = None, returncode: int | None = None):
        super().__init__(message)
        self.argv = list(argv or [])
        self.returncode = returncode


class BuildCancelledError(BuildError):
    """Raised when a build or reconciliation is cancelled or runs past its deadline."""

    pass


# --- 4. Errors related to the fingerprint computation ---
class DigestError(CtxBuilderError):
    """Raised when a context digest cannot be computed."""

    pass


# --- 5. Errors related to the platform and the resource store ---
class PlatformNotFoundError(CtxBuilderError):
    """Raised when no integration platform exists in a namespace."""

    pass


class StoreError(CtxBuilderError):
    """Base class for resource store errors."""

    pass


class ResourceNotFoundError(StoreError):
    """Raised when a requested resource does not exist."""

    pass


class ConflictError(StoreError):
    """Raised when an update is based on a stale resource version."""

    pass
