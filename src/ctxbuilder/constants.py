from enum import Enum

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "ctrl": "ctxbuilder.controller",
    "disp": "ctxbuilder.controller.dispatcher",
    "init": "ctxbuilder.controller.initialize",
    "bld": "ctxbuilder.controller.build",
    "mon": "ctxbuilder.controller.monitor",
    "orch": "ctxbuilder.docker.orchestrator",
    "ws": "ctxbuilder.docker.workspace",
    "asm": "ctxbuilder.docker.assembler",
    "run": "ctxbuilder.docker.runner",
    "conf": "ctxbuilder.config",
    "store": "ctxbuilder.store",
    "dgst": "ctxbuilder.digest",
}

# Top-level modules within ctxbuilder for auto-prefixing
KNOWN_TOP_MODULES = {
    "controller",
    "docker",
    "datacls",
    "store",
    "utils",
    "config",
    "digest",
    "platform",
    "resources",
}

LOG_LEVELS_ENV = "CTXB_LOG_LEVELS"
CONSOLE_HANDLER_NAME = "ctxb-console"
FILE_HANDLER_NAME = "ctxb-file"
CONSOLE_LOG_FORMAT = "[%(levelname).4s] %(name)s: %(message)s"
COLOR_LOG_FORMAT = "%(log_color)s[%(levelname).4s]%(reset)s %(cyan)s%(name)s%(reset)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s [%(levelname).4s] %(name)s: %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


# --- Phases ---
class ContextPhase(str, Enum):
    """Phases of an integration context. ``NEW`` is the unset value."""
    NEW = ""
    BUILDING = "Building"
    READY = "Ready"
    ERROR = "Error"


# --- Builder defaults ---
DEFAULT_BUILDER_BINARY = "docker"
DEFAULT_BASE_IMAGE = "adoptopenjdk/openjdk11:slim"
BASE_IMAGE_NAME = "integration-base-image"
LATEST_TAG = "latest"
DEFAULT_NETWORK = "host"
DOCKERFILE_NAME = "Dockerfile"

# --- Workspace prefixes ---
BASE_WORKSPACE_PREFIX = "docker-base-"
INTEGRATION_WORKSPACE_PREFIX = "docker-"

# --- Local (workspace) directory names ---
DEPENDENCIES_DIR_NAME = "dependencies"
ROUTES_DIR_NAME = "routes"
PROPERTIES_DIR_NAME = "properties"

# --- Container directories ---
CONTAINER_INTEGRATIONS_DIR = "/deployments"
CONTAINER_DEPENDENCIES_DIR = "/deployments/dependencies"
CONTAINER_ROUTES_DIR = "/deployments/routes"
CONTAINER_PROPERTIES_DIR = "/deployments/properties"

# --- In-container run command ---
JAVA_BINARY = "java"
INTEGRATION_MAIN_CLASS = "org.apache.camel.k.main.Application"
ENV_ROUTES = "CAMEL_K_ROUTES"
ENV_CONF = "CAMEL_K_CONF"
ENV_CONF_D = "CAMEL_K_CONF_D"

# --- Digest ---
DIGEST_VERSION = "2"

# --- Resource store layout ---
CONTEXTS_DIR_NAME = "contexts"
PLATFORMS_DIR_NAME = "platforms"
DEFAULT_NAMESPACE = "default"
DEFAULT_STORE_DIR = ".ctxb"

# --- Reconcile loop ---
DEFAULT_RECONCILE_INTERVAL = 10.0
PROCESS_POLL_INTERVAL = 0.1
PROCESS_KILL_GRACE = 5.0
