import yaml
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator, ConfigDict

from . import constants
from .exceptions import (
    ConfigParsingError,
    ConfigFileMissingError,
    ConfigValidationError,
)


logger = logging.getLogger(__name__)


class BuilderSettings(BaseModel):
    """
        Class Config-Validation Model describe `builder`
    """
    binary: str = constants.DEFAULT_BUILDER_BINARY
    base_image: str = constants.DEFAULT_BASE_IMAGE
    base_image_name: str = constants.BASE_IMAGE_NAME
    tag: str = constants.LATEST_TAG
    network: str = constants.DEFAULT_NETWORK
    model_config = ConfigDict(extra="forbid")

    @field_validator('base_image_name')
    @classmethod
    def check_image_name(cls, value: str) -> str:
        if ":" in value:
            raise ValueError(f"base_image_name cannot contain ':', got '{value}'. Use 'tag' instead.")
        return value


class ConfigModel(BaseModel):
    """
        Class Config-Validation Model desribe top-level of config
    """
    registry: str = ""
    namespace: str = constants.DEFAULT_NAMESPACE
    store_dir: str = constants.DEFAULT_STORE_DIR
    workspace_root: Optional[str] = None
    interval: float = Field(default=constants.DEFAULT_RECONCILE_INTERVAL, gt=0)
    timeout: Optional[float] = Field(default=None, gt=0)
    builder: BuilderSettings = Field(default_factory=BuilderSettings)
    model_config = ConfigDict(extra="forbid")

    @field_validator('registry')
    @classmethod
    def strip_registry(cls, value: str) -> str:
        return value.strip().rstrip("/")


class Config:
    """
    Loads and validates the ctxbuilder.yml file using Pydantic models.
    It is the sole gatekeeper for configuration.
    """
    def __init__(self, config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None):
        self.path = config_path
        raw_data = self._load_raw_config() if config_path else {}
        if overrides:
            raw_data.update({k: v for k, v in overrides.items() if v is not None})

        try:
            self.model = ConfigModel.model_validate(raw_data)
            logger.debug(f"Configuration model validated successfully: \n{self.model.model_dump_json(indent=2)}")
        except ValidationError as e:
            raise ConfigValidationError(f"Configuration validation failed:\n{e}")

    @classmethod
    def default(cls) -> "Config":
        return cls(None)

    def _load_raw_config(self) -> Dict[str, Any]:
        logger.info(f"Loading configuration from '{self.path}'...")
        try:
            content = Path(self.path).read_text(encoding="utf-8")
            config_data = yaml.safe_load(content) or {}
            if not isinstance(config_data, dict):
                raise ConfigParsingError("Configuration file must be a YAML document containing a dictionary.")
            logger.debug(f"Successfully parsed YAML from '{self.path}'.")
            return config_data
        except FileNotFoundError:
            raise ConfigFileMissingError(f"Configuration file not found at: {self.path}")
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file: {e}")

    @property
    def registry(self) -> str:
        return self.model.registry

    @property
    def namespace(self) -> str:
        return self.model.namespace

    @property
    def store_dir(self) -> Path:
        return Path(self.model.store_dir)

    @property
    def workspace_root(self) -> str:
        return self.model.workspace_root or tempfile.gettempdir()

    @property
    def interval(self) -> float:
        return self.model.interval

    @property
    def timeout(self) -> Optional[float]:
        return self.model.timeout

    @property
    def builder(self) -> BuilderSettings:
        return self.model.builder
