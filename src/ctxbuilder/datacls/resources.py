"""
Cluster resources consumed by the controller.

IntegrationContext is the resource whose image is built; its status block is
owned by the controller. IntegrationPlatform is read-only and only its
existence matters.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..constants import ContextPhase, DEFAULT_NAMESPACE


class ObjectMeta(BaseModel):
    """
        Identity of a namespaced resource
    """
    name: str
    namespace: str = DEFAULT_NAMESPACE
    resource_version: int = 0


class ConfigurationEntry(BaseModel):
    type: str
    value: str


class IntegrationContextSpec(BaseModel):
    """
        Declared specification of an integration context
    """
    image: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    routes: List[str] = Field(default_factory=list)
    property_files: List[str] = Field(default_factory=list)
    configuration: List[ConfigurationEntry] = Field(default_factory=list)
    repositories: List[str] = Field(default_factory=list)
    model_config = ConfigDict(extra="forbid")


class IntegrationContextStatus(BaseModel):
    phase: ContextPhase = ContextPhase.NEW
    digest: str = ""
    image: str = ""


class IntegrationContext(BaseModel):
    """
    A resource whose container image is built on demand from its spec.
    """
    metadata: ObjectMeta
    spec: IntegrationContextSpec = Field(default_factory=IntegrationContextSpec)
    status: IntegrationContextStatus = Field(default_factory=IntegrationContextStatus)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    def deep_copy(self) -> "IntegrationContext":
        return self.model_copy(deep=True)

    def key(self) -> str:
        return f"{self.namespace}/{self.name}"


class IntegrationPlatform(BaseModel):
    metadata: ObjectMeta
    spec: Dict[str, Any] = Field(default_factory=dict)

    def deep_copy(self) -> "IntegrationPlatform":
        return self.model_copy(deep=True)
