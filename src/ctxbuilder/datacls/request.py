import shlex
from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field

from .resources import IntegrationContext


class BuildRequest(BaseModel):
    """
        Class represents one invocation of the image build pipeline.
    """
    model_config = ConfigDict(frozen=True)

    registry: str = ""
    image_name: str
    just_base_image: bool = False
    dependencies: List[str] = Field(default_factory=list)
    routes: List[str] = Field(default_factory=list)
    property_files: List[str] = Field(default_factory=list)

    @classmethod
    def from_context(cls, ctx: IntegrationContext, registry: str,
                     image_name: str | None = None, just_base_image: bool = False) -> "BuildRequest":
        """Forward the build-relevant fields of a context spec."""
        return cls(
            registry=registry,
            image_name=image_name or ctx.name,
            just_base_image=just_base_image,
            dependencies=list(ctx.spec.dependencies),
            routes=list(ctx.spec.routes),
            property_files=list(ctx.spec.property_files),
        )


class RunCommand(BaseModel):
    """
        Class represents the command run inside the integration container.
    """
    args: List[str]
    env: Dict[str, str] = Field(default_factory=dict)

    def shell(self) -> str:
        return shlex.join(self.args)
