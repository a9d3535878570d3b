"""
Argument vectors for the external image builder.

    build -f <dir>/Dockerfile -t <registry>/<image>:<tag> <dir>
    run --network=<network> <registry>/<image>:<tag>
"""

import posixpath
from pathlib import Path
from typing import List

from .. import constants
from ..config import BuilderSettings


def full_image_name(registry: str, image_name: str, tag: str = constants.LATEST_TAG) -> str:
    if not registry:
        return f"{image_name}:{tag}"
    return f"{posixpath.join(registry, image_name)}:{tag}"


def build_image_args(dockerfile_dir: Path, image: str, source_dir: Path) -> List[str]:
    return [
        "build",
        "-f", str(Path(dockerfile_dir) / constants.DOCKERFILE_NAME),
        "-t", image,
        str(source_dir),
    ]


def build_base_image_args(settings: BuilderSettings, registry: str, base_dir: Path) -> List[str]:
    image = full_image_name(registry, settings.base_image_name, settings.tag)
    return build_image_args(base_dir, image, base_dir)


def build_integration_image_args(settings: BuilderSettings, registry: str, image_name: str,
                                 integration_dir: Path) -> List[str]:
    image = full_image_name(registry, image_name, settings.tag)
    return build_image_args(integration_dir, image, integration_dir)


def run_integration_image_args(settings: BuilderSettings, registry: str, image_name: str) -> List[str]:
    return [
        "run",
        f"--network={settings.network}",
        full_image_name(registry, image_name, settings.tag),
    ]
