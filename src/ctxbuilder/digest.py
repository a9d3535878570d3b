"""
Content fingerprint of an integration context.

The digest covers every spec field that influences the produced image, so a
context whose stored digest matches a fresh computation does not need to be
rebuilt.
"""

import base64
import hashlib
import logging

from . import constants
from .datacls import IntegrationContext
from .exceptions import DigestError

logger = logging.getLogger(__name__)


def compute_for_integration_context(ctx: IntegrationContext) -> str:
    """
    Compute a deterministic digest over the build-relevant spec of `ctx`.

    Each field is written with a label and length-delimited items so that
    moving an entry from one list to another changes the result.
    """
    try:
        spec = ctx.spec
        h = hashlib.sha256()
        _write(h, "version", constants.DIGEST_VERSION)
        _write(h, "image", spec.image or "")
        for label, items in (
            ("dependency", spec.dependencies),
            ("route", spec.routes),
            ("property-file", spec.property_files),
            ("repository", spec.repositories),
        ):
            for item in items:
                _write(h, label, item)
        for entry in spec.configuration:
            _write(h, "configuration-type", entry.type)
            _write(h, "configuration-value", entry.value)
    except (TypeError, AttributeError, UnicodeEncodeError) as e:
        raise DigestError(f"Failed to compute digest for context '{ctx.metadata.name}': {e}") from e

    digest = "v" + base64.urlsafe_b64encode(h.digest()).decode("ascii").rstrip("=")
    logger.debug(f"Digest for context '{ctx.key()}': {digest}")
    return digest


def _write(h, label: str, value: str):
    data = value.encode("utf-8")
    h.update(f"{label}:{len(data)}:".encode("ascii"))
    h.update(data)
