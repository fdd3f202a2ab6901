from __future__ import annotations

import importlib.metadata

try:
    # Dynamically pull version from installed package metadata
    __version__ = importlib.metadata.version("a2a-planner-agent")
except importlib.metadata.PackageNotFoundError:
    # Fallback when running from a source checkout
    __version__ = "0.0.0.dev0"

from .client import A2AClient, A2AClientError
from .handler import A2ARequestHandler

__all__ = ["A2AClient", "A2AClientError", "A2ARequestHandler", "__version__"]
