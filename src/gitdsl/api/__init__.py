"""HTTP API exposing the git DSL views."""

from .. import __version__

__all__ = ["__version__"]
