"""Range-aware static media server.

Exposes the installed distribution version as ``__version__``.
"""
from importlib.metadata import PackageNotFoundError, version

try:  # Resolves once the project is installed; else default.
    __version__ = version("mediaserve")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
