"""Top-level package for mvn-repository-mcp.

Exports the centralized logging configuration and the searcher entry points.
"""

from .logging_config import configure_logging  # re-export for convenience
from .searcher import MavenRepositorySearcher, get_searcher

__all__ = ["configure_logging", "MavenRepositorySearcher", "get_searcher"]
