"""
Shared utilities for logging setup and operation tracing.
"""

from github_extension.core.utils.logging import configure_logging, log_operation

__all__ = [
    "configure_logging",
    "log_operation",
]
