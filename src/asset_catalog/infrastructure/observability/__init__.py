"""
Observability for the asset catalog: structlog configuration and
layer-specific logger factories shared by the store clients and repositories.
"""

from .logging import (
    get_infrastructure_logger,
    get_logger,
    get_storage_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_infrastructure_logger",
    "get_storage_logger",
]
