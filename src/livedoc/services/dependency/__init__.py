"""
Feature dependency graph services.
"""

from .builder import DependencyGraphBuilder
from .resolver import SignatureResolver
from .service import DependencyService

__all__ = [
    "DependencyGraphBuilder",
    "DependencyService",
    "SignatureResolver",
]
