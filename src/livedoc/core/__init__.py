"""
Core contracts for Livedoc.

This package contains the interfaces shared by the feature stores and the
dependency graph services.
"""

from .interfaces import (
    IDependencyService,
    IFeatureCatalog,
    IInvocationLedger,
)

__all__ = [
    "IDependencyService",
    "IFeatureCatalog",
    "IInvocationLedger",
]
