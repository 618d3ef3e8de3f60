"""
Service interfaces for dependency injection and modularity.

This module defines abstract base classes for the stores the dependency
graph reads from and the query service it exposes, enabling loose coupling
and easier testing.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from livedoc.models.feature import Feature, FeatureGraph, FeatureKey


class IFeatureCatalog(ABC):
    """Abstract interface for reading feature records."""

    @abstractmethod
    def list_features(
        self,
        product: Optional[str] = None,
        version: Optional[str] = None
    ) -> List[Feature]:
        """List features, optionally restricted to a product and/or version."""
        pass


class IInvocationLedger(ABC):
    """Abstract interface for reading recorded invocations."""

    @abstractmethod
    def get_invocations(self, product: str, version: str) -> Dict[str, List[str]]:
        """Get the signature -> invoked signatures mapping of a product version."""
        pass


class IDependencyService(ABC):
    """Abstract interface for feature dependency graph queries."""

    @abstractmethod
    def get_top_level_feature_graphs(self) -> List[FeatureGraph]:
        """Get the graphs of every feature that has no dependants."""
        pass

    @abstractmethod
    def get_feature_graph(self, product: str, feature_name: str, version: str) -> FeatureGraph:
        """Get the graph centered on a single feature."""
        pass

    @abstractmethod
    def get_feature_cycles(self, product: str, version: str) -> List[List[FeatureKey]]:
        """Get the feature-level dependency cycles of a product version."""
        pass
