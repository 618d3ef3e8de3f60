"""
Feature dependency query service.

Fetches the features and invocations of a product version in a single batch
and hands them to a fresh DependencyGraphBuilder for every query.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from livedoc.core.interfaces import IDependencyService, IFeatureCatalog, IInvocationLedger
from livedoc.models.feature import FeatureGraph, FeatureKey, FeatureScope
from livedoc.services.dependency.builder import DependencyGraphBuilder

logger = logging.getLogger(__name__)


class DependencyService(IDependencyService):
    """Answers feature dependency graph queries."""

    def __init__(
        self,
        catalog: IFeatureCatalog,
        ledger: IInvocationLedger,
        scopes: Optional[Iterable[Tuple[str, str]]] = None,
        strict_signatures: bool = False,
    ):
        """
        Args:
            catalog: Source of feature records
            ledger: Source of recorded invocations
            scopes: (product, version) pairs spanned by the root graph query.
                Every scope present in the catalog is used when omitted.
            strict_signatures: Fail on signatures declared by several features
        """
        self.catalog = catalog
        self.ledger = ledger
        self.scopes = [FeatureScope(*scope) for scope in scopes] if scopes else None
        self.strict_signatures = strict_signatures

    def _builder(self, product: str, version: str) -> DependencyGraphBuilder:
        features = self.catalog.list_features(product, version)
        invocations = self.ledger.get_invocations(product, version)
        return DependencyGraphBuilder(features, invocations, strict_signatures=self.strict_signatures)

    def _resolve_scopes(self) -> List[FeatureScope]:
        if self.scopes is not None:
            return list(self.scopes)

        scopes: List[FeatureScope] = []
        for feature in self.catalog.list_features():
            if feature.scope not in scopes:
                scopes.append(feature.scope)
        return scopes

    def get_top_level_feature_graphs(self) -> List[FeatureGraph]:
        """Get the graphs of every feature that has no dependants."""
        graphs: List[FeatureGraph] = []
        for scope in self._resolve_scopes():
            scope_graphs = self._builder(scope.product, scope.version).top_level_graphs()
            logger.info(f"Found {len(scope_graphs)} top level features in {scope}")
            graphs.extend(scope_graphs)
        return graphs

    def get_feature_graph(self, product: str, feature_name: str, version: str) -> FeatureGraph:
        """Get the graph centered on a single feature.

        Raises:
            FeatureNotFoundError: If the feature does not exist in the product version
        """
        logger.info(f"Building feature graph for '{feature_name}' in {product}@{version}")
        return self._builder(product, version).feature_graph(product, feature_name, version)

    def get_feature_cycles(self, product: str, version: str) -> List[List[FeatureKey]]:
        """Get the feature-level dependency cycles of a product version."""
        cycles = self._builder(product, version).find_cycles()
        if cycles:
            logger.info(f"Found {len(cycles)} feature dependency cycles in {product}@{version}")
        return cycles
