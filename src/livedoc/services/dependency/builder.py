"""
Feature dependency graph construction.

Resolves the signature-level call graph recorded for a product version into
a feature-level graph. A feature depends on another when one of its direct
invocation signatures invokes a signature declared by the other feature.
"""
import logging
from collections import deque
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import networkx as nx

from livedoc.models.feature import Feature, FeatureGraph, FeatureKey
from livedoc.services.dependency.resolver import SignatureResolver
from livedoc.utils.errors import FeatureNotFoundError

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """Builds feature graphs for the features of a single product version.

    A builder holds the data of one query. Direct dependencies are memoised
    per builder, so create a new builder for every query.
    """

    def __init__(
        self,
        features: Iterable[Feature],
        invocations: Mapping[str, Sequence[str]],
        strict_signatures: bool = False,
    ):
        """
        Args:
            features: All features of the scope, in catalog order
            invocations: Signature -> invoked signatures of the same scope
            strict_signatures: Fail on signatures declared by several features
        """
        self.features: List[Feature] = list(features)
        self.invocations = invocations
        self.resolver = SignatureResolver(self.features, strict=strict_signatures)

        self._dependencies: Dict[FeatureKey, List[Feature]] = {}
        self._dependents: Optional[Dict[FeatureKey, List[Feature]]] = None

        logger.debug(
            f"Dependency graph builder created for {len(self.features)} features, "
            f"{len(self.resolver)} signatures and {len(self.invocations)} invocation entries"
        )

    def direct_dependencies(self, feature: Feature) -> List[Feature]:
        """Get the features whose signatures are invoked by the given feature's signatures."""
        cached = self._dependencies.get(feature.key)
        if cached is not None:
            return list(cached)

        dependencies: List[Feature] = []
        seen = {feature.key}
        for signature in feature.direct_invocation_signatures:
            for invoked_signature in self.invocations.get(signature, ()):
                owner = self.resolver.resolve_owner(invoked_signature)
                if owner is None or owner.key in seen:
                    continue
                seen.add(owner.key)
                dependencies.append(owner)

        self._dependencies[feature.key] = dependencies
        return list(dependencies)

    def direct_dependents(self, feature: Feature) -> List[Feature]:
        """Get the features that directly depend on the given feature, in catalog order."""
        if self._dependents is None:
            dependents: Dict[FeatureKey, List[Feature]] = {}
            for candidate in self.features:
                for dependency in self.direct_dependencies(candidate):
                    dependents.setdefault(dependency.key, []).append(candidate)
            self._dependents = dependents

        return list(self._dependents.get(feature.key, ()))

    def build_graph(
        self,
        feature: Feature,
        nodes: Optional[Dict[FeatureKey, FeatureGraph]] = None
    ) -> FeatureGraph:
        """Build the graph of a feature, expanding dependencies and dependants.

        Args:
            feature: The feature at the center of the graph
            nodes: Nodes already built during this query, keyed by feature. A
                feature found here is reused instead of expanded again.

        Returns:
            The node of the feature
        """
        if nodes is None:
            nodes = {}

        existing = nodes.get(feature.key)
        if existing is not None:
            return existing

        root = FeatureGraph.from_feature(feature)
        nodes[feature.key] = root
        pending = deque([(feature, root)])

        # Nodes are registered before they are expanded, so a cycle back to a
        # feature always resolves to the node that is already there.
        while pending:
            current, node = pending.popleft()
            for dependency in self.direct_dependencies(current):
                node.depends_on.append(self._node_for(dependency, nodes, pending))
            for dependent in self.direct_dependents(current):
                node.dependants.append(self._node_for(dependent, nodes, pending))

        return root

    def _node_for(self, feature: Feature, nodes: Dict[FeatureKey, FeatureGraph], pending: deque) -> FeatureGraph:
        node = nodes.get(feature.key)
        if node is None:
            node = FeatureGraph.from_feature(feature)
            nodes[feature.key] = node
            pending.append((feature, node))
        return node

    def top_level_graphs(self, nodes: Optional[Dict[FeatureKey, FeatureGraph]] = None) -> List[FeatureGraph]:
        """Build the graphs of all features without dependants, in catalog order."""
        if nodes is None:
            nodes = {}

        roots = [feature for feature in self.features if not self.direct_dependents(feature)]
        logger.debug(f"Found {len(roots)} top level features out of {len(self.features)}")
        return [self.build_graph(feature, nodes) for feature in roots]

    def find_feature(self, product: str, feature_name: str, version: str) -> Feature:
        """Get a feature of this scope by product, title and version."""
        for feature in self.features:
            if feature.product == product and feature.title == feature_name and feature.version == version:
                return feature
        raise FeatureNotFoundError(product, feature_name, version)

    def feature_graph(self, product: str, feature_name: str, version: str) -> FeatureGraph:
        """Build the graph centered on a single feature."""
        feature = self.find_feature(product, feature_name, version)
        return self.build_graph(feature, {})

    def to_digraph(self) -> nx.DiGraph:
        """Get the feature-level dependency graph of the scope.

        Nodes are feature keys; an edge A -> B means B is a direct dependency of A.
        """
        graph = nx.DiGraph()
        for feature in self.features:
            graph.add_node(
                feature.key,
                product=feature.product,
                group=feature.group,
                title=feature.title,
                version=feature.version,
            )
        for feature in self.features:
            for dependency in self.direct_dependencies(feature):
                graph.add_edge(feature.key, dependency.key)
        return graph

    def find_cycles(self) -> List[List[FeatureKey]]:
        """Get the elementary feature-level dependency cycles.

        Each cycle starts at its earliest feature in catalog order and the
        cycles are sorted by that order.
        """
        order = {feature.key: index for index, feature in enumerate(self.features)}
        cycles = []
        for cycle in nx.simple_cycles(self.to_digraph()):
            start = min(range(len(cycle)), key=lambda i: order[cycle[i]])
            cycles.append(cycle[start:] + cycle[:start])

        cycles.sort(key=lambda cycle: [order[key] for key in cycle])
        return cycles
