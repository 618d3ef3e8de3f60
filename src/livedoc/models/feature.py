"""
Feature models for Livedoc.

This module defines the feature catalog records, the recorded invocations
that make up a call graph, and the feature graph nodes produced from them.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class FeatureKey(NamedTuple):
    """Identity of a feature."""
    product: str
    group: str
    title: str
    version: str

    def __str__(self) -> str:
        return f"{self.product}/{self.group}/{self.title}@{self.version}"


class FeatureScope(NamedTuple):
    """A product/version pair; call graphs are recorded per scope."""
    product: str
    version: str

    def __str__(self) -> str:
        return f"{self.product}@{self.version}"


class Feature(BaseModel):
    """A documented unit of behavior, optionally linked to code."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product: str
    group: str
    title: str
    version: str
    direct_invocation_signatures: tuple[str, ...] = Field(
        default=(),
        alias="directInvocationSignatures",
        description="Signatures of the code entry points of this feature, in declaration order"
    )

    @property
    def key(self) -> FeatureKey:
        return FeatureKey(self.product, self.group, self.title, self.version)

    @property
    def scope(self) -> FeatureScope:
        return FeatureScope(self.product, self.version)


class Invocation(BaseModel):
    """The signatures invoked by a single signature."""

    model_config = ConfigDict(populate_by_name=True)

    signature: str
    invoked_signatures: list[str] = Field(default_factory=list, alias="invokedSignatures")


@dataclass(eq=False)
class FeatureGraph:
    """A node in a feature dependency graph.

    Child nodes are shared references: a feature reached through several
    paths is represented by one node object, so ``depends_on`` and
    ``dependants`` may form cycles.
    """
    product_name: str
    group_name: str
    feature_name: str
    version: str
    depends_on: list["FeatureGraph"] = field(default_factory=list)
    dependants: list["FeatureGraph"] = field(default_factory=list)

    @classmethod
    def from_feature(cls, feature: Feature) -> "FeatureGraph":
        return cls(
            product_name=feature.product,
            group_name=feature.group,
            feature_name=feature.title,
            version=feature.version,
        )

    @property
    def key(self) -> FeatureKey:
        return FeatureKey(self.product_name, self.group_name, self.feature_name, self.version)

    def __repr__(self) -> str:
        return (
            f"FeatureGraph({self.key}, depends_on={[n.feature_name for n in self.depends_on]}, "
            f"dependants={[n.feature_name for n in self.dependants]})"
        )

    @property
    def node_id(self) -> str:
        return str(self.key)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the graph reachable from this node, see ``graphs_to_dict``."""
        return graphs_to_dict([self])


def graphs_to_dict(roots: Iterable[FeatureGraph]) -> dict[str, Any]:
    """Serialize feature graphs as a flat list of nodes.

    Every reachable node is written once, in breadth-first order from the
    roots. ``dependsOn`` and ``dependants`` hold node ids, so shared nodes
    and cycles cost one entry each.

    Returns:
        ``{"roots": [node ids], "features": [node records]}``
    """
    root_ids: list[str] = []
    features: list[dict[str, Any]] = []
    seen: set[FeatureKey] = set()
    pending: deque[FeatureGraph] = deque()

    for root in roots:
        root_ids.append(root.node_id)
        if root.key not in seen:
            seen.add(root.key)
            pending.append(root)

        while pending:
            node = pending.popleft()
            features.append({
                "id": node.node_id,
                "productName": node.product_name,
                "groupName": node.group_name,
                "featureName": node.feature_name,
                "version": node.version,
                "dependsOn": [child.node_id for child in node.depends_on],
                "dependants": [child.node_id for child in node.dependants],
            })
            for child in node.depends_on + node.dependants:
                if child.key not in seen:
                    seen.add(child.key)
                    pending.append(child)

    return {"roots": root_ids, "features": features}
