"""
In-memory feature store.
"""
import logging
from typing import Dict, Iterable, List, Optional

from livedoc.core.interfaces import IFeatureCatalog, IInvocationLedger
from livedoc.models.feature import Feature, FeatureKey, FeatureScope, Invocation

logger = logging.getLogger(__name__)


class InMemoryFeatureStore(IFeatureCatalog, IInvocationLedger):
    """Feature catalog and invocation ledger kept in process memory."""

    def __init__(self):
        self._features: Dict[FeatureKey, Feature] = {}
        self._invocations: Dict[FeatureScope, Dict[str, List[str]]] = {}

    def persist_features(self, features: Iterable[Feature]) -> int:
        """Store features, replacing stored features with the same identity.

        A replaced feature keeps its original position in the catalog.
        """
        count = 0
        for feature in features:
            self._features[feature.key] = feature
            count += 1
        logger.debug(f"Persisted {count} features")
        return count

    def persist_invocations(self, product: str, version: str, invocations: Iterable[Invocation]) -> int:
        """Store the invocations recorded for a product version."""
        ledger = self._invocations.setdefault(FeatureScope(product, version), {})
        count = 0
        for invocation in invocations:
            ledger[invocation.signature] = list(invocation.invoked_signatures)
            count += 1
        logger.debug(f"Persisted {count} invocations for {product}@{version}")
        return count

    def list_features(
        self,
        product: Optional[str] = None,
        version: Optional[str] = None
    ) -> List[Feature]:
        return [
            feature for feature in self._features.values()
            if (product is None or feature.product == product)
            and (version is None or feature.version == version)
        ]

    def get_invocations(self, product: str, version: str) -> Dict[str, List[str]]:
        ledger = self._invocations.get(FeatureScope(product, version), {})
        return {signature: list(invoked) for signature, invoked in ledger.items()}

    def list_scopes(self) -> List[FeatureScope]:
        """Get every product version with features or invocations, in insertion order."""
        scopes: List[FeatureScope] = []
        for feature in self._features.values():
            if feature.scope not in scopes:
                scopes.append(feature.scope)
        for scope in self._invocations:
            if scope not in scopes:
                scopes.append(scope)
        return scopes
