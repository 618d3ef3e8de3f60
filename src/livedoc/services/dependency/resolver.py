"""
Signature ownership resolution.

Maps the direct invocation signatures declared by the features of a single
product version back to the feature that declares them.
"""
import logging
from typing import Dict, Iterable, List, Optional

from livedoc.models.feature import Feature, FeatureKey
from livedoc.utils.errors import AmbiguousSignatureOwnerError

logger = logging.getLogger(__name__)


class SignatureResolver:
    """Index from signature to the feature declaring it.

    When several features declare the same signature the first registered
    feature owns it. In strict mode such a declaration is an error instead.
    """

    def __init__(self, features: Iterable[Feature], strict: bool = False):
        self._owners: Dict[str, Feature] = {}
        self._ambiguous: Dict[str, List[FeatureKey]] = {}

        for feature in features:
            for signature in feature.direct_invocation_signatures:
                owner = self._owners.get(signature)
                if owner is None:
                    self._owners[signature] = feature
                elif owner.key != feature.key:
                    self._ambiguous.setdefault(signature, [owner.key]).append(feature.key)

        for signature, owners in self._ambiguous.items():
            if strict:
                raise AmbiguousSignatureOwnerError(signature, owners)
            logger.warning(
                f"Signature '{signature}' is declared by {len(owners)} features, "
                f"resolving to {owners[0]}"
            )

    def resolve_owner(self, signature: str) -> Optional[Feature]:
        """Get the feature owning a signature, or None if no feature declares it."""
        return self._owners.get(signature)

    @property
    def ambiguous_signatures(self) -> Dict[str, List[FeatureKey]]:
        """Signatures declared by more than one feature, with owners in registration order."""
        return {signature: list(owners) for signature, owners in self._ambiguous.items()}

    def __len__(self) -> int:
        return len(self._owners)
