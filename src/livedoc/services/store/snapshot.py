"""
Snapshot files.

A snapshot is a JSON document holding features and the invocations recorded
for each product version, for example::

    {
        "features": [
            {"product": "Shop", "group": "Orders", "title": "Checkout",
             "version": "1.0.0", "directInvocationSignatures": ["Cart.Checkout()"]}
        ],
        "invocations": [
            {"product": "Shop", "version": "1.0.0", "invocations": [
                {"signature": "Cart.Checkout()", "invokedSignatures": ["Payment.Charge()"]}
            ]}
        ]
    }
"""
import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from livedoc.models.feature import Feature, Invocation
from livedoc.services.store.memory import InMemoryFeatureStore
from livedoc.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ScopeInvocations(BaseModel):
    product: str
    version: str
    invocations: list[Invocation] = Field(default_factory=list)


class Snapshot(BaseModel):
    features: list[Feature] = Field(default_factory=list)
    invocations: list[ScopeInvocations] = Field(default_factory=list)


def load_snapshot(path: Path) -> InMemoryFeatureStore:
    """Load a snapshot file into a new in-memory store.

    Raises:
        ConfigurationError: If the file cannot be read or is not a valid snapshot
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        snapshot = Snapshot.model_validate(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read snapshot {path}: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid snapshot {path}: {e.error_count()} validation errors",
            context={"errors": e.errors(include_url=False)},
        ) from e

    store = InMemoryFeatureStore()
    store.persist_features(snapshot.features)
    for scope in snapshot.invocations:
        store.persist_invocations(scope.product, scope.version, scope.invocations)

    logger.info(f"Loaded {len(snapshot.features)} features from snapshot {path}")
    return store
