"""
Feature catalog and invocation ledger implementations.
"""

from .memory import InMemoryFeatureStore
from .neo4j_store import Neo4jFeatureStore
from .snapshot import load_snapshot

__all__ = [
    "InMemoryFeatureStore",
    "Neo4jFeatureStore",
    "load_snapshot",
]
