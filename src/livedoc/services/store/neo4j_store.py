"""
Neo4j backed feature store.

Stores features and recorded invocations in a Neo4j graph database and
reads them back one product version at a time.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from neo4j import GraphDatabase as Neo4jGraphDatabase, Driver, Transaction
from neo4j.exceptions import Neo4jError, ServiceUnavailable

from livedoc.core.interfaces import IFeatureCatalog, IInvocationLedger
from livedoc.models.feature import Feature, Invocation
from livedoc.utils.config import LivedocSettings
from livedoc.utils.errors import ServiceError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class Neo4jFeatureStore(IFeatureCatalog, IInvocationLedger):
    """Feature catalog and invocation ledger stored in Neo4j"""

    def __init__(self, settings: LivedocSettings):
        """
        Initialize Neo4j connection and schema based on settings.

        Args:
            settings: The application settings object.
        """
        self.driver: Optional[Driver] = None
        self.enabled = settings.graph_enabled

        if not self.enabled:
            logger.info("Neo4j integration is disabled by configuration.")
            return

        try:
            logger.info(f"Attempting Neo4j connection with URI: {settings.neo4j_uri}")
            self.driver = Neo4jGraphDatabase.driver(
                settings.neo4j_uri,
                auth=(settings.neo4j_user, settings.neo4j_password)
            )
            self.driver.verify_connectivity()

            self._initialize_schema()
            logger.info(f"Connected to Neo4j at {settings.neo4j_uri}")

        except (ServiceUnavailable, Neo4jError) as e:
            logger.warning(f"Neo4j connection to {settings.neo4j_uri} failed. Stored features will be unavailable. Reason: {e}")
            if self.driver:
                self.driver.close()
            self.driver = None

    @property
    def is_healthy(self) -> bool:
        """Check if the Neo4j connection is alive and configured."""
        return self.driver is not None

    def close(self):
        """Close the Neo4j driver connection"""
        if self.driver:
            self.driver.close()
            logger.info("Neo4j connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _initialize_schema(self):
        """Initialize Neo4j schema with constraints and indices"""
        with self.driver.session() as session:
            try:
                session.run("""
                    CREATE CONSTRAINT feature_identity_unique IF NOT EXISTS
                    FOR (f:Feature) REQUIRE (f.product, f.group, f.title, f.version) IS UNIQUE
                """)

                session.run("""
                    CREATE CONSTRAINT invocation_signature_unique IF NOT EXISTS
                    FOR (i:Invocation) REQUIRE (i.product, i.version, i.signature) IS UNIQUE
                """)

                session.run("""
                    CREATE INDEX feature_scope_index IF NOT EXISTS
                    FOR (f:Feature) ON (f.product, f.version)
                """)

                logger.info("Neo4j schema initialized successfully")
            except Neo4jError as e:
                logger.error(f"Error initializing Neo4j schema: {e}")

    def _require_driver(self) -> Driver:
        if not self.is_healthy:
            raise ServiceUnavailableError("Graph database is not available.")
        return self.driver

    def persist_features(self, features: Iterable[Feature]) -> int:
        """Create or update features. A feature keeps its catalog position when updated."""
        rows = [
            {
                "seq": seq,
                "product": feature.product,
                "group": feature.group,
                "title": feature.title,
                "version": feature.version,
                "signatures": list(feature.direct_invocation_signatures),
            }
            for seq, feature in enumerate(features)
        ]
        if not rows:
            return 0

        driver = self._require_driver()
        try:
            with driver.session() as session:
                count = session.execute_write(self._persist_features_tx, rows)
        except Neo4jError as e:
            logger.error(f"Error persisting features: {e}")
            raise ServiceError(f"Failed to persist features: {e}") from e

        logger.info(f"Persisted {count} features")
        return count

    def _persist_features_tx(self, tx: Transaction, rows: List[Dict[str, Any]]) -> int:
        """Transaction function to create or update features"""
        query = """
        UNWIND $rows AS row
        MERGE (f:Feature {product: row.product, group: row.group, title: row.title, version: row.version})
        ON CREATE SET
            f.created = timestamp(),
            f.seq = row.seq
        SET f.signatures = row.signatures
        RETURN count(f) AS feature_count
        """
        record = tx.run(query, {"rows": rows}).single()
        return record["feature_count"] if record else 0

    def persist_invocations(self, product: str, version: str, invocations: Iterable[Invocation]) -> int:
        """Create or update the invocations recorded for a product version."""
        rows = [
            {"signature": invocation.signature, "invoked": list(invocation.invoked_signatures)}
            for invocation in invocations
        ]
        if not rows:
            return 0

        driver = self._require_driver()
        try:
            with driver.session() as session:
                count = session.execute_write(self._persist_invocations_tx, product, version, rows)
        except Neo4jError as e:
            logger.error(f"Error persisting invocations for {product}@{version}: {e}")
            raise ServiceError(f"Failed to persist invocations for {product}@{version}: {e}") from e

        logger.info(f"Persisted {count} invocations for {product}@{version}")
        return count

    def _persist_invocations_tx(
        self, tx: Transaction,
        product: str,
        version: str,
        rows: List[Dict[str, Any]]
    ) -> int:
        """Transaction function to create or update invocations"""
        query = """
        UNWIND $rows AS row
        MERGE (i:Invocation {product: $product, version: $version, signature: row.signature})
        SET i.invoked = row.invoked
        RETURN count(i) AS invocation_count
        """
        record = tx.run(query, {"product": product, "version": version, "rows": rows}).single()
        return record["invocation_count"] if record else 0

    def list_features(
        self,
        product: Optional[str] = None,
        version: Optional[str] = None
    ) -> List[Feature]:
        driver = self._require_driver()
        try:
            with driver.session() as session:
                records = session.execute_read(self._list_features_tx, product, version)
        except Neo4jError as e:
            logger.error(f"Error listing features: {e}")
            raise ServiceError(f"Failed to list features: {e}") from e

        return [
            Feature(
                product=record["product"],
                group=record["group"],
                title=record["title"],
                version=record["version"],
                direct_invocation_signatures=record["signatures"] or (),
            )
            for record in records
        ]

    def _list_features_tx(self, tx: Transaction, product: Optional[str], version: Optional[str]) -> List[Dict[str, Any]]:
        """Transaction function to list features in catalog order"""
        query = """
        MATCH (f:Feature)
        WHERE ($product IS NULL OR f.product = $product)
          AND ($version IS NULL OR f.version = $version)
        RETURN f.product AS product, f.group AS group, f.title AS title,
               f.version AS version, f.signatures AS signatures
        ORDER BY f.created, f.seq
        """
        return tx.run(query, {"product": product, "version": version}).data()

    def get_invocations(self, product: str, version: str) -> Dict[str, List[str]]:
        driver = self._require_driver()
        try:
            with driver.session() as session:
                records = session.execute_read(self._get_invocations_tx, product, version)
        except Neo4jError as e:
            logger.error(f"Error reading invocations for {product}@{version}: {e}")
            raise ServiceError(f"Failed to read invocations for {product}@{version}: {e}") from e

        logger.debug(f"Read {len(records)} invocations for {product}@{version}")
        return {record["signature"]: list(record["invoked"] or []) for record in records}

    def _get_invocations_tx(self, tx: Transaction, product: str, version: str) -> List[Dict[str, Any]]:
        """Transaction function to read the invocations of a product version"""
        query = """
        MATCH (i:Invocation {product: $product, version: $version})
        RETURN i.signature AS signature, i.invoked AS invoked
        """
        return tx.run(query, {"product": product, "version": version}).data()
