"""Pytest configuration for resources/tests.

Shared fixtures for the feature dependency tests: a feature factory, the
call graph used by the dependency scenarios and a mocked Neo4j driver.
"""

import pytest
from unittest.mock import MagicMock, patch

from livedoc.models.feature import Feature, Invocation
from livedoc.services.store.memory import InMemoryFeatureStore
from livedoc.utils.config import LivedocSettings

PRODUCT = "TestProduct"
VERSION = "0.0.0"


def create_feature(feature_name: str, *signatures: str, product: str = PRODUCT, version: str = VERSION) -> Feature:
    return Feature(
        product=product,
        group="TestGroup",
        title=feature_name,
        version=version,
        direct_invocation_signatures=signatures,
    )


@pytest.fixture
def make_feature():
    return create_feature


@pytest.fixture
def base_invocations():
    return [
        Invocation(
            signature="SomeClass.Foo()",
            invoked_signatures=["SomeClass.Foo(System.String)", "SomeOtherClass.Bar()"],
        ),
        Invocation(
            signature="SomeOtherClass.Bar()",
            invoked_signatures=["SomeOtherClass.JuiceBar()"],
        ),
    ]


@pytest.fixture
def store():
    return InMemoryFeatureStore()


@pytest.fixture
def mock_neo4j_driver():
    with patch('livedoc.services.store.neo4j_store.Neo4jGraphDatabase') as mock_driver_class:
        mock_driver = MagicMock()
        mock_driver_class.driver.return_value = mock_driver
        yield mock_driver


@pytest.fixture
def mock_settings():
    """Fixture for LivedocSettings."""
    return LivedocSettings(
        neo4j_uri="bolt://localhost:7687",
        neo4j_user="neo4j",
        neo4j_password="password",
        graph_enabled=True,
    )
