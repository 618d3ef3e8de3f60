import pytest
from unittest.mock import MagicMock

from livedoc.core.interfaces import IFeatureCatalog, IInvocationLedger
from livedoc.models.feature import Invocation
from livedoc.services.dependency import DependencyService
from livedoc.utils.errors import FeatureNotFoundError, ServiceUnavailableError

PRODUCT = "TestProduct"
VERSION = "0.0.0"


@pytest.fixture
def service(store):
    return DependencyService(store, store)


def test_feature_graphs_can_be_discovered(service, store, make_feature, base_invocations):
    store.persist_features([
        make_feature("CallingFeature", "SomeClass.Foo()"),
        make_feature("CalledFeature", "SomeOtherClass.Bar()"),
    ])
    store.persist_invocations(PRODUCT, VERSION, base_invocations)

    graphs = service.get_top_level_feature_graphs()

    assert len(graphs) == 1, f"There are {len(graphs)} graphs, instead of just one."
    assert graphs[0].feature_name == "CallingFeature"
    assert len(graphs[0].depends_on) == 1
    assert graphs[0].depends_on[0].feature_name == "CalledFeature"


def test_feature_graph_discovery_is_resistant_to_features_without_signatures(service, store, make_feature, base_invocations):
    store.persist_features([
        make_feature("CallingFeature", "SomeClass.Foo()"),
        make_feature("CalledFeature", "SomeOtherClass.Bar()"),
        make_feature("UnlinkedFeature"),
    ])
    store.persist_invocations(PRODUCT, VERSION, base_invocations)

    graphs = service.get_top_level_feature_graphs()

    assert [graph.feature_name for graph in graphs] == ["CallingFeature", "UnlinkedFeature"]


def test_mid_tree_feature_graph_can_be_retrieved(service, store, make_feature, base_invocations):
    store.persist_features([
        make_feature("CallingFeature", "SomeClass.Foo()"),
        make_feature("CalledFeature", "SomeOtherClass.Bar()"),
        make_feature("AnotherCalledFeature", "SomeOtherClass.JuiceBar()"),
    ])
    store.persist_invocations(PRODUCT, VERSION, base_invocations)

    graph = service.get_feature_graph(PRODUCT, "CalledFeature", VERSION)

    assert graph.feature_name == "CalledFeature"
    assert [node.feature_name for node in graph.depends_on] == ["AnotherCalledFeature"]
    assert [node.feature_name for node in graph.dependants] == ["CallingFeature"]


def test_feature_graph_can_be_retrieved_when_its_code_has_recursion(service, store, make_feature, base_invocations):
    store.persist_features([
        make_feature("CallingFeature", "SomeClass.Foo()"),
        make_feature("CalledFeature", "SomeOtherClass.Bar()"),
        make_feature("AnotherCalledFeature", "SomeOtherClass.JuiceBar()"),
    ])
    store.persist_invocations(PRODUCT, VERSION, base_invocations + [
        Invocation(signature="SomeOtherClass.JuiceBar()", invoked_signatures=["SomeOtherClass.Bar()"]),
    ])

    graph = service.get_feature_graph(PRODUCT, "CalledFeature", VERSION)

    assert graph.feature_name == "CalledFeature"
    assert [node.feature_name for node in graph.depends_on] == ["AnotherCalledFeature"]
    assert [node.feature_name for node in graph.dependants] == ["CallingFeature", "AnotherCalledFeature"]
    # Both directions of the cycle lead to the same node
    assert graph.depends_on[0] is graph.dependants[1]
    assert graph.depends_on[0].depends_on[0] is graph


def test_get_feature_graph_not_found(service, store, make_feature):
    store.persist_features([make_feature("CallingFeature", "SomeClass.Foo()")])

    with pytest.raises(FeatureNotFoundError) as exc_info:
        service.get_feature_graph(PRODUCT, "MissingFeature", VERSION)

    assert exc_info.value.feature_name == "MissingFeature"
    assert exc_info.value.error_code == "FEATURE_NOT_FOUND"


def test_get_feature_graph_wrong_version_not_found(service, store, make_feature):
    store.persist_features([make_feature("CallingFeature", "SomeClass.Foo()")])

    with pytest.raises(FeatureNotFoundError):
        service.get_feature_graph(PRODUCT, "CallingFeature", "1.0.0")


def test_top_level_graphs_span_all_scopes_in_catalog_order(service, store, make_feature):
    store.persist_features([
        make_feature("Checkout", "Cart.Checkout()", product="Shop", version="1.0"),
        make_feature("Payment", "Payment.Charge()", product="Shop", version="1.0"),
        make_feature("Checkout", "Cart.Checkout()", product="Shop", version="2.0"),
        make_feature("Payment", "Payment.Charge()", product="Shop", version="2.0"),
    ])
    # Only version 1.0 has a recorded call graph
    store.persist_invocations("Shop", "1.0", [
        Invocation(signature="Cart.Checkout()", invoked_signatures=["Payment.Charge()"]),
    ])

    graphs = service.get_top_level_feature_graphs()

    assert [(graph.feature_name, graph.version) for graph in graphs] == [
        ("Checkout", "1.0"),
        ("Checkout", "2.0"),
        ("Payment", "2.0"),
    ]


def test_top_level_graphs_restricted_to_configured_scopes(store, make_feature):
    store.persist_features([
        make_feature("Checkout", product="Shop", version="1.0"),
        make_feature("Checkout", product="Shop", version="2.0"),
    ])
    service = DependencyService(store, store, scopes=[("Shop", "2.0")])

    graphs = service.get_top_level_feature_graphs()

    assert [graph.version for graph in graphs] == ["2.0"]


def test_each_query_fetches_scope_once():
    catalog = MagicMock(spec=IFeatureCatalog)
    ledger = MagicMock(spec=IInvocationLedger)
    catalog.list_features.return_value = []
    ledger.get_invocations.return_value = {}
    service = DependencyService(catalog, ledger, scopes=[(PRODUCT, VERSION)])

    assert service.get_top_level_feature_graphs() == []

    catalog.list_features.assert_called_once_with(PRODUCT, VERSION)
    ledger.get_invocations.assert_called_once_with(PRODUCT, VERSION)


def test_store_failures_propagate():
    catalog = MagicMock(spec=IFeatureCatalog)
    ledger = MagicMock(spec=IInvocationLedger)
    catalog.list_features.side_effect = ServiceUnavailableError("Graph database is not available.")
    service = DependencyService(catalog, ledger)

    with pytest.raises(ServiceUnavailableError):
        service.get_feature_graph(PRODUCT, "CalledFeature", VERSION)


def test_feature_cycles(service, store, make_feature, base_invocations):
    store.persist_features([
        make_feature("CallingFeature", "SomeClass.Foo()"),
        make_feature("CalledFeature", "SomeOtherClass.Bar()"),
        make_feature("AnotherCalledFeature", "SomeOtherClass.JuiceBar()"),
    ])
    store.persist_invocations(PRODUCT, VERSION, base_invocations + [
        Invocation(signature="SomeOtherClass.JuiceBar()", invoked_signatures=["SomeOtherClass.Bar()"]),
    ])

    cycles = service.get_feature_cycles(PRODUCT, VERSION)

    assert [[key.title for key in cycle] for cycle in cycles] == [["CalledFeature", "AnotherCalledFeature"]]
