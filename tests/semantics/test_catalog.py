import logging

from ladskit.graph import DataType, DeviceGraph
from ladskit.semantics import AFO_NAMESPACE_URI, DictionaryIds, ReferenceCatalog


def _graph_with(*ids):
    graph = DeviceGraph()
    namespace = graph.add_namespace(AFO_NAMESPACE_URI)
    for symbolic_id in ids:
        namespace.add_entry(symbolic_id)
    return graph


def test_add_references_counts_added_existing_missing(caplog):
    graph = _graph_with("manufacturer")
    node = graph.create_root("Device").add_variable("Manufacturer", DataType.STRING, "ACME")
    catalog = ReferenceCatalog()

    with caplog.at_level(logging.INFO, logger="ladskit.semantics.catalog"):
        first = catalog.add_references(node, DictionaryIds.manufacturer, "model_number", None)
        second = catalog.add_references(node, DictionaryIds.manufacturer)

    assert (first.added, first.existing, first.missing) == (1, 0, 1)
    assert (second.added, second.existing, second.missing) == (0, 1, 0)
    assert node.references() == ["ns=1;s=manufacturer"]
    assert catalog.reference_count == 1
    assert "Unable to find dictionary entry model_number" in caplog.text
    assert "Dictionary reference manufacturer already exists for Manufacturer" in caplog.text


def test_catalog_without_namespace_stays_inert(caplog):
    graph = DeviceGraph()
    node = graph.create_root("Device")
    catalog = ReferenceCatalog()
    assert catalog.installed is None

    with caplog.at_level(logging.INFO, logger="ladskit.semantics.catalog"):
        stats = catalog.add_references(node, DictionaryIds.manufacturer)
        # namespace added later is not picked up; the probe is final
        graph.add_namespace(AFO_NAMESPACE_URI).add_entry("manufacturer")
        again = catalog.add_references(node, DictionaryIds.manufacturer)

    assert catalog.installed is False
    assert stats.attempted == 0 and again.attempted == 0
    assert node.reference_count == 0
    assert caplog.text.count("Dictionary support unavailable") == 1


def test_none_node_is_ignored():
    catalog = ReferenceCatalog()
    assert catalog.add_references(None, DictionaryIds.sensor).attempted == 0
    assert catalog.installed is None


def test_resolve_uses_configured_namespace():
    graph = DeviceGraph()
    graph.add_namespace("urn:custom").add_entry("sensor")
    catalog = ReferenceCatalog("urn:custom")

    assert catalog.ensure_installed(graph.create_root("Device")) is True
    assert catalog.resolve(DictionaryIds.sensor).node_id == "ns=1;s=sensor"
    assert catalog.resolve("unknown") is None
