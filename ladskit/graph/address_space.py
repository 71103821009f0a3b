"""
Device Graph - Node registry and dictionary namespaces

WHAT: Registry of device nodes plus the dictionary namespaces they annotate against
WHERE: ladskit/graph/address_space.py - device graph boundary
WHO: ReferenceCatalog (namespace probing), exporters (reverse edge lookup)
TIME: Node lookup O(1), reverse edge lookup O(n) over registered nodes

Dictionary namespaces hold entries addressed by symbolic id. A namespace
that was never added is simply absent, which is how a server without
ontology support looks to the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .errors import NodeNotFoundError, NotAVariableError
from .nodes import DeviceNode, DeviceVariable, NodeRole


@dataclass(frozen=True, slots=True)
class DictionaryEntry:
    """Handle of one concept inside a dictionary namespace."""

    node_id: str
    symbolic_id: str
    label: str = ""
    iri: str = ""


@dataclass(slots=True)
class DictionaryNamespace:
    uri: str
    index: int
    entries: Dict[str, DictionaryEntry] = field(default_factory=dict)

    def add_entry(self, symbolic_id: str, *, label: str = "", iri: str = "") -> DictionaryEntry:
        entry = self.entries.get(symbolic_id)
        if entry is None:
            entry = DictionaryEntry(
                node_id=f"ns={self.index};s={symbolic_id}",
                symbolic_id=symbolic_id,
                label=label or symbolic_id.replace("_", " "),
                iri=iri,
            )
            self.entries[symbolic_id] = entry
        return entry

    def find_entry(self, symbolic_id: str) -> Optional[DictionaryEntry]:
        return self.entries.get(symbolic_id)

    def __len__(self) -> int:
        return len(self.entries)


class DeviceGraph:
    """Owns every node of one device model and the namespaces it references."""

    def __init__(self) -> None:
        self._nodes: Dict[str, DeviceNode] = {}
        self._namespaces: Dict[str, DictionaryNamespace] = {}

    def create_root(
        self,
        name: str,
        role: NodeRole = NodeRole.DEVICE,
        *,
        display_name: Optional[str] = None,
        description: str = "",
    ) -> DeviceNode:
        node = DeviceNode(self, name, role, display_name=display_name, description=description)
        self.register(node)
        return node

    def register(self, node: DeviceNode) -> None:
        self._nodes[node.node_id] = node

    def __iter__(self) -> Iterator[DeviceNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def find_node(self, node_id: str) -> Optional[DeviceNode]:
        return self._nodes.get(node_id)

    def get_node(self, node_id: str) -> DeviceNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(f"Unknown node id '{node_id}'")
        return node

    def get_variable(self, node_id: str) -> DeviceVariable:
        node = self.get_node(node_id)
        if not isinstance(node, DeviceVariable):
            raise NotAVariableError(f"Node '{node.browse_path}' is not a variable")
        return node

    # ------------------ namespaces ------------------
    def add_namespace(self, uri: str) -> DictionaryNamespace:
        namespace = self._namespaces.get(uri)
        if namespace is None:
            namespace = DictionaryNamespace(uri=uri, index=len(self._namespaces) + 1)
            self._namespaces[uri] = namespace
        return namespace

    def get_namespace(self, uri: str) -> Optional[DictionaryNamespace]:
        return self._namespaces.get(uri)

    def find_dictionary_entry(self, node_id: str) -> Optional[DictionaryEntry]:
        for namespace in self._namespaces.values():
            for entry in namespace.entries.values():
                if entry.node_id == node_id:
                    return entry
        return None

    # ------------------ edges ------------------
    def referencing_nodes(self, target_id: str, reference_type: Optional[str] = None) -> list[DeviceNode]:
        """Reverse lookup: nodes holding an annotation edge to ``target_id``."""

        return [
            node
            for node in self._nodes.values()
            if target_id in node.references(reference_type)
        ]

    def edge_count(self, reference_type: Optional[str] = None) -> int:
        return sum(len(node.references(reference_type)) for node in self._nodes.values())


__all__ = ["DeviceGraph", "DictionaryEntry", "DictionaryNamespace"]
