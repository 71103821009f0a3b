"""
Reference Catalog - Symbolic concept id to dictionary entry lookup

WHAT: Resolves dictionary concept ids and adds annotation edges onto nodes
WHERE: ladskit/semantics/catalog.py - leaf service used by the binder
WHO: SemanticBinder and device servers adding custom references
TIME: Namespace probe once per catalog, resolve O(1), add O(#ids)

The catalog probes the device graph for its dictionary namespace on first
use and remembers the outcome for its whole lifetime. When the namespace is
absent every later call is a silent no-op; nothing retries the probe.

Annotation is best effort:
- unresolved ids are logged as warnings and skipped
- an edge that already exists is logged at info level and counted, not raised
- there is no rollback, one bad id never blocks the others
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..graph.address_space import DictionaryEntry, DictionaryNamespace
from ..graph.nodes import HAS_DICTIONARY_ENTRY, DeviceNode
from .dictionary_ids import AFO_NAMESPACE_URI

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BindingStats:
    """Outcome counters of one or more ``add_references`` calls."""

    added: int = 0
    existing: int = 0
    missing: int = 0

    def __iadd__(self, other: "BindingStats") -> "BindingStats":
        self.added += other.added
        self.existing += other.existing
        self.missing += other.missing
        return self

    @property
    def attempted(self) -> int:
        return self.added + self.existing + self.missing

    def as_dict(self) -> Dict[str, Any]:
        return {
            "added": self.added,
            "existing": self.existing,
            "missing": self.missing,
            "attempted": self.attempted,
        }


class ReferenceCatalog:
    """Explicit, non-singleton dictionary lookup service."""

    def __init__(
        self,
        namespace_uri: str = AFO_NAMESPACE_URI,
        *,
        reference_type: str = HAS_DICTIONARY_ENTRY,
    ) -> None:
        self.namespace_uri = namespace_uri
        self.reference_type = reference_type
        self.reference_count = 0
        self._installed: Optional[bool] = None
        self._namespace: Optional[DictionaryNamespace] = None

    @property
    def installed(self) -> Optional[bool]:
        """``None`` until probed, then final."""

        return self._installed

    def ensure_installed(self, node: Optional[DeviceNode]) -> bool:
        if self._installed is not None:
            return self._installed
        if node is None:
            return False
        namespace = node.graph.get_namespace(self.namespace_uri)
        if namespace is None:
            self._installed = False
            logger.info(f"Dictionary support unavailable: namespace {self.namespace_uri} not found")
        else:
            self._namespace = namespace
            self._installed = True
        return self._installed

    def resolve(self, symbolic_id: str) -> Optional[DictionaryEntry]:
        if not self._installed or self._namespace is None:
            return None
        return self._namespace.find_entry(str(symbolic_id))

    def add_references(self, node: Optional[DeviceNode], *ids: Optional[str]) -> BindingStats:
        stats = BindingStats()
        if node is None:
            return stats
        if not self.ensure_installed(node):
            return stats

        for symbolic_id in ids:
            if symbolic_id is None:
                continue
            entry = self.resolve(symbolic_id)
            if entry is None:
                logger.warning(f"Unable to find dictionary entry {symbolic_id}")
                stats.missing += 1
                continue
            if node.add_reference(self.reference_type, entry.node_id):
                self.reference_count += 1
                stats.added += 1
            else:
                logger.info(f"Dictionary reference {symbolic_id} already exists for {node.name}")
                stats.existing += 1
        return stats


__all__ = ["BindingStats", "ReferenceCatalog"]
