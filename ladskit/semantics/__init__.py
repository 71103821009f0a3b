"""
Semantic Annotation - Dictionary references on device models

WHAT: Catalog lookup of dictionary concepts and the default-reference binder
WHERE: ladskit/semantics/ - annotation subsystem
WHO: Device servers making their models interpretable without bespoke parsing

Annotation is best effort. A graph without the dictionary namespace turns
the catalog inert for good; missing entries and missing substructures are
absorbed locally and never surface as errors.
"""

from .binder import SemanticBinder  # noqa: F401
from .catalog import BindingStats, ReferenceCatalog  # noqa: F401
from .dictionary_ids import AFO_NAMESPACE_URI, DictionaryIds  # noqa: F401

__all__ = [
    "AFO_NAMESPACE_URI",
    "BindingStats",
    "DictionaryIds",
    "ReferenceCatalog",
    "SemanticBinder",
]
