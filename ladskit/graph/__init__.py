"""
Device Graph - In-memory rendition of the device model runtime

WHAT: Typed nodes, variables, dictionary namespaces and event subscriptions
WHERE: ladskit/graph/ - boundary consumed by semantics and recording
WHO: Device servers building models; binder and recorders reading them

Network transport, wire protocol and persistence of a real device server are
out of scope. This package exposes only what annotation and recording need:
role classification, named child collections, typed values, annotation edges
with reverse lookup and a synchronous event-subscription primitive.
"""

from .address_space import DeviceGraph, DictionaryEntry, DictionaryNamespace  # noqa: F401
from .errors import DuplicateChildError, GraphError, NodeNotFoundError, NotAVariableError  # noqa: F401
from .events import EventChannel  # noqa: F401
from .nodes import (  # noqa: F401
    HAS_DICTIONARY_ENTRY,
    DataType,
    DeviceNode,
    DeviceVariable,
    EUInformation,
    LocalizedText,
    NodeRole,
)

__all__ = [
    "HAS_DICTIONARY_ENTRY",
    "DataType",
    "DeviceGraph",
    "DeviceNode",
    "DeviceVariable",
    "DictionaryEntry",
    "DictionaryNamespace",
    "DuplicateChildError",
    "EUInformation",
    "EventChannel",
    "GraphError",
    "LocalizedText",
    "NodeNotFoundError",
    "NodeRole",
    "NotAVariableError",
]
