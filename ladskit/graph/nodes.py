"""
Device Nodes - In-memory device graph node handles

WHAT: Typed node handles with a stable role classification and annotation edges
WHERE: ladskit/graph/nodes.py - device graph boundary
WHO: Semantic binder, recorders and exporters walking a device model
TIME: Child lookup O(1), edge insertion O(1), event delivery O(subscribers)

A laboratory device is modelled as a tree of objects (device, functional
units, functions, program manager, results) whose leaves are typed variables.
Every node declares a ``NodeRole`` so consumers dispatch on a closed set of
roles instead of probing runtime types. Annotation edges are kept in an
insertion-ordered set keyed by ``(reference_type, target_id)`` so adding the
same edge twice reports "already present" instead of duplicating it.

Boundary Notes:
- Topology changes only happen through ``add_object`` / ``add_variable``
- Annotation edges never create children
- Event delivery is synchronous and in subscription order
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Iterator, Optional, Sequence

from .errors import DuplicateChildError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .address_space import DeviceGraph

HAS_DICTIONARY_ENTRY = "HasDictionaryEntry"

EventHandler = Callable[[Dict[str, Any]], None]
ValueChangeHandler = Callable[[Any], None]


class NodeRole(str, Enum):
    """Structural role of a node inside a device model."""

    DEVICE = "device"
    COMPONENT = "component"
    FUNCTIONAL_UNIT = "functional_unit"
    SENSOR_FUNCTION = "sensor_function"
    CONTROL_FUNCTION = "control_function"
    STATE_MACHINE = "state_machine"
    PROGRAM_MANAGER = "program_manager"
    PROGRAM_TEMPLATE = "program_template"
    ACTIVE_PROGRAM = "active_program"
    RESULT = "result"
    RESULT_FILE = "result_file"
    FILE = "file"
    FOLDER = "folder"
    VARIABLE = "variable"
    UNKNOWN = "unknown"


class DataType(str, Enum):
    """Value types a ``DeviceVariable`` can carry."""

    BOOLEAN = "Boolean"
    INT32 = "Int32"
    UINT32 = "UInt32"
    INT64 = "Int64"
    FLOAT = "Float"
    DOUBLE = "Double"
    STRING = "String"
    LOCALIZED_TEXT = "LocalizedText"
    ENUMERATION = "Enumeration"
    DATETIME = "DateTime"
    BYTE_STRING = "ByteString"


NUMERIC_TYPES = frozenset(
    {DataType.INT32, DataType.UINT32, DataType.INT64, DataType.FLOAT, DataType.DOUBLE}
)


@dataclass(frozen=True, slots=True)
class LocalizedText:
    text: str
    locale: str = "en"

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class EUInformation:
    """Engineering unit metadata attached to analog variables."""

    display_name: str
    description: str = ""
    unit_id: int = -1
    namespace_uri: str = "http://www.opcfoundation.org/UA/units/un/cefact"


class DeviceNode:
    """Object node in the device graph."""

    def __init__(
        self,
        graph: "DeviceGraph",
        name: str,
        role: NodeRole = NodeRole.UNKNOWN,
        *,
        display_name: Optional[str] = None,
        description: str = "",
        parent: Optional["DeviceNode"] = None,
    ) -> None:
        self.graph = graph
        self.name = name
        self.role = role
        self.display_name = display_name or name
        self.description = description
        self.parent = parent
        self.node_id = f"n_{uuid.uuid4().hex[:12]}"
        self._children: Dict[str, DeviceNode] = {}
        self._references: Dict[tuple[str, str], None] = {}
        self._subscribers: Dict[str, EventHandler] = {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.browse_path!r} role={self.role.value}>"

    # ------------------ topology ------------------
    @property
    def browse_path(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.browse_path}/{self.name}"

    @property
    def children(self) -> tuple["DeviceNode", ...]:
        return tuple(self._children.values())

    def __iter__(self) -> Iterator["DeviceNode"]:
        return iter(self._children.values())

    def get_child(self, name: str) -> Optional["DeviceNode"]:
        return self._children.get(name)

    def find(self, *path: str) -> Optional["DeviceNode"]:
        """Walk a relative browse path; ``None`` as soon as a segment is missing."""

        node: Optional[DeviceNode] = self
        for segment in path:
            if node is None:
                return None
            node = node.get_child(segment)
        return node

    def children_with_role(self, *roles: NodeRole) -> list["DeviceNode"]:
        return [child for child in self._children.values() if child.role in roles]

    def add_object(
        self,
        name: str,
        role: NodeRole = NodeRole.FOLDER,
        *,
        display_name: Optional[str] = None,
        description: str = "",
    ) -> "DeviceNode":
        node = DeviceNode(
            self.graph,
            name,
            role,
            display_name=display_name,
            description=description,
            parent=self,
        )
        return self._attach(node)

    def add_variable(
        self,
        name: str,
        data_type: DataType = DataType.DOUBLE,
        value: Any = None,
        *,
        display_name: Optional[str] = None,
        description: str = "",
        is_analog: bool = False,
        engineering_units: Optional[EUInformation] = None,
        enum_strings: Sequence[str] = (),
    ) -> "DeviceVariable":
        variable = DeviceVariable(
            self.graph,
            name,
            data_type,
            value,
            display_name=display_name,
            description=description,
            parent=self,
            is_analog=is_analog,
            engineering_units=engineering_units,
            enum_strings=enum_strings,
        )
        return self._attach(variable)

    def _attach(self, node: "DeviceNode") -> Any:
        if node.name in self._children:
            raise DuplicateChildError(self.browse_path, node.name)
        self._children[node.name] = node
        self.graph.register(node)
        return node

    # ------------------ annotation edges ------------------
    def add_reference(self, reference_type: str, target_id: str) -> bool:
        """Add an annotation edge; ``False`` when the edge already exists."""

        key = (reference_type, target_id)
        if key in self._references:
            return False
        self._references[key] = None
        return True

    def has_reference(self, reference_type: str, target_id: str) -> bool:
        return (reference_type, target_id) in self._references

    def references(self, reference_type: Optional[str] = None) -> list[str]:
        """Target ids of annotation edges, in insertion order."""

        return [
            target
            for ref_type, target in self._references
            if reference_type is None or ref_type == reference_type
        ]

    @property
    def reference_count(self) -> int:
        return len(self._references)

    # ------------------ events ------------------
    def subscribe(self, handler: EventHandler) -> str:
        sub_id = f"sub_{uuid.uuid4().hex[:12]}"
        self._subscribers[sub_id] = handler
        return sub_id

    def unsubscribe(self, subscription_id: str) -> bool:
        return self._subscribers.pop(subscription_id, None) is not None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def raise_event(self, message: str, severity: int = 0, **fields: Any) -> Dict[str, Any]:
        """Deliver an event notification to every subscriber, in order."""

        notification: Dict[str, Any] = {
            "time": datetime.now(timezone.utc),
            "severity": severity,
            "message": message,
            "source_name": self.display_name,
            "source_node": self.node_id,
        }
        notification.update(fields)
        for handler in list(self._subscribers.values()):
            handler(notification)
        return notification


class DeviceVariable(DeviceNode):
    """Leaf node carrying a typed value."""

    def __init__(
        self,
        graph: "DeviceGraph",
        name: str,
        data_type: DataType = DataType.DOUBLE,
        value: Any = None,
        *,
        display_name: Optional[str] = None,
        description: str = "",
        parent: Optional[DeviceNode] = None,
        is_analog: bool = False,
        engineering_units: Optional[EUInformation] = None,
        enum_strings: Iterable[str] = (),
    ) -> None:
        super().__init__(
            graph,
            name,
            NodeRole.VARIABLE,
            display_name=display_name,
            description=description,
            parent=parent,
        )
        self.data_type = data_type
        self.is_analog = is_analog
        self.engineering_units = engineering_units
        self.enum_strings = tuple(enum_strings)
        self._value = value
        self._change_handlers: Dict[str, ValueChangeHandler] = {}

    @property
    def is_numeric(self) -> bool:
        return self.data_type in NUMERIC_TYPES

    def read(self) -> Any:
        return self._value

    def write(self, value: Any) -> None:
        self._value = value
        for handler in list(self._change_handlers.values()):
            handler(value)

    def display_value(self) -> Any:
        """Current value with localized text and enumerations reduced to strings."""

        value = self._value
        if isinstance(value, LocalizedText):
            return value.text
        if self.data_type == DataType.LOCALIZED_TEXT:
            return "" if value is None else str(value)
        if self.data_type == DataType.ENUMERATION:
            if isinstance(value, int) and 0 <= value < len(self.enum_strings):
                return self.enum_strings[value]
            return "" if value is None else str(value)
        return value

    def on_change(self, handler: ValueChangeHandler) -> str:
        sub_id = f"chg_{uuid.uuid4().hex[:12]}"
        self._change_handlers[sub_id] = handler
        return sub_id

    def remove_change_handler(self, subscription_id: str) -> bool:
        return self._change_handlers.pop(subscription_id, None) is not None


__all__ = [
    "HAS_DICTIONARY_ENTRY",
    "NUMERIC_TYPES",
    "DataType",
    "DeviceNode",
    "DeviceVariable",
    "EUInformation",
    "EventHandler",
    "LocalizedText",
    "NodeRole",
    "ValueChangeHandler",
]
