"""
Track - Column definition bound to one live variable

WHAT: Immutable binding of a variable to display name, unit and value kind
WHERE: ladskit/recording/track.py - recording data layer
WHO: VariableDataRecorder deriving its columns at construction
TIME: Derived once, O(1)

Name derivation scopes the variable by its parent (``Temperature.SensorValue``).
With ``abbreviate`` set, sensor and current values render as ``PV`` and target
values as ``SP``. The long form is the default because it is what deployed
reports contain; the short form is opt-in through configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..graph.nodes import DataType, DeviceVariable, NUMERIC_TYPES

_PROCESS_VALUE_MARKERS = ("CurrentValue", "SensorValue")
_SET_POINT_MARKERS = ("TargetValue",)


class ValueKind(str, Enum):
    NUMERIC = "numeric"
    STRING = "string"


def value_kind_of(data_type: DataType) -> ValueKind:
    if data_type in NUMERIC_TYPES or data_type == DataType.BOOLEAN:
        return ValueKind.NUMERIC
    return ValueKind.STRING


def abbreviated_name(variable_name: str) -> str:
    if any(marker in variable_name for marker in _PROCESS_VALUE_MARKERS):
        return "PV"
    if any(marker in variable_name for marker in _SET_POINT_MARKERS):
        return "SP"
    return variable_name


@dataclass(frozen=True, slots=True)
class Track:
    """One recording column; compares sources by identity, never by name."""

    name: str
    unit: str
    source: DeviceVariable
    value_kind: ValueKind

    @classmethod
    def from_variable(cls, variable: DeviceVariable, *, abbreviate: bool = False) -> "Track":
        variable_name = variable.display_name
        leaf = abbreviated_name(variable_name) if abbreviate else variable_name
        parent = variable.parent
        name = f"{parent.display_name}.{leaf}" if parent is not None else leaf

        unit = ""
        units = variable.engineering_units
        if variable.is_analog and variable.is_numeric and units is not None:
            unit = units.display_name

        return cls(
            name=name,
            unit=unit,
            source=variable,
            value_kind=value_kind_of(variable.data_type),
        )

    @property
    def label(self) -> str:
        return f"{self.name} [{self.unit}]" if self.unit else self.name

    def is_bound_to(self, variable: DeviceVariable) -> bool:
        return self.source is variable

    def capture(self) -> object:
        """Read the source now, reducing localized text and enumerations to strings."""

        return self.source.display_value()


__all__ = ["Track", "ValueKind", "abbreviated_name", "value_kind_of"]
