"""Raise events on an event source whenever a watched variable changes.

Event recorders only see what is raised on their source. These reporters
bridge value changes of individual variables (set points, discrete states)
into that event stream with a human readable message.
"""

from __future__ import annotations

from typing import Any, Optional

from ..graph.nodes import DeviceNode, DeviceVariable

_UNSET = object()


def raise_event(node: Optional[DeviceNode], message: str, severity: int = 0) -> None:
    if node is None:
        return
    node.raise_event(message, severity)


class ValueChangedEventReporter:
    """Raise ``"<source> <variable> changed to <value>."`` on every real change.

    The value present at installation (or the first value written when the
    variable starts out empty) only primes the reporter; no event is raised
    for it.
    """

    @classmethod
    def install(cls, event_source: DeviceNode, variable: DeviceVariable, **kwargs: Any) -> "ValueChangedEventReporter":
        return cls(event_source, variable, **kwargs)

    def __init__(self, event_source: DeviceNode, variable: DeviceVariable) -> None:
        self.event_source = event_source
        self.variable = variable
        self.previous_value: Any = _UNSET
        self._subscription: Optional[str] = variable.on_change(self.on_changed)
        if variable.read() is not None:
            self.previous_value = variable.read()

    def message(self, value: Any) -> str:
        return f"{self.event_source.display_name} {self.variable.display_name} changed to {value}."

    def on_changed(self, value: Any) -> None:
        if self.previous_value is not _UNSET and value != self.previous_value:
            raise_event(self.event_source, self.message(value))
        self.previous_value = value

    def uninstall(self) -> None:
        if self._subscription is not None:
            self.variable.remove_change_handler(self._subscription)
            self._subscription = None


class AnalogValueChangedEventReporter(ValueChangedEventReporter):
    def __init__(self, event_source: DeviceNode, variable: DeviceVariable, decimals: int = 1) -> None:
        super().__init__(event_source, variable)
        self.decimals = decimals

    def message(self, value: Any) -> str:
        try:
            rounded = round(float(value), self.decimals)
            text = str(int(rounded)) if rounded.is_integer() else str(rounded)
        except (TypeError, ValueError, OverflowError):
            text = str(value)
        units = self.variable.engineering_units
        unit = f" [{units.display_name}]" if units is not None and units.display_name else ""
        return f"{self.event_source.display_name} {self.variable.display_name} changed to {text}{unit}."


class TwoStateChangedEventReporter(ValueChangedEventReporter):
    def __init__(
        self,
        event_source: DeviceNode,
        variable: DeviceVariable,
        true_state: str = "true",
        false_state: str = "false",
    ) -> None:
        super().__init__(event_source, variable)
        self.true_state = true_state
        self.false_state = false_state

    def message(self, value: Any) -> str:
        state = self.true_state if bool(value) else self.false_state
        return f"{self.event_source.display_name} {self.variable.display_name} changed to {state}."


__all__ = [
    "AnalogValueChangedEventReporter",
    "TwoStateChangedEventReporter",
    "ValueChangedEventReporter",
    "raise_event",
]
