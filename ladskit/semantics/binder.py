"""
Semantic Binder - Default dictionary references for device models

WHAT: Recursive, role-dispatched pass attaching dictionary references to a subtree
WHERE: ladskit/semantics/binder.py - annotation layer above the catalog
WHO: Device servers annotating their models after construction
TIME: O(n) over the reachable subtree, one catalog lookup per bound id

Dispatch goes through a per-role handler table keyed by ``NodeRole``. Nodes
with a role the table does not know are skipped, and every optional child is
looked up independently, so partially populated device models bind as far
as they go without raising. Binding the same subtree again adds no edges.

Handler map:
- device: component identity + device state, then functional units
- functional unit: functions (sensor or control by role), state, program manager
- program manager: templates, active program elapsed time, results
- result: identity and run metadata, its program template, its result files
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Set

from ..graph import browse_names as bn
from ..graph.nodes import DeviceNode, NodeRole
from ..logging.binding_log import log_binding
from ..telemetry import NoOpTelemetryClient, TelemetryClient
from .catalog import BindingStats, ReferenceCatalog
from .dictionary_ids import DictionaryIds as Ids

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config.settings import RecordingConfig


@dataclass(slots=True)
class _BindingPass:
    stats: BindingStats = field(default_factory=BindingStats)
    visited: List[str] = field(default_factory=list)
    seen: Set[str] = field(default_factory=set)

    def enter(self, node: DeviceNode) -> bool:
        if node.node_id in self.seen:
            return False
        self.seen.add(node.node_id)
        self.visited.append(node.node_id)
        return True


Handler = Callable[[DeviceNode, _BindingPass], None]


class SemanticBinder:
    """Attach default dictionary references across a device model subtree."""

    def __init__(
        self,
        catalog: Optional[ReferenceCatalog] = None,
        *,
        telemetry: Optional[TelemetryClient] = None,
        binding_log: Optional[Path] = None,
    ) -> None:
        self.catalog = catalog or ReferenceCatalog()
        self.binding_log = binding_log
        self._telemetry = telemetry or NoOpTelemetryClient()
        self._handlers: Dict[NodeRole, Handler] = {
            NodeRole.DEVICE: self._bind_device,
            NodeRole.COMPONENT: self._bind_component,
            NodeRole.FUNCTIONAL_UNIT: self._bind_functional_unit,
            NodeRole.SENSOR_FUNCTION: self._bind_sensor_function,
            NodeRole.CONTROL_FUNCTION: self._bind_control_function,
            NodeRole.STATE_MACHINE: self._bind_state_machine,
            NodeRole.PROGRAM_MANAGER: self._bind_program_manager,
            NodeRole.PROGRAM_TEMPLATE: self._bind_program_template,
            NodeRole.ACTIVE_PROGRAM: self._bind_active_program,
            NodeRole.RESULT: self._bind_result,
            NodeRole.RESULT_FILE: self._bind_result_file,
        }
        self.last_visited: tuple[str, ...] = ()

    @classmethod
    def from_config(
        cls,
        config: "RecordingConfig",
        *,
        telemetry: Optional[TelemetryClient] = None,
    ) -> "SemanticBinder":
        catalog = ReferenceCatalog(config.dictionary_namespace_uri)
        return cls(catalog, telemetry=telemetry, binding_log=config.binding_log_path)

    @property
    def handled_roles(self) -> frozenset[NodeRole]:
        return frozenset(self._handlers)

    # ------------------ public entry points ------------------
    def bind_default_references(self, root: Optional[DeviceNode]) -> BindingStats:
        """Bind default references starting at ``root``, dispatching on its role."""

        return self._run(root, self._dispatch, "default")

    def bind_device(self, device: Optional[DeviceNode]) -> BindingStats:
        return self._run(device, self._bind_device, "device")

    def bind_program_template(self, template: Optional[DeviceNode]) -> BindingStats:
        return self._run(template, self._bind_program_template, "program_template")

    def bind_result(self, result: Optional[DeviceNode]) -> BindingStats:
        return self._run(result, self._bind_result, "result")

    def bind_result_file(self, result_file: Optional[DeviceNode]) -> BindingStats:
        return self._run(result_file, self._bind_result_file, "result_file")

    def add_references(self, node: Optional[DeviceNode], *ids: Optional[str]) -> BindingStats:
        """Attach custom references (device class, measurand, ...) to one node."""

        return self.catalog.add_references(node, *ids)

    def bind_sensor_function(
        self, sensor_function: Optional[DeviceNode], sensor_id: str, *ids: str
    ) -> BindingStats:
        """Bind a sensor function and its value; the value falls back to ``sensor_id``."""

        if sensor_function is None:
            return BindingStats()
        stats = self.catalog.add_references(sensor_function, sensor_id, *ids)
        value_ids = ids or (sensor_id,)
        stats += self.catalog.add_references(sensor_function.get_child(bn.SENSOR_VALUE), *value_ids)
        return stats

    def bind_control_function(
        self, control_function: Optional[DeviceNode], controller_id: str, *ids: str
    ) -> BindingStats:
        if control_function is None:
            return BindingStats()
        stats = self.catalog.add_references(control_function, controller_id, *ids)
        stats += self.catalog.add_references(control_function.get_child(bn.TARGET_VALUE), *ids)
        stats += self.catalog.add_references(control_function.get_child(bn.CURRENT_VALUE), *ids)
        return stats

    # ------------------ pass plumbing ------------------
    def _run(self, root: Optional[DeviceNode], handler: Handler, entry: str) -> BindingStats:
        if root is None or not self.catalog.ensure_installed(root):
            return BindingStats()

        binding_pass = _BindingPass()
        attributes = {"entry": entry, "root": root.browse_path, "role": root.role.value}
        with self._telemetry.span("semantics.bind_defaults", attributes=attributes) as span:
            handler(root, binding_pass)
            for key, value in binding_pass.stats.as_dict().items():
                span.set_attribute(key, value)
            span.set_attribute("visited", len(binding_pass.visited))
        self.last_visited = tuple(binding_pass.visited)
        if self.binding_log is not None:
            log_binding(
                label=entry,
                root=root,
                stats=binding_pass.stats,
                visited=len(binding_pass.visited),
                namespace_uri=self.catalog.namespace_uri,
                output_path=self.binding_log,
            )
        return binding_pass.stats

    def _dispatch(self, node: Optional[DeviceNode], binding_pass: _BindingPass) -> None:
        if node is None:
            return
        handler = self._handlers.get(node.role)
        if handler is not None:
            handler(node, binding_pass)

    def _add(self, binding_pass: _BindingPass, node: Optional[DeviceNode], *ids: str) -> None:
        binding_pass.stats += self.catalog.add_references(node, *ids)

    @staticmethod
    def _members(container: Optional[DeviceNode], *roles: NodeRole) -> List[DeviceNode]:
        if container is None:
            return []
        return container.children_with_role(*roles)

    # ------------------ components and devices ------------------
    def _bind_component(self, component: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(component):
            return
        self._bind_component_attributes(component, binding_pass)

    def _bind_component_attributes(self, component: DeviceNode, binding_pass: _BindingPass) -> None:
        self._add(binding_pass, component.get_child(bn.MANUFACTURER), Ids.manufacturer)
        self._add(binding_pass, component.get_child(bn.MODEL), Ids.model_number)
        self._add(binding_pass, component.get_child(bn.SERIAL_NUMBER), Ids.equipment_serial_number)
        self._add(binding_pass, component.get_child(bn.HARDWARE_REVISION), Ids.version_number)
        self._add(binding_pass, component.get_child(bn.SOFTWARE_REVISION), Ids.software_version)
        self._add(binding_pass, component.get_child(bn.ASSET_ID), Ids.asset_management_identifier)
        self._add(
            binding_pass,
            component.get_child(bn.COMPONENT_NAME),
            Ids.local_identifier,
            Ids.nick_name,
        )
        self._bind_identification(component.get_child(bn.IDENTIFICATION), binding_pass)
        for nested in self._members(component.get_child(bn.COMPONENTS), NodeRole.COMPONENT):
            self._bind_component(nested, binding_pass)

    def _bind_identification(self, identification: Optional[DeviceNode], binding_pass: _BindingPass) -> None:
        if identification is None or not binding_pass.enter(identification):
            return
        self._bind_component_attributes(identification, binding_pass)
        self._add(binding_pass, identification.get_child(bn.LOCATION), Ids.location_specification)

    def _bind_device(self, device: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(device):
            return
        self._bind_component_attributes(device, binding_pass)
        self._bind_state_machine_of(device.get_child(bn.DEVICE_STATE), binding_pass)
        for unit in self._members(device.get_child(bn.FUNCTIONAL_UNIT_SET), NodeRole.FUNCTIONAL_UNIT):
            self._bind_functional_unit(unit, binding_pass)

    # ------------------ functional units and functions ------------------
    def _bind_functional_unit(self, unit: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(unit):
            return
        functions = self._members(
            unit.get_child(bn.FUNCTION_SET),
            NodeRole.SENSOR_FUNCTION,
            NodeRole.CONTROL_FUNCTION,
        )
        for function in functions:
            self._dispatch(function, binding_pass)
        self._bind_state_machine_of(unit.get_child(bn.FUNCTIONAL_UNIT_STATE), binding_pass)
        program_manager = unit.get_child(bn.PROGRAM_MANAGER)
        if program_manager is not None:
            self._bind_program_manager(program_manager, binding_pass)

    def _bind_sensor_function(self, function: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(function):
            return
        self._add(binding_pass, function, Ids.sensor, Ids.measurement_function)
        self._add(binding_pass, function.get_child(bn.SENSOR_VALUE), Ids.sensor, Ids.measurement_function)

    def _bind_control_function(self, function: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(function):
            return
        self._add(binding_pass, function, Ids.controller)
        self._bind_state_machine_of(function.get_child(bn.CONTROL_FUNCTION_STATE), binding_pass)
        self._add(binding_pass, function.get_child(bn.TARGET_VALUE), Ids.control_setting)
        self._add(binding_pass, function.get_child(bn.CURRENT_VALUE), Ids.current_setting)

    def _bind_state_machine_of(self, state_machine: Optional[DeviceNode], binding_pass: _BindingPass) -> None:
        if state_machine is not None:
            self._bind_state_machine(state_machine, binding_pass)

    def _bind_state_machine(self, state_machine: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(state_machine):
            return
        self._add(binding_pass, state_machine, Ids.process_state)
        self._add(binding_pass, state_machine.get_child(bn.CURRENT_STATE), Ids.process_state)

    # ------------------ programs and results ------------------
    def _bind_program_manager(self, program_manager: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(program_manager):
            return
        templates = self._members(program_manager.get_child(bn.PROGRAM_TEMPLATE_SET), NodeRole.PROGRAM_TEMPLATE)
        for template in templates:
            self._bind_program_template(template, binding_pass)
        active_program = program_manager.get_child(bn.ACTIVE_PROGRAM)
        if active_program is not None:
            self._bind_active_program(active_program, binding_pass)
        for result in self._members(program_manager.get_child(bn.RESULT_SET), NodeRole.RESULT):
            self._bind_result(result, binding_pass)

    def _bind_active_program(self, active_program: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(active_program):
            return
        self._add(binding_pass, active_program.get_child(bn.CURRENT_RUNTIME), Ids.elapsed_time)

    def _bind_program_template(self, template: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(template):
            return
        self._add(binding_pass, template, Ids.device_method, Ids.method_name)
        self._add(binding_pass, template.get_child(bn.DESCRIPTION), Ids.description)
        self._add(binding_pass, template.get_child(bn.AUTHOR), Ids.author_result)
        self._add(binding_pass, template.get_child(bn.DEVICE_TEMPLATE_ID), Ids.method_identifier)
        self._add(binding_pass, template.get_child(bn.CREATED), Ids.creation_time)
        self._add(binding_pass, template.get_child(bn.MODIFIED), Ids.modified_time)
        self._add(binding_pass, template.get_child(bn.VERSION), Ids.method_version)

    def _bind_result(self, result: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(result):
            return
        self._add(binding_pass, result, Ids.experimental_data, Ids.experiment_result)
        self._add(binding_pass, result.get_child(bn.DESCRIPTION), Ids.description)
        self._add(binding_pass, result.get_child(bn.PROPERTIES), Ids.process_property)
        self._add(binding_pass, result.get_child(bn.STARTED), Ids.start_time)
        self._add(binding_pass, result.get_child(bn.STOPPED), Ids.end_time)
        self._add(binding_pass, result.get_child(bn.SAMPLES), Ids.sample_identifier)
        # job and task ids share one concept
        self._add(binding_pass, result.get_child(bn.SUPERVISORY_JOB_ID), Ids.lot_number)
        self._add(binding_pass, result.get_child(bn.SUPERVISORY_TASK_ID), Ids.lot_number)
        self._add(binding_pass, result.get_child(bn.USER), Ids.analyst)
        template = result.get_child(bn.PROGRAM_TEMPLATE)
        if template is not None:
            self._bind_program_template(template, binding_pass)
        for result_file in self._members(result.get_child(bn.FILE_SET), NodeRole.RESULT_FILE):
            self._bind_result_file(result_file, binding_pass)

    def _bind_result_file(self, result_file: DeviceNode, binding_pass: _BindingPass) -> None:
        if not binding_pass.enter(result_file):
            return
        self._add(binding_pass, result_file.get_child(bn.FILE), Ids.file_result)
        self._add(binding_pass, result_file.get_child(bn.NAME), Ids.file_name)
        self._add(binding_pass, result_file.get_child(bn.MIME_TYPE), Ids.media_type)
        self._add(binding_pass, result_file.get_child(bn.URL), Ids.URL)


__all__ = ["SemanticBinder"]
