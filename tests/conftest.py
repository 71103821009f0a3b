from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from ladskit.graph import DataType, DeviceGraph, EUInformation, LocalizedText, NodeRole
from ladskit.semantics import AFO_NAMESPACE_URI, DictionaryIds
from ladskit.telemetry import TelemetryClient

CELSIUS = EUInformation("degC", "degree Celsius", 4408652)
PERCENT = EUInformation("%", "percent", 20529)


def populate_dictionary(graph, *, skip=()):
    namespace = graph.add_namespace(AFO_NAMESPACE_URI)
    for concept in DictionaryIds:
        if concept.value not in skip:
            namespace.add_entry(concept.value)
    return namespace


def build_incubator(graph):
    """Small but complete incubator model; returns handles to the interesting nodes."""

    device = graph.create_root("Incubator", NodeRole.DEVICE)
    device.add_variable("Manufacturer", DataType.STRING, "ACME Labs")
    device.add_variable("Model", DataType.STRING, "INC-200")
    device.add_variable("SerialNumber", DataType.STRING, "SN-0001")
    device.add_variable("HardwareRevision", DataType.STRING, "1.0")
    device.add_variable("SoftwareRevision", DataType.STRING, "2.3.1")
    device.add_variable("AssetId", DataType.STRING, "A-17")
    device.add_variable("ComponentName", DataType.LOCALIZED_TEXT, LocalizedText("Incubator 1"))

    identification = device.add_object("Identification")
    identification.add_variable("Manufacturer", DataType.STRING, "ACME Labs")
    identification.add_variable("Location", DataType.STRING, "Lab 2")

    pump = device.add_object("Components").add_object("Pump", NodeRole.COMPONENT)
    pump.add_variable("Manufacturer", DataType.STRING, "PumpCo")

    device_state = device.add_object("DeviceState", NodeRole.STATE_MACHINE)
    device_state.add_variable("CurrentState", DataType.LOCALIZED_TEXT, LocalizedText("Operate"))

    unit = device.add_object("FunctionalUnitSet").add_object("Chamber", NodeRole.FUNCTIONAL_UNIT)
    functions = unit.add_object("FunctionSet")

    temperature = functions.add_object("Temperature", NodeRole.CONTROL_FUNCTION)
    target = temperature.add_variable(
        "TargetValue", DataType.DOUBLE, 37.0, is_analog=True, engineering_units=CELSIUS
    )
    current = temperature.add_variable(
        "CurrentValue", DataType.DOUBLE, 36.5, is_analog=True, engineering_units=CELSIUS
    )
    control_state = temperature.add_object("ControlFunctionState", NodeRole.STATE_MACHINE)
    control_state.add_variable("CurrentState", DataType.LOCALIZED_TEXT, LocalizedText("Running"))

    humidity = functions.add_object("Humidity", NodeRole.SENSOR_FUNCTION)
    humidity_value = humidity.add_variable(
        "SensorValue", DataType.DOUBLE, 80.0, is_analog=True, engineering_units=PERCENT
    )

    door = functions.add_object("Door", NodeRole.SENSOR_FUNCTION)
    door_value = door.add_variable("SensorValue", DataType.BOOLEAN, False)

    unit_state = unit.add_object("FunctionalUnitState", NodeRole.STATE_MACHINE)
    unit_state.add_variable("CurrentState", DataType.LOCALIZED_TEXT, LocalizedText("Idle"))

    program_manager = unit.add_object("ProgramManager", NodeRole.PROGRAM_MANAGER)
    template = program_manager.add_object("ProgramTemplateSet").add_object(
        "Incubate", NodeRole.PROGRAM_TEMPLATE
    )
    template.add_variable("Description", DataType.STRING, "Incubate at 37 degC")
    template.add_variable("Author", DataType.STRING, "jdoe")
    template.add_variable("DeviceTemplateId", DataType.STRING, "T-1")
    template.add_variable("Created", DataType.DATETIME, datetime(2024, 1, 1, tzinfo=timezone.utc))
    template.add_variable("Modified", DataType.DATETIME, datetime(2024, 2, 1, tzinfo=timezone.utc))
    template.add_variable("Version", DataType.STRING, "1")

    active_program = program_manager.add_object("ActiveProgram", NodeRole.ACTIVE_PROGRAM)
    active_program.add_variable("CurrentRuntime", DataType.DOUBLE, 0.0)

    result_set = program_manager.add_object("ResultSet")
    result = result_set.add_object("Run1", NodeRole.RESULT)
    for name in ("Description", "Properties", "Samples", "SupervisoryJobId", "SupervisoryTaskId", "User"):
        result.add_variable(name, DataType.STRING, name.lower())
    result.add_variable("Started", DataType.DATETIME, datetime(2024, 3, 1, 8, tzinfo=timezone.utc))
    result.add_variable("Stopped", DataType.DATETIME, datetime(2024, 3, 1, 9, tzinfo=timezone.utc))
    result_template = result.add_object("ProgramTemplate", NodeRole.PROGRAM_TEMPLATE)
    result_template.add_variable("Description", DataType.STRING, "snapshot")
    result_template.add_variable("DeviceTemplateId", DataType.STRING, "T-1")
    file_set = result.add_object("FileSet")
    report = file_set.add_object("Report", NodeRole.RESULT_FILE)
    report.add_object("File", NodeRole.FILE)
    report.add_variable("Name", DataType.STRING, "report.xlsx")
    report.add_variable("MimeType", DataType.STRING, "application/json")
    report.add_variable("URL", DataType.STRING, "file:///tmp/report.xlsx")

    return SimpleNamespace(
        graph=graph,
        device=device,
        identification=identification,
        pump=pump,
        device_state=device_state,
        unit=unit,
        temperature=temperature,
        target=target,
        current=current,
        control_state=control_state,
        humidity=humidity,
        humidity_value=humidity_value,
        door=door,
        door_value=door_value,
        unit_state=unit_state,
        program_manager=program_manager,
        template=template,
        active_program=active_program,
        result_set=result_set,
        result=result,
        result_template=result_template,
        file_set=file_set,
        report=report,
    )


@pytest.fixture
def incubator():
    graph = DeviceGraph()
    populate_dictionary(graph)
    return build_incubator(graph)


@pytest.fixture
def make_incubator():
    def _make(*, dictionary=True, skip=()):
        graph = DeviceGraph()
        if dictionary:
            populate_dictionary(graph, skip=skip)
        return build_incubator(graph)

    return _make


@pytest.fixture
def bare_incubator():
    """Same model on a graph without dictionary support."""

    return build_incubator(DeviceGraph())


@pytest.fixture
def entry_id():
    def _entry_id(graph, concept):
        return graph.get_namespace(AFO_NAMESPACE_URI).find_entry(str(concept)).node_id

    return _entry_id


class RecordingTelemetry(TelemetryClient):
    def __init__(self) -> None:
        self.spans = []

    def emit_span(self, name, attributes):
        self.spans.append((name, dict(attributes)))


@pytest.fixture
def telemetry():
    return RecordingTelemetry()
