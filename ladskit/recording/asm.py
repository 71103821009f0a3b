"""
Allotrope Simple Model - JSON result documents for recorded runs

WHAT: Recorders that turn sampled tracks plus device and result metadata into ASM documents
WHERE: ladskit/recording/asm.py - recording output layer above the exporter
WHO: Device servers publishing instrument-neutral result files next to workbooks
TIME: Model creation O(records·tracks); writes go through DataExporter

An ASM recorder wraps a ``VariableDataRecorder`` and knows how to map the
device identity (manufacturer, model, serial number, asset id) and the result
(identifier, method template, start time, analyst, sample) onto the document
skeleton every ASM technique shares. Technique recorders such as
``PHSensorRecorder`` add their own aggregate document, end-point properties
and data cube.

Result files written here follow the exporter's write-then-register order and
are tagged with the ``ASM_file`` dictionary references.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..graph import browse_names as bn
from ..graph.nodes import DeviceNode, DeviceVariable
from ..semantics.dictionary_ids import DictionaryIds as Ids
from .exporter import DataExporter
from .recorder import VariableDataRecorder

logger = logging.getLogger(__name__)

PH_SENSOR_MANIFEST = "http://purl.allotrope.org/manifests/ph/REC/2025/03/ph-sensor.manifest"
DEFAULT_CALIBRATION_CERTIFICATE = "Default calibration certificate"


class Units:
    """Unit symbols used in ASM properties and data cubes."""

    degC = "degC"
    pH = "pH"
    s = "s"


@dataclass(slots=True)
class DeviceInfo:
    device_type: str
    device: DeviceNode


@dataclass(slots=True)
class SampleInfo:
    sample_id: str
    position: str = ""
    container_id: str = ""
    custom_data: str = ""


@dataclass(slots=True)
class AsmRecorderOptions:
    result: DeviceNode
    devices: List[DeviceInfo]
    sample: SampleInfo


def _read(node: Optional[DeviceNode], *path: str, default: Any = "") -> Any:
    target = node.find(*path) if node is not None else None
    if not isinstance(target, DeviceVariable):
        return default
    value = target.display_value()
    return default if value is None else value


def _property(value: Any, unit: str) -> Dict[str, Any]:
    return {"unit": unit, "value": float(value) if value is not None else None}


class AllotropeSimpleModelRecorder(ABC):
    """Shared document builders plus the write path of every ASM technique."""

    def __init__(
        self,
        options: AsmRecorderOptions,
        variables: Sequence[DeviceVariable],
        *,
        abbreviate: bool = False,
    ) -> None:
        self.options = options
        self.data_recorder = VariableDataRecorder(options.result.name, variables, abbreviate=abbreviate)
        self.reference_ids: List[str] = [Ids.ASM_file.value]

    # ------------------ document builders ------------------
    @staticmethod
    def create_base_device_document(device: DeviceNode) -> Dict[str, Any]:
        manufacturer = _read(device, bn.MANUFACTURER)
        return {
            "brand name": manufacturer,
            "equipment serial number": _read(device, bn.SERIAL_NUMBER),
            "device identifier": device.name,
            "firmware version": _read(device, bn.SOFTWARE_REVISION),
            "model number": _read(device, bn.MODEL),
            "product manufacturer": manufacturer,
        }

    @classmethod
    def create_device_document(cls, device_info: DeviceInfo) -> Dict[str, Any]:
        document = cls.create_base_device_document(device_info.device)
        document["device type"] = device_info.device_type
        return document

    @classmethod
    def create_device_documents(cls, device_infos: Sequence[DeviceInfo]) -> List[Dict[str, Any]]:
        return [cls.create_device_document(info) for info in device_infos]

    @classmethod
    def create_device_control_documents(cls, device_infos: Sequence[DeviceInfo]) -> List[Dict[str, Any]]:
        return cls.create_device_documents(device_infos)

    @classmethod
    def create_device_system_document(cls, options: AsmRecorderOptions) -> Optional[Dict[str, Any]]:
        if not options.devices:
            return None
        system_device = options.devices[0].device
        return {
            "asset management identifier": _read(system_device, bn.ASSET_ID),
            "device identifier": system_device.name,
            "device document": cls.create_device_documents(options.devices),
        }

    @staticmethod
    def create_sample_document(sample: SampleInfo) -> Dict[str, Any]:
        return {
            "sample identifier": sample.sample_id,
            "location identifier": sample.position,
        }

    @classmethod
    def create_measurement_document(cls, options: AsmRecorderOptions) -> Dict[str, Any]:
        result = options.result
        return {
            "device control aggregate document": {
                "device control document": cls.create_device_control_documents(options.devices),
            },
            "experimental data identifier": result.name,
            "measurement identifier": result.name,
            "measurement method identifier": _read(result, bn.PROGRAM_TEMPLATE, bn.DEVICE_TEMPLATE_ID),
            "measurement time": _read(result, bn.STARTED, default=None),
            "sample document": cls.create_sample_document(options.sample),
        }

    @staticmethod
    def create_measurement_aggregate_document(
        options: AsmRecorderOptions, measurement_documents: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        return {
            "analyst": _read(options.result, bn.USER),
            "measurement document": measurement_documents,
        }

    # ------------------ recording ------------------
    def add_reference_ids(self, *reference_ids: str) -> None:
        self.reference_ids.extend(str(reference_id) for reference_id in reference_ids)

    def create_record(self):
        return self.data_recorder.create_record()

    @abstractmethod
    def create_model(self) -> Optional[Dict[str, Any]]:
        """Technique specific document; ``None`` while nothing was recorded."""

    async def write_result_file(
        self,
        exporter: DataExporter,
        file_set: DeviceNode,
        name: str,
        directory: Path | str,
        file_name: str,
        model: Optional[Dict[str, Any]] = None,
    ) -> DeviceNode:
        document = model if model is not None else self.create_model()
        if document is None:
            raise ValueError(f"No ASM model available for {self.data_recorder.identifier}")

        result_file = await exporter.write_document_result_file(file_set, name, directory, file_name, document)
        logger.info(f"Created ASM file {result_file.browse_path}")
        if exporter.binder is not None:
            binder = exporter.binder
            binder.add_references(result_file, *self.reference_ids)
            binder.add_references(result_file.get_child(bn.FILE), Ids.ASM_file)
            binder.add_references(result_file.get_child(bn.NAME), Ids.ASM_file_identifier)
        return result_file


class PHSensorRecorder(AllotropeSimpleModelRecorder):
    """pH monitoring document with end point and a runtime/pH/temperature data cube."""

    DATA_CUBE_STRUCTURE: Dict[str, Any] = {
        "dimensions": [
            {"@componentDatatype": "double", "concept": "elapsed time", "unit": Units.s},
        ],
        "measures": [
            {"@componentDatatype": "double", "concept": "pH", "unit": Units.pH},
            {"@componentDatatype": "double", "concept": "temperature", "unit": Units.degC},
        ],
    }

    def __init__(
        self,
        options: AsmRecorderOptions,
        *,
        runtime: DeviceVariable,
        ph: DeviceVariable,
        temperature: DeviceVariable,
        include_end_point: bool = True,
        include_profile: bool = True,
        calibration_certificate: str = DEFAULT_CALIBRATION_CERTIFICATE,
        calibration_time: Optional[datetime] = None,
    ) -> None:
        super().__init__(options, [runtime, ph, temperature])
        self.runtime = runtime
        self.ph = ph
        self.temperature = temperature
        self.include_end_point = include_end_point
        self.include_profile = include_profile
        self.calibration_certificate = calibration_certificate
        self.calibration_time = calibration_time
        self.add_reference_ids(Ids.pH, Ids.pH_monitoring_aggregate_document)

    def create_model(self) -> Optional[Dict[str, Any]]:
        last = self.data_recorder.get_last_record()
        if last is None:
            logger.error(f"No records found for {self.data_recorder.identifier}")
            return None
        identifier = self.options.result.name

        measurement = self.create_measurement_document(self.options)
        if self.include_end_point:
            measurement["pH"] = _property(last.values[1], Units.pH)
            measurement["temperature"] = _property(last.values[2], Units.degC)
        if self.include_profile:
            # runtime is kept in milliseconds
            elapsed = [
                None if value is None else 0.001 * float(value)
                for value in self.data_recorder.track_values(self.runtime)
            ]
            measurement["data cube"] = {
                "cube-structure": self.DATA_CUBE_STRUCTURE,
                "data": {
                    "dimensions": [elapsed],
                    "measures": [
                        self.data_recorder.track_values(self.ph),
                        self.data_recorder.track_values(self.temperature),
                    ],
                },
                "label": identifier,
            }

        aggregate = self.create_measurement_aggregate_document(self.options, [measurement])
        aggregate["experiment identifier"] = identifier

        system = self.create_device_system_document(self.options)
        if system is not None:
            calibration_time = self.calibration_time or datetime.now(timezone.utc)
            for device_document in system["device document"]:
                device_document["calibration certificate identifier"] = self.calibration_certificate
                device_document["calibration time"] = calibration_time

        aggregate_document: Dict[str, Any] = {
            "pH monitoring document": [{"measurement aggregate document": aggregate}],
        }
        if system is not None:
            aggregate_document["device system document"] = system
        return {
            "$asm.manifest": PH_SENSOR_MANIFEST,
            "pH monitoring aggregate document": aggregate_document,
        }


__all__ = [
    "AllotropeSimpleModelRecorder",
    "AsmRecorderOptions",
    "DeviceInfo",
    "PHSensorRecorder",
    "PH_SENSOR_MANIFEST",
    "SampleInfo",
    "Units",
]
