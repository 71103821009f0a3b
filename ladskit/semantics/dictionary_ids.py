"""Symbolic ids of the dictionary concepts used by device models."""

from __future__ import annotations

from enum import Enum

AFO_NAMESPACE_URI = "http://aixengineers.de/UA/Dictionary/AFO"


class DictionaryIds(str, Enum):
    """Closed set of concept ids; values are the symbolic entry names."""

    # identity of components and devices
    manufacturer = "manufacturer"
    model_number = "model_number"
    equipment_serial_number = "equipment_serial_number"
    version_number = "version_number"
    software_version = "software_version"
    asset_management_identifier = "asset_management_identifier"
    local_identifier = "local_identifier"
    nick_name = "nick_name"
    location_specification = "location_specification"
    process_state = "process_state"

    # functions
    sensor = "sensor"
    measurement_function = "measurement_function"
    controller = "controller"
    control_setting = "control_setting"
    current_setting = "current_setting"

    # programs
    device_method = "device_method"
    method_name = "method_name"
    method_identifier = "method_identifier"
    method_version = "method_version"
    measurement_method = "measurement_method"
    description = "description"
    author_result = "author_result"
    creation_time = "creation_time"
    modified_time = "modified_time"
    elapsed_time = "elapsed_time"

    # results
    experimental_data = "experimental_data"
    experiment_result = "experiment_result"
    process_property = "process_property"
    start_time = "start_time"
    end_time = "end_time"
    sample_identifier = "sample_identifier"
    lot_number = "lot_number"
    analyst = "analyst"
    recording = "recording"

    # result files
    file_result = "file_result"
    file_name = "file_name"
    media_type = "media_type"
    URL = "URL"
    ASM_file = "ASM_file"
    ASM_file_identifier = "ASM_file_identifier"
    pH_monitoring_aggregate_document = "pH_monitoring_aggregate_document"

    # device classes and measurands used by device servers
    measurement_device = "measurement_device"
    temperature_controlled_chamber = "temperature_controlled_chamber"
    temperature_controller = "temperature_controller"
    temperature_measurement = "temperature_measurement"
    temperature_measurement_result = "temperature_measurement_result"
    temperature = "temperature"
    relative_humidity = "relative_humidity"
    pressure = "pressure"
    pressure_control = "pressure_control"
    carbon_dioxide_gas = "carbon_dioxide_gas"
    oxygen_gas = "oxygen_gas"
    pH = "pH"
    pH_measurement = "pH_measurement"
    weighing = "weighing"
    weighing_device = "weighing_device"
    weighing_result = "weighing_result"
    sample_weight = "sample_weight"
    tare_weight = "tare_weight"
    calibration_time = "calibration_time"
    calibration_report = "calibration_report"
    rheometry = "rheometry"
    viscometry = "viscometry"
    viscosity = "viscosity"
    torque = "torque"
    rotational_speed = "rotational_speed"

    def __str__(self) -> str:
        return self.value


__all__ = ["AFO_NAMESPACE_URI", "DictionaryIds"]
