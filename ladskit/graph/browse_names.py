"""Well-known browse names of the device model children the binder walks."""

# component identity
MANUFACTURER = "Manufacturer"
MODEL = "Model"
SERIAL_NUMBER = "SerialNumber"
HARDWARE_REVISION = "HardwareRevision"
SOFTWARE_REVISION = "SoftwareRevision"
ASSET_ID = "AssetId"
COMPONENT_NAME = "ComponentName"
IDENTIFICATION = "Identification"
LOCATION = "Location"
COMPONENTS = "Components"

# device and functional units
DEVICE_STATE = "DeviceState"
FUNCTIONAL_UNIT_SET = "FunctionalUnitSet"
FUNCTION_SET = "FunctionSet"
FUNCTIONAL_UNIT_STATE = "FunctionalUnitState"
CURRENT_STATE = "CurrentState"

# functions
SENSOR_VALUE = "SensorValue"
CONTROL_FUNCTION_STATE = "ControlFunctionState"
TARGET_VALUE = "TargetValue"
CURRENT_VALUE = "CurrentValue"

# program manager
PROGRAM_MANAGER = "ProgramManager"
PROGRAM_TEMPLATE_SET = "ProgramTemplateSet"
ACTIVE_PROGRAM = "ActiveProgram"
RESULT_SET = "ResultSet"
CURRENT_RUNTIME = "CurrentRuntime"

# program templates and results
DESCRIPTION = "Description"
AUTHOR = "Author"
DEVICE_TEMPLATE_ID = "DeviceTemplateId"
CREATED = "Created"
MODIFIED = "Modified"
VERSION = "Version"
PROPERTIES = "Properties"
STARTED = "Started"
STOPPED = "Stopped"
SAMPLES = "Samples"
SUPERVISORY_JOB_ID = "SupervisoryJobId"
SUPERVISORY_TASK_ID = "SupervisoryTaskId"
USER = "User"
PROGRAM_TEMPLATE = "ProgramTemplate"
FILE_SET = "FileSet"
VARIABLE_SET = "VariableSet"

# result files
FILE = "File"
NAME = "Name"
MIME_TYPE = "MimeType"
URL = "URL"
