from .step_10_check_executable import CheckExecutableStep
from .step_20_groups import GroupsStep
from .step_30_udev_rule import UdevRuleStep
from .step_40_uinput_module import UinputModuleStep
from .step_50_config_scaffold import ConfigScaffoldStep
from .step_60_service_unit import ServiceUnitStep
from .step_70_service_activation import ServiceActivationStep

__all__ = [
    "CheckExecutableStep",
    "GroupsStep",
    "UdevRuleStep",
    "UinputModuleStep",
    "ConfigScaffoldStep",
    "ServiceUnitStep",
    "ServiceActivationStep",
]
