"""
恒温器服务模块
"""

from .thermostat_device import ThermostatDevice
from .thermostat_enums import AuxMode, ThermostatCommand, ThermostatMode
from .thermostat_models import DeviceDataStream, LocationDevice
from .thermostat_state import ThermostatState

__all__ = [
    "ThermostatDevice",
    "ThermostatState",
    "ThermostatMode",
    "ThermostatCommand",
    "AuxMode",
    "LocationDevice",
    "DeviceDataStream",
]
