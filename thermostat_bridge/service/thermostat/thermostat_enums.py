"""
恒温器模式与命令枚举定义
"""

from enum import Enum
from typing import Optional


class ThermostatMode(str, Enum):
    """设备原始模式；AUX 为硬件辅助加热，对外展示为 HEAT"""

    OFF = "off"
    COOL = "cool"
    HEAT = "heat"
    AUTO = "auto"
    AUX = "aux"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, mode_str: Optional[str]) -> Optional["ThermostatMode"]:
        if not mode_str:
            return None

        mode_str = mode_str.lower().strip()
        for mode in cls:
            if mode.value == mode_str:
                return mode
        return None

    @classmethod
    def public_modes(cls):
        """可在发现配置中声明的模式（不含 aux）"""
        return [cls.OFF, cls.COOL, cls.HEAT, cls.AUTO]

    @property
    def presented(self) -> "ThermostatMode":
        return ThermostatMode.HEAT if self == ThermostatMode.AUX else self


class AuxMode(str, Enum):
    """辅助加热开关"""

    ON = "on"
    OFF = "off"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["AuxMode"]:
        if not value:
            return None

        value = value.lower().strip()
        for aux in cls:
            if aux.value == value:
                return aux
        return None

    @property
    def device_mode(self) -> ThermostatMode:
        return ThermostatMode.AUX if self == AuxMode.ON else ThermostatMode.HEAT


class ThermostatCommand(str, Enum):
    """命令主题后缀（thermostat/<command>）"""

    MODE = "thermostat/mode_command"
    TEMPERATURE = "thermostat/temperature_command"
    TEMPERATURE_HIGH = "thermostat/temperature_high_command"
    TEMPERATURE_LOW = "thermostat/temperature_low_command"
    FAN_MODE = "thermostat/fan_mode_command"
    AUX = "thermostat/aux_command"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_topic(cls, topic: Optional[str]) -> Optional["ThermostatCommand"]:
        """按主题后缀解析命令，完整主题与后缀均可"""
        if not topic:
            return None

        for command in cls:
            if topic == command.value or topic.endswith("/" + command.value):
                return command
        return None

    @property
    def suffix(self) -> str:
        return self.value.split("/", 1)[1]


__all__ = ["ThermostatMode", "AuxMode", "ThermostatCommand"]
