"""
恒温器状态快照解析

构造时按父设备 ID 与类型绑定两个子设备（运行状态、温度传感器），
之后所有对外展示的字段都在读取时从三个实时对象重新计算，不做缓存。
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from thermostat_bridge.base.error_exceptions import DeviceBindingError
from thermostat_bridge.service.thermostat.thermostat_enums import ThermostatMode
from thermostat_bridge.service.thermostat.thermostat_models import (
    LocationDevice,
    OPERATING_STATUS_DEVICE_TYPE,
    TEMPERATURE_SENSOR_DEVICE_TYPE,
    MIN_DEAD_BAND,
)

Number = Union[int, float]


def format_number(value: Any) -> str:
    """数值转字符串，整数值不带小数部分（20.0 -> "20"）

    浮点数先保留 5 位小数，去掉计算误差（20.7 + 1.9 -> "22.6"）。
    """
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        value = round(value, 5)
        if value.is_integer():
            return str(int(value))
    return str(value)


def capitalize_first(value: str) -> str:
    """仅首字母大写，其余保持不变"""
    return value[:1].upper() + value[1:]


def find_child_device(
    parent: LocationDevice, all_devices: Iterable[LocationDevice], device_type: str
) -> LocationDevice:
    """查找父设备下指定类型的子设备"""
    for device in all_devices:
        if device.parent_id == parent.id and device.device_type == device_type:
            return device
    raise DeviceBindingError(
        f"恒温器 {parent.id} 未找到类型为 {device_type} 的子设备",
        device_id=parent.id,
        details={"device_type": device_type},
    )


class ThermostatState:
    """恒温器对外状态的只读视图"""

    def __init__(
        self, device: LocationDevice, all_devices: Iterable[LocationDevice]
    ):
        devices = list(all_devices)
        self.device = device
        self.operating_status = find_child_device(
            device, devices, OPERATING_STATUS_DEVICE_TYPE
        )
        self.temperature_sensor = find_child_device(
            device, devices, TEMPERATURE_SENSOR_DEVICE_TYPE
        )

    @property
    def data(self) -> Dict[str, Any]:
        return self.device.data

    # ------------------------------------------------------------------
    # 原始字段
    # ------------------------------------------------------------------

    def raw_mode(self) -> Optional[str]:
        return self.data.get("mode")

    def raw_fan_mode(self) -> str:
        return self.data.get("fanMode") or ""

    def ambient_celsius(self) -> Number:
        return self.temperature_sensor.data["celsius"]

    def set_point_value(self) -> Number:
        """当前设定温度，设备未提供时回退到环境温度"""
        set_point = self.data.get("setPoint")
        return set_point if set_point is not None else self.ambient_celsius()

    def dead_band(self) -> Number:
        """自动模式死区，未设置或为 0 时取 1.5"""
        auto = (self.data.get("modeSetpoints") or {}).get("auto") or {}
        return auto.get("deadBand") or self.data.get("deadBand") or MIN_DEAD_BAND

    # ------------------------------------------------------------------
    # 对外展示字段
    # ------------------------------------------------------------------

    def mode(self) -> Optional[str]:
        mode = ThermostatMode.from_string(self.raw_mode())
        if mode is None:
            return self.raw_mode()
        return mode.presented.value

    def fan_mode(self) -> str:
        return capitalize_first(self.raw_fan_mode())

    def aux_mode(self) -> str:
        return "ON" if self.raw_mode() == ThermostatMode.AUX.value else "OFF"

    def set_point(self) -> str:
        return format_number(self.set_point_value())

    def operating_mode(self) -> str:
        """当前动作：heating/cooling/fan/idle/off"""
        operating = self.operating_status.data.get("operatingMode")
        if operating and operating != "off":
            return f"{operating}ing"
        if self.raw_mode() == ThermostatMode.OFF.value:
            return "off"
        if self.raw_fan_mode() == "on":
            return "fan"
        return "idle"

    def temperature(self) -> str:
        return format_number(self.ambient_celsius())

    # ------------------------------------------------------------------
    # 设备能力
    # ------------------------------------------------------------------

    def supported_modes(self) -> List[str]:
        """modeSetpoints 中声明的公开模式"""
        public = {mode.value for mode in ThermostatMode.public_modes()}
        return [
            mode for mode in (self.data.get("modeSetpoints") or {}) if mode in public
        ]

    def supported_fan_modes(self) -> List[str]:
        """设备声明的风扇模式（首字母大写），未声明时只有 Auto"""
        if "supportedFanModes" in self.data:
            return [capitalize_first(f) for f in self.data["supportedFanModes"]]
        return ["Auto"]


__all__ = ["ThermostatState", "find_child_device", "format_number", "capitalize_first"]
