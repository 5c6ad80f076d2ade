"""
恒温器 MQTT 适配器

- 子设备变更 -> 重新计算对外状态并发布到 MQTT
- MQTT 命令 -> 校验 -> 写入设备（不等待确认）-> 乐观回显

所有被拒绝的命令只记录日志：不写设备、不回显、不抛出异常。
"""

import logging
import math
import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from thermostat_bridge.base.error_exceptions import (
    CommandError,
    MalformedCommandError,
    OutOfRangeError,
    UnsupportedValueError,
    DeadBandViolationError,
    UnknownCommandError,
)
from thermostat_bridge.base.error_utils import run_async_safe, report_error
from thermostat_bridge.base.logger import get_structured_logger
from thermostat_bridge.service.homeassistant.ha_models import (
    ClimateTopics,
    HADeviceInfo,
    build_climate_topics,
    build_climate_discovery,
)
from thermostat_bridge.service.thermostat.thermostat_enums import (
    AuxMode,
    ThermostatCommand,
    ThermostatMode,
)
from thermostat_bridge.service.thermostat.thermostat_models import (
    LocationDevice,
    MIN_SETPOINT,
    MAX_SETPOINT,
    MIN_DEAD_BAND,
)
from thermostat_bridge.service.thermostat.thermostat_state import (
    ThermostatState,
    capitalize_first,
    format_number,
)

# 随属性主题发布的设备字段
ATTRIBUTE_KEYS = (
    "batteryLevel",
    "batteryStatus",
    "commStatus",
    "tamperStatus",
    "lastCommTime",
    "lastUpdate",
    "serialNumber",
    "firmwareStatus",
)

# 仅接受 ASCII 十进制数字（不含下划线分隔符与其他文字的数字）
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)

logger = logging.getLogger(__name__)


class ThermostatDevice:
    """恒温器实体：状态发布与命令处理"""

    def __init__(
        self,
        device: LocationDevice,
        all_devices: Iterable[LocationDevice],
        publisher,
        base_topic: str = "ring",
        category: str = "alarm",
    ):
        self.device = device
        self.state = ThermostatState(device, all_devices)
        self.publisher = publisher
        self.topics: ClimateTopics = build_climate_topics(
            base_topic, device.location_id, device.id, category
        )

        # 设备能力在构造时确定
        self.modes: List[str] = self.state.supported_modes()
        self.fan_modes: List[str] = self.state.supported_fan_modes()

        self._slog = get_structured_logger(__name__)
        self._unsubscribers: List[Callable[[], None]] = [
            self.device.on_data.subscribe(self._on_device_data),
            self.state.operating_status.on_data.subscribe(self._on_operating_status),
            self.state.temperature_sensor.on_data.subscribe(self._on_temperature),
        ]

    @property
    def device_id(self) -> str:
        return self.device.id

    def is_online(self) -> bool:
        return self.device.data.get("commStatus") != "offline"

    def detach(self) -> None:
        """取消所有设备变更订阅"""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # ------------------------------------------------------------------
    # 变更通知
    # ------------------------------------------------------------------

    def _on_device_data(self, data: Dict[str, Any]) -> None:
        self.publish_availability()
        if self.is_online():
            self.publish_data(full=False)

    def _on_operating_status(self, data: Dict[str, Any]) -> None:
        if self.is_online():
            self.publish_operating_mode()

    def _on_temperature(self, data: Dict[str, Any]) -> None:
        if self.is_online():
            self.publish_temperature()
            self.publish_attributes()

    # ------------------------------------------------------------------
    # 发布
    # ------------------------------------------------------------------

    def publish_mqtt(self, topic: str, value: Any) -> None:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = format_number(value)
        logger.debug(f"[{self.device_id}] {topic} -> {value}")
        run_async_safe(self.publisher.publish(topic, value))

    def publish_data(self, full: bool = True) -> None:
        """发布完整状态；full 为 True 时同时发布当前温度"""
        mode = self.state.mode()

        self.publish_mqtt(self.topics.mode_state_topic, mode)
        if mode == ThermostatMode.AUTO.value:
            dead_band = self.state.dead_band()
            set_point = self.state.set_point_value()
            self.publish_mqtt(
                self.topics.temperature_high_state_topic, set_point + dead_band
            )
            self.publish_mqtt(
                self.topics.temperature_low_state_topic, set_point - dead_band
            )
        else:
            self.publish_mqtt(self.topics.temperature_state_topic, self.state.set_point())
        self.publish_mqtt(self.topics.fan_mode_state_topic, self.state.fan_mode())
        self.publish_mqtt(self.topics.aux_state_topic, self.state.aux_mode())
        self.publish_operating_mode()

        if full:
            self.publish_temperature()
        self.publish_attributes()

    def publish_operating_mode(self) -> None:
        self.publish_mqtt(self.topics.action_topic, self.state.operating_mode())

    def publish_temperature(self) -> None:
        self.publish_mqtt(
            self.topics.current_temperature_topic, self.state.temperature()
        )

    def publish_attributes(self) -> None:
        data = self.device.data
        attributes = {key: data[key] for key in ATTRIBUTE_KEYS if key in data}
        self.publish_mqtt(self.topics.attributes_topic, attributes)

    def publish_availability(self) -> None:
        self.publish_mqtt(
            self.topics.availability_topic,
            "online" if self.is_online() else "offline",
        )

    def discovery_payload(self, bridge_availability_topic: str) -> Dict[str, Any]:
        name = self.device.name or "Thermostat"
        unique_id = f"{self.device_id}_thermostat"
        device_info = HADeviceInfo(
            identifiers=self.device_id,
            name=name,
            model="Thermostat",
            manufacturer="Ring",
            sw_version=str(self.device.data.get("firmwareVersion", "unknown")),
        )
        return build_climate_discovery(
            self.topics,
            device_info,
            unique_id=unique_id,
            name=name,
            modes=self.modes,
            fan_modes=self.fan_modes,
            bridge_availability_topic=bridge_availability_topic,
        )

    def command_topics(self) -> Dict[str, ThermostatCommand]:
        """完整命令主题 -> 命令"""
        return {
            self.topics.command_topic(command.suffix): command
            for command in ThermostatCommand
        }

    # ------------------------------------------------------------------
    # 命令处理
    # ------------------------------------------------------------------

    def process_command(self, message: str, component_command: str) -> None:
        """按主题后缀分发命令；无效命令只记录日志"""
        command = ThermostatCommand.from_topic(component_command)
        try:
            if command is None:
                raise UnknownCommandError(
                    f"收到未知命令主题: {component_command}", command=component_command
                )
            elif command == ThermostatCommand.MODE:
                self.set_mode(message)
            elif command == ThermostatCommand.TEMPERATURE:
                self.set_set_point(message)
            elif command == ThermostatCommand.TEMPERATURE_HIGH:
                self.set_auto_set_point(message, "high")
            elif command == ThermostatCommand.TEMPERATURE_LOW:
                self.set_auto_set_point(message, "low")
            elif command == ThermostatCommand.FAN_MODE:
                self.set_fan_mode(message)
            elif command == ThermostatCommand.AUX:
                self.set_aux_mode(message)
            else:
                raise UnknownCommandError(
                    f"未处理的命令: {command}", command=str(command)
                )
        except CommandError as e:
            report_error(e, context=f"[{self.device_id}]")
            return

        self._slog.log_command(self.device_id, str(command), message, accepted=True)

    def set_mode(self, value: str) -> None:
        logger.debug(f"[{self.device_id}] 收到模式设置 {value}")
        mode = ThermostatMode.from_string(value)
        if mode is None:
            raise UnsupportedValueError(
                f"无效的模式: {value}", command="mode", value=value
            )

        if mode == ThermostatMode.OFF:
            # 关机时立即更新动作，不等设备确认
            self.publish_mqtt(self.topics.action_topic, mode.value)

        declared = [m.lower() for m in self.modes]
        if mode.value not in declared and mode != ThermostatMode.AUX:
            raise UnsupportedValueError(
                f"设备不支持模式: {mode.value}", command="mode", value=value
            )

        self._submit({"mode": mode.value})
        self.publish_mqtt(self.topics.mode_state_topic, mode.presented.value)

    def set_set_point(self, value: str) -> None:
        logger.debug(f"[{self.device_id}] 收到目标温度设置 {value}")
        set_point = self._parse_temperature(value, "temperature")
        self._submit({"setPoint": set_point})
        self.publish_mqtt(self.topics.temperature_state_topic, value)

    def set_auto_set_point(self, value: str, bound: str) -> None:
        """自动模式上下限设置，bound 为 high 或 low"""
        logger.debug(f"[{self.device_id}] 收到 {bound} 目标温度设置 {value}")
        command = f"temperature_{bound}"
        target = self._parse_temperature(value, command)

        set_point = self.state.set_point_value()
        dead_band = self.state.dead_band()
        # 未编辑的一侧两边都取 set_point + dead_band（沿用设备原有算法）
        target_high = target if bound == "high" else set_point + dead_band
        target_low = target if bound == "low" else set_point + dead_band
        target_set_point = (target_high + target_low) / 2
        # 死区为上下限间距的一半，取绝对值
        target_dead_band = abs(target_high - target_set_point)

        if target_dead_band < MIN_DEAD_BAND:
            raise DeadBandViolationError(
                f"新的 {bound} 目标温度会使死区低于最小值 {MIN_DEAD_BAND}",
                command=command,
                value=value,
                dead_band=target_dead_band,
            )

        self._submit({"setPoint": target_set_point, "deadBand": target_dead_band})
        self.publish_mqtt(
            self.topics.temperature_high_state_topic,
            value if bound == "high" else target_high,
        )
        self.publish_mqtt(
            self.topics.temperature_low_state_topic,
            value if bound == "low" else target_low,
        )

    def set_fan_mode(self, value: str) -> None:
        logger.debug(f"[{self.device_id}] 收到风扇模式设置 {value}")
        fan_mode = value.strip().lower()
        if not fan_mode or fan_mode not in [f.lower() for f in self.fan_modes]:
            raise UnsupportedValueError(
                f"设备不支持风扇模式: {value}", command="fan_mode", value=value
            )

        self._submit({"fanMode": fan_mode})
        self.publish_mqtt(self.topics.fan_mode_state_topic, capitalize_first(fan_mode))

    def set_aux_mode(self, value: str) -> None:
        logger.debug(f"[{self.device_id}] 收到辅助加热设置 {value}")
        aux_mode = AuxMode.from_string(value)
        if aux_mode is None:
            raise UnsupportedValueError(
                f"无效的辅助加热命令: {value}", command="aux", value=value
            )

        self._submit({"mode": aux_mode.device_mode.value})
        self.publish_mqtt(self.topics.aux_state_topic, aux_mode.value.upper())

    # ------------------------------------------------------------------
    # 内部工具
    # ------------------------------------------------------------------

    def _parse_temperature(self, value: Optional[str], command: str) -> float:
        text = str(value).strip() if value is not None else ""
        if not NUMBER_PATTERN.match(text):
            raise MalformedCommandError(
                f"{command} 目标温度不是数字: {value}", command=command, value=value
            )
        temperature = float(text)
        if not math.isfinite(temperature):
            raise MalformedCommandError(
                f"{command} 目标温度不是有限数字: {value}", command=command, value=value
            )
        if not (MIN_SETPOINT <= temperature <= MAX_SETPOINT):
            raise OutOfRangeError(
                f"{command} 目标温度超出范围 ({MIN_SETPOINT}-{MAX_SETPOINT}°C): {value}",
                command=command,
                value=value,
                minimum=MIN_SETPOINT,
                maximum=MAX_SETPOINT,
            )
        return temperature

    def _submit(self, patch: Dict[str, Any]) -> None:
        """提交设备写入，不等待结果"""
        logger.debug(f"[{self.device_id}] 写入设备: {patch}")
        run_async_safe(self.device.set_info({"device": {"v1": patch}}))


__all__ = ["ThermostatDevice", "ATTRIBUTE_KEYS"]
