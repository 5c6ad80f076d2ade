"""
Home Assistant 数据模型

climate 实体的主题集合与 MQTT Discovery 配置
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from thermostat_bridge.service.thermostat.thermostat_models import (
    MIN_SETPOINT,
    MAX_SETPOINT,
)


@dataclass
class HADeviceInfo:
    """Home Assistant设备信息"""

    identifiers: str  # 设备唯一标识符
    name: str  # 设备名称
    model: str  # 设备型号
    manufacturer: str  # 制造商
    sw_version: str  # 软件版本

    def to_dict(self) -> Dict[str, Any]:
        """转换为HA设备注册格式"""
        return {
            "identifiers": [self.identifiers],
            "name": self.name,
            "model": self.model,
            "manufacturer": self.manufacturer,
            "sw_version": self.sw_version,
        }


@dataclass
class ClimateTopics:
    """climate 实体的状态与命令主题"""

    device_root: str
    entity_root: str

    @property
    def availability_topic(self) -> str:
        return f"{self.device_root}/status"

    @property
    def attributes_topic(self) -> str:
        return f"{self.entity_root}/attributes"

    @property
    def mode_state_topic(self) -> str:
        return f"{self.entity_root}/mode_state"

    @property
    def temperature_state_topic(self) -> str:
        return f"{self.entity_root}/temperature_state"

    @property
    def temperature_high_state_topic(self) -> str:
        return f"{self.entity_root}/temperature_high_state"

    @property
    def temperature_low_state_topic(self) -> str:
        return f"{self.entity_root}/temperature_low_state"

    @property
    def fan_mode_state_topic(self) -> str:
        return f"{self.entity_root}/fan_mode_state"

    @property
    def aux_state_topic(self) -> str:
        return f"{self.entity_root}/aux_state"

    @property
    def action_topic(self) -> str:
        return f"{self.entity_root}/action_state"

    @property
    def current_temperature_topic(self) -> str:
        return f"{self.entity_root}/current_temperature_state"

    def command_topic(self, suffix: str) -> str:
        """命令主题，suffix 形如 mode_command"""
        return f"{self.entity_root}/{suffix}"


def build_climate_topics(
    base_topic: str,
    location_id: str,
    device_id: str,
    category: str = "alarm",
    entity: str = "thermostat",
) -> ClimateTopics:
    """生成 {base}/{location}/{category}/{device}/{entity}/... 主题"""
    device_root = f"{base_topic}/{location_id}/{category}/{device_id}"
    return ClimateTopics(device_root=device_root, entity_root=f"{device_root}/{entity}")


def build_climate_discovery(
    topics: ClimateTopics,
    device_info: HADeviceInfo,
    unique_id: str,
    name: str,
    modes: List[str],
    fan_modes: List[str],
    bridge_availability_topic: str,
) -> Dict[str, Any]:
    """生成 climate 实体的 Discovery 配置负载"""
    return {
        "name": name,
        "unique_id": unique_id,
        "object_id": unique_id,
        "availability": [
            {"topic": bridge_availability_topic},
            {"topic": topics.availability_topic},
        ],
        "availability_mode": "all",
        "json_attributes_topic": topics.attributes_topic,
        "mode_state_topic": topics.mode_state_topic,
        "mode_command_topic": topics.command_topic("mode_command"),
        "temperature_state_topic": topics.temperature_state_topic,
        "temperature_command_topic": topics.command_topic("temperature_command"),
        "temperature_high_state_topic": topics.temperature_high_state_topic,
        "temperature_high_command_topic": topics.command_topic(
            "temperature_high_command"
        ),
        "temperature_low_state_topic": topics.temperature_low_state_topic,
        "temperature_low_command_topic": topics.command_topic(
            "temperature_low_command"
        ),
        "fan_mode_state_topic": topics.fan_mode_state_topic,
        "fan_mode_command_topic": topics.command_topic("fan_mode_command"),
        "aux_state_topic": topics.aux_state_topic,
        "aux_command_topic": topics.command_topic("aux_command"),
        "action_topic": topics.action_topic,
        "current_temperature_topic": topics.current_temperature_topic,
        "modes": list(modes),
        "fan_modes": list(fan_modes),
        "min_temp": MIN_SETPOINT,
        "max_temp": MAX_SETPOINT,
        "temperature_unit": "C",
        "precision": 0.1,
        "device": device_info.to_dict(),
    }
