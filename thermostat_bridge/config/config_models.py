"""
配置数据模型定义
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class LogConfig:
    """日志配置"""

    level: str = "INFO"


@dataclass
class MQTTBrokerConfig:
    """MQTT 连接与主题配置"""

    host: str = "localhost"
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: str = "thermostat_bridge"
    discovery_prefix: str = "homeassistant"
    base_topic: str = "ring"
    qos: int = 1
    retain: bool = True


@dataclass
class ThermostatConfig:
    """恒温器桥接配置"""

    refresh_interval: int = 300  # 全量刷新间隔(秒)，0 表示关闭


@dataclass
class GlobalConfig:
    """全局配置"""

    log: LogConfig = field(default_factory=LogConfig)
    mqtt: MQTTBrokerConfig = field(default_factory=MQTTBrokerConfig)
    thermostat: ThermostatConfig = field(default_factory=ThermostatConfig)


@dataclass
class AppConfig:
    """应用完整配置"""

    global_config: GlobalConfig = field(default_factory=GlobalConfig)
