"""
桥接配置管理模块

支持结构化配置及环境变量覆盖
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

import yaml

from thermostat_bridge.config.config_models import (
    LogConfig,
    MQTTBrokerConfig,
    ThermostatConfig,
    GlobalConfig,
    AppConfig,
)

# 导出所有配置模型
__all__ = [
    "LogConfig",
    "MQTTBrokerConfig",
    "ThermostatConfig",
    "GlobalConfig",
    "AppConfig",
    "ConfigManager",
    "config_manager",
    "get_log_config",
]


# =============================================================================
# 配置加载和解析
# =============================================================================


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_file: str = "config.yaml"):
        self.config_file = config_file
        self._config: Optional[AppConfig] = None
        self._raw_config: Optional[Dict] = None

    def load_config(self, force_reload: bool = False) -> AppConfig:
        """加载配置文件"""
        if self._config is None or force_reload:
            self._load_from_file()
        return self._config

    def reload_config(self) -> AppConfig:
        """强制重新加载配置文件"""
        return self.load_config(force_reload=True)

    def _load_from_file(self):
        """从文件加载配置"""
        try:
            if not Path(self.config_file).exists():
                logging.warning(f"配置文件 {self.config_file} 不存在，使用默认配置")
                self._config = AppConfig()
                self._apply_env_overrides(self._config)
                return

            with open(self.config_file, "r", encoding="utf-8") as f:
                self._raw_config = yaml.safe_load(f) or {}

            self._config = self._parse_structured_config(self._raw_config)
            logging.info(f"成功加载配置文件: {self.config_file}")

        except Exception as e:
            logging.error(f"加载配置文件失败: {e}，使用默认配置")
            self._config = AppConfig()
            self._apply_env_overrides(self._config)

    def _parse_structured_config(self, raw_config: Dict) -> AppConfig:
        """解析配置格式"""
        config = AppConfig()

        global_data = raw_config.get("global") or {}

        # 日志配置
        if "log" in global_data:
            log_data = global_data["log"] or {}
            config.global_config.log = LogConfig(level=log_data.get("level", "INFO"))
        elif "log_level" in global_data:  # 兼容平级格式
            config.global_config.log = LogConfig(
                level=global_data.get("log_level", "INFO")
            )

        # MQTT 配置
        if "mqtt" in global_data:
            mqtt_data = global_data["mqtt"] or {}
            defaults = MQTTBrokerConfig()
            config.global_config.mqtt = MQTTBrokerConfig(
                host=mqtt_data.get("host", defaults.host),
                port=mqtt_data.get("port", defaults.port),
                username=mqtt_data.get("username"),
                password=mqtt_data.get("password"),
                client_id=mqtt_data.get("client_id", defaults.client_id),
                discovery_prefix=mqtt_data.get(
                    "discovery_prefix", defaults.discovery_prefix
                ),
                base_topic=mqtt_data.get("base_topic", defaults.base_topic),
                qos=mqtt_data.get("qos", defaults.qos),
                retain=bool(mqtt_data.get("retain", defaults.retain)),
            )

        # 恒温器配置
        if "thermostat" in global_data:
            thermostat_data = global_data["thermostat"] or {}
            config.global_config.thermostat = ThermostatConfig(
                refresh_interval=thermostat_data.get(
                    "refresh_interval", ThermostatConfig().refresh_interval
                )
            )

        # 应用环境变量覆盖
        self._apply_env_overrides(config)

        return config

    def _apply_env_overrides(self, config: AppConfig):
        """应用环境变量覆盖"""
        mqtt = config.global_config.mqtt
        if os.getenv("MQTT_HOST"):
            mqtt.host = os.getenv("MQTT_HOST")
        if os.getenv("MQTT_PORT"):
            try:
                mqtt.port = int(os.getenv("MQTT_PORT"))
            except ValueError:
                logging.warning(
                    f"环境变量 MQTT_PORT 不是整数，忽略: {os.getenv('MQTT_PORT')}"
                )
        if os.getenv("MQTT_USERNAME"):
            mqtt.username = os.getenv("MQTT_USERNAME")
        if os.getenv("MQTT_PASSWORD"):
            mqtt.password = os.getenv("MQTT_PASSWORD")

        # 日志级别覆盖
        if os.getenv("LOG_LEVEL"):
            config.global_config.log.level = os.getenv("LOG_LEVEL").upper()


# =============================================================================
# 全局配置管理器实例
# =============================================================================

config_manager = ConfigManager()


# =============================================================================
# 接口函数
# =============================================================================


def get_log_config() -> LogConfig:
    """获取日志配置"""
    config = config_manager.load_config()
    return config.global_config.log
