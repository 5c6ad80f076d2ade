"""
配置验证模块

验证配置文件的正确性和完整性
"""

import logging
import re
from typing import List, Dict, Any

from thermostat_bridge.config.config import AppConfig, MQTTBrokerConfig

_KNOWN_LOG_LEVELS = {"CRITICAL", "ERROR", "WARN", "WARNING", "INFO", "DEBUG", "NOTSET"}


class ConfigValidator:
    """配置验证器"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self, config: AppConfig) -> bool:
        """验证完整配置"""
        self.errors.clear()
        self.warnings.clear()

        try:
            self._validate_log_config(config)
            self._validate_mqtt_config(config.global_config.mqtt)
            self._validate_thermostat_config(config)

            if self.errors:
                for error in self.errors:
                    logging.error(f"配置验证错误: {error}")
                return False

            if self.warnings:
                for warning in self.warnings:
                    logging.warning(f"配置验证警告: {warning}")

            logging.info("配置验证通过")
            return True

        except Exception as e:
            logging.error(f"配置验证异常: {e}")
            return False

    def _validate_log_config(self, config: AppConfig):
        """验证日志配置"""
        level = (config.global_config.log.level or "").upper()
        if level not in _KNOWN_LOG_LEVELS:
            self.warnings.append(f"未知的日志级别: {level}，将使用 INFO")

    def _validate_mqtt_config(self, mqtt: MQTTBrokerConfig):
        """验证 MQTT 配置"""
        if not mqtt.host:
            self.errors.append("MQTT主机地址不能为空")

        if not isinstance(mqtt.port, int) or not (1 <= mqtt.port <= 65535):
            self.errors.append(f"MQTT端口号无效: {mqtt.port}")

        if not mqtt.client_id:
            self.warnings.append("MQTT客户端ID未配置，将使用默认值")

        if mqtt.qos not in (0, 1, 2):
            self.errors.append(f"MQTT QoS级别无效: {mqtt.qos}，必须为0、1或2")

        if mqtt.username and not mqtt.password:
            self.warnings.append("配置了MQTT用户名但未配置密码")

        for name, topic in (
            ("base_topic", mqtt.base_topic),
            ("discovery_prefix", mqtt.discovery_prefix),
        ):
            if not topic:
                self.errors.append(f"MQTT {name} 不能为空")
            elif not self._validate_topic_prefix(topic):
                self.errors.append(f"MQTT {name} 格式无效: {topic}")

    def _validate_thermostat_config(self, config: AppConfig):
        """验证恒温器配置"""
        interval = config.global_config.thermostat.refresh_interval
        if not isinstance(interval, int) or interval < 0:
            self.errors.append(f"刷新间隔无效: {interval}")
        elif 0 < interval < 30:
            self.warnings.append("刷新间隔过短，建议至少30秒")

    def _validate_topic_prefix(self, topic: str) -> bool:
        """验证主题前缀：不能包含通配符，不能以 / 开头或结尾"""
        pattern = r"^[^/#+\s][^#+\s]*[^/#+\s]$|^[^/#+\s]$"
        return re.match(pattern, topic) is not None

    def get_validation_summary(self) -> Dict[str, Any]:
        """获取验证摘要"""
        return {
            "valid": len(self.errors) == 0,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "errors": self.errors.copy(),
            "warnings": self.warnings.copy(),
        }


def validate_config(config: AppConfig) -> bool:
    """验证配置的快捷函数"""
    validator = ConfigValidator()
    return validator.validate(config)
