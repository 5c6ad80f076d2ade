"""
thermostat_bridge 配置管理包
"""

from .config import (
    # 数据类
    AppConfig,
    GlobalConfig,
    LogConfig,
    MQTTBrokerConfig,
    ThermostatConfig,
    # 配置管理器
    ConfigManager,
    config_manager,
    # 接口函数
    get_log_config,
)

# 配置验证
from .validation import (
    ConfigValidator,
    validate_config,
)

__all__ = [
    # 数据类
    "AppConfig",
    "GlobalConfig",
    "LogConfig",
    "MQTTBrokerConfig",
    "ThermostatConfig",
    # 配置管理
    "ConfigManager",
    "config_manager",
    "get_log_config",
    # 配置验证
    "ConfigValidator",
    "validate_config",
]
