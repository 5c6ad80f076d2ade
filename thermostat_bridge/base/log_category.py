"""
日志分类枚举定义
"""

from enum import Enum


class LogCategory(Enum):
    """日志分类"""

    SYSTEM = "system"  # 系统级日志
    DEVICE = "device"  # 设备状态日志
    COMMAND = "command"  # 命令处理日志
    MQTT = "mqtt"  # MQTT 通信日志
    ERROR = "error"  # 错误日志
