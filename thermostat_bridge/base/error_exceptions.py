"""
桥接系统异常定义
"""

from datetime import datetime
from typing import Any, Dict, Optional


class BridgeError(Exception):
    """桥接系统基础异常"""

    def __init__(
        self, message: str, error_code: str = None, details: Dict[str, Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "UNKNOWN_ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()


class ConfigurationError(BridgeError):
    """配置错误"""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "CONFIG_ERROR", details)


class DeviceBindingError(BridgeError):
    """子设备绑定失败"""

    def __init__(
        self, message: str, device_id: str = None, details: Dict[str, Any] = None
    ):
        details = details or {}
        if device_id:
            details["device_id"] = device_id
        super().__init__(message, "DEVICE_BINDING_ERROR", details)


class CommandError(BridgeError):
    """命令处理错误基类，命令被丢弃且不会回显"""

    def __init__(
        self,
        message: str,
        error_code: str = "COMMAND_ERROR",
        command: Optional[str] = None,
        value: Optional[str] = None,
        details: Dict[str, Any] = None,
    ):
        details = details or {}
        if command is not None:
            details["command"] = command
        if value is not None:
            details["value"] = value
        super().__init__(message, error_code, details)
        self.command = command
        self.value = value


class MalformedCommandError(CommandError):
    """命令负载格式错误（如非数字）"""

    def __init__(self, message: str, command: str = None, value: str = None):
        super().__init__(message, "MALFORMED_COMMAND", command, value)


class OutOfRangeError(CommandError):
    """数值超出硬件允许范围"""

    def __init__(
        self,
        message: str,
        command: str = None,
        value: str = None,
        minimum: float = None,
        maximum: float = None,
    ):
        super().__init__(
            message,
            "OUT_OF_RANGE",
            command,
            value,
            {"min": minimum, "max": maximum},
        )


class UnsupportedValueError(CommandError):
    """设备不支持的模式或风扇模式"""

    def __init__(self, message: str, command: str = None, value: str = None):
        super().__init__(message, "UNSUPPORTED_VALUE", command, value)


class DeadBandViolationError(CommandError):
    """自动模式死区小于最小值"""

    def __init__(
        self,
        message: str,
        command: str = None,
        value: str = None,
        dead_band: float = None,
    ):
        super().__init__(
            message, "DEADBAND_VIOLATION", command, value, {"dead_band": dead_band}
        )


class UnknownCommandError(CommandError):
    """未知命令主题"""

    def __init__(self, message: str, command: str = None):
        super().__init__(message, "UNKNOWN_COMMAND", command)
