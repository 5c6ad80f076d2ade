"""
错误分类管理
"""

import logging
from typing import Type, Optional

from thermostat_bridge.base.error_exceptions import (
    ConfigurationError,
    DeviceBindingError,
    CommandError,
    MalformedCommandError,
    OutOfRangeError,
    UnsupportedValueError,
    DeadBandViolationError,
    UnknownCommandError,
)
from thermostat_bridge.base.error_enums import ErrorSeverity


class ErrorCategory:
    """错误分类管理"""

    # 默认错误严重级别映射
    DEFAULT_SEVERITY_MAPPING = {
        ConfigurationError: ErrorSeverity.HIGH,
        DeviceBindingError: ErrorSeverity.CRITICAL,
        CommandError: ErrorSeverity.LOW,
        MalformedCommandError: ErrorSeverity.LOW,
        OutOfRangeError: ErrorSeverity.LOW,
        UnsupportedValueError: ErrorSeverity.LOW,
        DeadBandViolationError: ErrorSeverity.LOW,
        UnknownCommandError: ErrorSeverity.MEDIUM,
    }

    # 严重级别到日志级别
    LOG_LEVEL_MAPPING = {
        ErrorSeverity.LOW: logging.INFO,
        ErrorSeverity.MEDIUM: logging.WARNING,
        ErrorSeverity.HIGH: logging.ERROR,
        ErrorSeverity.CRITICAL: logging.CRITICAL,
    }

    SEVERITY_MAPPING = DEFAULT_SEVERITY_MAPPING.copy()

    @classmethod
    def get_severity(cls, error: Exception) -> ErrorSeverity:
        """获取错误严重级别"""
        error_type = type(error)
        return cls.SEVERITY_MAPPING.get(error_type, ErrorSeverity.MEDIUM)

    @classmethod
    def get_log_level(cls, error: Exception) -> int:
        """获取错误对应的日志级别"""
        return cls.LOG_LEVEL_MAPPING[cls.get_severity(error)]

    @classmethod
    def register_error(
        cls,
        error_type: Type[Exception],
        severity: Optional[ErrorSeverity] = None,
    ) -> None:
        """动态注册新的错误类型配置"""
        if severity:
            cls.SEVERITY_MAPPING[error_type] = severity

    @classmethod
    def reset(cls) -> None:
        """恢复到默认映射（主要用于测试）"""
        cls.SEVERITY_MAPPING = cls.DEFAULT_SEVERITY_MAPPING.copy()
