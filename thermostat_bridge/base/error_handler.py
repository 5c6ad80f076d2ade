"""
错误处理工具模块

提供统一的错误分类、记录和后台任务错误监控
"""

# 导入工具类
from thermostat_bridge.base.error_category import ErrorCategory
from thermostat_bridge.base.error_collector import ErrorCollector

# 导入全局实例
from thermostat_bridge.base.error_collector import error_collector

# 导入枚举类
from thermostat_bridge.base.error_enums import ErrorSeverity

# 导入所有异常类
from thermostat_bridge.base.error_exceptions import (
    BridgeError,
    ConfigurationError,
    DeviceBindingError,
    CommandError,
    MalformedCommandError,
    OutOfRangeError,
    UnsupportedValueError,
    DeadBandViolationError,
    UnknownCommandError,
)

# 导入工具函数
from thermostat_bridge.base.error_utils import (
    run_async_safe,
    report_error,
    get_error_handling_status,
)

__all__ = [
    # 异常类
    "BridgeError",
    "ConfigurationError",
    "DeviceBindingError",
    "CommandError",
    "MalformedCommandError",
    "OutOfRangeError",
    "UnsupportedValueError",
    "DeadBandViolationError",
    "UnknownCommandError",
    # 枚举类
    "ErrorSeverity",
    # 工具类
    "ErrorCategory",
    "ErrorCollector",
    # 工具函数
    "run_async_safe",
    "report_error",
    "get_error_handling_status",
    # 全局实例
    "error_collector",
]
