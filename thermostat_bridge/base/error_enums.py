"""
错误严重级别
"""

from enum import Enum


class ErrorSeverity(Enum):
    """错误严重级别，决定日志级别"""

    LOW = "low"  # 命令被拒绝等用户输入问题
    MEDIUM = "medium"  # 未知命令主题
    HIGH = "high"  # 配置无效，服务无法启动
    CRITICAL = "critical"  # 恒温器无法绑定子设备
