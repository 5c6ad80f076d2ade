"""
错误收集器

桥接不会因为错误输入而中断，被丢弃的命令只能从日志和这里的统计中看到。
"""

from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List

from thermostat_bridge.base.error_exceptions import BridgeError, CommandError


class ErrorCollector:
    """最近错误记录与按类型、按拒绝原因的计数"""

    def __init__(self, max_records: int = 100):
        self.max_records = max_records
        self._records: Deque[Dict[str, Any]] = deque(maxlen=max_records)
        self.error_counts: Dict[str, int] = {}
        self.rejection_counts: Dict[str, int] = {}

    @property
    def errors(self) -> List[Dict[str, Any]]:
        return list(self._records)

    def record_error(self, error: Exception, context: str = ""):
        record = {
            "timestamp": datetime.now().isoformat(),
            "type": type(error).__name__,
            "message": str(error),
            "context": context,
        }
        if isinstance(error, BridgeError):
            record["error_code"] = error.error_code
            record["details"] = error.details
        if isinstance(error, CommandError):
            record["command"] = error.command
            record["value"] = error.value
            self.rejection_counts[error.error_code] = (
                self.rejection_counts.get(error.error_code, 0) + 1
            )

        self._records.append(record)
        self.error_counts[record["type"]] = self.error_counts.get(record["type"], 0) + 1

    def get_error_summary(self) -> Dict[str, Any]:
        """获取错误统计摘要"""
        records = self.errors
        return {
            "total_errors": len(records),
            "error_counts": self.error_counts.copy(),
            "rejected_commands": sum(self.rejection_counts.values()),
            "rejection_counts": self.rejection_counts.copy(),
            "recent_errors": records[-10:],
        }

    def clear_errors(self):
        self._records.clear()
        self.error_counts.clear()
        self.rejection_counts.clear()


# 全局错误收集器实例
error_collector = ErrorCollector()
