"""
设备数据模型

外部传输层拥有设备状态，本模块只定义桥接所需的最小接口：
设备句柄、变更通知流和“发出即忘”的设备写入。
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

# 设备类型标签
THERMOSTAT_DEVICE_TYPE = "temperature-control.thermostat"
OPERATING_STATUS_DEVICE_TYPE = "thermostat-operating-status"
TEMPERATURE_SENSOR_DEVICE_TYPE = "sensor.temperature"

# 硬件允许的设定温度范围（摄氏度）
MIN_SETPOINT = 10.0
MAX_SETPOINT = 37.22223

# 自动模式死区下限，也是未设置时的默认值
MIN_DEAD_BAND = 1.5

DataCallback = Callable[[Dict[str, Any]], None]


class DeviceDataStream:
    """设备变更通知流"""

    def __init__(self):
        self._subscribers: List[DataCallback] = []

    def subscribe(self, callback: DataCallback) -> Callable[[], None]:
        """订阅变更，返回取消订阅函数"""
        self._subscribers.append(callback)

        def _unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def emit(self, data: Dict[str, Any]) -> None:
        for callback in list(self._subscribers):
            try:
                callback(data)
            except Exception as e:
                logging.error(f"设备变更回调执行失败: {e}", exc_info=True)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


@dataclass
class LocationDevice:
    """同一位置下的设备句柄"""

    id: str
    device_type: str
    location_id: str
    data: Dict[str, Any] = field(default_factory=dict)
    name: Optional[str] = None
    # 设备写入接收方，接受部分状态补丁，可返回 awaitable
    sink: Optional[Callable[[Dict[str, Any]], Any]] = None
    on_data: DeviceDataStream = field(default_factory=DeviceDataStream)

    @property
    def parent_id(self) -> Optional[str]:
        return self.data.get("parentZid")

    def set_info(self, body: Dict[str, Any]) -> Any:
        """提交写入补丁，不等待设备确认"""
        if self.sink is None:
            logging.warning(f"设备 {self.id} 未配置写入接收方，丢弃补丁: {body}")
            return None
        return self.sink(body)

    def apply_update(self, changes: Dict[str, Any]) -> None:
        """由传输层调用：合并遥测数据并通知订阅者"""
        self.data.update(changes)
        self.on_data.emit(self.data)


__all__ = [
    "THERMOSTAT_DEVICE_TYPE",
    "OPERATING_STATUS_DEVICE_TYPE",
    "TEMPERATURE_SENSOR_DEVICE_TYPE",
    "MIN_SETPOINT",
    "MAX_SETPOINT",
    "MIN_DEAD_BAND",
    "DeviceDataStream",
    "LocationDevice",
]
