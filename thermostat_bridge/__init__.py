"""
thermostat_bridge 顶级包

云端恒温器与 Home Assistant MQTT 之间的双向状态桥接，统一暴露 base、config、service 子模块。
"""

__all__ = [
    "base",
    "config",
    "service",
]
