"""
Home Assistant MQTT 客户端

功能：
- 通过 MQTT Discovery 注册 climate 实体
- 发布实体状态（发出即忘，不等待确认）
- 订阅命令主题并按主题分发给对应处理函数
- 使用遗嘱消息维护桥接在线状态
"""

import asyncio
import json
import logging
import threading
from typing import Any, Callable, Dict, Optional

import gmqtt
from gmqtt import Client as GMQTTClient

from thermostat_bridge.base.error_utils import run_async_safe
from thermostat_bridge.service.homeassistant.mqtt_config import MQTTConfig

CommandHandler = Callable[[str], None]


class HAMQTTClient:
    def __init__(self, cfg: MQTTConfig):
        self._cfg = cfg
        self._client = None
        self._connecting: bool = False
        self._handlers: Dict[str, CommandHandler] = {}
        # 客户端所属的事件循环，所有发布都在此循环中执行
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def config(self) -> MQTTConfig:
        return self._cfg

    @property
    def connected(self) -> bool:
        return self._client is not None and bool(
            getattr(self._client, "is_connected", True)
        )

    def _log_debug(self, message: str, **kwargs):
        """输出 debug 级别日志（同步函数）"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        logging.debug(f"[MQTT] {message} {extra_data}".strip())

    async def _ensure_client(self):
        if self._client:
            return self._client
        if self._connecting:
            # 另一个协程在连接，稍等
            for _ in range(20):
                await asyncio.sleep(0.05)
                if self._client:
                    return self._client
            return None
        try:
            self._connecting = True
            self._log_debug(
                "创建新的 MQTT 客户端连接",
                host=self._cfg.host,
                port=self._cfg.port,
                client_id=self._cfg.client_id,
            )

            will = gmqtt.Message(
                self._cfg.availability_topic, "offline", qos=1, retain=True
            )
            client = GMQTTClient(self._cfg.client_id, will_message=will)
            client.on_connect = self._on_connect
            client.on_message = self._on_message
            if self._cfg.username:
                client.set_auth_credentials(self._cfg.username, self._cfg.password)
            await client.connect(self._cfg.host, self._cfg.port)

            self._client = client
            self._loop = asyncio.get_running_loop()
            self._log_debug("MQTT 客户端连接成功")
            await self._publish_availability("online")
            return self._client
        except Exception as e:
            logging.error(f"MQTT连接失败: {e}")
            self._client = None
            return None
        finally:
            self._connecting = False

    async def connect(self) -> bool:
        return await self._ensure_client() is not None

    async def close(self):
        if not self._client:
            return
        self._log_debug("关闭 MQTT 客户端连接")
        try:
            await self._publish_availability("offline")
        except Exception as e:
            self._log_debug("发布离线状态失败", error=str(e))

        try:
            await self._client.disconnect()
        except Exception as e:
            self._log_debug("断开 MQTT 连接时出错", error=str(e))
        finally:
            self._client = None
            self._log_debug("MQTT 客户端已关闭")

    # ------------------------------------------------------------------
    # 订阅与命令分发
    # ------------------------------------------------------------------

    def subscribe(self, topic: str, handler: CommandHandler) -> None:
        """注册命令主题处理函数；已连接时立即订阅，否则在连接时订阅"""
        self._handlers[topic] = handler
        if self._client is not None:
            self._client.subscribe(topic, qos=self._cfg.qos)
        self._log_debug("注册命令主题", topic=topic)

    def unsubscribe(self, topic: str) -> None:
        self._handlers.pop(topic, None)
        if self._client is not None:
            self._client.unsubscribe(topic)

    def _on_connect(self, client, flags, rc, properties):
        # 重连后需要重新订阅
        for topic in self._handlers:
            client.subscribe(topic, qos=self._cfg.qos)
        self._log_debug("订阅命令主题", count=len(self._handlers))

    def _on_message(self, client, topic, payload, qos, properties):
        self.dispatch(topic, payload)
        return 0

    def dispatch(self, topic: str, payload: Any) -> bool:
        """将收到的消息交给对应处理函数，返回是否找到处理函数"""
        if isinstance(payload, (bytes, bytearray)):
            payload = payload.decode("utf-8", errors="replace")
        handler = self._handlers.get(topic)
        if handler is None:
            self._log_debug("收到未注册主题的消息", topic=topic)
            return False

        self._log_debug("收到命令消息", topic=topic, payload=payload)
        try:
            handler(str(payload))
        except Exception as e:
            logging.error(f"处理 MQTT 消息失败 {topic}: {e}", exc_info=True)
        return True

    # ------------------------------------------------------------------
    # 发布
    # ------------------------------------------------------------------

    async def _publish(
        self,
        topic: str,
        payload: Any,
        qos: Optional[int] = None,
        retain: Optional[bool] = None,
    ):
        client = await self._ensure_client()
        if not client:
            self._log_debug("无法获取 MQTT 客户端，跳过发布", topic=topic)
            return False

        if hasattr(client, "is_connected") and not client.is_connected:
            self._log_debug("MQTT 连接已断开，重置客户端", topic=topic)
            self._client = None
            client = await self._ensure_client()
            if not client:
                self._log_debug("重新连接失败，跳过发布", topic=topic)
                return False

        qos_val = self._cfg.qos if qos is None else qos
        retain_val = self._cfg.retain if retain is None else retain
        try:
            if not isinstance(payload, (str, bytes)):
                payload = json.dumps(payload, ensure_ascii=False)
            self._log_debug(
                "发布 MQTT 消息",
                topic=topic,
                qos=qos_val,
                retain=retain_val,
                payload=payload,
            )
            client.publish(topic, payload, qos=qos_val, retain=retain_val)
            return True
        except Exception as e:
            logging.error(f"MQTT发布失败 {topic}: {e}")
            # 如果是连接相关错误，重置客户端
            if "socket" in str(e).lower() or "connection" in str(e).lower():
                self._log_debug("检测到连接错误，重置 MQTT 客户端")
                self._client = None
            return False

    def publish(self, topic: str, payload: Any) -> None:
        """发出即忘地发布状态消息，始终在客户端所属的事件循环中执行"""
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is not None and (self._loop is None or running is self._loop):
            run_async_safe(self._publish(topic, payload))
            return

        if self._loop is None or not self._loop.is_running():
            logging.warning(f"MQTT 事件循环未运行，丢弃发布: {topic}")
            return

        # 其他线程的调用交回客户端所属的事件循环
        self._log_debug(
            "跨线程发布，转交事件循环",
            topic=topic,
            thread=threading.current_thread().name,
        )
        future = asyncio.run_coroutine_threadsafe(
            self._publish(topic, payload), self._loop
        )
        future.add_done_callback(self._log_future_error)

    def _log_future_error(self, future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logging.error(f"MQTT发布任务失败: {type(exc).__name__}: {exc}")

    async def _publish_availability(self, status: str):
        topic = self._cfg.availability_topic
        self._log_debug("发布可用性状态", topic=topic, status=status)
        await self._publish(topic, status, qos=1, retain=True)

    async def publish_discovery(
        self, component: str, object_path: str, config_payload: Dict[str, Any]
    ) -> bool:
        """发布 Discovery 配置（retain）"""
        topic = f"{self._cfg.discovery_prefix}/{component}/{object_path}/config"
        self._log_debug(
            "发布 Discovery 配置",
            topic=topic,
            unique_id=config_payload.get("unique_id"),
        )
        return await self._publish(topic, config_payload, qos=1, retain=True)
