# services/gateway_service.py
# TRÅDFRI 게이트웨이 연결과 기기 관찰을 담당합니다.

import asyncio
from typing import Any, Dict, Optional

from pytradfri import Gateway
from pytradfri.error import PytradfriError

from config import GatewayConfig, get_gateway_config
from exceptions import GatewayUnavailable, LookupFailure
from utils.logger import LoggerMixin, get_logger

logger = get_logger(__name__)


def _spectrum(light_control) -> str:
    """조명이 지원하는 색 범위 (rgb / white / none)"""
    if getattr(light_control, "can_set_color", False):
        return "rgb"
    if getattr(light_control, "can_set_temp", False):
        return "white"
    return "none"


def device_to_record(device) -> Dict[str, Any]:
    """
    pytradfri Device를 게이트웨이 원시 레코드 형식으로 변환합니다.

    Returns:
        Dict[str, Any]: type / instanceId / name / deviceInfo / lightList / plugList
    """
    record: Dict[str, Any] = {
        "type": device.application_type,
        "instanceId": device.id,
        "name": device.name,
        "deviceInfo": {"battery": device.device_info.battery_level},
    }

    if device.has_light_control:
        light_control = device.light_control
        record["lightList"] = [
            {
                "onOff": light.state,
                "dimmer": light.dimmer,
                "color": light.hex_color,
                "spectrum": _spectrum(light_control),
            }
            for light in light_control.lights
        ]

    if device.has_socket_control:
        record["plugList"] = [{"onOff": socket.state} for socket in device.socket_control.sockets]

    return record


class GatewayHandle(LoggerMixin):
    """
    연결된 게이트웨이 핸들.

    devices 는 기기 ID -> 원시 레코드 매핑이며 백그라운드 관찰로 계속 갱신됩니다.
    관찰은 프로세스 수명 동안 유지되는 구독이며 핸들당 한 번만 시작됩니다.
    """

    def __init__(self, api_factory, api, gateway: Optional[Gateway] = None):
        self.api_factory = api_factory
        self.api = api
        self.gateway = gateway or Gateway()
        self.devices: Dict[int, Dict[str, Any]] = {}
        self._device_objects: Dict[int, Any] = {}
        self._observe_task: Optional[asyncio.Task] = None
        self._observe_started = 0.0
        self._observer_tasks = set()

    @property
    def observing(self) -> bool:
        return self._observe_task is not None

    def observe_devices(self) -> bool:
        """
        기기 관찰을 백그라운드에서 시작합니다. 이미 시작했다면 아무것도 하지 않습니다.

        Returns:
            bool: 이번 호출로 새로 시작했으면 True
        """
        if self._observe_task is not None:
            return False
        self._observe_started = asyncio.get_running_loop().time()
        self._observe_task = asyncio.ensure_future(self._observe())
        self.log_info("게이트웨이 기기 관찰 시작")
        return True

    async def wait_settled(self, settle_delay: float) -> None:
        """
        관찰 시작 후 settle_delay 가 지나거나 초기 기기 조회가 끝날 때까지 기다립니다.

        같은 구간 안의 모든 조회가 같은 시점까지 기다리므로 기기 수가 달라지지 않습니다.

        Raises:
            GatewayUnavailable: 초기 기기 조회 실패 (다음 조회에서 관찰을 다시 시작)
        """
        task = self._observe_task
        if task is None:
            return

        remaining = self._observe_started + settle_delay - asyncio.get_running_loop().time()
        if not task.done() and remaining > 0:
            await asyncio.wait({task}, timeout=remaining)

        if task.done() and not task.cancelled() and task.exception() is not None:
            if self._observe_task is task:
                self._observe_task = None
            raise task.exception()

    async def _observe(self) -> None:
        try:
            devices_command = self.gateway.get_devices()
            devices_commands = await self.api(devices_command)
            devices = await self.api(devices_commands)
        except Exception as e:
            self.log_error("게이트웨이 기기 목록 조회 실패")
            raise GatewayUnavailable(f"게이트웨이 기기 목록을 조회할 수 없습니다: {e}") from e

        for device in devices:
            self._store(device)
            observe_command = device.observe(self._store, self._observe_error, duration=0)
            task = asyncio.ensure_future(self.api(observe_command))
            self._observer_tasks.add(task)
            task.add_done_callback(self._observer_tasks.discard)
            # 관찰 요청 사이에 이벤트 루프에 양보
            await asyncio.sleep(0)

    def _store(self, device) -> None:
        self._device_objects[device.id] = device
        self.devices[device.id] = device_to_record(device)

    def _observe_error(self, error) -> None:
        self.log_warning(f"기기 관찰 오류: {error}")

    async def set_power(self, instance_id: int, on: bool) -> None:
        """
        조명 또는 플러그를 켜거나 끕니다.

        Raises:
            LookupFailure: 알 수 없는 기기이거나 켜고 끌 수 없는 기기
            GatewayUnavailable: 명령 전송 실패
        """
        device = self._device_objects.get(instance_id)
        if device is None:
            raise LookupFailure(f"기기를 찾을 수 없습니다: {instance_id}")

        if device.has_light_control:
            command = device.light_control.set_state(on)
            channel_key = "lightList"
        elif device.has_socket_control:
            command = device.socket_control.set_state(on)
            channel_key = "plugList"
        else:
            raise LookupFailure(f"켜고 끌 수 없는 기기입니다: {instance_id}")

        try:
            await self.api(command)
        except (PytradfriError, OSError) as e:
            raise GatewayUnavailable(f"기기 명령 전송에 실패했습니다: {e}") from e

        # 관찰 콜백이 도착하기 전에도 목록에 반영
        record = self.devices.get(instance_id)
        if record and record.get(channel_key):
            record[channel_key][0]["onOff"] = on
        self.log_info(f"기기 전원 변경: {instance_id} -> {on}")

    async def shutdown(self) -> None:
        for task in list(self._observer_tasks):
            task.cancel()
        if self._observe_task is not None:
            self._observe_task.cancel()
        await self.api_factory.shutdown()


class GatewayService(LoggerMixin):
    """게이트웨이 연결을 지연 생성하고 공유하는 서비스"""

    def __init__(self, config: Optional[GatewayConfig] = None):
        self._config = config
        self._handle: Optional[GatewayHandle] = None
        self._lock = asyncio.Lock()

    @property
    def config(self) -> GatewayConfig:
        if self._config is None:
            self._config = get_gateway_config()
        return self._config

    @property
    def settle_delay(self) -> float:
        return self.config.settle_delay

    async def connect(self) -> GatewayHandle:
        """
        게이트웨이에 연결합니다. 이미 연결되어 있으면 같은 핸들을 반환합니다.

        Raises:
            GatewayUnavailable: 연결 실패 시
        """
        async with self._lock:
            if self._handle is not None:
                return self._handle

            try:
                self._handle = await self._open()
            except GatewayUnavailable:
                raise
            except Exception as e:
                self.log_error(f"게이트웨이 연결 실패: {self.config.host}")
                raise GatewayUnavailable(f"게이트웨이에 연결할 수 없습니다: {e}") from e

            self.log_info(f"게이트웨이 연결 완료: {self.config.host}")
            return self._handle

    async def _open(self) -> GatewayHandle:
        config = self.config
        if not config.psk and not config.security_code:
            raise GatewayUnavailable("TRADFRI_PSK 또는 TRADFRI_SECURITY_CODE가 필요합니다.")

        # aiocoap(DTLS)은 실제 연결할 때만 필요
        from pytradfri.api.aiocoap_api import APIFactory

        if config.psk:
            api_factory = await APIFactory.init(host=config.host, psk_id=config.identity, psk=config.psk)
        else:
            api_factory = await APIFactory.init(host=config.host, psk_id=config.identity)
            psk = await api_factory.generate_psk(config.security_code)
            self.log_warning(f"새 PSK가 생성되었습니다. TRADFRI_PSK 환경변수에 저장하세요: {psk}")
        return GatewayHandle(api_factory, api_factory.request)

    async def shutdown(self) -> None:
        """연결을 종료합니다."""
        async with self._lock:
            if self._handle is not None:
                await self._handle.shutdown()
                self._handle = None


_gateway_service: Optional[GatewayService] = None


def get_gateway_service() -> GatewayService:
    """공유 GatewayService 인스턴스를 반환합니다."""
    global _gateway_service
    if _gateway_service is None:
        _gateway_service = GatewayService()
    return _gateway_service
