# services/device_reader.py
# 게이트웨이의 원시 기기 레코드를 DeviceSnapshot으로 정규화합니다.

from typing import Any, Callable, Dict, List, Mapping, Optional

from models.device import DeviceKind, DeviceSnapshot
from utils.logger import get_logger

logger = get_logger(__name__)


def _first_channel(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """lightList / plugList 의 첫 번째 채널 (없으면 빈 딕셔너리)"""
    channels = raw.get(key) or []
    return channels[0] if channels else {}


def _normalize_battery(raw: Mapping[str, Any], kind: DeviceKind) -> DeviceSnapshot:
    device_info = raw.get("deviceInfo") or {}
    return DeviceSnapshot(
        instance_id=raw.get("instanceId"),
        name=raw.get("name", ""),
        kind=kind,
        battery_percent=device_info.get("battery"),
    )


def _normalize_light(raw: Mapping[str, Any], kind: DeviceKind) -> DeviceSnapshot:
    light = _first_channel(raw, "lightList")
    return DeviceSnapshot(
        instance_id=raw.get("instanceId"),
        name=raw.get("name", ""),
        kind=kind,
        on_off=light.get("onOff"),
        spectrum=light.get("spectrum"),
        dimmer_level=light.get("dimmer"),
        color_hex=light.get("color"),
    )


def _normalize_plug(raw: Mapping[str, Any], kind: DeviceKind) -> DeviceSnapshot:
    plug = _first_channel(raw, "plugList")
    return DeviceSnapshot(
        instance_id=raw.get("instanceId"),
        name=raw.get("name", ""),
        kind=kind,
        on_off=plug.get("onOff"),
    )


# 기기 종류별 정규화 함수 (UNKNOWN은 의도적으로 없음)
_NORMALIZERS: Dict[DeviceKind, Callable[[Mapping[str, Any], DeviceKind], DeviceSnapshot]] = {
    DeviceKind.REMOTE: _normalize_battery,
    DeviceKind.SENSOR: _normalize_battery,
    DeviceKind.LIGHT: _normalize_light,
    DeviceKind.PLUG: _normalize_plug,
}


def normalize(raw: Mapping[str, Any]) -> Optional[DeviceSnapshot]:
    """
    원시 기기 레코드를 DeviceSnapshot으로 변환합니다.

    원본 레코드는 수정하지 않으며, 누락된 하위 필드는 None으로 남깁니다.

    Args:
        raw: 게이트웨이에서 받은 기기 레코드

    Returns:
        Optional[DeviceSnapshot]: 분류할 수 없는 기기면 None
    """
    kind = DeviceKind.from_code(raw.get("type"))
    normalizer = _NORMALIZERS.get(kind)
    if normalizer is None:
        logger.info(f"알 수 없는 기기 타입 - {raw.get('instanceId')} {raw.get('name')}: {raw.get('type')}")
        return None
    return normalizer(raw, kind)


def read_snapshots(devices: Mapping[Any, Mapping[str, Any]]) -> List[DeviceSnapshot]:
    """
    게이트웨이의 기기 목록을 순서대로 정규화합니다. 분류할 수 없는 기기는 건너뜁니다.

    Args:
        devices: 기기 ID -> 원시 레코드 매핑 (GatewayHandle.devices)
    """
    snapshots = []
    for raw in list(devices.values()):
        snapshot = normalize(raw)
        if snapshot is not None:
            snapshots.append(snapshot)
    logger.debug(f"기기 스냅샷 {len(snapshots)}개 생성 (전체 {len(devices)}개)")
    return snapshots
