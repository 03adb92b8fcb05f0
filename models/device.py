# models/device.py
# 조명 기기 스냅샷 데이터 모델을 정의합니다.

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from utils.constants import DeviceTypeCodes


class DeviceKind(Enum):
    """기기 종류"""
    REMOTE = "remote"
    SENSOR = "sensor"
    LIGHT = "light"
    PLUG = "plug"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code) -> "DeviceKind":
        """게이트웨이 타입 코드를 기기 종류로 변환합니다."""
        return _KIND_BY_CODE.get(code, cls.UNKNOWN)

    @property
    def switchable(self) -> bool:
        """켜고 끌 수 있는 기기인지 확인"""
        return self in (DeviceKind.LIGHT, DeviceKind.PLUG)


_KIND_BY_CODE = {
    DeviceTypeCodes.REMOTE: DeviceKind.REMOTE,
    DeviceTypeCodes.LIGHT: DeviceKind.LIGHT,
    DeviceTypeCodes.PLUG: DeviceKind.PLUG,
    DeviceTypeCodes.SENSOR: DeviceKind.SENSOR,
}


@dataclass(frozen=True)
class DeviceSnapshot:
    """렌더링용으로 정규화된 기기 상태 (목록 조회마다 새로 생성)"""
    instance_id: int
    name: str
    kind: DeviceKind
    battery_percent: Optional[int] = None
    on_off: Optional[bool] = None
    color_hex: Optional[str] = None
    dimmer_level: Optional[int] = None
    spectrum: Optional[str] = None
