"""
Unit tests for raw gateway record normalization.
"""

import copy

from conftest import light_record
from models.device import DeviceKind
from services.device_reader import normalize, read_snapshots


class TestNormalize:
    def test_light_copies_first_channel(self):
        snapshot = normalize(light_record(onOff=False, dimmer=200, color="ff0000", spectrum="rgb"))

        assert snapshot.kind is DeviceKind.LIGHT
        assert snapshot.instance_id == 65537
        assert snapshot.name == "Desk lamp"
        assert snapshot.on_off is False
        assert snapshot.dimmer_level == 200
        assert snapshot.color_hex == "ff0000"
        assert snapshot.spectrum == "rgb"
        assert snapshot.battery_percent is None

    def test_light_without_channel_leaves_fields_unset(self):
        raw = {"type": 2, "instanceId": 1, "name": "Bare"}
        snapshot = normalize(raw)

        assert snapshot.kind is DeviceKind.LIGHT
        assert snapshot.on_off is None
        assert snapshot.spectrum is None
        assert snapshot.dimmer_level is None
        assert snapshot.color_hex is None

    def test_light_with_partial_channel(self):
        raw = {"type": 2, "instanceId": 1, "name": "Partial", "lightList": [{"onOff": True}]}
        snapshot = normalize(raw)

        assert snapshot.on_off is True
        assert snapshot.dimmer_level is None

    def test_remote_and_sensor_report_battery(self):
        remote = normalize({"type": 0, "instanceId": 2, "name": "Remote", "deviceInfo": {"battery": 87}})
        sensor = normalize({"type": 4, "instanceId": 3, "name": "Motion", "deviceInfo": {"battery": 12}})

        assert remote.kind is DeviceKind.REMOTE
        assert remote.battery_percent == 87
        assert remote.on_off is None
        assert sensor.kind is DeviceKind.SENSOR
        assert sensor.battery_percent == 12

    def test_battery_device_without_device_info(self):
        snapshot = normalize({"type": 0, "instanceId": 2, "name": "Remote"})
        assert snapshot.battery_percent is None

    def test_plug_reports_on_off(self):
        snapshot = normalize({"type": 3, "instanceId": 4, "name": "Plug", "plugList": [{"onOff": True}]})

        assert snapshot.kind is DeviceKind.PLUG
        assert snapshot.on_off is True
        assert snapshot.dimmer_level is None

    def test_unknown_type_returns_none(self):
        assert normalize({"type": 6, "instanceId": 5, "name": "Blind"}) is None
        assert normalize({"instanceId": 5, "name": "No type"}) is None

    def test_does_not_mutate_raw_record(self):
        raw = light_record()
        before = copy.deepcopy(raw)
        normalize(raw)
        assert raw == before


class TestReadSnapshots:
    def test_skips_unknown_devices_in_order(self):
        devices = {
            1: light_record(1, "First"),
            2: {"type": 1, "instanceId": 2, "name": "Repeater"},
            3: {"type": 3, "instanceId": 3, "name": "Plug", "plugList": [{"onOff": False}]},
        }
        snapshots = read_snapshots(devices)

        assert [s.name for s in snapshots] == ["First", "Plug"]

    def test_empty_gateway(self):
        assert read_snapshots({}) == []
