"""Tests for room status aggregation."""

from __future__ import annotations

from zrshell.channel.stubs import StubRoomChannel
from zrshell.core.state_machine import SessionState
from zrshell.meeting.session import MeetingSession
from zrshell.monitor.aggregator import (
    ACTIVE_MEETING_KEY,
    IN_CALL_KEYS,
    SYSTEM_FIELD_KEYS,
    StatusAggregator,
    SystemField,
    map_line_properties,
    map_system_properties,
)
from zrshell.monitor.controls import CallControl
from zrshell.monitor.models import Button, Switch
from zrshell.protocol.executor import CommandExecutor


def _make_aggregator(channel: StubRoomChannel) -> StatusAggregator:
    executor = CommandExecutor(channel)
    session = MeetingSession(executor, sleep=lambda seconds: None)
    return StatusAggregator(executor, session)


class TestMapping:
    def test_every_system_field_has_a_display_key(self) -> None:
        assert set(SYSTEM_FIELD_KEYS) == set(SystemField)

    def test_system_properties(self) -> None:
        statistics = map_system_properties({
            "SystemUnit room_version": "5.15.1",
            "SystemUnit room_info room_name": "Board Room",
            "SystemUnit room_info account_email": "room@example.com",
            "SystemUnit room_info meeting_number": "2149695280",
            "SystemUnit platform": "Windows 10",
            "SystemUnit serial_number": "ignored",
        })

        assert statistics == {
            "Zoom Rooms Version": "5.15.1",
            "Room Name": "Board Room",
            "Account Email": "room@example.com",
            "Meeting Number (Personal)": "2149695280",
            "Platform": "Windows 10",
        }

    def test_line_properties_report_names_and_selection_only(self) -> None:
        statistics = map_line_properties({
            "Audio Input Line 1 Name": "Mic A",
            "Audio Input Line 1 Selected": "on",
            "Audio Input Line 1 id": "usb:1",
            "Video Camera Line 1 Name": "Rally",
            "Video Camera Line 1 ptzComId": "-1",
        })

        assert statistics == {
            "Audio Settings#Audio Input Line 1 Name": "Mic A",
            "Audio Settings#Audio Input Line 1 Selected": "on",
            "Video Camera Settings#Video Camera Line 1 Name": "Rally",
        }


class TestPollNotInMeeting:
    def test_device_statistics_always_present(self) -> None:
        channel = StubRoomChannel()
        status = _make_aggregator(channel).poll()

        assert status.state is SessionState.NOT_IN_MEETING
        assert not status.in_call
        assert status.statistics["Audio Settings#Audio Input Line 1 Name"] == "Logitech Rally Mic"
        assert status.statistics["Audio Settings#Audio Output Line 1 Name"] == (
            "Logitech Rally Speaker"
        )
        assert status.statistics["Video Camera Settings#Video Camera Line 1 Name"] == (
            "Logi Rally Camera"
        )
        assert status.statistics["Room Name"] == "Board Room"
        assert status.statistics["Zoom Rooms Version"] == "5.15.1 (2345)"
        assert status.statistics["Meeting Number (Personal)"] == "2149695280"

    def test_in_call_keys_absent(self) -> None:
        channel = StubRoomChannel()
        status = _make_aggregator(channel).poll()

        assert IN_CALL_KEYS.isdisjoint(status.statistics)
        assert status.controls == []
        assert status.call_id is None
        assert status.microphone_muted is None

    def test_commands_issued(self) -> None:
        channel = StubRoomChannel()
        _make_aggregator(channel).poll()

        assert channel.sent == [
            "zstatus call status",
            "zstatus audio input line",
            "zstatus audio output line",
            "zstatus video camera line",
            "zstatus systemunit",
        ]

    def test_reconnects_before_polling(self) -> None:
        channel = StubRoomChannel(connected=False)
        _make_aggregator(channel).poll()

        assert channel.connect_count == 1


class TestPollInMeeting:
    def test_in_call_keys_present(self) -> None:
        channel = StubRoomChannel(call_status="IN_MEETING", meeting_id="2754909175")
        channel.microphone_muted = True
        status = _make_aggregator(channel).poll()

        assert status.in_call
        assert IN_CALL_KEYS <= set(status.statistics)
        assert status.statistics[ACTIVE_MEETING_KEY] == "2754909175"
        assert status.call_id == "2754909175"
        assert status.microphone_muted is True

    def test_controls(self) -> None:
        channel = StubRoomChannel(call_status="IN_MEETING", meeting_id="1")
        channel.camera_muted = True
        status = _make_aggregator(channel).poll()

        controls = {control.name: control for control in status.controls}
        assert set(controls) == {control.value for control in CallControl}

        microphone = controls[CallControl.MICROPHONE_MUTE.value]
        assert isinstance(microphone.control, Switch)
        assert microphone.value == 0
        assert controls[CallControl.CAMERA_MUTE.value].value == 1

        move_up = controls[CallControl.MOVE_UP.value]
        assert isinstance(move_up.control, Button)
        assert move_up.control.label == "Up"
        assert status.statistics[CallControl.MOVE_UP.value] == ""

    def test_rebuilt_after_call_ends(self) -> None:
        channel = StubRoomChannel(call_status="IN_MEETING", meeting_id="1")
        aggregator = _make_aggregator(channel)
        assert aggregator.poll().in_call

        channel.call_status = "NOT_IN_MEETING"
        status = aggregator.poll()

        assert IN_CALL_KEYS.isdisjoint(status.statistics)
        assert status.controls == []

    def test_to_dict(self) -> None:
        channel = StubRoomChannel(call_status="IN_MEETING", meeting_id="1")
        data = _make_aggregator(channel).poll().to_dict()

        assert data["state"] == "IN_MEETING"
        assert data["in_call"] is True
        assert {"name": "Video Camera#Move Left", "type": "button", "value": ""} in data["controls"]
