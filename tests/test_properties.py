"""Tests for property extraction from status dumps."""

from __future__ import annotations

from zrshell.protocol.properties import parse_properties


CAMERA_LINE = (
    "*s Video Camera Line 1 id: 00#8&2cc2822b&0&0000#{65e8773d}\\global\r\n"
    "*s Video Camera Line 1 Name: Logi Rally Camera\r\n"
    "*s Video Camera Line 1 Selected: on\r\n"
    "*s Video Camera Line 2 ptzComId: -1\r\n"
    "** end\r\n"
    "\r\n"
    "OK\r\n"
)


class TestParseProperties:
    def test_extracts_matching_lines(self) -> None:
        properties = parse_properties(CAMERA_LINE, "*s Video Camera Line")

        assert properties == {
            "Video Camera Line 1 id": "00#8&2cc2822b&0&0000#{65e8773d}\\global",
            "Video Camera Line 1 Name": "Logi Rally Camera",
            "Video Camera Line 1 Selected": "on",
            "Video Camera Line 2 ptzComId": "-1",
        }

    def test_duplicate_key_keeps_last_value(self) -> None:
        response = (
            "*s Audio Input Line 1 Name: Mic A\r\n"
            "*s Audio Input Line 1 Name: Mic B\r\n"
        )
        properties = parse_properties(response, "*s Audio Input Line")

        assert properties == {"Audio Input Line 1 Name": "Mic B"}

    def test_splits_on_first_colon_only(self) -> None:
        response = "*s Audio Input Line 1 id: usb:046d:0881\r\n"
        properties = parse_properties(response, "*s Audio Input Line")

        assert properties["Audio Input Line 1 id"] == "usb:046d:0881"

    def test_ignores_unsolicited_and_error_lines(self) -> None:
        response = (
            "*e SharingState: on\r\n"
            "*s Audio Input Line 1 Name: Mic A\r\n"
            "ERROR\r\n"
            "*s Audio Output Line 1 Name: Speaker\r\n"
        )
        properties = parse_properties(response, "*s Audio Input Line")

        assert properties == {"Audio Input Line 1 Name": "Mic A"}

    def test_skips_lines_without_colon(self) -> None:
        response = "*s SystemUnit header\r\n*s SystemUnit platform: Windows 10\r\n"
        properties = parse_properties(response, "*s SystemUnit")

        assert properties == {"SystemUnit platform": "Windows 10"}

    def test_non_status_prefix_keeps_marker(self) -> None:
        response = "*r InfoResult Info meeting_id: 2754909175\r\n** end\r\n"
        properties = parse_properties(response, "*r InfoResult Info meeting_id")

        assert properties == {"*r InfoResult Info meeting_id": "2754909175"}

    def test_empty_response(self) -> None:
        assert parse_properties("", "*s Audio Input Line") == {}
