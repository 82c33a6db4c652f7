"""Tests for netdash/telemetry/radio.py"""

import asyncio
import json

import pytest
from conftest import FakeRunner

from netdash.exceptions import ExternalToolError
from netdash.telemetry.radio import PROFILER_CMD, parse_airport_profile, read_radio_info


def _profile(current=None):
    iface = {"_name": "en0"}
    if current is not None:
        iface["spairport_current_network_information"] = current
    return json.dumps({"SPAirPortDataType": [{"spairport_airport_interfaces": [{"_name": "awdl0"}, iface]}]})


class TestParseAirportProfile:
    """Tests for parse_airport_profile function."""

    def test_active_network(self):
        """Test field renaming for an associated radio."""
        text = _profile(
            {
                "_name": "HomeNet",
                "spairport_network_channel": "52 (5GHz, 80MHz)",
                "spairport_security_mode": "spairport_security_mode_wpa2_personal",
                "spairport_network_phymode": "802.11ac",
                "spairport_signal_noise": "-55 dBm / -92 dBm",
                "spairport_network_rate": 866,
            }
        )

        radio = parse_airport_profile(text)

        assert radio is not None
        assert radio.ssid == "HomeNet"
        assert radio.channel == "52"
        assert radio.channel_raw == "52 (5GHz, 80MHz)"
        assert radio.security == "wpa2_personal"
        assert radio.phymode == "802.11ac"
        assert radio.signal == "-55 dBm / -92 dBm"
        assert radio.rate == "866"

    def test_missing_fields_default_unknown(self):
        """Test absent fields degrade to Unknown."""
        radio = parse_airport_profile(_profile({"_name": "HomeNet"}))

        assert radio is not None
        assert radio.channel == "Unknown"
        assert radio.channel_raw is None
        assert radio.security == "Unknown"

    def test_no_active_network(self):
        """Test None when no interface is associated."""
        assert parse_airport_profile(_profile()) is None

    def test_empty_profile(self):
        """Test None for a profile without Wi-Fi cards."""
        assert parse_airport_profile("{}") is None

    def test_invalid_json_raises(self):
        """Test unparseable output raises ExternalToolError."""
        with pytest.raises(ExternalToolError):
            parse_airport_profile("system_profiler: command not found")


class TestReadRadioInfo:
    """Tests for read_radio_info coroutine."""

    def test_invokes_system_profiler(self):
        """Test the profiler command line."""
        runner = FakeRunner({"system_profiler": _profile({"_name": "HomeNet"})})

        radio = asyncio.run(read_radio_info(runner))

        assert runner.calls == [PROFILER_CMD]
        assert radio.ssid == "HomeNet"
