"""Shared test fixtures and helpers for channel_rating tests."""

from pathlib import Path

import pytest

from channel_rating.bands import default_band_plan
from channel_rating.models import (
    WiFiAdditional,
    WiFiConnection,
    WiFiDetail,
    WiFiSignal,
    WiFiWidth,
)
from channel_rating.rating import ChannelRating

SCAN_CSV = """\
ssid,bssid,capabilities,primary_frequency,center_frequency,width,level,is_80211mc,connected
SSID1,20:cf:30:ce:1d:71,[WPA2],2432,2432,20,-50,true,true
SSID2,58:6d:8f:fa:ae:c0,[WPA2],2442,2442,20,-70,true,false
SSID3,84:94:8c:9d:40:68,[WPA2],2452,2452,20,-60,true,false
SSID3,64:A4:8c:90:10:12,[WPA2],2452,2452,20,-80,true,false
"""


def make_detail(ssid, bssid, frequency, level, connected=False):
    """Build a 20 MHz observation centred on *frequency*."""
    additional = WiFiAdditional()
    if connected:
        additional = WiFiAdditional(
            wifi_connection=WiFiConnection(ssid, bssid, "192.168.1.15", 11)
        )
    return WiFiDetail(
        ssid=ssid,
        bssid=bssid,
        wifi_signal=WiFiSignal(frequency, frequency, WiFiWidth.MHZ_20, level, True),
        wifi_additional=additional,
    )


@pytest.fixture
def band_plan():
    """Return the band plan bundled with the package."""
    return default_band_plan()


@pytest.fixture
def rating(band_plan) -> ChannelRating:
    """Return an empty rating over the bundled plan."""
    return ChannelRating(band_plan=band_plan)


@pytest.fixture
def connected_detail() -> WiFiDetail:
    """The network currently connected to, channel 5 at -50 dBm."""
    return make_detail("SSID1", "20:cf:30:ce:1d:71", 2432, -50, connected=True)


@pytest.fixture
def scan(connected_detail):
    """Four observations on channels 5, 7, 9 and 9."""
    return [
        connected_detail,
        make_detail("SSID2", "58:6d:8f:fa:ae:c0", 2442, -70),
        make_detail("SSID3", "84:94:8c:9d:40:68", 2452, -60),
        make_detail("SSID3", "64:A4:8c:90:10:12", 2452, -80),
    ]


@pytest.fixture
def scan_csv(tmp_path) -> Path:
    """Write the four-observation scan to a CSV file and return the path."""
    p = tmp_path / "scan.csv"
    p.write_text(SCAN_CSV, encoding="utf-8")
    return p
