"""CSV parser for exported WiFi scan snapshots.

This module provides :class:`ScanParser`, a stateful parser that
ingests scan CSV lines one at a time and turns each row into a
:class:`~channel_rating.models.WiFiDetail`.

The CSV format has one row per detected access point::

    ssid,bssid,capabilities,primary_frequency,center_frequency,width,level,is_80211mc,connected

``width`` is in MHz, ``level`` in dBm, booleans accept
``true/false/yes/no/1/0``.  An optional header row is skipped, as are
rows that are too short or carry non-numeric fields.
"""

import csv
from typing import List, Optional

from channel_rating.models import (
    EMPTY_ADDITIONAL,
    WiFiAdditional,
    WiFiConnection,
    WiFiDetail,
    WiFiSignal,
    WiFiWidth,
)

#: Column names in file order.
COLUMNS = [
    "ssid",
    "bssid",
    "capabilities",
    "primary_frequency",
    "center_frequency",
    "width",
    "level",
    "is_80211mc",
    "connected",
]

_TRUE_VALUES = {"true", "yes", "1", "y"}

# Placeholder address for the connection of an exported "connected" row.
_CONNECTED_IP = "0.0.0.0"


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUE_VALUES


def _convert_line(line: str) -> Optional[WiFiDetail]:
    """Convert a single CSV row into a :class:`WiFiDetail`.

    Args:
        line: A single CSV row string.

    Returns:
        The parsed observation, or ``None`` for a header row, a row
        with too few columns or a row with non-numeric fields.
    """
    parts = next(csv.reader([line]), [])
    if len(parts) < 7:
        return None
    if parts[0].strip().lower() == "ssid" and parts[1].strip().lower() == "bssid":
        return None

    try:
        primary = int(parts[3].strip())
        center = int(parts[4].strip() or primary)
        width = WiFiWidth.from_mhz(int(parts[5].strip() or 20))
        level = int(float(parts[6].strip()))
    except (ValueError, OverflowError):
        return None

    is_80211mc = _parse_bool(parts[7]) if len(parts) > 7 else False
    connected = _parse_bool(parts[8]) if len(parts) > 8 else False

    ssid = parts[0].strip()
    bssid = parts[1].strip()
    additional = EMPTY_ADDITIONAL
    if connected:
        additional = WiFiAdditional(
            wifi_connection=WiFiConnection(
                ssid=ssid,
                bssid=bssid,
                ip_address=_CONNECTED_IP,
            )
        )

    return WiFiDetail(
        ssid=ssid,
        bssid=bssid,
        capabilities=parts[2].strip(),
        wifi_signal=WiFiSignal(
            primary_frequency=primary,
            center_frequency=center,
            wifi_width=width,
            level=level,
            is_80211mc=is_80211mc,
        ),
        wifi_additional=additional,
    )


class ScanParser:
    """Stateful parser that accumulates scan CSV lines.

    Each call to :meth:`add_line` parses one CSV row; call
    :meth:`convert` to retrieve the observations in file order.

    Example:
        >>> parser = ScanParser()
        >>> parser.add_line("home,20:cf:30:ce:1d:71,[WPA2],2432,2432,20,-50,true,true")
        >>> details = parser.convert()
    """

    def __init__(self) -> None:
        """Initialize with no observations."""
        self._details: List[WiFiDetail] = []
        self.skipped: int = 0

    def add_line(self, line: str) -> None:
        """Parse a single CSV line and append its observation.

        Lines that cannot be parsed are counted in :attr:`skipped`.

        Args:
            line: A single CSV line.
        """
        wifi_detail = _convert_line(line)
        if wifi_detail is None:
            self.skipped += 1
            return
        self._details.append(wifi_detail)

    def convert(self) -> List[WiFiDetail]:
        """Return the parsed observations in file order."""
        return list(self._details)
