"""Data model for access point observations and channel occupancy.

This module defines the records produced by a WiFi scan (one
:class:`WiFiDetail` per detected access point, carrying its
:class:`WiFiSignal`) and the values derived from them when rating
channels: :class:`Channel`, :class:`Strength` and
:class:`ChannelAPCount`.

Channel and strength derivation depends on a band plan, which is
injected rather than global; see :mod:`channel_rating.bands`.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum


class Strength(IntEnum):
    """Coarse signal strength category, weakest first."""

    ZERO = 0
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4


class WiFiWidth(Enum):
    """Channel width of a signal, valued in MHz."""

    MHZ_20 = 20
    MHZ_40 = 40
    MHZ_80 = 80
    MHZ_160 = 160

    @property
    def frequency_width(self) -> int:
        return self.value

    @property
    def frequency_width_half(self) -> int:
        return self.value // 2

    @classmethod
    def from_mhz(cls, mhz: int) -> "WiFiWidth":
        """Look up a width by its MHz value.

        Raises:
            ValueError: If *mhz* is not a supported width.
        """
        return cls(int(mhz))


@dataclass(frozen=True)
class Channel:
    """A numbered channel slot within a band.

    Equality and hashing use the channel number only, so a channel
    derived from an observed frequency compares equal to the
    canonical channel of the band plan.

    Attributes:
        number: Channel number (``0`` for an unmapped frequency).
        frequency: Frequency in MHz.
    """

    number: int
    frequency: int = field(default=0, compare=False)


#: Result of mapping a frequency that lies outside every channel set.
UNKNOWN_CHANNEL = Channel(number=0, frequency=0)


@dataclass(frozen=True)
class WiFiSignal:
    """Decoded signal record of one observation.

    Attributes:
        primary_frequency: Primary (20 MHz) frequency in MHz.
        center_frequency: Centre frequency of the whole channel width.
        wifi_width: Channel width.
        level: Signal level in dBm (more negative is weaker).
        is_80211mc: Whether the access point supports 802.11mc ranging.
    """

    primary_frequency: int
    center_frequency: int
    wifi_width: WiFiWidth = WiFiWidth.MHZ_20
    level: int = -100
    is_80211mc: bool = False

    @property
    def frequency_start(self) -> int:
        return self.center_frequency - self.wifi_width.frequency_width_half

    @property
    def frequency_end(self) -> int:
        return self.center_frequency + self.wifi_width.frequency_width_half

    def in_range(self, frequency: int) -> bool:
        """Whether *frequency* falls inside the span this signal occupies."""
        return self.frequency_start <= frequency <= self.frequency_end

    @property
    def distance(self) -> float:
        """Estimated distance to the access point in metres.

        Free-space path loss model evaluated at the primary frequency.
        Returns ``0.0`` for a non-positive frequency.
        """
        if self.primary_frequency <= 0:
            return 0.0
        exponent = (
            27.55 - 20 * math.log10(self.primary_frequency) + abs(self.level)
        ) / 20.0
        return math.pow(10.0, exponent)


@dataclass(frozen=True)
class WiFiConnection:
    """The network the device is currently connected to."""

    ssid: str = ""
    bssid: str = ""
    ip_address: str = ""
    link_speed: int = -1

    @property
    def connected(self) -> bool:
        return bool(self.ip_address)


EMPTY_CONNECTION = WiFiConnection()


@dataclass(frozen=True)
class WiFiAdditional:
    """Metadata attached to an observation outside the radio record."""

    vendor_name: str = ""
    wifi_connection: WiFiConnection = EMPTY_CONNECTION


EMPTY_ADDITIONAL = WiFiAdditional()


@dataclass(frozen=True)
class WiFiDetail:
    """One detected access point at a point in time.

    Attributes:
        ssid: Network name (may be empty for hidden networks).
        bssid: Hardware address, ``xx:xx:xx:xx:xx:xx``, any case.
        capabilities: Security capabilities string as reported.
        wifi_signal: The decoded signal record.
        wifi_additional: Connection and vendor metadata.
    """

    ssid: str
    bssid: str
    capabilities: str = ""
    wifi_signal: WiFiSignal = field(
        default_factory=lambda: WiFiSignal(0, 0)
    )
    wifi_additional: WiFiAdditional = EMPTY_ADDITIONAL

    @property
    def is_connected(self) -> bool:
        """Whether this observation is the network currently connected to."""
        connection = self.wifi_additional.wifi_connection
        return (
            connection.connected
            and connection.bssid.lower() == self.bssid.lower()
        )


@dataclass(frozen=True)
class ChannelAPCount:
    """A channel paired with the number of access points occupying it."""

    channel: Channel
    count: int
