"""Channel rating: occupancy and strength per channel.

:class:`ChannelRating` holds the latest scan snapshot, deduplicated
so each physical access point appears once, and answers per-channel
questions about it: how many access points occupy a channel, how
strong the strongest of them is, and which channels of a candidate
list are the least congested.

An access point occupies every channel whose frequency falls inside
its signal span, so a 40 MHz network counts against each 20 MHz
channel it covers.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from channel_rating.bands import BandPlan, default_band_plan
from channel_rating.models import Channel, ChannelAPCount, Strength, WiFiDetail

logger = logging.getLogger(__name__)

# Strength categories a channel may have and still be recommended.
_RECOMMENDED_STRENGTHS = (Strength.ZERO, Strength.ONE)


def bssid_key(wifi_detail: WiFiDetail) -> str:
    """Deduplication key: the lower-cased hardware address."""
    return wifi_detail.bssid.lower()


def virtual_bssid_key(wifi_detail: WiFiDetail) -> str:
    """Deduplication key that folds virtual access points together.

    A radio broadcasting several networks varies the first octet and
    the last hex digit of its BSSID, so both are dropped and the
    centre frequency is added.
    """
    bssid = wifi_detail.bssid.lower()
    return f"{bssid[2:-1]}@{wifi_detail.wifi_signal.center_frequency}"


def remove_duplicates(
    wifi_details: Iterable[WiFiDetail],
    key=bssid_key,
) -> List[WiFiDetail]:
    """Keep the strongest observation of each access point.

    Observations sharing a key collapse into the one with the highest
    signal level; on equal levels the first one seen is kept.  The
    result is ordered by first occurrence of each key.
    """
    best: Dict[str, WiFiDetail] = {}
    for wifi_detail in wifi_details:
        k = key(wifi_detail)
        current = best.get(k)
        if current is None or wifi_detail.wifi_signal.level > current.wifi_signal.level:
            best[k] = wifi_detail
    return list(best.values())


class ChannelRating:
    """Rates channels from the most recent scan snapshot.

    Each call to :meth:`set_wifi_details` replaces the snapshot
    wholesale.  Queries read whatever snapshot is current when they
    start; nothing is cached between calls.

    Example:
        >>> rating = ChannelRating()
        >>> rating.set_wifi_details(scan)
        >>> rating.best_channels(rating.band_plan.channels("2.4GHz"))
    """

    def __init__(
        self,
        band_plan: Optional[BandPlan] = None,
        merge_virtual: bool = False,
    ) -> None:
        """Initialize with an empty snapshot.

        Args:
            band_plan: Band and strength tables.  Defaults to the plan
                bundled with the package.
            merge_virtual: Fold virtual access points of the same radio
                into one entry instead of keying on the exact BSSID.
        """
        self.band_plan: BandPlan = band_plan or default_band_plan()
        self._key = virtual_bssid_key if merge_virtual else bssid_key
        self._lock = threading.Lock()
        self._wifi_details: Tuple[WiFiDetail, ...] = ()

    def set_wifi_details(self, wifi_details: Iterable[WiFiDetail]) -> None:
        """Replace the snapshot with *wifi_details*, deduplicated."""
        deduplicated = tuple(remove_duplicates(wifi_details, self._key))
        with self._lock:
            self._wifi_details = deduplicated
        logger.debug("Channel rating holds %d access points", len(deduplicated))

    def wifi_details(self) -> Tuple[WiFiDetail, ...]:
        """The current deduplicated snapshot."""
        with self._lock:
            return self._wifi_details

    def _frequency(self, channel: Channel) -> Optional[int]:
        # A channel built from its number alone carries no frequency.
        if channel.frequency or not channel.number:
            return channel.frequency
        return self.band_plan.frequency_of(channel.number)

    def _overlapping(self, channel: Channel) -> List[WiFiDetail]:
        frequency = self._frequency(channel)
        if frequency is None:
            return []
        return [
            d for d in self.wifi_details()
            if d.wifi_signal.in_range(frequency)
        ]

    def count(self, channel: Channel) -> int:
        """Number of access points occupying *channel*."""
        return len(self._overlapping(channel))

    def strength(self, channel: Channel) -> Strength:
        """Strongest signal category on *channel*.

        The network currently connected to is left out: it is the
        user's own network, not interference.  Returns
        :attr:`Strength.ZERO` when nothing else occupies the channel.
        """
        result = Strength.ZERO
        for wifi_detail in self._overlapping(channel):
            if wifi_detail.is_connected:
                continue
            result = max(
                result,
                self.band_plan.strength_for(wifi_detail.wifi_signal.level),
            )
        return result

    def rating(self, channel: Channel) -> int:
        """Star rating of *channel*, from 1 (busy) to 5 (quiet)."""
        return len(Strength) - int(self.strength(channel))

    def best_channels(self, channels: Sequence[Channel]) -> List[ChannelAPCount]:
        """Rank *channels* by ascending occupancy.

        Every candidate appears exactly once; channels with equal
        counts keep their order from *channels*.
        """
        results = [ChannelAPCount(channel=c, count=self.count(c)) for c in channels]
        return sorted(results, key=lambda r: r.count)

    def recommended_channels(
        self,
        channels: Sequence[Channel],
        limit: Optional[int] = None,
    ) -> List[ChannelAPCount]:
        """Least congested channels whose strength is at most ``ONE``.

        Args:
            channels: Candidate channels, usually every channel a band
                (and country) permits.
            limit: Return at most this many entries.

        Returns:
            Matching channels ranked like :meth:`best_channels`.

        Raises:
            ValueError: If *limit* is negative.
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        candidates = [
            c for c in channels
            if self.strength(c) in _RECOMMENDED_STRENGTHS
        ]
        results = self.best_channels(candidates)
        if limit is not None:
            results = results[:limit]
        return results
