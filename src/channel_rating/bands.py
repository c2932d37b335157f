"""WiFi band plan: channel numbering and strength thresholds.

This module loads a YAML band plan and provides the lookups that turn
raw signal records into channels and strength categories.  The plan
is an immutable :class:`BandPlan` that is loaded once and injected
into :class:`~channel_rating.rating.ChannelRating`.

The YAML format is a mapping with three keys::

    bands:
    - name: 2.4GHz
      frequency_range: [2400, 2499]   # inclusive, MHz
      channel_step: 1
      channel_sets:
      - first_channel: 1
        last_channel: 13
        first_frequency: 2412
    strength_thresholds:
    - level: -55                       # minimum dBm
      strength: FOUR
    countries:                         # optional
      US:
        2.4GHz: [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11]

All frequency values are in **MHz**.  Channel *n* of a set sits at
``first_frequency + 5 * (n - first_channel)``.
"""

import bisect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml

from channel_rating.models import UNKNOWN_CHANNEL, Channel, Strength

logger = logging.getLogger(__name__)

#: Spacing between adjacent channel numbers in MHz.
FREQUENCY_SPREAD = 5

#: Path of the band plan bundled with the package.
DEFAULT_BAND_PLAN = Path(__file__).parent / "data" / "band_plan.yaml"


@dataclass(frozen=True)
class ChannelSet:
    """A contiguous run of channel numbers inside a band.

    Attributes:
        first_channel: Lowest channel number of the run.
        last_channel: Highest channel number of the run (inclusive).
        first_frequency: Frequency of ``first_channel`` in MHz.
    """

    first_channel: int
    last_channel: int
    first_frequency: int

    def frequency_of(self, number: int) -> int:
        return self.first_frequency + (number - self.first_channel) * FREQUENCY_SPREAD

    def channel_number(self, frequency: int) -> Optional[int]:
        """Channel number nearest to *frequency*, or ``None`` outside the set."""
        number = int(
            (frequency - self.first_frequency) / FREQUENCY_SPREAD
            + self.first_channel
            + 0.5
        )
        if self.first_channel <= number <= self.last_channel:
            return number
        return None


@dataclass(frozen=True)
class WiFiBand:
    """A frequency band with its own channel numbering.

    Attributes:
        name: Band name (e.g. ``"2.4GHz"``).
        frequency_range: Inclusive ``(low, high)`` range in MHz.
        channel_sets: Channel runs in band order.
        channel_step: Step between listed channels within a set.
    """

    name: str
    frequency_range: Tuple[int, int]
    channel_sets: Tuple[ChannelSet, ...]
    channel_step: int = 1

    def in_range(self, frequency: int) -> bool:
        low, high = self.frequency_range
        return low <= frequency <= high

    def channel_for(self, frequency: int) -> Channel:
        if not self.in_range(frequency):
            return UNKNOWN_CHANNEL
        for channel_set in self.channel_sets:
            number = channel_set.channel_number(frequency)
            if number is not None:
                return Channel(number=number, frequency=frequency)
        return UNKNOWN_CHANNEL

    def channels(self) -> List[Channel]:
        """Canonical channels of this band, in band order."""
        result: List[Channel] = []
        for channel_set in self.channel_sets:
            for number in range(
                channel_set.first_channel,
                channel_set.last_channel + 1,
                self.channel_step,
            ):
                result.append(
                    Channel(number=number, frequency=channel_set.frequency_of(number))
                )
        return result


@dataclass(frozen=True)
class BandPlan:
    """Band and strength tables used to rate channels.

    Attributes:
        bands: Bands in plan order.
        thresholds: ``(minimum level, strength)`` pairs sorted by
            ascending level.
        countries: Country code → band name → permitted channel numbers.
    """

    bands: Tuple[WiFiBand, ...]
    thresholds: Tuple[Tuple[int, Strength], ...]
    countries: Dict[str, Dict[str, Tuple[int, ...]]] = field(
        default_factory=dict, compare=False
    )

    @property
    def band_names(self) -> List[str]:
        return [band.name for band in self.bands]

    def band(self, name: str) -> WiFiBand:
        """Return the band called *name*.

        Raises:
            KeyError: If the plan has no such band.
        """
        for band in self.bands:
            if band.name.lower() == name.lower():
                return band
        raise KeyError(f"Unknown band: {name}")

    def band_for(self, frequency: int) -> Optional[WiFiBand]:
        for band in self.bands:
            if band.in_range(frequency):
                return band
        return None

    def channel_for(self, frequency: int) -> Channel:
        """Map a frequency to its channel, or :data:`UNKNOWN_CHANNEL`.

        The returned channel carries the observed *frequency*, not the
        canonical one; channels compare by number.
        """
        band = self.band_for(frequency)
        if band is None:
            return UNKNOWN_CHANNEL
        return band.channel_for(frequency)

    def frequency_of(self, number: int) -> Optional[int]:
        """Canonical frequency of channel *number*, or ``None`` if no band has it."""
        for band in self.bands:
            for channel_set in band.channel_sets:
                offset = number - channel_set.first_channel
                if (channel_set.first_channel <= number <= channel_set.last_channel
                        and offset % band.channel_step == 0):
                    return channel_set.frequency_of(number)
        return None

    def channels(self, band_name: str) -> List[Channel]:
        return self.band(band_name).channels()

    def available_channels(
        self,
        band_name: str,
        country: Optional[str] = None,
    ) -> List[Channel]:
        """Channels of a band that *country* permits.

        Countries without an entry for the band (or no country at all)
        get every channel of the band.
        """
        channels = self.channels(band_name)
        if not country:
            return channels
        allowed = self.countries.get(country.upper(), {})
        band = self.band(band_name)
        numbers = allowed.get(band.name)
        if numbers is None:
            return channels
        return [c for c in channels if c.number in numbers]

    def strength_for(self, level: int) -> Strength:
        """Map a signal level in dBm to its strength category."""
        levels = [t[0] for t in self.thresholds]
        idx = bisect.bisect_right(levels, level)
        if idx == 0:
            return Strength.ZERO
        return self.thresholds[idx - 1][1]


def validate_band_plan_yaml(data: object) -> None:
    """Validate that parsed YAML data has the expected band plan structure.

    Checks:

    1. Top-level value is a ``dict``.
    2. ``bands`` is a non-empty list; each band has a non-empty
       ``name``, a ``frequency_range`` of exactly 2 numbers and a
       non-empty ``channel_sets`` list of mappings holding integer
       ``first_channel``, ``last_channel`` and ``first_frequency``.
    3. ``strength_thresholds`` is a list of mappings with a numeric
       ``level`` and a ``strength`` naming a :class:`Strength`.
    4. ``countries``, when present, maps country codes to mappings of
       band name to a list of integer channel numbers.

    Args:
        data: The object returned by ``yaml.safe_load()``.

    Raises:
        ValueError: If the data does not conform to the expected
            structure.  The message describes the first problem found.
    """
    if not isinstance(data, dict):
        raise ValueError(
            "Invalid band plan: expected a mapping, "
            f"got {type(data).__name__}"
        )

    bands = data.get("bands")
    if not isinstance(bands, list):
        raise ValueError("Invalid band plan: 'bands' must be a list")
    if len(bands) == 0:
        raise ValueError("Invalid band plan: 'bands' is empty")

    for i, entry in enumerate(bands):
        label = f"band {i}"
        if not isinstance(entry, dict):
            raise ValueError(
                f"Invalid band plan: {label} is not a mapping "
                f"(got {type(entry).__name__})"
            )
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(
                f"Invalid band plan: {label} is missing or has an empty 'name'"
            )
        fr = entry.get("frequency_range")
        if not isinstance(fr, list) or len(fr) != 2:
            raise ValueError(
                f"Invalid band plan: {label} 'frequency_range' "
                "must be a list of exactly 2 numbers"
            )
        for j, val in enumerate(fr):
            if not isinstance(val, (int, float)):
                raise ValueError(
                    f"Invalid band plan: {label} "
                    f"'frequency_range[{j}]' is not a number "
                    f"(got {type(val).__name__})"
                )
        sets = entry.get("channel_sets")
        if not isinstance(sets, list) or not sets:
            raise ValueError(
                f"Invalid band plan: {label} 'channel_sets' must be a non-empty list"
            )
        for k, cs in enumerate(sets):
            if not isinstance(cs, dict):
                raise ValueError(
                    f"Invalid band plan: {label} channel set {k} is not a mapping"
                )
            for key in ("first_channel", "last_channel", "first_frequency"):
                if not isinstance(cs.get(key), int):
                    raise ValueError(
                        f"Invalid band plan: {label} channel set {k} "
                        f"'{key}' must be an integer"
                    )

    thresholds = data.get("strength_thresholds")
    if not isinstance(thresholds, list):
        raise ValueError(
            "Invalid band plan: 'strength_thresholds' must be a list"
        )
    for i, entry in enumerate(thresholds):
        label = f"strength threshold {i}"
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid band plan: {label} is not a mapping")
        if not isinstance(entry.get("level"), (int, float)):
            raise ValueError(
                f"Invalid band plan: {label} 'level' is not a number"
            )
        strength = entry.get("strength")
        if not isinstance(strength, str) or strength.upper() not in Strength.__members__:
            raise ValueError(
                f"Invalid band plan: {label} has unknown strength {strength!r}"
            )

    countries = data.get("countries", {})
    if countries is not None and not isinstance(countries, dict):
        raise ValueError("Invalid band plan: 'countries' must be a mapping")
    for code, per_band in (countries or {}).items():
        label = f"country {code}"
        if per_band is None:
            continue
        if not isinstance(per_band, dict):
            raise ValueError(
                f"Invalid band plan: {label} must map band names to channel lists "
                f"(got {type(per_band).__name__})"
            )
        for band_name, numbers in per_band.items():
            if not isinstance(numbers, list) or not all(
                isinstance(n, int) for n in numbers
            ):
                raise ValueError(
                    f"Invalid band plan: {label} '{band_name}' "
                    "must be a list of channel numbers"
                )


def band_plan_from_dict(data: dict) -> BandPlan:
    """Build a :class:`BandPlan` from already-parsed YAML data.

    Raises:
        ValueError: If *data* fails :func:`validate_band_plan_yaml`.
    """
    validate_band_plan_yaml(data)

    bands: List[WiFiBand] = []
    for entry in data["bands"]:
        channel_sets = tuple(
            ChannelSet(
                first_channel=cs["first_channel"],
                last_channel=cs["last_channel"],
                first_frequency=cs["first_frequency"],
            )
            for cs in entry["channel_sets"]
        )
        fr = entry["frequency_range"]
        bands.append(WiFiBand(
            name=entry["name"],
            frequency_range=(int(fr[0]), int(fr[1])),
            channel_sets=channel_sets,
            channel_step=int(entry.get("channel_step", 1) or 1),
        ))

    thresholds = sorted(
        (int(t["level"]), Strength[t["strength"].upper()])
        for t in data["strength_thresholds"]
    )

    countries: Dict[str, Dict[str, Tuple[int, ...]]] = {}
    for code, per_band in (data.get("countries") or {}).items():
        countries[str(code).upper()] = {
            str(band_name): tuple(int(n) for n in numbers)
            for band_name, numbers in (per_band or {}).items()
        }

    return BandPlan(
        bands=tuple(bands),
        thresholds=tuple(thresholds),
        countries=countries,
    )


def load_band_plan(path: Union[str, Path] = DEFAULT_BAND_PLAN) -> BandPlan:
    """Load a band plan YAML file into a :class:`BandPlan`.

    Args:
        path: Path to the YAML band plan.  Defaults to the plan bundled
            with the package.

    Returns:
        An immutable :class:`BandPlan`.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a valid band plan.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Band plan file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    plan = band_plan_from_dict(data)
    logger.debug("Loaded band plan %s: bands=%s", path, plan.band_names)
    return plan


_default_plan: Optional[BandPlan] = None


def default_band_plan() -> BandPlan:
    """The bundled band plan, loaded on first use."""
    global _default_plan
    if _default_plan is None:
        _default_plan = load_band_plan(DEFAULT_BAND_PLAN)
    return _default_plan
