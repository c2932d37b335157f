"""File I/O for scan snapshots and rating tables.

This module loads scan CSV files into
:class:`~channel_rating.models.WiFiDetail` lists and exports channel
rating tables to CSV.
"""

import csv
import logging
from pathlib import Path
from typing import List, Union

from channel_rating.models import ChannelAPCount, WiFiDetail
from channel_rating.parser import COLUMNS, ScanParser
from channel_rating.rating import ChannelRating

logger = logging.getLogger(__name__)

#: Header row written by :func:`save_ratings`.
RATING_COLUMNS = ["channel", "frequency", "count", "strength", "rating"]


def load_scan(path: Union[str, Path]) -> List[WiFiDetail]:
    """Load a scan CSV file and return its observations.

    Reads the file line-by-line, feeding each line into a
    :class:`~channel_rating.parser.ScanParser`.

    Args:
        path: Path to the CSV file.

    Returns:
        Observations in file order, duplicates included.

    Raises:
        FileNotFoundError: If *path* does not exist.
        IOError: If the file cannot be read.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scan file not found: {path}")

    parser = ScanParser()
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.rstrip("\n\r")
            if line:
                parser.add_line(line)
    details = parser.convert()
    logger.debug(
        "Loaded %d observations from %s (%d lines skipped)",
        len(details), path, parser.skipped,
    )
    return details


def save_scan(details: List[WiFiDetail], path: Union[str, Path]) -> None:
    """Save observations in the scan CSV format read by :func:`load_scan`.

    Raises:
        IOError: If the file cannot be written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh, lineterminator="\n")
        writer.writerow(COLUMNS)
        for cur in details:
            signal = cur.wifi_signal
            writer.writerow([
                cur.ssid,
                cur.bssid,
                cur.capabilities,
                signal.primary_frequency,
                signal.center_frequency,
                signal.wifi_width.frequency_width,
                signal.level,
                str(signal.is_80211mc).lower(),
                str(cur.is_connected).lower(),
            ])


def save_ratings(
    rating: ChannelRating,
    results: List[ChannelAPCount],
    path: Union[str, Path],
) -> None:
    """Save a ranked channel list to CSV.

    Writes a header row followed by one row per entry of *results*:
    ``channel,frequency,count,strength,rating``.

    Args:
        rating: The rating the results came from (for strength and stars).
        results: Output of :meth:`ChannelRating.best_channels` or
            :meth:`ChannelRating.recommended_channels`.
        path: Destination file path.

    Raises:
        IOError: If the file cannot be written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as fh:
        fh.write(",".join(RATING_COLUMNS) + "\n")
        for cur in results:
            channel = cur.channel
            fh.write(
                f"{channel.number},{channel.frequency},{cur.count},"
                f"{rating.strength(channel).name},{rating.rating(channel)}\n"
            )
