"""Command-line interface for channel_rating.

Provides a ``click``-based CLI with subcommands for rating the
channels of a band from an exported scan, recommending the quietest
channels, and plotting occupancy.

Usage::

    channel-rating rate scan.csv
    channel-rating rate scan.csv --band 5GHz --output ratings.csv
    channel-rating recommend scan.csv --country US --limit 3
    channel-rating plot scan.csv --mode graph --output graph.html
"""

import logging
from typing import List, Optional, Tuple

import click

from channel_rating.bands import BandPlan, default_band_plan, load_band_plan
from channel_rating.formatters import format_frequency, format_rating, format_strength
from channel_rating.io import load_scan, save_ratings
from channel_rating.models import Channel, ChannelAPCount
from channel_rating.plotting import plot_channel_graph, plot_channel_rating
from channel_rating.rating import ChannelRating

#: Valid plot choices for the ``--mode`` option.
MODE_CHOICES = click.Choice(["rating", "graph"], case_sensitive=False)


def _load_plan(band_plan_file: Optional[str]) -> BandPlan:
    if not band_plan_file:
        return default_band_plan()
    try:
        plan = load_band_plan(band_plan_file)
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc))
    except ValueError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Loaded band plan with {len(plan.bands)} bands.")
    return plan


def _prepare(
    scan_file: str,
    band: str,
    country: Optional[str],
    merge_virtual: bool,
    band_plan_file: Optional[str],
) -> Tuple[ChannelRating, List[Channel]]:
    """Load the scan into a rating and resolve the candidate channels."""
    plan = _load_plan(band_plan_file)
    try:
        channels = plan.available_channels(band, country)
    except KeyError:
        raise click.ClickException(
            f"Unknown band {band!r}; choose from {', '.join(plan.band_names)}"
        )

    details = load_scan(scan_file)
    rating = ChannelRating(band_plan=plan, merge_virtual=merge_virtual)
    rating.set_wifi_details(details)
    click.echo(
        f"Loaded {len(details)} observations, "
        f"{len(rating.wifi_details())} distinct access points."
    )
    return rating, channels


def _echo_table(rating: ChannelRating, results: List[ChannelAPCount]) -> None:
    click.echo(f"{'Channel':>7}  {'Frequency':>10}  {'APs':>3}  {'Strength':<8}  Rating")
    for cur in results:
        channel = cur.channel
        click.echo(
            f"{channel.number:>7}  {format_frequency(channel.frequency):>10}  "
            f"{cur.count:>3}  {format_strength(rating.strength(channel)):<8}  "
            f"{format_rating(rating.rating(channel))}"
        )


def _scan_options(func):
    """Options shared by every subcommand that reads a scan."""
    func = click.option("--band-plan", type=click.Path(), default=None,
                        help="Path to a band plan YAML file.")(func)
    func = click.option("--merge-virtual", is_flag=True, default=False,
                        help="Treat virtual access points of one radio as one.")(func)
    func = click.option("--country", "-c", default=None,
                        help="Country code restricting the channels (e.g. US).")(func)
    func = click.option("--band", "-b", default="2.4GHz",
                        help="Band to rate (default: 2.4GHz).")(func)
    func = click.argument("scan_file", type=click.Path(exists=True))(func)
    return func


@click.group()
@click.version_option(package_name="channel-rating")
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """channel-rating: rank WiFi channels by congestion."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )


@cli.command()
@_scan_options
@click.option("--output", "-o", type=click.Path(), default=None,
              help="Save the ranking to a CSV file.")
def rate(scan_file: str, band: str, country: Optional[str],
         merge_virtual: bool, band_plan: Optional[str],
         output: Optional[str]) -> None:
    """Rank every channel of a band by access point count."""
    rating, channels = _prepare(scan_file, band, country, merge_virtual, band_plan)
    results = rating.best_channels(channels)
    _echo_table(rating, results)

    if output:
        save_ratings(rating, results, output)
        click.echo(f"Saved to {output}")


@cli.command()
@_scan_options
@click.option("--limit", "-n", type=click.IntRange(min=0), default=None,
              help="Show at most this many channels.")
@click.option("--output", "-o", type=click.Path(), default=None,
              help="Save the recommendations to a CSV file.")
def recommend(scan_file: str, band: str, country: Optional[str],
              merge_virtual: bool, band_plan: Optional[str],
              limit: Optional[int], output: Optional[str]) -> None:
    """Recommend the least congested channels of a band."""
    rating, channels = _prepare(scan_file, band, country, merge_virtual, band_plan)
    results = rating.recommended_channels(channels, limit=limit)
    if not results:
        click.echo("No channel is quiet enough to recommend.")
        return
    _echo_table(rating, results)

    if output:
        save_ratings(rating, results, output)
        click.echo(f"Saved to {output}")


@cli.command(name="plot")
@_scan_options
@click.option("--mode", "-m", type=MODE_CHOICES, default="rating",
              help="Plot type: rating (bars per channel) or graph (per AP).")
@click.option("--output", "-o", type=click.Path(), default=None,
              help="Save plot to file (.html for interactive, .png for static).")
@click.option("--no-show", is_flag=True, default=False,
              help="Do not open the plot in a browser.")
@click.option("--title", "-t", default=None,
              help="Plot title.")
def plot_cmd(scan_file: str, band: str, country: Optional[str],
             merge_virtual: bool, band_plan: Optional[str], mode: str,
             output: Optional[str], no_show: bool,
             title: Optional[str]) -> None:
    """Plot channel occupancy for a band."""
    rating, channels = _prepare(scan_file, band, country, merge_virtual, band_plan)
    if mode.lower() == "graph":
        plot_channel_graph(
            rating,
            channels,
            title=title or f"Channel Graph {band}",
            show=not no_show,
            output=output,
        )
    else:
        plot_channel_rating(
            rating,
            channels,
            title=title or f"Channel Rating {band}",
            show=not no_show,
            output=output,
        )
    if output:
        click.echo(f"Saved plot to {output}")


if __name__ == "__main__":
    cli()
