"""Interactive channel plots with Plotly.

This module provides two views of a rated scan:

* :func:`plot_channel_rating`: a bar per channel showing how many
  access points occupy it, coloured by the channel's strength.
* :func:`plot_channel_graph`: one trapezoid per access point spanning
  the frequencies it occupies, its height being the signal level.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from channel_rating.formatters import (
    format_frequency,
    format_level,
    format_rating,
    format_strength,
)
from channel_rating.models import Channel, Strength
from channel_rating.rating import ChannelRating

try:
    import plotly.graph_objects as go
except ImportError:  # pragma: no cover
    go = None  # type: ignore[assignment]


#: Bar colour per strength category, quiet (green) to busy (red).
STRENGTH_COLORS: Dict[Strength, str] = {
    Strength.ZERO: "#00c853",
    Strength.ONE: "#64dd17",
    Strength.TWO: "#ffd600",
    Strength.THREE: "#ff6d00",
    Strength.FOUR: "#d50000",
}

# Level drawn as the floor of the channel graph.
_GRAPH_FLOOR_DBM = -100

# Fraction of the span used by each sloped side of a trapezoid.
_GRAPH_SLOPE = 0.25


def _save_figure(
    fig: object,
    output: Union[str, Path],
) -> None:
    """Save a Plotly figure to file.

    Args:
        fig: A Plotly :class:`~plotly.graph_objects.Figure`.
        output: Destination path.  ``.html`` → interactive HTML;
            any other extension → static image via ``kaleido``.
    """
    output = Path(output)
    if output.suffix.lower() == ".html":
        fig.write_html(str(output))  # type: ignore[union-attr]
    else:
        fig.write_image(str(output))  # type: ignore[union-attr]


def plot_channel_rating(
    rating: ChannelRating,
    channels: Sequence[Channel],
    title: str = "Channel Rating",
    show: bool = True,
    output: Optional[Union[str, Path]] = None,
) -> Optional[object]:
    """Create a bar chart of access point counts per channel.

    Args:
        rating: Rating holding the current scan snapshot.
        channels: Channels to plot, in axis order.
        title: Chart title.
        show: If ``True``, opens the plot in the default browser.
        output: Optional file path to save the plot.

    Returns:
        The Plotly :class:`~plotly.graph_objects.Figure` object.
    """
    if go is None:  # pragma: no cover
        raise ImportError("plotly is required for plotting. Install with: pip install plotly")

    labels = [str(c.number) for c in channels]
    counts = [rating.count(c) for c in channels]
    strengths = [rating.strength(c) for c in channels]
    hover_texts = [
        f"Channel {c.number} ({format_frequency(c.frequency)})<br>"
        f"Access points: {n}<br>"
        f"Strength: {format_strength(s)}<br>"
        f"{format_rating(rating.rating(c))}"
        for c, n, s in zip(channels, counts, strengths)
    ]

    fig = go.Figure(data=go.Bar(
        x=labels,
        y=counts,
        marker_color=[STRENGTH_COLORS[s] for s in strengths],
        hovertext=hover_texts,
        hoverinfo="text",
    ))

    fig.update_layout(
        title=title,
        xaxis_title="Channel",
        yaxis_title="Access points",
        template="plotly_dark",
        xaxis=dict(type="category"),
        yaxis=dict(rangemode="tozero", dtick=1),
    )

    if output:
        _save_figure(fig, output)

    if show:
        fig.show()

    return fig


def plot_channel_graph(
    rating: ChannelRating,
    channels: Sequence[Channel],
    title: str = "Channel Graph",
    show: bool = True,
    output: Optional[Union[str, Path]] = None,
) -> Optional[object]:
    """Plot every access point as a trapezoid over the span it occupies.

    Only access points whose span overlaps the frequencies of
    *channels* are drawn.  The X axis is frequency, labelled with the
    channel numbers; the Y axis is signal level in dBm.

    Args:
        rating: Rating holding the current scan snapshot.
        channels: Channels defining the visible frequency range.
        title: Chart title.
        show: If ``True``, opens the plot in the default browser.
        output: Optional file path to save the plot.

    Returns:
        The Plotly :class:`~plotly.graph_objects.Figure` object.

    Raises:
        ValueError: If *channels* is empty.
    """
    if go is None:  # pragma: no cover
        raise ImportError("plotly is required for plotting. Install with: pip install plotly")

    if not channels:
        raise ValueError("Cannot plot a channel graph without channels")

    low = min(c.frequency for c in channels)
    high = max(c.frequency for c in channels)

    fig = go.Figure()
    for wifi_detail in rating.wifi_details():
        signal = wifi_detail.wifi_signal
        if signal.frequency_end < low or signal.frequency_start > high:
            continue
        slope = (signal.frequency_end - signal.frequency_start) * _GRAPH_SLOPE
        xs: List[float] = [
            signal.frequency_start,
            signal.frequency_start + slope,
            signal.frequency_end - slope,
            signal.frequency_end,
        ]
        ys = [_GRAPH_FLOOR_DBM, signal.level, signal.level, _GRAPH_FLOOR_DBM]
        name = wifi_detail.ssid or wifi_detail.bssid
        if wifi_detail.is_connected:
            name = f"{name} (connected)"
        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            fill="toself",
            name=name,
            hovertext=(
                f"{name}<br>{wifi_detail.bssid}<br>"
                f"{format_level(signal.level)}<br>"
                f"{format_frequency(signal.center_frequency)}"
            ),
            hoverinfo="text",
        ))

    fig.update_layout(
        title=title,
        xaxis_title="Channel",
        yaxis_title="Signal (dBm)",
        template="plotly_dark",
        xaxis=dict(
            tickmode="array",
            tickvals=[c.frequency for c in channels],
            ticktext=[str(c.number) for c in channels],
        ),
        yaxis=dict(range=[_GRAPH_FLOOR_DBM, -20]),
    )

    if output:
        _save_figure(fig, output)

    if show:
        fig.show()

    return fig
