from __future__ import annotations

import warnings
from collections.abc import Iterable
from pathlib import Path

import matplotlib.pyplot as plt

from pipeflow.flow import FlowResult
from pipeflow.graph import PipelineGraph
from pipeflow.network.records import Tank, Valve

SEGMENT_STYLES: dict[str, dict[str, object]] = {
    "unreached": {"color": "#bdc3c7", "lw": 1.5, "label": "Unreached"},
    "flowing": {"color": "#3498db", "lw": 2.5, "label": "Flowing"},
    "blocked": {"color": "#e74c3c", "lw": 2.5, "label": "Blocked"},
}


def _line(ax: plt.Axes, start, end, style: dict[str, object], label: str | None) -> None:
    ax.plot(
        [start.lon, end.lon],
        [start.lat, end.lat],
        color=style["color"],
        lw=style["lw"],
        label=label,
        zorder=2,
    )


def plot_flow(
    graph: PipelineGraph,
    result: FlowResult,
    tanks: Iterable[Tank] = (),
    valves: Iterable[Valve] = (),
    ax: plt.Axes | None = None,
    save_to: str | Path | None = None,
    figsize: tuple[int, int] = (12, 8),
) -> plt.Axes | None:
    """Draw the pipeline network coloured by flow classification.

    Longitude is plotted on x and latitude on y. When ``save_to`` is given
    the figure is written there and closed, and None is returned.
    """
    if not graph.nodes:
        warnings.warn("Pipeline graph is empty; nothing to plot.", stacklevel=2)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    classified = {frozenset((s.start.key(), s.end.key())) for s in result.flowing}
    classified |= {frozenset((s.start.key(), s.end.key())) for s in result.blocked}

    labelled: set[str] = set()

    def _label(kind: str) -> str | None:
        if kind in labelled:
            return None
        labelled.add(kind)
        return SEGMENT_STYLES[kind]["label"]

    for edge in graph.edges:
        if edge.pair in classified:
            continue
        start, end = graph.position(edge.source), graph.position(edge.target)
        _line(ax, start, end, SEGMENT_STYLES["unreached"], _label("unreached"))
    for segment in result.flowing:
        _line(ax, segment.start, segment.end, SEGMENT_STYLES["flowing"], _label("flowing"))
    for segment in result.blocked:
        _line(ax, segment.start, segment.end, SEGMENT_STYLES["blocked"], _label("blocked"))

    for tank in tanks:
        color = "#27ae60" if tank.is_active else "#7f8c8d"
        ax.scatter(tank.position.lon, tank.position.lat, c=color, marker="s", s=150, zorder=3)
        ax.annotate(tank.label, (tank.position.lon, tank.position.lat), textcoords="offset points", xytext=(5, 5))
    for valve in valves:
        color = "#2ecc71" if valve.is_open else "#c0392b"
        marker = "D" if valve.is_main else "o"
        ax.scatter(valve.position.lon, valve.position.lat, c=color, marker=marker, s=60, zorder=4)

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title("Pipeline Flow")
    if labelled:
        ax.legend(loc="best")
    ax.grid(True, alpha=0.3)
    ax.ticklabel_format(useOffset=False)

    if save_to:
        fig.savefig(save_to, dpi=150, bbox_inches="tight")
        plt.close(fig)
        return None
    return ax
