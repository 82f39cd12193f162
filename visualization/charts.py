# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Chart creation functions for rule tag aggregates.

Every output kind has one builder taking its aggregate and a title.
Builders return an Altair Chart or a Plotly Figure; writing the result to
disk is left to the renderer.
"""

import math
from typing import Callable, Dict, List, Tuple, Union

import altair as alt
import plotly.graph_objects as go

from aggregation.aggregator import (
    RULE_NODE,
    BipartiteGraph,
    FlowSequence,
    FrequencyTable,
    NumericSeries,
    OutputKind,
    ProportionalLabels,
    TagMatrix,
)

Chart = Union[alt.Chart, go.Figure]

NODE_PALETTE = [
    "#1b4f72",
    "#6c3483",
    "#196f3d",
    "#7d6608",
    "#922b21",
    "#154360",
    "#4a235a",
    "#145a32",
    "#7e5109",
    "#641e16",
    "#2e4053",
    "#7b241c",
    "#21618c",
    "#633974",
    "#1e8449",
    "#9a7d0a",
    "#b03a2e",
    "#7d3c98",
    "#117864",
    "#b9770e",
]
RULE_COLOR = "#1f77b4"
TAG_COLOR = "#ff7f0e"
HIERARCHY_ROOT_ID = "root"


def _hex_to_rgba(hex_color: str, alpha: float) -> str:
    hex_color = hex_color.lstrip("#")
    r = int(hex_color[0:2], 16)
    g = int(hex_color[2:4], 16)
    b = int(hex_color[4:6], 16)
    return f"rgba({r},{g},{b},{alpha})"


def _figure_layout(figure: go.Figure, title: str) -> go.Figure:
    figure.update_layout(
        title={"text": title},
        height=650,
        margin={"l": 40, "r": 40, "t": 60, "b": 40},
        font={"color": "black", "size": 11},
        plot_bgcolor="#ffffff",
        paper_bgcolor="#ffffff",
    )
    return figure


# ===== Frequency charts =====


def _frequency_base(table: FrequencyTable, title: str) -> alt.Chart:
    df = table.to_dataframe()
    return alt.Chart(df).properties(title=title, height=400)


def _frequency_encoding() -> Dict[str, object]:
    return {
        "x": alt.X("tag:N", title="Tag", sort=None, axis=alt.Axis(labelAngle=-45)),
        "y": alt.Y("count:Q", title="Count", axis=alt.Axis(format="d")),
        "tooltip": [
            alt.Tooltip("tag:N", title="Tag"),
            alt.Tooltip("count:Q", title="Count"),
        ],
    }


def create_bar_chart(table: FrequencyTable, title: str) -> alt.Chart:
    """Create a bar chart with one bar per tag, height = occurrence count."""
    return _frequency_base(table, title).mark_bar().encode(**_frequency_encoding())


def create_line_chart(table: FrequencyTable, title: str) -> alt.Chart:
    """Create a line chart of tag counts in first-seen tag order."""
    return (
        _frequency_base(table, title)
        .mark_line(point=True)
        .encode(**_frequency_encoding())
    )


def create_area_chart(table: FrequencyTable, title: str) -> alt.Chart:
    return (
        _frequency_base(table, title)
        .mark_area(opacity=0.6, line=True)
        .encode(**_frequency_encoding())
    )


def create_scatter_chart(table: FrequencyTable, title: str) -> alt.Chart:
    """Create a scatter plot of tag counts, point size scaled by count."""
    encoding = _frequency_encoding()
    encoding["size"] = alt.Size("count:Q", legend=None)
    return _frequency_base(table, title).mark_circle().encode(**encoding)


def create_histogram_chart(table: FrequencyTable, title: str) -> alt.Chart:
    """Create a histogram of how many tags share each occurrence count."""
    return (
        _frequency_base(table, title)
        .mark_bar()
        .encode(
            x=alt.X("count:Q", bin=alt.Bin(maxbins=20), title="Occurrences per tag"),
            y=alt.Y("count():Q", title="Number of tags"),
            tooltip=[alt.Tooltip("count():Q", title="Number of tags")],
        )
    )


def create_boxplot_chart(table: FrequencyTable, title: str) -> go.Figure:
    """Create a box plot of the tag count distribution, one point per tag."""
    figure = go.Figure(
        data=[
            go.Box(
                y=list(table.counts.values()),
                text=list(table.counts.keys()),
                name="Count",
                boxpoints="all",
                jitter=0.4,
                pointpos=0,
                hovertemplate="%{text}: %{y}<extra></extra>",
            )
        ]
    )
    return _figure_layout(figure, title)


def create_radar_chart(table: FrequencyTable, title: str) -> go.Figure:
    """Create a radar chart with one axis per tag."""
    tags = list(table.counts.keys())
    counts = list(table.counts.values())
    if tags:
        # Close the polygon
        tags.append(tags[0])
        counts.append(counts[0])
    figure = go.Figure(
        data=[go.Scatterpolar(r=counts, theta=tags, fill="toself", name="Count")]
    )
    figure.update_layout(polar={"radialaxis": {"visible": True}}, showlegend=False)
    return _figure_layout(figure, title)


def _spiral_positions(count: int) -> List[Tuple[float, float]]:
    golden_angle = math.pi * (3 - math.sqrt(5))
    positions = []
    for i in range(count):
        radius = math.sqrt(i)
        angle = i * golden_angle
        positions.append((radius * math.cos(angle), radius * math.sin(angle)))
    return positions


def create_wordcloud_chart(
    table: FrequencyTable,
    title: str,
    min_font_size: int = 12,
    max_font_size: int = 48,
) -> go.Figure:
    """Create a word cloud of tags weighted by count.

    The most frequent tags are placed at the center of a spiral and drawn
    with the largest font.
    """
    ranked = table.most_common()
    highest = ranked[0][1] if ranked else 1
    positions = _spiral_positions(len(ranked))
    sizes = [
        min_font_size + (max_font_size - min_font_size) * count / highest
        for _, count in ranked
    ]
    figure = go.Figure(
        data=[
            go.Scatter(
                x=[x for x, _ in positions],
                y=[y for _, y in positions],
                mode="text",
                text=[tag for tag, _ in ranked],
                customdata=[count for _, count in ranked],
                textfont={
                    "size": sizes,
                    "color": [
                        NODE_PALETTE[i % len(NODE_PALETTE)] for i in range(len(ranked))
                    ],
                },
                hovertemplate="%{text}: %{customdata}<extra></extra>",
            )
        ]
    )
    figure.update_xaxes(visible=False)
    figure.update_yaxes(visible=False)
    return _figure_layout(figure, title)


# ===== Proportional charts =====


def create_pie_chart(
    labels: ProportionalLabels, title: str, hole: float = 0.0
) -> go.Figure:
    """Create a pie chart, each slice labelled with its percentage."""
    figure = go.Figure(
        data=[
            go.Pie(
                labels=[entry.tag for entry in labels.entries],
                values=[entry.count for entry in labels.entries],
                text=[entry.label for entry in labels.entries],
                textinfo="text",
                hole=hole,
                sort=False,
                hovertemplate="%{label}: %{value}<extra></extra>",
            )
        ]
    )
    return _figure_layout(figure, title)


def create_doughnut_chart(labels: ProportionalLabels, title: str) -> go.Figure:
    return create_pie_chart(labels, title, hole=0.45)


# ===== Graph and hierarchy charts =====


def _bipartite_positions(graph: BipartiteGraph) -> Dict[str, Tuple[float, float]]:
    """Place rules in the left column and tags in the right column."""

    def column(names: List[str], x: float) -> Dict[str, Tuple[float, float]]:
        if len(names) == 1:
            return {names[0]: (x, 0.5)}
        step = 1.0 / max(len(names) - 1, 1)
        return {name: (x, 1.0 - i * step) for i, name in enumerate(names)}

    positions = column(graph.rules(), 0.0)
    positions.update(column(graph.tags(), 1.0))
    return positions


def create_graph_chart(graph: BipartiteGraph, title: str) -> go.Figure:
    """Create a node-link diagram of rules and their tags.

    Node size grows with node degree; rules and tags use distinct colors.
    """
    positions = _bipartite_positions(graph)

    edge_x: List[float | None] = []
    edge_y: List[float | None] = []
    for source, target in graph.edges:
        x0, y0 = positions[source]
        x1, y1 = positions[target]
        edge_x.extend([x0, x1, None])
        edge_y.extend([y0, y1, None])

    edge_trace = go.Scatter(
        x=edge_x,
        y=edge_y,
        mode="lines",
        line={"width": 1, "color": "#b0b0b0"},
        hoverinfo="skip",
        name="Edges",
    )
    node_trace = go.Scatter(
        x=[positions[node.name][0] for node in graph.nodes],
        y=[positions[node.name][1] for node in graph.nodes],
        mode="markers+text",
        text=[node.name for node in graph.nodes],
        textposition=[
            "middle left" if node.category == RULE_NODE else "middle right"
            for node in graph.nodes
        ],
        customdata=[[node.category, node.weight] for node in graph.nodes],
        marker={
            "size": [10 + 4 * node.weight for node in graph.nodes],
            "color": [
                RULE_COLOR if node.category == RULE_NODE else TAG_COLOR
                for node in graph.nodes
            ],
            "line": {"color": "white", "width": 1},
        },
        hovertemplate=(
            "<b>%{text}</b><br>%{customdata[0]}, %{customdata[1]} links"
            "<extra></extra>"
        ),
        name="Nodes",
    )
    figure = go.Figure(data=[edge_trace, node_trace])
    figure.update_xaxes(visible=False, range=[-0.5, 1.5])
    figure.update_yaxes(visible=False)
    figure.update_layout(showlegend=False)
    return _figure_layout(figure, title)


def _hierarchy(
    graph: BipartiteGraph, root_label: str
) -> Tuple[List[str], List[str], List[str], List[int]]:
    """Flatten the graph into root -> rule -> tag hierarchy arrays."""
    ids = [HIERARCHY_ROOT_ID]
    labels = [root_label]
    parents = [""]
    values = [0]
    for rule in graph.parents():
        ids.append(f"rule:{rule}")
        labels.append(rule)
        parents.append(HIERARCHY_ROOT_ID)
        values.append(0)
    for rule, tag in graph.edges:
        ids.append(f"rule:{rule}|tag:{tag}")
        labels.append(tag)
        parents.append(f"rule:{rule}")
        values.append(1)
    return ids, labels, parents, values


def create_treemap_chart(graph: BipartiteGraph, title: str) -> go.Figure:
    ids, labels, parents, values = _hierarchy(graph, title)
    figure = go.Figure(
        data=[
            go.Treemap(
                ids=ids,
                labels=labels,
                parents=parents,
                values=values,
                branchvalues="remainder",
            )
        ]
    )
    return _figure_layout(figure, title)


def create_sunburst_chart(graph: BipartiteGraph, title: str) -> go.Figure:
    ids, labels, parents, values = _hierarchy(graph, title)
    figure = go.Figure(
        data=[
            go.Sunburst(
                ids=ids,
                labels=labels,
                parents=parents,
                values=values,
                branchvalues="remainder",
            )
        ]
    )
    return _figure_layout(figure, title)


def create_tree_chart(graph: BipartiteGraph, title: str) -> go.Figure:
    """Create a left-to-right tree (icicle) of rules and their tags."""
    ids, labels, parents, values = _hierarchy(graph, title)
    figure = go.Figure(
        data=[
            go.Icicle(
                ids=ids,
                labels=labels,
                parents=parents,
                values=values,
                branchvalues="remainder",
                tiling={"orientation": "h"},
            )
        ]
    )
    return _figure_layout(figure, title)


def create_parallel_chart(graph: BipartiteGraph, title: str) -> go.Figure:
    """Create a parallel categories chart linking rules to tags."""
    figure = go.Figure(
        data=[
            go.Parcats(
                dimensions=[
                    {"label": "Rule", "values": [rule for rule, _ in graph.edges]},
                    {"label": "Tag", "values": [tag for _, tag in graph.edges]},
                ],
                hoveron="color",
                arrangement="freeform",
            )
        ]
    )
    return _figure_layout(figure, title)


# ===== Flow charts =====


def create_sankey_chart(
    flow: FlowSequence, title: str, show_labels: bool = True
) -> go.Figure:
    """Create a Sankey chart of consecutive tag links.

    Args:
        flow: Flow aggregate with nodes and merged links
        title: Chart title
        show_labels: Whether to display node labels (default True)

    Returns:
        Plotly Figure object with Sankey diagram
    """
    node_index = {name: i for i, name in enumerate(flow.nodes)}
    node_color_map = {
        name: NODE_PALETTE[i % len(NODE_PALETTE)] for i, name in enumerate(flow.nodes)
    }

    # When labels are hidden, use tiny font and transparent color
    # (labels still exist for hover tooltips, but invisible on display)
    if show_labels:
        textfont = {"size": 11, "color": "black", "family": "Arial, sans-serif"}
    else:
        textfont = {"size": 1, "color": "rgba(0,0,0,0)", "family": "Arial, sans-serif"}

    figure = go.Figure(
        data=[
            go.Sankey(
                arrangement="snap",
                node={
                    "label": list(flow.nodes),
                    "color": [
                        _hex_to_rgba(node_color_map[name], 0.35) for name in flow.nodes
                    ],
                    "hovertemplate": "<b>%{label}</b><extra></extra>",
                    "pad": 25,
                    "thickness": 20,
                    "line": {"color": "white", "width": 2},
                },
                link={
                    "source": [node_index[link.source] for link in flow.links],
                    "target": [node_index[link.target] for link in flow.links],
                    "value": [link.value for link in flow.links],
                    "color": [
                        _hex_to_rgba(node_color_map[link.source], 0.55)
                        for link in flow.links
                    ],
                },
                textfont=textfont,
            )
        ]
    )
    return _figure_layout(figure, title)


# ===== Matrix charts =====


def create_heatmap_chart(matrix: TagMatrix, title: str) -> alt.Chart:
    """Create heatmap of tag occurrences per rule.

    Only non-zero cells are drawn; empty cells stay blank.
    """
    df = matrix.to_dataframe()
    df = df[df["count"] > 0]
    return (
        alt.Chart(df)
        .mark_rect()
        .encode(
            x=alt.X(
                "tag:N",
                title="Tag",
                sort=matrix.columns,
                axis=alt.Axis(labelAngle=-45, labelLimit=200),
            ),
            y=alt.Y(
                "rule:N",
                title="Rule",
                sort=matrix.rows,
                axis=alt.Axis(labelLimit=300, labelOverlap=False),
            ),
            color=alt.Color(
                "count:Q",
                title="Occurrences",
                scale=alt.Scale(scheme="greens"),
            ),
            tooltip=[
                alt.Tooltip("rule:N", title="Rule"),
                alt.Tooltip("tag:N", title="Tag"),
                alt.Tooltip("count:Q", title="Occurrences"),
            ],
        )
        .properties(title=title, height=600, width=800)
    )


def create_themeriver_chart(matrix: TagMatrix, title: str) -> alt.Chart:
    """Create a streamgraph: one stream per tag flowing across the rules."""
    df = matrix.to_dataframe()
    return (
        alt.Chart(df)
        .mark_area(interpolate="basis")
        .encode(
            x=alt.X("rule:N", title="Rule", sort=matrix.rows),
            y=alt.Y("sum(count):Q", stack="center", axis=None),
            color=alt.Color("tag:N", title="Tag", sort=matrix.columns),
            tooltip=[
                alt.Tooltip("rule:N", title="Rule"),
                alt.Tooltip("tag:N", title="Tag"),
                alt.Tooltip("sum(count):Q", title="Occurrences"),
            ],
        )
        .properties(title=title, height=400, width=800)
    )


def create_surface_chart(matrix: TagMatrix, title: str) -> go.Figure:
    """Create a 3D surface of tag occurrences (x = tag, y = rule)."""
    figure = go.Figure(
        data=[
            go.Surface(
                z=matrix.values,
                x=list(range(len(matrix.columns))),
                y=list(range(len(matrix.rows))),
                colorscale="Greens",
            )
        ]
    )
    figure.update_layout(
        scene={
            "xaxis": {
                "title": {"text": "Tag"},
                "tickvals": list(range(len(matrix.columns))),
                "ticktext": matrix.columns,
            },
            "yaxis": {
                "title": {"text": "Rule"},
                "tickvals": list(range(len(matrix.rows))),
                "ticktext": matrix.rows,
            },
            "zaxis": {"title": {"text": "Occurrences"}},
        }
    )
    return _figure_layout(figure, title)


# ===== Numeric charts =====


def create_funnel_chart(series: NumericSeries, title: str) -> go.Figure:
    """Create a funnel with one stage per rule, width = sum of tag values."""
    sums = series.sums()
    figure = go.Figure(
        data=[go.Funnel(y=list(sums.keys()), x=list(sums.values()), name="Data")]
    )
    return _figure_layout(figure, title)


def create_gauge_chart(series: NumericSeries, title: str) -> go.Figure:
    """Create one gauge per rule, laid out in a grid, sharing one scale."""
    sums = series.sums()
    columns = min(len(sums), 3) or 1
    rows = math.ceil(len(sums) / columns) or 1
    upper = max(list(sums.values()) + [1.0])

    figure = go.Figure()
    for i, (rule, value) in enumerate(sums.items()):
        figure.add_trace(
            go.Indicator(
                mode="gauge+number",
                value=value,
                title={"text": rule},
                gauge={"axis": {"range": [0, upper]}},
                domain={"row": i // columns, "column": i % columns},
            )
        )
    figure.update_layout(
        grid={"rows": rows, "columns": columns, "pattern": "independent"}
    )
    return _figure_layout(figure, title)


def create_kline_chart(series: NumericSeries, title: str) -> go.Figure:
    """Create a candlestick per rule from its first, last, min and max values."""
    candles = series.candles()
    figure = go.Figure(
        data=[
            go.Candlestick(
                x=[candle.rule for candle in candles],
                open=[candle.open for candle in candles],
                close=[candle.close for candle in candles],
                low=[candle.low for candle in candles],
                high=[candle.high for candle in candles],
            )
        ]
    )
    figure.update_layout(xaxis_rangeslider_visible=False)
    figure.update_xaxes(type="category")
    return _figure_layout(figure, title)


CHART_BUILDERS: Dict[OutputKind, Callable[..., Chart]] = {
    OutputKind.BAR: create_bar_chart,
    OutputKind.LINE: create_line_chart,
    OutputKind.SCATTER: create_scatter_chart,
    OutputKind.AREA: create_area_chart,
    OutputKind.HISTOGRAM: create_histogram_chart,
    OutputKind.BOXPLOT: create_boxplot_chart,
    OutputKind.RADAR: create_radar_chart,
    OutputKind.WORDCLOUD: create_wordcloud_chart,
    OutputKind.PIE: create_pie_chart,
    OutputKind.DOUGHNUT: create_doughnut_chart,
    OutputKind.GRAPH: create_graph_chart,
    OutputKind.TREE: create_tree_chart,
    OutputKind.TREEMAP: create_treemap_chart,
    OutputKind.SUNBURST: create_sunburst_chart,
    OutputKind.PARALLEL: create_parallel_chart,
    OutputKind.SANKEY: create_sankey_chart,
    OutputKind.HEATMAP: create_heatmap_chart,
    OutputKind.SURFACE: create_surface_chart,
    OutputKind.THEMERIVER: create_themeriver_chart,
    OutputKind.FUNNEL: create_funnel_chart,
    OutputKind.GAUGE: create_gauge_chart,
    OutputKind.KLINE: create_kline_chart,
}

