# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Render aggregates into HTML chart documents."""

import logging
from pathlib import Path
from typing import Union

import altair as alt
import plotly.graph_objects as go

from aggregation.aggregator import (
    KIND_SHAPES,
    Aggregate,
    AggregateShape,
    BipartiteGraph,
    FlowSequence,
    FrequencyTable,
    NumericSeries,
    OutputKind,
    ProportionalLabels,
    TagMatrix,
    parse_kind,
)
from aggregation.errors import OutputWriteError
from visualization.charts import CHART_BUILDERS, Chart

logger = logging.getLogger(__name__)

_SHAPE_TYPES = {
    AggregateShape.FREQUENCY: FrequencyTable,
    AggregateShape.PROPORTIONAL: ProportionalLabels,
    AggregateShape.BIPARTITE: BipartiteGraph,
    AggregateShape.FLOW: FlowSequence,
    AggregateShape.MATRIX: TagMatrix,
    AggregateShape.NUMERIC: NumericSeries,
}


def chart_file_name(kind: Union[str, OutputKind], index: int) -> str:
    """Return the artifact file name for the index-th requested kind."""
    return f"{parse_kind(kind).value}_chart_{index}.html"


def build_chart(
    aggregate: Aggregate, kind: Union[str, OutputKind], title: str
) -> Chart:
    """
    Build the chart object for an aggregate.

    Raises:
        UnsupportedKindError: If the kind is unknown
        TypeError: If the aggregate is not the shape the kind is drawn from
    """
    output_kind = parse_kind(kind)
    expected = _SHAPE_TYPES[KIND_SHAPES[output_kind]]
    if not isinstance(aggregate, expected):
        raise TypeError(
            f"{output_kind.value} charts need a {expected.__name__}, "
            f"got {type(aggregate).__name__}"
        )
    return CHART_BUILDERS[output_kind](aggregate, title)


def save_chart(chart: Chart, output_path: Path) -> None:
    """Write a chart to a standalone HTML document."""
    if isinstance(chart, go.Figure):
        chart.write_html(str(output_path), include_plotlyjs="cdn", full_html=True)
    elif isinstance(chart, alt.Chart):
        chart.save(str(output_path), format="html")
    else:
        raise TypeError(f"Cannot save chart of type {type(chart).__name__}")


def render(
    aggregate: Aggregate,
    kind: Union[str, OutputKind],
    title: str,
    output_path: Union[str, Path],
) -> Path:
    """
    Render an aggregate as the requested chart kind and write it to a file.

    Args:
        aggregate: Aggregate built for the kind
        kind: Output kind
        title: Chart title
        output_path: Path of the HTML document to write

    Returns:
        Path of the written document

    Raises:
        UnsupportedKindError: If the kind is unknown
        OutputWriteError: If the document cannot be written
    """
    path = Path(output_path)
    chart = build_chart(aggregate, kind, title)
    try:
        save_chart(chart, path)
    except OSError as e:
        raise OutputWriteError(str(path), e) from e
    logger.info("Chart written to %s", path)
    return path
