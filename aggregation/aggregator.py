# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Tag aggregation for every supported output kind.

Each output kind is registered against one aggregate shape. ``aggregate``
looks the kind up and builds that shape from the corpus:

- FrequencyTable: tag -> occurrence count
- ProportionalLabels: tag -> (count, percentage of all occurrences)
- BipartiteGraph: rule and tag nodes joined by (rule, tag) edges
- FlowSequence: consecutive tag links per rule, merged with a count
- TagMatrix: rule x tag occurrence counts
- NumericSeries: per-rule tag values coerced to float

All shapes list tags, nodes and rules in first-seen order of the corpus
traversal, so the same corpus always produces the same aggregate.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from aggregation.errors import EncodingError, UnsupportedKindError
from aggregation.models import TagCorpus

logger = logging.getLogger(__name__)

RULE_NODE = "rule"
TAG_NODE = "tag"


class OutputKind(str, Enum):
    """Chart kinds that can be requested on the command line."""

    BAR = "bar"
    LINE = "line"
    SCATTER = "scatter"
    AREA = "area"
    HISTOGRAM = "histogram"
    BOXPLOT = "boxplot"
    RADAR = "radar"
    WORDCLOUD = "wordcloud"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    GRAPH = "graph"
    TREE = "tree"
    TREEMAP = "treemap"
    SUNBURST = "sunburst"
    PARALLEL = "parallel"
    SANKEY = "sankey"
    HEATMAP = "heatmap"
    SURFACE = "surface"
    THEMERIVER = "themeriver"
    FUNNEL = "funnel"
    GAUGE = "gauge"
    KLINE = "kline"


class AggregateShape(str, Enum):
    """Derived data shapes handed to the chart builders."""

    FREQUENCY = "frequency"
    PROPORTIONAL = "proportional"
    BIPARTITE = "bipartite"
    FLOW = "flow"
    MATRIX = "matrix"
    NUMERIC = "numeric"


KIND_SHAPES: Dict[OutputKind, AggregateShape] = {
    OutputKind.BAR: AggregateShape.FREQUENCY,
    OutputKind.LINE: AggregateShape.FREQUENCY,
    OutputKind.SCATTER: AggregateShape.FREQUENCY,
    OutputKind.AREA: AggregateShape.FREQUENCY,
    OutputKind.HISTOGRAM: AggregateShape.FREQUENCY,
    OutputKind.BOXPLOT: AggregateShape.FREQUENCY,
    OutputKind.RADAR: AggregateShape.FREQUENCY,
    OutputKind.WORDCLOUD: AggregateShape.FREQUENCY,
    OutputKind.PIE: AggregateShape.PROPORTIONAL,
    OutputKind.DOUGHNUT: AggregateShape.PROPORTIONAL,
    OutputKind.GRAPH: AggregateShape.BIPARTITE,
    OutputKind.TREE: AggregateShape.BIPARTITE,
    OutputKind.TREEMAP: AggregateShape.BIPARTITE,
    OutputKind.SUNBURST: AggregateShape.BIPARTITE,
    OutputKind.PARALLEL: AggregateShape.BIPARTITE,
    OutputKind.SANKEY: AggregateShape.FLOW,
    OutputKind.HEATMAP: AggregateShape.MATRIX,
    OutputKind.SURFACE: AggregateShape.MATRIX,
    OutputKind.THEMERIVER: AggregateShape.MATRIX,
    OutputKind.FUNNEL: AggregateShape.NUMERIC,
    OutputKind.GAUGE: AggregateShape.NUMERIC,
    OutputKind.KLINE: AggregateShape.NUMERIC,
}


def parse_kind(value: Union[str, OutputKind]) -> OutputKind:
    """
    Resolve a chart kind name.

    Args:
        value: Kind name, matched case-insensitively after trimming

    Returns:
        The matching OutputKind

    Raises:
        UnsupportedKindError: If the name is not a known kind
    """
    if isinstance(value, OutputKind):
        return value
    try:
        return OutputKind(str(value).strip().lower())
    except ValueError as e:
        raise UnsupportedKindError(str(value)) from e


def parse_kinds(value: Union[str, Iterable[str]]) -> List[OutputKind]:
    """Resolve a comma-separated string (or list) of kind names."""
    names = value.split(",") if isinstance(value, str) else list(value)
    return [parse_kind(name) for name in names if str(name).strip()]


# ===== Aggregate shapes =====


@dataclass
class FrequencyTable:
    """Occurrence count per tag, in first-seen order."""

    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def most_common(self, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        """Tags sorted by count descending; ties keep first-seen order."""
        ranked = sorted(self.counts.items(), key=lambda item: -item[1])
        return ranked if limit is None else ranked[:limit]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.counts.items()), columns=["tag", "count"])


@dataclass
class ProportionEntry:
    tag: str
    count: int
    percent: float

    @property
    def label(self) -> str:
        return f"{self.tag}: {self.percent:.2f}%"


@dataclass
class ProportionalLabels:
    """Share of each tag among all tag occurrences."""

    entries: List[ProportionEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(entry.count for entry in self.entries)


@dataclass
class GraphNode:
    name: str
    category: str
    weight: int = 0


@dataclass
class BipartiteGraph:
    """Rule and tag nodes joined by one edge per distinct (rule, tag) pair."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def node_names(self) -> List[str]:
        return [node.name for node in self.nodes]

    def rules(self) -> List[str]:
        return [node.name for node in self.nodes if node.category == RULE_NODE]

    def parents(self) -> List[str]:
        """Names that own at least one tag, or were first seen as a rule.

        A rule whose name was first seen as a tag keeps the tag category but
        is still listed here, in node order.
        """
        sources = {source for source, _ in self.edges}
        return [
            node.name
            for node in self.nodes
            if node.category == RULE_NODE or node.name in sources
        ]

    def tags(self) -> List[str]:
        return [node.name for node in self.nodes if node.category == TAG_NODE]


@dataclass
class FlowLink:
    source: str
    target: str
    value: int = 1


@dataclass
class FlowSequence:
    """Links between consecutive tags of each rule."""

    nodes: List[str] = field(default_factory=list)
    links: List[FlowLink] = field(default_factory=list)


@dataclass
class TagMatrix:
    """Occurrences of each tag (columns) within each rule (rows)."""

    rows: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    values: List[List[int]] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the matrix in long form with columns: rule, tag, count."""
        records = [
            (rule, tag, self.values[i][j])
            for i, rule in enumerate(self.rows)
            for j, tag in enumerate(self.columns)
        ]
        return pd.DataFrame(records, columns=["rule", "tag", "count"])


@dataclass
class Candle:
    rule: str
    open: float
    close: float
    low: float
    high: float


@dataclass
class NumericSeries:
    """Tag values of each rule parsed as numbers."""

    values: Dict[str, List[float]] = field(default_factory=dict)

    def sums(self) -> Dict[str, float]:
        return {rule: float(sum(values)) for rule, values in self.values.items()}

    def candles(self) -> List[Candle]:
        """Open/close/low/high per rule; rules without values are left out."""
        return [
            Candle(
                rule=rule,
                open=values[0],
                close=values[-1],
                low=min(values),
                high=max(values),
            )
            for rule, values in self.values.items()
            if values
        ]


Aggregate = Union[
    FrequencyTable,
    ProportionalLabels,
    BipartiteGraph,
    FlowSequence,
    TagMatrix,
    NumericSeries,
]


# ===== Builders =====


def build_frequency_table(corpus: TagCorpus) -> FrequencyTable:
    """Count every tag occurrence across every rule."""
    pairs_df = corpus.to_dataframe()
    counts = pairs_df.groupby("tag", sort=False).size()
    return FrequencyTable(counts={str(tag): int(n) for tag, n in counts.items()})


def build_proportional_labels(corpus: TagCorpus) -> ProportionalLabels:
    """Compute each tag's share of the total tag occurrences."""
    table = build_frequency_table(corpus)
    total = table.total
    if total == 0:
        return ProportionalLabels()
    return ProportionalLabels(
        entries=[
            ProportionEntry(tag=tag, count=count, percent=count * 100.0 / total)
            for tag, count in table.counts.items()
        ]
    )


def build_bipartite_graph(corpus: TagCorpus) -> BipartiteGraph:
    """
    Build the rule/tag graph.

    A name that appears several times (a tag shared by many rules, or a tag
    equal to a rule name) yields a single node; its category is the one it
    was first seen with. Repeated tags inside one rule yield a single edge.
    Node weight is the node degree.
    """
    nodes: Dict[str, GraphNode] = {}
    edges: List[Tuple[str, str]] = []
    seen_edges = set()

    def add_node(name: str, category: str) -> GraphNode:
        if name not in nodes:
            nodes[name] = GraphNode(name=name, category=category)
        return nodes[name]

    for rule, tags in corpus.items():
        add_node(rule, RULE_NODE)
        for tag in tags:
            add_node(tag, TAG_NODE)
            edge = (rule, tag)
            if edge in seen_edges:
                continue
            seen_edges.add(edge)
            edges.append(edge)

    for source, target in edges:
        nodes[source].weight += 1
        if target != source:
            nodes[target].weight += 1

    return BipartiteGraph(nodes=list(nodes.values()), edges=edges)


def build_flow_sequence(corpus: TagCorpus) -> FlowSequence:
    """Link each tag to the one that follows it in the same rule."""
    nodes: List[str] = []
    node_seen = set()
    links: Dict[Tuple[str, str], FlowLink] = {}

    def add_node(name: str) -> None:
        if name not in node_seen:
            node_seen.add(name)
            nodes.append(name)

    for rule, tags in corpus.items():
        for source, target in zip(tags, tags[1:]):
            if source == target:
                logger.debug("Skipping self link '%s' in rule '%s'", source, rule)
                continue
            add_node(source)
            add_node(target)
            key = (source, target)
            if key in links:
                links[key].value += 1
            else:
                links[key] = FlowLink(source=source, target=target)

    return FlowSequence(nodes=nodes, links=list(links.values()))


def build_tag_matrix(corpus: TagCorpus) -> TagMatrix:
    """Count how often each tag occurs within each rule."""
    columns: Dict[str, int] = {}
    for _, tags in corpus.items():
        for tag in tags:
            columns.setdefault(tag, len(columns))

    rows: List[str] = []
    values: List[List[int]] = []
    for rule, tags in corpus.items():
        row = [0] * len(columns)
        for tag in tags:
            row[columns[tag]] += 1
        rows.append(rule)
        values.append(row)

    return TagMatrix(rows=rows, columns=list(columns), values=values)


def build_numeric_series(corpus: TagCorpus) -> NumericSeries:
    """
    Parse every tag as a float.

    Raises:
        EncodingError: On the first tag that is not a number
    """
    values: Dict[str, List[float]] = {}
    for rule, tags in corpus.items():
        parsed = []
        for tag in tags:
            try:
                parsed.append(float(tag))
            except ValueError as e:
                raise EncodingError(rule, tag) from e
        values[rule] = parsed
    return NumericSeries(values=values)


_SHAPE_BUILDERS: Dict[AggregateShape, Callable[[TagCorpus], Aggregate]] = {
    AggregateShape.FREQUENCY: build_frequency_table,
    AggregateShape.PROPORTIONAL: build_proportional_labels,
    AggregateShape.BIPARTITE: build_bipartite_graph,
    AggregateShape.FLOW: build_flow_sequence,
    AggregateShape.MATRIX: build_tag_matrix,
    AggregateShape.NUMERIC: build_numeric_series,
}


def aggregate(corpus: TagCorpus, kind: Union[str, OutputKind]) -> Aggregate:
    """
    Build the aggregate the given chart kind is drawn from.

    Args:
        corpus: Rule name to tags mapping
        kind: Requested output kind

    Returns:
        The aggregate shape registered for the kind

    Raises:
        UnsupportedKindError: If the kind is unknown
        EncodingError: If the kind needs numeric tags and one is not numeric
    """
    output_kind = parse_kind(kind)
    shape = KIND_SHAPES[output_kind]
    logger.debug(
        "Aggregating %d rules as %s for %s",
        len(corpus),
        shape.value,
        output_kind.value,
    )
    return _SHAPE_BUILDERS[shape](corpus)
