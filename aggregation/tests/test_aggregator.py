# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for tag aggregation."""

import pytest

from aggregation.aggregator import (
    KIND_SHAPES,
    RULE_NODE,
    TAG_NODE,
    AggregateShape,
    BipartiteGraph,
    FlowSequence,
    FrequencyTable,
    NumericSeries,
    OutputKind,
    ProportionalLabels,
    TagMatrix,
    aggregate,
    build_bipartite_graph,
    build_flow_sequence,
    build_frequency_table,
    build_numeric_series,
    build_proportional_labels,
    build_tag_matrix,
    parse_kind,
    parse_kinds,
)
from aggregation.errors import EncodingError, UnsupportedKindError
from aggregation.models import TagCorpus, TaggedEntity

# ===== Kind parsing =====


@pytest.mark.unit
def test_parse_kind_is_case_insensitive():
    assert parse_kind(" Bar ") == OutputKind.BAR
    assert parse_kind("SANKEY") == OutputKind.SANKEY
    assert parse_kind(OutputKind.PIE) == OutputKind.PIE


@pytest.mark.unit
def test_parse_kind_unknown_names_value():
    """Test that the error names the rejected value."""
    with pytest.raises(UnsupportedKindError) as exc_info:
        parse_kind("foo")

    assert exc_info.value.kind == "foo"
    assert "foo" in str(exc_info.value)


@pytest.mark.unit
def test_parse_kinds_from_string_and_list():
    assert parse_kinds("bar, pie,,graph") == [
        OutputKind.BAR,
        OutputKind.PIE,
        OutputKind.GRAPH,
    ]
    assert parse_kinds(["line", "heatmap"]) == [OutputKind.LINE, OutputKind.HEATMAP]
    assert parse_kinds("") == []


@pytest.mark.unit
def test_every_kind_has_a_shape():
    assert set(KIND_SHAPES) == set(OutputKind)
    assert set(KIND_SHAPES.values()) == set(AggregateShape)


# ===== Frequency =====


@pytest.mark.unit
def test_frequency_table_counts(two_rule_corpus):
    table = build_frequency_table(two_rule_corpus)

    assert table.counts == {"tag1": 2, "tag3": 1, "tag2": 1}
    assert list(table.counts) == ["tag1", "tag3", "tag2"]


@pytest.mark.unit
def test_frequency_total_equals_tag_occurrences():
    corpus = TagCorpus(
        [
            TaggedEntity("A", ("x", "x", "y")),
            TaggedEntity("B", ("y",)),
            TaggedEntity("C", ()),
        ]
    )

    table = build_frequency_table(corpus)

    assert table.total == corpus.total_tags == 4
    assert table.counts == {"x": 2, "y": 2}


@pytest.mark.unit
def test_frequency_most_common_keeps_first_seen_ties(two_rule_corpus):
    table = build_frequency_table(two_rule_corpus)

    assert table.most_common() == [("tag1", 2), ("tag3", 1), ("tag2", 1)]
    assert table.most_common(1) == [("tag1", 2)]


@pytest.mark.unit
def test_frequency_dataframe(two_rule_corpus):
    df = build_frequency_table(two_rule_corpus).to_dataframe()

    assert list(df.columns) == ["tag", "count"]
    assert df["count"].sum() == 4


# ===== Proportions =====


@pytest.mark.unit
def test_proportional_labels(two_rule_corpus):
    labels = build_proportional_labels(two_rule_corpus)

    assert [entry.label for entry in labels.entries] == [
        "tag1: 50.00%",
        "tag3: 25.00%",
        "tag2: 25.00%",
    ]
    assert labels.total == 4
    assert sum(entry.percent for entry in labels.entries) == pytest.approx(100.0)


@pytest.mark.unit
def test_proportional_labels_empty_corpus():
    assert build_proportional_labels(TagCorpus()).entries == []


# ===== Bipartite graph =====


@pytest.mark.unit
def test_bipartite_graph(two_rule_corpus):
    graph = build_bipartite_graph(two_rule_corpus)

    assert graph.node_names == ["Rule1", "tag1", "tag3", "Rule2", "tag2"]
    assert graph.rules() == ["Rule1", "Rule2"]
    assert graph.tags() == ["tag1", "tag3", "tag2"]
    assert graph.edges == [
        ("Rule1", "tag1"),
        ("Rule1", "tag3"),
        ("Rule2", "tag1"),
        ("Rule2", "tag2"),
    ]
    weights = {node.name: node.weight for node in graph.nodes}
    assert weights == {"Rule1": 2, "tag1": 2, "tag3": 1, "Rule2": 2, "tag2": 1}


@pytest.mark.unit
def test_bipartite_graph_dedupes_nodes_and_edges():
    """Test that shared names and repeated tags collapse."""
    corpus = TagCorpus(
        [
            TaggedEntity("A", ("x", "x", "B")),
            TaggedEntity("B", ("x",)),
        ]
    )

    graph = build_bipartite_graph(corpus)

    assert graph.node_names == ["A", "x", "B"]
    assert len(set(graph.node_names)) == len(graph.nodes)
    assert graph.edges == [("A", "x"), ("A", "B"), ("B", "x")]
    categories = {node.name: node.category for node in graph.nodes}
    assert categories == {"A": RULE_NODE, "x": TAG_NODE, "B": TAG_NODE}


@pytest.mark.unit
def test_bipartite_parents_include_rules_first_seen_as_tags():
    corpus = TagCorpus([TaggedEntity("A", ("B",)), TaggedEntity("B", ("c",))])

    graph = build_bipartite_graph(corpus)

    assert graph.rules() == ["A"]
    assert graph.parents() == ["A", "B"]


@pytest.mark.unit
def test_bipartite_graph_rule_without_tags():
    graph = build_bipartite_graph(TagCorpus([TaggedEntity("Lonely", ())]))

    assert graph.node_names == ["Lonely"]
    assert graph.edges == []


# ===== Flow =====


@pytest.mark.unit
def test_flow_sequence_links_consecutive_tags():
    corpus = TagCorpus(
        [
            TaggedEntity("A", ("x", "y", "z")),
            TaggedEntity("B", ("x", "y")),
            TaggedEntity("C", ("solo",)),
        ]
    )

    flow = build_flow_sequence(corpus)

    assert flow.nodes == ["x", "y", "z"]
    assert [(l.source, l.target, l.value) for l in flow.links] == [
        ("x", "y", 2),
        ("y", "z", 1),
    ]


@pytest.mark.unit
def test_flow_sequence_skips_self_links():
    flow = build_flow_sequence(TagCorpus([TaggedEntity("A", ("x", "x", "y"))]))

    assert [(l.source, l.target) for l in flow.links] == [("x", "y")]


# ===== Matrix =====


@pytest.mark.unit
def test_tag_matrix(two_rule_corpus):
    matrix = build_tag_matrix(two_rule_corpus)

    assert matrix.rows == ["Rule1", "Rule2"]
    assert matrix.columns == ["tag1", "tag3", "tag2"]
    assert matrix.values == [[1, 1, 0], [1, 0, 1]]
    assert matrix.to_dataframe()["count"].sum() == two_rule_corpus.total_tags


# ===== Numeric =====


@pytest.mark.unit
def test_numeric_series(numeric_corpus):
    series = build_numeric_series(numeric_corpus)

    assert series.values == {"Rule1": [3.0, 1.5, 7.0], "Rule2": [10.0], "Rule3": []}
    assert series.sums() == {"Rule1": 11.5, "Rule2": 10.0, "Rule3": 0.0}


@pytest.mark.unit
def test_numeric_candles_skip_empty_rules(numeric_corpus):
    candles = build_numeric_series(numeric_corpus).candles()

    assert [c.rule for c in candles] == ["Rule1", "Rule2"]
    first = candles[0]
    assert (first.open, first.close, first.low, first.high) == (3.0, 7.0, 1.5, 7.0)


@pytest.mark.unit
def test_numeric_series_rejects_text_tags(two_rule_corpus):
    with pytest.raises(EncodingError) as exc_info:
        build_numeric_series(two_rule_corpus)

    assert exc_info.value.entity == "Rule1"
    assert exc_info.value.value == "tag1"


# ===== Dispatch =====

SHAPE_TYPES = {
    AggregateShape.FREQUENCY: FrequencyTable,
    AggregateShape.PROPORTIONAL: ProportionalLabels,
    AggregateShape.BIPARTITE: BipartiteGraph,
    AggregateShape.FLOW: FlowSequence,
    AggregateShape.MATRIX: TagMatrix,
    AggregateShape.NUMERIC: NumericSeries,
}


@pytest.mark.unit
@pytest.mark.parametrize("kind", list(OutputKind), ids=lambda k: k.value)
def test_aggregate_returns_registered_shape(kind, numeric_corpus):
    result = aggregate(numeric_corpus, kind.value)

    assert isinstance(result, SHAPE_TYPES[KIND_SHAPES[kind]])


@pytest.mark.unit
@pytest.mark.parametrize("kind", list(OutputKind), ids=lambda k: k.value)
def test_aggregate_is_deterministic(kind, numeric_corpus):
    assert aggregate(numeric_corpus, kind) == aggregate(numeric_corpus, kind)


@pytest.mark.unit
@pytest.mark.parametrize("kind", list(OutputKind), ids=lambda k: k.value)
def test_aggregate_empty_corpus(kind):
    """Test that every kind accepts an empty corpus."""
    result = aggregate(TagCorpus(), kind)

    assert isinstance(result, SHAPE_TYPES[KIND_SHAPES[kind]])


@pytest.mark.unit
def test_aggregate_unknown_kind(two_rule_corpus):
    with pytest.raises(UnsupportedKindError, match="foo"):
        aggregate(two_rule_corpus, "foo")


@pytest.mark.unit
@pytest.mark.parametrize("kind", ["funnel", "gauge", "kline"])
def test_numeric_kinds_reject_text_tags(kind, two_rule_corpus):
    with pytest.raises(EncodingError):
        aggregate(two_rule_corpus, kind)
