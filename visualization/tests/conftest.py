# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Shared pytest fixtures for visualization tests."""

# pylint: disable=redefined-outer-name

import pytest

from aggregation.aggregator import (
    build_bipartite_graph,
    build_flow_sequence,
    build_frequency_table,
    build_numeric_series,
    build_proportional_labels,
    build_tag_matrix,
)
from aggregation.models import TagCorpus
from visualization.tests.fixtures.sample_data import (
    build_numeric_corpus,
    build_sample_corpus,
)

# ===== Corpus Fixtures =====


@pytest.fixture
def sample_corpus():
    """Return a corpus of four Sigma-style rules."""
    return build_sample_corpus()


@pytest.fixture
def numeric_corpus():
    """Return a corpus whose tags are all numeric."""
    return build_numeric_corpus()


@pytest.fixture
def empty_corpus():
    return TagCorpus()


# ===== Aggregate Fixtures =====


@pytest.fixture
def frequency_table(sample_corpus):
    return build_frequency_table(sample_corpus)


@pytest.fixture
def proportional_labels(sample_corpus):
    return build_proportional_labels(sample_corpus)


@pytest.fixture
def bipartite_graph(sample_corpus):
    return build_bipartite_graph(sample_corpus)


@pytest.fixture
def flow_sequence(sample_corpus):
    return build_flow_sequence(sample_corpus)


@pytest.fixture
def tag_matrix(sample_corpus):
    return build_tag_matrix(sample_corpus)


@pytest.fixture
def numeric_series(numeric_corpus):
    return build_numeric_series(numeric_corpus)
