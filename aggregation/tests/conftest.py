# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Shared pytest fixtures for aggregation tests."""

# pylint: disable=redefined-outer-name

import base64

import pytest

from aggregation.models import TagCorpus, TaggedEntity


@pytest.fixture
def two_rule_corpus():
    """Rule1 -> [tag1, tag3], Rule2 -> [tag1, tag2]."""
    return TagCorpus(
        [
            TaggedEntity("Rule1", ("tag1", "tag3")),
            TaggedEntity("Rule2", ("tag1", "tag2")),
        ]
    )


@pytest.fixture
def numeric_corpus():
    """Corpus whose tags are all numbers."""
    return TagCorpus(
        [
            TaggedEntity("Rule1", ("3", "1.5", "7")),
            TaggedEntity("Rule2", ("10",)),
            TaggedEntity("Rule3", ()),
        ]
    )


@pytest.fixture
def sigma_rules_dir(tmp_path):
    """Directory holding two Sigma rules and one broken file."""
    rules_dir = tmp_path / "rules"
    rules_dir.mkdir()
    (rules_dir / "rule1.yml").write_text(
        "title: Rule1\ntags:\n  - tag1\n  - tag3\n", encoding="utf-8"
    )
    (rules_dir / "rule2.yml").write_text(
        "title: Rule2\ntags:\n  - tag1\n  - tag2\n", encoding="utf-8"
    )
    (rules_dir / "broken.yml").write_text("title: [unclosed\n", encoding="utf-8")
    return rules_dir


@pytest.fixture
def sigma_blob():
    """Base64 blob of a single Sigma rule."""
    content = b"title: R1\ntags:\n  - a\n  - b\n"
    return base64.b64encode(content).decode("ascii")
