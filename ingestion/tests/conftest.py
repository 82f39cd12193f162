# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Shared pytest fixtures for ingestion tests."""

# pylint: disable=redefined-outer-name

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def data_dir():
    """Return the directory holding sample rule files."""
    return DATA_DIR


@pytest.fixture
def sigma_dir(data_dir):
    return data_dir / "sigma"


@pytest.fixture
def yara_file(data_dir):
    return data_dir / "yara" / "apt_samples.yar"


@pytest.fixture
def sigma_rule_bytes():
    """Return a minimal Sigma rule with two tags."""
    return b"title: R1\ntags:\n  - a\n  - b\n"
