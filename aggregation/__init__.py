# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Aggregation module for rule tag analysis.

This module provides the tagged-rule data model and the aggregations the
charts and reports are drawn from.
"""

__version__ = "1.0.0"
