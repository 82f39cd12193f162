# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Chart and spreadsheet rendering for rule tag aggregates."""
