# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Ingestion of Sigma, YARA and CSIEM rules into tagged rule records."""
