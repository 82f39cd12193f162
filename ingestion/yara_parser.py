# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""YARA rule-set decoding via plyara.

Rule sets are parsed for their grammar only. Semantic checks (duplicate
identifiers, undefined external variables, unavailable modules) are left to
the engine that eventually compiles the rules, so a set that any YARA
build could read still contributes every rule.
"""

import logging
from typing import List

import plyara
from plyara.exceptions import ParseError

from aggregation.errors import DecodeError
from aggregation.models import TaggedEntity

logger = logging.getLogger(__name__)


def parse_yara_rules(content: bytes, source: str = "") -> List[TaggedEntity]:
    """
    Parse a YARA rule set and return one record per rule.

    Include directives are recorded by the parser but never followed, so a
    rule set only contributes its own rules.

    Args:
        content: Raw bytes of the rule-set file
        source: Label of the input (file path or blob label)

    Returns:
        List of TaggedEntity (identifier and tags), in rule-set order.
        An empty rule set returns an empty list.

    Raises:
        DecodeError: If the text is not valid UTF-8 or violates the grammar
    """
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"rule set is not UTF-8 text: {e}", source) from e

    # Parser state accumulates across calls, so use a fresh instance per input
    parser = plyara.Plyara()
    try:
        parsed_rules = parser.parse_string(text)
    except ParseError as e:
        raise DecodeError(f"invalid YARA rule set: {e}", source) from e

    entities = [
        TaggedEntity(name=rule["rule_name"], tags=tuple(rule.get("tags", ())))
        for rule in parsed_rules
    ]
    logger.debug("Parsed %d YARA rules from %s", len(entities), source or "input")
    return entities
