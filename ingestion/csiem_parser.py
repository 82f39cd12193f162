# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""CSIEM rule decoding (JSON records with ``Name`` and ``Tags`` fields)."""

import json
from typing import Any, Dict

from aggregation.errors import DecodeError
from aggregation.models import TaggedEntity
from ingestion.sigma_parser import normalize_tags


def _get_field(record: Dict[str, Any], name: str) -> Any:
    # Field names match case-insensitively; an exact match takes precedence
    if name in record:
        return record[name]
    for key, value in record.items():
        if key.casefold() == name.casefold():
            return value
    return None


def parse_csiem_rule(content: bytes, source: str = "") -> TaggedEntity:
    """
    Decode one CSIEM rule.

    Args:
        content: Raw JSON bytes of the rule file
        source: Label of the input (file path or blob label)

    Returns:
        TaggedEntity with the rule name and tags

    Raises:
        DecodeError: If the content is not a JSON object
    """
    try:
        record = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"invalid JSON: {e}", source) from e

    if not isinstance(record, dict):
        raise DecodeError(f"expected an object, got {type(record).__name__}", source)

    name = _get_field(record, "Name")
    tags = normalize_tags(_get_field(record, "Tags"), source)
    return TaggedEntity(name="" if name is None else str(name), tags=tuple(tags))
