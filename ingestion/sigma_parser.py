# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Sigma rule decoding.

Only the two fields the tag analysis needs are read: ``title`` and ``tags``.
Decoding is permissive: a rule without a title yields an empty name and a
rule without tags yields an empty tag list. A file holding several
``---``-separated documents is read up to the end of its first document.
"""

import logging
from typing import Any, List

import yaml

from aggregation.errors import DecodeError
from aggregation.models import TaggedEntity

logger = logging.getLogger(__name__)


def normalize_tags(raw_tags: Any, source: str = "") -> List[str]:
    """
    Convert a decoded ``tags`` value into a list of strings.

    Args:
        raw_tags: Value decoded from the rule (None, list of scalars)
        source: Label of the input, used in error messages

    Returns:
        List of tag strings (empty when tags are absent)

    Raises:
        DecodeError: If tags are not a list of scalar values
    """
    if raw_tags is None:
        return []
    if not isinstance(raw_tags, list):
        raise DecodeError(
            f"'tags' must be a list, got {type(raw_tags).__name__}", source
        )

    tags = []
    for tag in raw_tags:
        if isinstance(tag, (dict, list)):
            raise DecodeError(f"tag entries must be scalars, got {tag!r}", source)
        tags.append("" if tag is None else str(tag))
    return tags


def parse_sigma_rule(content: bytes, source: str = "") -> TaggedEntity:
    """
    Decode one Sigma rule.

    Args:
        content: Raw YAML bytes of the rule file
        source: Label of the input (file path or blob label)

    Returns:
        TaggedEntity with the rule title and tags

    Raises:
        DecodeError: If the content is not valid YAML or not a mapping
    """
    try:
        # Only the first document of a multi-document stream is read
        rule_data = next(yaml.safe_load_all(content), None)
    except yaml.YAMLError as e:
        raise DecodeError(f"invalid YAML: {e}", source) from e

    if rule_data is None:
        logger.debug("Empty Sigma document in %s", source or "input")
        return TaggedEntity(name="")
    if not isinstance(rule_data, dict):
        raise DecodeError(
            f"expected a mapping, got {type(rule_data).__name__}", source
        )

    title = rule_data.get("title")
    tags = normalize_tags(rule_data.get("tags"), source)
    return TaggedEntity(name="" if title is None else str(title), tags=tuple(tags))
