# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Gather rule inputs and decode them into a TagCorpus.

Inputs come either from the filesystem (a single file, or a directory that
is walked recursively) or from inline base64 content (one blob, or several
blobs separated by newlines). Each input is decoded on its own; an input
that cannot be read or decoded is logged and skipped so the rest of the
batch still contributes to the corpus.
"""

import base64
import binascii
import logging
from pathlib import Path
from typing import Callable, Dict, List

from tqdm import tqdm

from aggregation.errors import DecodeError, InputAccessError
from aggregation.models import RuleFormat, TagCorpus, TaggedEntity
from ingestion.csiem_parser import parse_csiem_rule
from ingestion.sigma_parser import parse_sigma_rule
from ingestion.yara_parser import parse_yara_rules

logger = logging.getLogger(__name__)

INLINE_LABEL = "filecontent"

RuleDecoder = Callable[[bytes, str], List[TaggedEntity]]


def _single(parser: Callable[[bytes, str], TaggedEntity]) -> RuleDecoder:
    def decode(content: bytes, source: str) -> List[TaggedEntity]:
        return [parser(content, source)]

    return decode


DECODERS: Dict[RuleFormat, RuleDecoder] = {
    RuleFormat.SIGMA: _single(parse_sigma_rule),
    RuleFormat.CSIEM: _single(parse_csiem_rule),
    RuleFormat.YARA: parse_yara_rules,
}


def find_rule_files(root: Path, pattern: str = "**/*") -> List[Path]:
    """
    Find all files under a directory matching the given glob pattern.

    Args:
        root: Directory to walk
        pattern: Glob pattern relative to root (e.g., "**/*.yml")

    Returns:
        Sorted list of matching file paths
    """
    files = sorted(path for path in root.glob(pattern) if path.is_file())
    logger.debug("Found %d files matching pattern '%s'", len(files), pattern)
    return files


def read_path_inputs(file_path: str, pattern: str = "**/*") -> Dict[str, bytes]:
    """
    Read rule inputs from a file or a directory.

    Args:
        file_path: Path to a rule file or a directory of rule files
        pattern: Glob pattern used when file_path is a directory

    Returns:
        Mapping of file path to raw bytes, in sorted path order

    Raises:
        InputAccessError: If the path does not exist or a single file
            cannot be read
    """
    path = Path(file_path)
    if not path.exists():
        raise InputAccessError(f"Input path not found: {file_path}")

    if path.is_file():
        try:
            return {str(path): path.read_bytes()}
        except OSError as e:
            raise InputAccessError(f"Cannot read {file_path}: {e}") from e

    inputs: Dict[str, bytes] = {}
    for rule_file in find_rule_files(path, pattern):
        try:
            inputs[str(rule_file)] = rule_file.read_bytes()
        except OSError as e:
            logger.warning("Skipping %s: cannot read file: %s", rule_file, e)
    return inputs


def decode_inline_content(file_content: str) -> Dict[str, bytes]:
    """
    Decode inline base64 content.

    A single blob is labelled "filecontent"; several newline-separated blobs
    are labelled "filecontent-1", "filecontent-2", ... Blank lines are
    ignored and a blob that is not valid base64 is logged and skipped.

    Args:
        file_content: One base64 blob, or several separated by newlines

    Returns:
        Mapping of blob label to decoded bytes
    """
    blobs = [line.strip() for line in file_content.splitlines() if line.strip()]
    inputs: Dict[str, bytes] = {}
    for index, blob in enumerate(blobs, start=1):
        label = INLINE_LABEL if len(blobs) == 1 else f"{INLINE_LABEL}-{index}"
        try:
            inputs[label] = base64.b64decode(blob, validate=True)
        except binascii.Error as e:
            logger.warning("Skipping %s: invalid base64 content: %s", label, e)
    return inputs


def decode_inputs(
    inputs: Dict[str, bytes],
    rule_format: RuleFormat,
    show_progress: bool = False,
) -> List[TaggedEntity]:
    """
    Decode every input with the parser for the given rule format.

    Args:
        inputs: Mapping of input label to raw bytes
        rule_format: Source format of all inputs
        show_progress: Display a progress bar on stderr

    Returns:
        Decoded rules in input order; inputs that fail to decode are skipped
    """
    decoder = DECODERS[rule_format]
    entities: List[TaggedEntity] = []
    failed = 0

    with tqdm(
        total=len(inputs),
        desc="Parsing rules",
        unit="file",
        disable=not show_progress,
    ) as pbar:
        for label, content in inputs.items():
            try:
                entities.extend(decoder(content, label))
            except DecodeError as e:
                failed += 1
                logger.warning("Skipping %s: error parsing rule: %s", label, e)
            pbar.update(1)

    logger.debug(
        "Decoded %d rules from %d inputs (%d skipped)",
        len(entities),
        len(inputs),
        failed,
    )
    return entities


def load_corpus(
    inputs: Dict[str, bytes],
    rule_format: RuleFormat,
    show_progress: bool = False,
) -> TagCorpus:
    """Decode all inputs and collect them into a TagCorpus."""
    return TagCorpus(decode_inputs(inputs, rule_format, show_progress))
