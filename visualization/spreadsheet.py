# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Spreadsheet export of rule tags: one row per (rule, tag) occurrence."""

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from aggregation.errors import OutputWriteError
from aggregation.models import TagCorpus

logger = logging.getLogger(__name__)

SPREADSHEET_FILE_NAME = "tags.xlsx"
COLUMNS = ["Rule", "Tag"]


def corpus_to_rows(corpus: TagCorpus) -> pd.DataFrame:
    """Return the sheet content: columns Rule and Tag, in corpus order."""
    return pd.DataFrame(list(corpus.pairs()), columns=COLUMNS)


def write_spreadsheet(
    corpus: TagCorpus,
    output_path: Union[str, Path],
    sheet_name: str = "Tags",
) -> Path:
    """
    Write the corpus to an Excel workbook.

    The sheet has a "Rule"/"Tag" header row followed by one row per tag
    occurrence.

    Args:
        corpus: Rule name to tags mapping
        output_path: Path of the .xlsx file to write
        sheet_name: Name of the worksheet

    Returns:
        Path of the written workbook

    Raises:
        OutputWriteError: If the file cannot be written
    """
    path = Path(output_path)
    rows_df = corpus_to_rows(corpus)
    try:
        rows_df.to_excel(path, sheet_name=sheet_name, index=False, engine="openpyxl")
    except OSError as e:
        raise OutputWriteError(str(path), e) from e
    logger.info("Spreadsheet with %d rows written to %s", len(rows_df), path)
    return path
