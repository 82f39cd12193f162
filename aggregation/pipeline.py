# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Analyze Tags command line.

Reads Sigma, YARA or CSIEM rules, extracts each rule's name and tags, and
either lists them, renders them as charts or exports them to a spreadsheet.

Usage:
    python -m aggregation.pipeline --sigma --filepath rules/
    python -m aggregation.pipeline --yara --filepath rules.yar \\
        --output-mode chart --chart-types bar,pie,graph --output output/charts
    python -m aggregation.pipeline --config analyze_tags.json
"""

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Dict, List, Optional

from aggregation import __version__
from aggregation.aggregator import aggregate
from aggregation.config_utils import (
    OUTPUT_MODE_CHART,
    OUTPUT_MODE_LIST,
    OUTPUT_MODES,
    AnalysisConfig,
    build_analysis_config,
    load_config_from_args,
    setup_logging,
)
from aggregation.errors import (
    AnalyzeTagsError,
    ConfigurationError,
    EncodingError,
    InputAccessError,
    OutputWriteError,
)
from aggregation.models import RuleFormat, TagCorpus, TaggedEntity
from ingestion.loader import (
    decode_inline_content,
    decode_inputs,
    load_corpus,
    read_path_inputs,
)
from visualization.renderer import chart_file_name, render
from visualization.spreadsheet import SPREADSHEET_FILE_NAME, write_spreadsheet

logger = logging.getLogger(__name__)


def read_inputs(config: AnalysisConfig) -> Dict[str, bytes]:
    """
    Read raw rule inputs from the configured path or inline content.

    Raises:
        InputAccessError: If the input path cannot be accessed
    """
    if config.file_path:
        return read_path_inputs(config.file_path, config.pattern)
    return decode_inline_content(config.file_content or "")


def format_entity(entity: TaggedEntity, json_output: bool) -> str:
    """Format one rule for the list output."""
    if json_output:
        return json.dumps(entity.to_dict(), indent=2)
    return f"Name: {entity.name} Tags: {' '.join(entity.tags)}"


def write_entity_listing(entities: List[TaggedEntity], config: AnalysisConfig) -> int:
    """
    Print each rule, or write it to <output>/<name>.json when an output
    directory is configured.

    Returns:
        Number of rules that could not be written
    """
    failures = 0
    for entity in entities:
        output = format_entity(entity, config.json_output)
        if not config.output_dir:
            sys.stdout.write(output + "\n")
            continue

        output_file = Path(config.output_dir) / f"{entity.name}.json"
        try:
            output_file.write_text(output, encoding="utf-8")
        except OSError as e:
            failures += 1
            logger.error("Error writing output to file %s: %s", output_file, e)
            continue
        logger.info(
            "Output for rule '%s' written to file: %s", entity.name, output_file
        )
    return failures


def render_charts(corpus: TagCorpus, config: AnalysisConfig) -> int:
    """
    Render every requested chart kind independently.

    A kind that fails to aggregate or render is logged and the remaining
    kinds are still rendered.

    Returns:
        Number of kinds that failed
    """
    output_dir = Path(config.output_dir or ".")
    failures = 0
    for index, kind in enumerate(config.chart_kinds, start=1):
        output_file = output_dir / chart_file_name(kind, index)
        try:
            aggregated = aggregate(corpus, kind)
            render(aggregated, kind, config.title, output_file)
        except EncodingError as e:
            failures += 1
            logger.error("Error generating %s chart: %s", kind.value, e)
        except OutputWriteError as e:
            failures += 1
            logger.error("Error writing %s chart: %s", kind.value, e)
        except (AnalyzeTagsError, ValueError, TypeError) as e:
            failures += 1
            logger.error("Error rendering %s chart: %s", kind.value, e)
    return failures


def save_config_snapshot(config: AnalysisConfig, output_dir: Path) -> None:
    """
    Save a snapshot of the configuration used.

    Args:
        config: Resolved configuration
        output_dir: Output directory
    """
    config_snapshot_path = output_dir / "config.json"
    with config_snapshot_path.open("w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info("Configuration snapshot saved to: %s", config_snapshot_path)


def run_analysis(config: AnalysisConfig) -> int:
    """
    Run one analysis: read inputs, decode rules, produce the output.

    Args:
        config: Resolved configuration

    Returns:
        Process exit code (0 when every requested output was written)

    Raises:
        InputAccessError: If the input path cannot be accessed
    """
    inputs = read_inputs(config)
    logger.debug("Read %d input(s)", len(inputs))

    if config.output_dir:
        output_dir = Path(config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        if config.save_config_snapshot:
            save_config_snapshot(config, output_dir)

    # The list keeps every decoded rule, duplicates included
    if config.output_mode == OUTPUT_MODE_LIST:
        entities = decode_inputs(inputs, config.rule_format, config.show_progress)
        failures = write_entity_listing(entities, config)
        return 1 if failures else 0

    corpus = load_corpus(inputs, config.rule_format, config.show_progress)
    logger.info("Collected %d rules with %d tags", len(corpus), corpus.total_tags)

    if config.output_mode == OUTPUT_MODE_CHART:
        failures = render_charts(corpus, config)
        if failures:
            logger.error("%d of %d chart(s) failed", failures, len(config.chart_kinds))
            return 1
        return 0

    spreadsheet_path = Path(config.output_dir or ".") / SPREADSHEET_FILE_NAME
    try:
        write_spreadsheet(corpus, spreadsheet_path, config.sheet_name)
    except OutputWriteError as e:
        logger.error("Error writing spreadsheet: %s", e)
        return 1
    return 0


def _parse_pipeline_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the analyze-tags command."""
    parser = argparse.ArgumentParser(
        prog="analyze-tags",
        description="Extract rule names and tags from Sigma, YARA or CSIEM rules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # List Sigma rule tags
    analyze-tags --sigma --filepath /path/to/rules

    # Charts from a YARA rule set
    analyze-tags --yara --filepath rules.yar \\
        --output-mode chart --chart-types bar,pie,graph --output output/charts

    # Spreadsheet from base64-encoded rules (one blob per line)
    analyze-tags --sigma --filecontent "$(base64 -w0 rule.yml)" \\
        --output-mode spreadsheet --output output/report
        """,
    )
    parser.add_argument(
        "--sigma",
        dest="formats",
        action="append_const",
        const=RuleFormat.SIGMA.value,
        help="Use Sigma rules",
    )
    parser.add_argument(
        "--yara",
        dest="formats",
        action="append_const",
        const=RuleFormat.YARA.value,
        help="Use YARA rules",
    )
    parser.add_argument(
        "--csiem",
        dest="formats",
        action="append_const",
        const=RuleFormat.CSIEM.value,
        help="Use CSIEM (JSON) rules",
    )
    parser.add_argument(
        "--filepath",
        type=str,
        help="Name or path of the file or directory to read",
    )
    parser.add_argument(
        "--filecontent",
        type=str,
        help="Base64-encoded content of the file, or one blob per line",
    )
    parser.add_argument(
        "--pattern",
        type=str,
        help='Glob pattern for files inside a directory (default: "**/*")',
    )
    parser.add_argument(
        "--output-mode",
        dest="output_mode",
        choices=OUTPUT_MODES,
        help="What to produce (default: list)",
    )
    parser.add_argument(
        "--chart-types",
        dest="chart_types",
        type=str,
        help="Comma-separated chart kinds (e.g., bar,pie,graph)",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Output directory for writing files",
    )
    parser.add_argument("--title", type=str, help="Chart title")
    parser.add_argument(
        "--sheet-name",
        dest="sheet_name",
        type=str,
        help="Spreadsheet sheet name (default: Tags)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=None,
        help="Output results in JSON format (list mode)",
    )
    parser.add_argument(
        "--no-progress",
        dest="show_progress",
        action="store_false",
        default=None,
        help="Disable the progress bar",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON config file (CLI flags take precedence)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version",
        action="version",
        version=f"Analyze Tags version {__version__}",
    )
    return parser.parse_args(argv)


def _cli_values(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "formats": args.formats,
        "filepath": args.filepath,
        "filecontent": args.filecontent,
        "pattern": args.pattern,
        "output_mode": args.output_mode,
        "chart_types": args.chart_types,
        "output": args.output,
        "title": args.title,
        "sheet_name": args.sheet_name,
        "json": args.json,
        "show_progress": args.show_progress,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = _parse_pipeline_args(argv)

    # Set up logging
    setup_logging(
        debug=args.debug,
        module_names=["aggregation", "ingestion", "visualization"],
    )

    # Load configuration
    try:
        config_dict = load_config_from_args(args.config)
    except FileNotFoundError:
        return 1

    try:
        config = build_analysis_config(_cli_values(args), config_dict)
    except ConfigurationError as e:
        logger.error("%s", e)
        return 1
    except AnalyzeTagsError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    try:
        return run_analysis(config)
    except InputAccessError as e:
        logger.error("Error reading input: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
