# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Shared configuration utilities.

This module provides configuration loading, the resolved run configuration
and logging setup used by the analyze-tags command line.
"""

from dataclasses import asdict, dataclass, field
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from aggregation.aggregator import OutputKind, parse_kinds
from aggregation.errors import ConfigurationError
from aggregation.models import RuleFormat

logger = logging.getLogger(__name__)

OUTPUT_MODE_LIST = "list"
OUTPUT_MODE_CHART = "chart"
OUTPUT_MODE_SPREADSHEET = "spreadsheet"
OUTPUT_MODES = (OUTPUT_MODE_LIST, OUTPUT_MODE_CHART, OUTPUT_MODE_SPREADSHEET)

DEFAULT_PATTERN = "**/*"
DEFAULT_TITLE = "Rule Tags"
DEFAULT_SHEET_NAME = "Tags"


@dataclass(frozen=True)
class AnalysisConfig:
    """Resolved configuration for one analyze-tags run."""

    rule_format: RuleFormat
    file_path: Optional[str] = None
    file_content: Optional[str] = None
    pattern: str = DEFAULT_PATTERN
    output_mode: str = OUTPUT_MODE_LIST
    chart_kinds: Tuple[OutputKind, ...] = field(default_factory=tuple)
    output_dir: Optional[str] = None
    title: str = DEFAULT_TITLE
    sheet_name: str = DEFAULT_SHEET_NAME
    json_output: bool = False
    show_progress: bool = True
    save_config_snapshot: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable snapshot (inline content omitted)."""
        snapshot = asdict(self)
        snapshot["rule_format"] = self.rule_format.value
        snapshot["chart_kinds"] = [kind.value for kind in self.chart_kinds]
        snapshot["file_content"] = None if self.file_content is None else "<inline>"
        return snapshot


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If configuration file doesn't exist
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_config_from_args(
    config_arg: str | None,
) -> Dict[str, Any]:
    """
    Load configuration from CLI argument if provided.

    Args:
        config_arg: Path to config file from CLI argument (or None)

    Returns:
        Configuration dictionary (empty dict if no config provided)

    Raises:
        FileNotFoundError: If the config file does not exist
    """
    config_dict = {}
    if config_arg:
        config_path = Path(config_arg)
        if not config_path.exists():
            logger.error("Configuration file not found: %s", config_path)
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        config_dict = load_config(config_path)
    return config_dict


def _resolve_format(selected: List[str], config_format: Any) -> RuleFormat:
    if len(selected) > 1:
        raise ConfigurationError(
            "Only one of --sigma, --yara or --csiem can be given, got: "
            + ", ".join(selected)
        )
    value = selected[0] if selected else config_format
    if not value:
        raise ConfigurationError(
            "Please provide either --sigma, --yara or --csiem flag "
            "to specify the type of rules."
        )
    try:
        return RuleFormat(str(value).lower())
    except ValueError as e:
        raise ConfigurationError(f"Unknown rule format: {value}") from e


def build_analysis_config(
    cli_values: Dict[str, Any], config_dict: Dict[str, Any]
) -> AnalysisConfig:
    """
    Merge CLI values over config file values into an AnalysisConfig.

    Args:
        cli_values: Values from the command line; None means "not given".
            The "formats" entry lists the selected format flags.
        config_dict: Values from the JSON config file

    Returns:
        Validated AnalysisConfig

    Raises:
        ConfigurationError: If required settings are missing or conflicting
        UnsupportedKindError: If a requested chart kind is unknown
    """

    def pick(key: str, default: Any = None) -> Any:
        value = cli_values.get(key)
        if value is None:
            value = config_dict.get(key, default)
        return default if value is None else value

    rule_format = _resolve_format(
        cli_values.get("formats") or [], config_dict.get("format")
    )

    file_path = pick("filepath")
    file_content = pick("filecontent")
    if not file_path and not file_content:
        raise ConfigurationError("Please provide either file paths or file contents.")
    if file_path and file_content:
        raise ConfigurationError(
            "Provide either --filepath or --filecontent, not both."
        )

    output_mode = str(pick("output_mode", OUTPUT_MODE_LIST)).lower()
    if output_mode not in OUTPUT_MODES:
        raise ConfigurationError(
            f"Unknown output mode: {output_mode} (expected one of {OUTPUT_MODES})"
        )

    chart_kinds = tuple(parse_kinds(pick("chart_types", [])))
    output_dir = pick("output")
    if output_mode == OUTPUT_MODE_CHART:
        if not chart_kinds:
            raise ConfigurationError("Chart output requires --chart-types.")
        if not output_dir:
            raise ConfigurationError("Chart output requires --output.")
    if output_mode == OUTPUT_MODE_SPREADSHEET and not output_dir:
        raise ConfigurationError("Spreadsheet output requires --output.")

    return AnalysisConfig(
        rule_format=rule_format,
        file_path=file_path or None,
        file_content=file_content or None,
        pattern=pick("pattern", DEFAULT_PATTERN),
        output_mode=output_mode,
        chart_kinds=chart_kinds,
        output_dir=output_dir or None,
        title=pick("title", DEFAULT_TITLE),
        sheet_name=pick("sheet_name", DEFAULT_SHEET_NAME),
        json_output=bool(pick("json", False)),
        show_progress=bool(pick("show_progress", True)),
        save_config_snapshot=bool(pick("save_config_snapshot", False)),
    )


def setup_logging(debug: bool = False, module_names: list[str] | None = None) -> None:
    """
    Configure logging for analyze-tags modules.

    Args:
        debug: Enable debug-level logging
        module_names: Additional module names to set log level for
    """
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Set log level for specified modules
    if module_names:
        for module_name in module_names:
            logging.getLogger(module_name).setLevel(log_level)
