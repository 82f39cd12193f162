# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Error types shared by ingestion, aggregation and rendering."""


class AnalyzeTagsError(Exception):
    """Base class for all analyze-tags failures."""


class ConfigurationError(AnalyzeTagsError):
    """Invalid or incomplete configuration (flags or config file)."""


class InputAccessError(AnalyzeTagsError, OSError):
    """Input path is missing or cannot be read."""


class DecodeError(AnalyzeTagsError, ValueError):
    """Rule content is malformed for the declared source format."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(f"{source}: {message}" if source else message)
        self.source = source


class UnsupportedKindError(AnalyzeTagsError, ValueError):
    """Requested output kind is not one of the known chart kinds."""

    def __init__(self, kind: str):
        super().__init__(f"Unsupported chart kind: '{kind}'")
        self.kind = kind


class EncodingError(AnalyzeTagsError, ValueError):
    """A tag that must be numeric for the requested kind is not."""

    def __init__(self, entity: str, value: str):
        super().__init__(
            f"Tag '{value}' of rule '{entity}' is not a numeric value"
        )
        self.entity = entity
        self.value = value


class OutputWriteError(AnalyzeTagsError, OSError):
    """Output artifact could not be created or written."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Cannot write {path}: {cause}")
        self.path = path
        self.cause = cause
