# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for the error hierarchy."""

import pytest

from aggregation.errors import (
    AnalyzeTagsError,
    ConfigurationError,
    DecodeError,
    EncodingError,
    InputAccessError,
    OutputWriteError,
    UnsupportedKindError,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "error_type, builtin",
    [
        (InputAccessError, OSError),
        (OutputWriteError, OSError),
        (DecodeError, ValueError),
        (UnsupportedKindError, ValueError),
        (EncodingError, ValueError),
    ],
)
def test_errors_extend_matching_builtin(error_type, builtin):
    assert issubclass(error_type, AnalyzeTagsError)
    assert issubclass(error_type, builtin)


@pytest.mark.unit
def test_configuration_error_is_only_an_analyze_tags_error():
    assert issubclass(ConfigurationError, AnalyzeTagsError)
    assert not issubclass(ConfigurationError, (OSError, ValueError))


@pytest.mark.unit
def test_input_access_error_caught_as_os_error():
    with pytest.raises(OSError, match="Input path not found: rules"):
        raise InputAccessError("Input path not found: rules")


@pytest.mark.unit
def test_decode_error_prefixes_source():
    error = DecodeError("invalid YARA rule set", "rules.yar")

    assert isinstance(error, ValueError)
    assert str(error) == "rules.yar: invalid YARA rule set"
    assert error.source == "rules.yar"
    assert str(DecodeError("bad")) == "bad"
