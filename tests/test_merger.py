"""Tests for override precedence in the metadata merge."""

import pytest

from lora_converter.conversion import ModelVersion
from lora_converter.merger import DEFAULT_SCALE_FACTOR, UNKNOWN_NAME, CLIOverrides, ResolvedParameters, merge
from lora_converter.registry import RegistryRecord

RECORD = RegistryRecord(display_name="Y", base_model_tag="SDXL 1.0", trigger_words=("style", "painting"))


class TestNamePrecedence:
    def test_cli_name_wins(self):
        assert merge(CLIOverrides(name="X"), RECORD).name == "X"

    def test_registry_name_when_cli_absent(self):
        assert merge(CLIOverrides(), RECORD).name == "Y"

    def test_unknown_when_both_absent(self):
        assert merge(CLIOverrides(), None).name == UNKNOWN_NAME == "unknown"

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_cli_name_falls_through(self, blank):
        assert merge(CLIOverrides(name=blank), RECORD).name == "Y"

    def test_blank_registry_name_degrades_to_unknown(self):
        record = RegistryRecord(display_name="")
        assert merge(CLIOverrides(), record).name == "unknown"


class TestScaleFactor:
    def test_default_is_exactly_one(self):
        assert merge(CLIOverrides(), RECORD).scale_factor == 1.0
        assert DEFAULT_SCALE_FACTOR == 1.0

    def test_cli_value_wins(self):
        assert merge(CLIOverrides(scale_factor=0.6), RECORD).scale_factor == 0.6

    def test_explicit_zero_is_not_absent(self):
        assert merge(CLIOverrides(scale_factor=0.0), None).scale_factor == 0.0

    def test_custom_default(self):
        assert merge(CLIOverrides(), None, default_scale=2.5).scale_factor == 2.5


class TestRegistryOnlyFields:
    def test_passed_through_from_record(self):
        params = merge(CLIOverrides(name="X"), RECORD)

        assert params.base_model_tag == "SDXL 1.0"
        assert params.trigger_words == ("style", "painting")

    def test_absent_without_record(self):
        params = merge(CLIOverrides(name="X"), None)

        assert params.base_model_tag is None
        assert params.trigger_words is None

    def test_partial_record_degrades_like_missing_record(self):
        partial = merge(CLIOverrides(), RegistryRecord(display_name=""))
        missing = merge(CLIOverrides(), None)

        assert partial == missing


class TestForcedVersion:
    def test_cli_version_forwarded(self):
        assert merge(CLIOverrides(version=ModelVersion.FLUX1), RECORD).forced_version is ModelVersion.FLUX1

    def test_absent_by_default(self):
        assert merge(CLIOverrides(), RECORD).forced_version is None


def test_merge_is_deterministic_and_frozen():
    overrides = CLIOverrides(name="X", scale_factor=0.8)

    first = merge(overrides, RECORD)
    assert first == merge(overrides, RECORD)
    assert first == ResolvedParameters(
        name="X",
        scale_factor=0.8,
        base_model_tag="SDXL 1.0",
        trigger_words=("style", "painting"),
        forced_version=None,
    )
    with pytest.raises(AttributeError):
        first.name = "Z"  # type: ignore[misc]
