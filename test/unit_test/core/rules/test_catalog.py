"""Unit tests for the packaged catalog rule data."""

import pytest
from pydantic import ValidationError

from cleanstation.core.models.domain.enums import BasinKind
from cleanstation.core.rules import load_rules, parse_rules


class TestLoadRules:
    """Tests for loading the packaged rule document."""

    def test_load_rules_is_cached(self):
        """The rule document is parsed once per process."""
        assert load_rules() is load_rules()

    def test_rules_reference_every_basin_kind(self, rules):
        """Every basin kind maps to a kit."""
        assert {basin.kind for basin in rules.basin_types} == set(BasinKind)

    def test_parse_rules_rejects_incomplete_document(self):
        """A document missing required sections fails validation."""
        with pytest.raises(ValidationError):
            parse_rules('{"version": "broken"}')


class TestCatalogRuleLookups:
    """Tests for the lookup helpers on CatalogRules."""

    @pytest.mark.parametrize(
        "length,expected",
        [
            (48, "T2-BODY-48-60-HA"),
            (60, "T2-BODY-48-60-HA"),
            (61, "T2-BODY-61-72-HA"),
            (72, "T2-BODY-61-72-HA"),
            (120, "T2-BODY-73-120-HA"),
        ],
    )
    def test_sink_body_for_length(self, rules, length, expected):
        """Sink bodies are chosen by inclusive length range."""
        assert rules.sink_body_for_length(length).id == expected

    @pytest.mark.parametrize("length", [47, 121])
    def test_sink_body_out_of_range(self, rules, length):
        """Lengths outside 48-120 have no body."""
        assert rules.sink_body_for_length(length) is None

    @pytest.mark.parametrize(
        "language,expected",
        [
            ("EN", "T2-STD-MANUAL-EN-KIT"),
            ("FR", "T2-STD-MANUAL-FR-KIT"),
            ("ES", "T2-STD-MANUAL-SP-KIT"),
            (None, "T2-STD-MANUAL-EN-KIT"),
            ("DE", "T2-STD-MANUAL-EN-KIT"),
        ],
    )
    def test_manual_kit(self, rules, language, expected):
        """Manual kits follow the order language and fall back to English."""
        assert rules.manual_kit(language) == expected

    def test_height_adjustable_legs(self, rules):
        """Fixed height kits carry the -FH- marker."""
        assert rules.is_height_adjustable("T2-DL27-KIT")
        assert not rules.is_height_adjustable("T2-DL27-FH-KIT")

    def test_control_box_for_counts(self, rules):
        """Control boxes are keyed by E-Drain and E-Sink counts."""
        assert rules.control_box_for_counts(1, 1).id == "T2-CTRL-EDR1-ESK1"
        assert rules.control_box_for_counts(2, 1).id == "T2-CTRL-EDR2-ESK1"
        assert rules.control_box_for_counts(4, 0) is None

    def test_expected_basin_count(self, rules):
        """Sink models define how many basins a complete configuration has."""
        assert rules.expected_basin_count("T2-B3") == 3
        assert rules.expected_basin_count("UNKNOWN") == 0

    def test_pegboard_size_for_long_sink_uses_largest(self, rules):
        """Sinks longer than every range get the largest pegboard."""
        assert rules.pegboard.covering_size(200) is None
        assert rules.pegboard.size_for_length(200).size == "12036"
