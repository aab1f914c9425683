"""Unit tests for the configurator lookups."""

import pytest

from cleanstation.core.rules import configurator


class TestControlBoxSelection:
    """Tests for control box selection from the basin mix."""

    @pytest.mark.parametrize(
        "basins,expected",
        [
            ([{"basinType": "E_DRAIN"}], "T2-CTRL-EDR1"),
            ([{"basinType": "E_SINK"}], "T2-CTRL-ESK1"),
            ([{"basinType": "E_DRAIN"}, {"basinType": "E_SINK"}], "T2-CTRL-EDR1-ESK1"),
            ([{"basinType": "E_SINK_DI"}, {"basinType": "E_SINK"}], "T2-CTRL-ESK2"),
            ([{"basin_type_id": "T2-BSN-EDR-KIT"}, {"basinTypeId": "T2-BSN-EDR-KIT"}], "T2-CTRL-EDR2"),
            (
                [{"basinType": "E_DRAIN"}, {"basinType": "E_SINK"}, {"basinType": "E_SINK"}],
                "T2-CTRL-EDR1-ESK2",
            ),
        ],
    )
    def test_get_control_box(self, basins, expected):
        """E-Sink DI counts as an E-Sink and kits resolve to their kind."""
        result = configurator.get_control_box(basins)
        assert result is not None
        assert result["control_box_id"] == expected

    def test_get_control_box_reports_counts(self):
        """The response explains the mapping rule."""
        result = configurator.get_control_box([{"basinType": "E_DRAIN"}, {"basinType": "E_SINK"}])
        assert result["basin_configuration"] == {"e_drain_count": 1, "e_sink_count": 1}
        assert result["mapping_rule"] == "1 E-Drain + 1 E-Sink basins"

    def test_no_basins(self):
        """No basins means no control box."""
        assert configurator.get_control_box([]) is None

    def test_unsupported_mix(self):
        """Four E-Drains have no matching control box."""
        assert configurator.get_control_box([{"basinType": "E_DRAIN"}] * 4) is None


class TestOptionLookups:
    """Tests for the configuration wizard option lists."""

    def test_leg_types_are_grouped(self):
        """Legs split into height adjustable and fixed height groups."""
        legs = configurator.get_leg_types()
        assert [leg["id"] for leg in legs["height_adjustable"]] == ["T2-DL27-KIT", "T2-DL14-KIT", "T2-LC1-KIT"]
        assert all(not leg["is_height_adjustable"] for leg in legs["fixed_height"])
        assert len(legs["fixed_height"]) == 3

    def test_sink_models_for_unavailable_family(self):
        """Families under construction have no models."""
        assert configurator.get_sink_models("INSTROSINK") == []
        assert len(configurator.get_sink_models("MDRD")) == 3

    def test_pegboard_recommendation(self):
        """A sink length yields the covering pegboard size and its kits."""
        options = configurator.get_pegboard_options(width=30, length=50)
        recommended = options["recommended"]
        assert recommended["size"] == "4836"
        assert recommended["size_assembly_id"] == "T2-ADW-PB-4836"
        assert recommended["kits"] == {
            "PERFORATED": "T2-ADW-PB-4836-PERF-KIT",
            "SOLID": "T2-ADW-PB-4836-SOLID-KIT",
        }

    def test_pegboard_without_length(self):
        """Without a length no size is recommended."""
        options = configurator.get_pegboard_options()
        assert "recommended" not in options
        assert len(options["colors"]) == 8

    @pytest.mark.parametrize(
        "size_id,expected",
        [
            ("ASSY-T2-ADW-BASIN24X20X8", "24X20X8"),
            ("T2-ADW-BASIN30X20X10", "30X20X10"),
            ("CUSTOM", None),
        ],
    )
    def test_parse_basin_dimensions(self, size_id, expected):
        assert configurator.parse_basin_dimensions(size_id) == expected

    def test_di_faucet_is_default_for_di_basins(self):
        """The DI gooseneck faucet is preselected for E-Sink DI basins."""
        defaults = [f["id"] for f in configurator.get_faucet_type_options("E_SINK_DI") if f["is_default"]]
        assert defaults == ["T2-OA-DI-GOOSENECK-FAUCET-KIT"]
        assert not any(f["is_default"] for f in configurator.get_faucet_type_options("E_SINK"))

    def test_get_all_options(self):
        """The aggregate lookup carries every option group."""
        options = configurator.get_all_options()
        assert set(options) == {
            "sink_families",
            "sink_models",
            "leg_types",
            "feet_types",
            "pegboard_options",
            "basin_types",
            "basin_sizes",
            "basin_addons",
            "faucet_types",
            "sprayer_types",
        }
