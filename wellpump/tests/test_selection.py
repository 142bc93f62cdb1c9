"""Unit tests for total head, the bracketing matcher and the filter evaluator."""

import pytest

from wellpump.core.selection import (
    FilterCriteria,
    HydraulicInputs,
    apply_filters,
    find_bracketing_pumps,
    total_head,
)


def _pumps(*flows, **extra):
    return [
        {
            "id": i,
            "name": f"{flow}gpm",
            "gpm_value": flow,
            "efficiency_min": 100.0,
            "efficiency_max": 400.0,
            "head_ft": None,
            **extra,
        }
        for i, flow in enumerate(flows, start=1)
    ]


CATALOG = _pumps(5, 7, 10, 13, 18, 25)


def _flows(pumps):
    return [p["gpm_value"] for p in pumps]


# ── Tests: Total Head ─────────────────────────────────────────────────────


class TestTotalHead:

    def test_reference_point(self):
        assert total_head(60, 100, 7) == pytest.approx(245.6)

    def test_pressure_counted_once(self):
        assert total_head(10, 0, 0) == pytest.approx(23.1)

    def test_zero_inputs(self):
        assert total_head(0, 0, 0) == 0

    def test_negative_inputs_accepted(self):
        assert total_head(-10, 5, 5) == pytest.approx(-13.1)

    def test_deterministic(self):
        assert total_head(42.5, 80, 12) == total_head(42.5, 80, 12)

    def test_inputs_property(self):
        inputs = HydraulicInputs(pressure=60, static_water_level=100, pump_setting_depth=7, target_gpm=18)
        assert inputs.total_head == pytest.approx(245.6)


# ── Tests: Bracketing Matcher ─────────────────────────────────────────────


class TestBracketingMatcher:

    def test_exact_match_takes_next_above(self):
        assert _flows(find_bracketing_pumps(CATALOG, 18)) == [18, 25]

    def test_between_takes_below_and_above(self):
        assert _flows(find_bracketing_pumps(CATALOG, 20)) == [18, 25]

    def test_below_smallest(self):
        assert _flows(find_bracketing_pumps(CATALOG, 3)) == [5]

    def test_above_largest(self):
        assert _flows(find_bracketing_pumps(CATALOG, 80)) == [25]

    def test_exact_match_on_largest(self):
        assert _flows(find_bracketing_pumps(CATALOG, 25)) == [25]

    def test_exact_match_on_smallest(self):
        assert _flows(find_bracketing_pumps(CATALOG, 5)) == [5, 7]

    def test_fractional_target(self):
        assert _flows(find_bracketing_pumps(CATALOG, 12.5)) == [10, 13]

    def test_empty_catalog(self):
        assert find_bracketing_pumps([], 18) == []

    def test_single_pump(self):
        single = _pumps(10)
        assert _flows(find_bracketing_pumps(single, 3)) == [10]
        assert _flows(find_bracketing_pumps(single, 10)) == [10]
        assert _flows(find_bracketing_pumps(single, 30)) == [10]

    def test_duplicate_flows_skip_to_strictly_greater(self):
        pumps = _pumps(5, 18, 18, 25)
        result = find_bracketing_pumps(pumps, 18)
        assert _flows(result) == [18, 25]
        assert result[0]["id"] == 2

    def test_never_more_than_two(self):
        for target in range(0, 40):
            result = find_bracketing_pumps(CATALOG, target)
            assert 1 <= len(result) <= 2
            assert _flows(result) == sorted(_flows(result))


# ── Tests: Filter Evaluator ───────────────────────────────────────────────


class TestFilters:

    def test_default_keeps_everything(self):
        criteria = FilterCriteria()
        assert criteria.is_default()
        assert apply_filters(CATALOG, criteria) == CATALOG

    def test_gpm_window(self):
        result = apply_filters(CATALOG, FilterCriteria(gpm_min=7, gpm_max=13))
        assert _flows(result) == [7, 10, 13]

    def test_gpm_single_bound(self):
        assert _flows(apply_filters(CATALOG, FilterCriteria(gpm_min=18))) == [18, 25]

    def test_target_gpm_tolerance_inclusive(self):
        result = apply_filters(CATALOG, FilterCriteria(target_gpm=13))
        assert _flows(result) == [10, 13, 18]

    def test_efficiency_containment(self):
        pumps = _pumps(5, 7, 10)
        pumps[0].update(efficiency_min=50.0, efficiency_max=300.0)
        pumps[1].update(efficiency_min=120.0, efficiency_max=300.0)
        pumps[2].update(efficiency_min=120.0, efficiency_max=500.0)

        result = apply_filters(pumps, FilterCriteria(efficiency_min=100, efficiency_max=400))

        assert _flows(result) == [7]

    def test_head_tolerance(self):
        pumps = _pumps(5, 7, 10, 13)
        pumps[0]["head_ft"] = 300.0
        pumps[1]["head_ft"] = 275.0
        pumps[2]["head_ft"] = 274.0
        # pumps[3] has no rated head

        result = apply_filters(pumps, FilterCriteria(target_head=300))

        assert _flows(result) == [5, 7]

    def test_search_on_name_or_flow(self):
        pumps = _pumps(18, 20, 118)
        pumps[1]["name"] = "Deep Well 18"
        pumps[2]["name"] = "Shallow"

        result = apply_filters(pumps, FilterCriteria(search_text="18"))

        assert _flows(result) == [18, 20, 118]

    def test_search_case_insensitive(self):
        assert _flows(apply_filters(CATALOG, FilterCriteria(search_text="25GPM"))) == [25]

    def test_predicates_are_conjunctive(self):
        criteria = FilterCriteria(gpm_min=5, gpm_max=20, target_gpm=20, search_text="1")
        assert _flows(apply_filters(CATALOG, criteria)) == [18]

    def test_show_images_does_not_filter(self):
        assert apply_filters(CATALOG, FilterCriteria(show_images=False)) == CATALOG

    def test_order_preserved(self):
        shuffled = [CATALOG[3], CATALOG[0], CATALOG[5]]
        assert apply_filters(shuffled, FilterCriteria(gpm_min=0)) == shuffled
