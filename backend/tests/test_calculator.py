"""Tests for the EmissionsCalculator and the linear emissions formula."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from carbonlog.calculator import EmissionsCalculator, round2, total_emissions
from carbonlog.data.defaults import DEFAULT_FORM_SCHEMA
from carbonlog.models.entry import EmissionsResult, Entry
from carbonlog.models.schema import CalculationSchema


@pytest.fixture()
def calculator() -> EmissionsCalculator:
    """Calculator wired to the built-in calculation tables."""
    return EmissionsCalculator(DEFAULT_FORM_SCHEMA.calculations)


def _entry(entry_id: int, total: float | None) -> Entry:
    footprint = None
    if total is not None:
        footprint = EmissionsResult(
            total_emissions=total,
            emission_factor=1.0,
            condition_multiplier=1.0,
            base_consumption=total,
            operation_hours=1.0,
        )
    return Entry(id=entry_id, data={}, carbon_footprint=footprint)


# ---------------------------------------------------------------------------
# Worked examples
# ---------------------------------------------------------------------------


class TestWorkedExamples:
    def test_diesel_normal_conditions(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {
                "fuelType": "diesel",
                "fuelConsumption": "50",
                "operationHours": "8",
                "operatingConditions": "normal",
            }
        )
        # 50 * 2.68 * 1.0 * 8
        assert result.total_emissions == 1072.00
        assert result.emission_factor == 2.68
        assert result.condition_multiplier == 1.0
        assert result.base_consumption == 50.0
        assert result.operation_hours == 8.0

    def test_hybrid_uses_electric_factor(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {
                "fuelType": "hybrid",
                "electricityConsumption": "20",
                "operationHours": "5",
                "operatingConditions": "heavy",
            }
        )
        # 20 * 0.5 * 1.3 * 5, not the 1.0 listed under "hybrid"
        assert result.total_emissions == 65.00
        assert result.emission_factor == 0.5
        assert result.condition_multiplier == 1.3

    def test_unknown_fuel_resolves_to_zero(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {
                "fuelType": "unknownFuel",
                "fuelConsumption": "100",
                "operationHours": "3",
            }
        )
        assert result.total_emissions == 0.0
        assert result.emission_factor == 0.0
        assert result.base_consumption == 0.0


# ---------------------------------------------------------------------------
# Fuel resolution
# ---------------------------------------------------------------------------


class TestFuelResolution:
    def test_electric_reads_electricity_consumption(
        self, calculator: EmissionsCalculator
    ) -> None:
        result = calculator.calculate(
            {
                "fuelType": "electric",
                "fuelConsumption": "999",
                "electricityConsumption": "10",
                "operationHours": "2",
            }
        )
        assert result.base_consumption == 10.0
        assert result.total_emissions == 10.0

    def test_combustion_fuel_reads_fuel_consumption(
        self, calculator: EmissionsCalculator
    ) -> None:
        result = calculator.calculate(
            {
                "fuelType": "gasoline",
                "fuelConsumption": "10",
                "electricityConsumption": "999",
                "operationHours": "1",
            }
        )
        assert result.base_consumption == 10.0
        assert result.total_emissions == 23.10

    def test_missing_fuel_type(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate({"fuelConsumption": "10", "operationHours": "1"})
        assert result.total_emissions == 0.0

    def test_missing_electric_factor_defaults_to_zero(self) -> None:
        calculator = EmissionsCalculator(
            CalculationSchema(emission_factors={"diesel": 2.68})
        )
        result = calculator.calculate(
            {"fuelType": "electric", "electricityConsumption": "10", "operationHours": "1"}
        )
        assert result.emission_factor == 0.0
        assert result.total_emissions == 0.0


# ---------------------------------------------------------------------------
# Condition multipliers
# ---------------------------------------------------------------------------


class TestConditionMultiplier:
    def test_blank_condition_means_normal(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {"fuelType": "diesel", "fuelConsumption": "1", "operationHours": "1"}
        )
        assert result.condition_multiplier == 1.0

    def test_unknown_condition_is_neutral(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {
                "fuelType": "diesel",
                "fuelConsumption": "1",
                "operationHours": "1",
                "operatingConditions": "apocalyptic",
            }
        )
        assert result.condition_multiplier == 1.0
        assert result.total_emissions == 2.68

    def test_missing_normal_key_is_neutral(self) -> None:
        calculator = EmissionsCalculator(
            CalculationSchema(
                emission_factors={"diesel": 2.0},
                condition_multipliers={"heavy": 1.5},
            )
        )
        result = calculator.calculate(
            {"fuelType": "diesel", "fuelConsumption": "3", "operationHours": "2"}
        )
        assert result.condition_multiplier == 1.0
        assert result.total_emissions == 12.0

    def test_light_conditions(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {
                "fuelType": "diesel",
                "fuelConsumption": "10",
                "operationHours": "1",
                "operatingConditions": "light",
            }
        )
        assert result.total_emissions == pytest.approx(21.44)


# ---------------------------------------------------------------------------
# Malformed input
# ---------------------------------------------------------------------------


class TestMalformedInput:
    def test_non_numeric_consumption_is_zero(
        self, calculator: EmissionsCalculator
    ) -> None:
        result = calculator.calculate(
            {"fuelType": "diesel", "fuelConsumption": "lots", "operationHours": "8"}
        )
        assert result.base_consumption == 0.0
        assert result.total_emissions == 0.0

    def test_non_numeric_hours_is_zero(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {"fuelType": "diesel", "fuelConsumption": "50", "operationHours": "all day"}
        )
        assert result.operation_hours == 0.0
        assert result.total_emissions == 0.0

    def test_empty_values(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate({})
        assert result.total_emissions == 0.0
        assert result.condition_multiplier == 1.0

    def test_nan_is_not_a_number(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {"fuelType": "diesel", "fuelConsumption": "nan", "operationHours": "1"}
        )
        assert result.total_emissions == 0.0

    def test_leading_number_is_used(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate(
            {"fuelType": "diesel", "fuelConsumption": "50L", "operationHours": "8h"}
        )
        assert result.base_consumption == 50.0
        assert result.operation_hours == 8.0
        assert result.total_emissions == 1072.0

    def test_non_text_fuel_type_is_unknown(
        self, calculator: EmissionsCalculator
    ) -> None:
        result = calculator.calculate(
            {"fuelType": ["diesel"], "fuelConsumption": "50", "operationHours": "8"}
        )
        assert result.emission_factor == 0.0
        assert result.total_emissions == 0.0


# ---------------------------------------------------------------------------
# Purity and rounding
# ---------------------------------------------------------------------------


class TestPurity:
    def test_identical_inputs_identical_results(
        self, calculator: EmissionsCalculator
    ) -> None:
        values = {
            "fuelType": "diesel",
            "fuelConsumption": "33.3",
            "operationHours": "7.7",
            "operatingConditions": "extreme",
        }
        first = calculator.calculate(values)
        second = calculator.calculate(dict(values))
        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_does_not_mutate_values(self, calculator: EmissionsCalculator) -> None:
        values = {"fuelType": "diesel", "fuelConsumption": "1", "operationHours": "1"}
        snapshot = dict(values)
        calculator.calculate(values)
        assert values == snapshot

    def test_result_is_frozen(self, calculator: EmissionsCalculator) -> None:
        result = calculator.calculate({})
        with pytest.raises(ValidationError):
            result.total_emissions = 5.0  # type: ignore[misc]


class TestRound2:
    def test_rounds_half_up(self) -> None:
        assert round2(2.675) == 2.68
        assert round2(0.125) == 0.13

    def test_strips_float_noise(self) -> None:
        assert round2(50 * 2.68 * 8) == 1072.0

    def test_zero(self) -> None:
        assert round2(0) == 0.0


# ---------------------------------------------------------------------------
# Preview eligibility
# ---------------------------------------------------------------------------


class TestPreview:
    def test_preview_needs_fuel_consumption_and_hours(
        self, calculator: EmissionsCalculator
    ) -> None:
        assert calculator.preview({"fuelType": "diesel"}) is None
        assert calculator.preview({"fuelType": "diesel", "fuelConsumption": "5"}) is None
        assert (
            calculator.preview({"fuelConsumption": "5", "operationHours": "2"}) is None
        )

    def test_preview_with_electricity(self, calculator: EmissionsCalculator) -> None:
        result = calculator.preview(
            {"fuelType": "electric", "electricityConsumption": "4", "operationHours": "2"}
        )
        assert result is not None
        assert result.total_emissions == 4.0

    def test_preview_matches_calculate(self, calculator: EmissionsCalculator) -> None:
        values = {"fuelType": "diesel", "fuelConsumption": "50", "operationHours": "8"}
        assert calculator.preview(values) == calculator.calculate(values)

    def test_blank_strings_do_not_count(self, calculator: EmissionsCalculator) -> None:
        values = {"fuelType": "diesel", "fuelConsumption": "  ", "operationHours": "8"}
        assert calculator.should_preview(values) is False


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


class TestTotalEmissions:
    def test_sums_footprints(self) -> None:
        entries = [_entry(1, 1072.0), _entry(2, 65.0), _entry(3, 0.1)]
        assert total_emissions(entries) == 1137.1

    def test_missing_footprint_counts_zero(self) -> None:
        assert total_emissions([_entry(1, 10.5), _entry(2, None)]) == 10.5

    def test_empty(self) -> None:
        assert total_emissions([]) == 0.0
