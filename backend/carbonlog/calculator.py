"""Emissions calculator for carbonlog.

The estimate is a single linear formula over the schema's calculation
tables::

    total = consumption * emission_factor * condition_multiplier * hours

1. **Fuel resolution**: electric and hybrid equipment read
   ``electricityConsumption`` and use the ``electric`` factor (hybrid
   reuses it as-is). Any other fuel listed in ``emissionFactors`` reads
   ``fuelConsumption`` and uses its own factor. Unknown fuels resolve to a
   zero factor.
2. **Operating conditions**: ``operatingConditions`` selects a multiplier,
   ``normal`` when blank, 1.0 when the key is not in the table.
3. **Hours**: ``operationHours``.
4. **Rounding**: the product is rounded half-up to two decimals.

Unparseable numbers count as 0. The calculator never raises on user input,
so it can run on every field change for the live preview and again when
the entry is committed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from carbonlog.coercion import is_blank, parse_number_or
from carbonlog.models.entry import EmissionsResult

if TYPE_CHECKING:
    from carbonlog.models.entry import Entry
    from carbonlog.models.schema import CalculationSchema

ELECTRIC_FUEL_TYPES = frozenset({"electric", "hybrid"})
ELECTRIC_FACTOR_KEY = "electric"
DEFAULT_CONDITION = "normal"
NEUTRAL_MULTIPLIER = 1.0


def round2(value: float) -> float:
    """Round half-up to two decimal places."""
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), ROUND_HALF_UP))


class EmissionsCalculator:
    """Computes emissions estimates from raw form values.

    Args:
        calculations: Emission factors and condition multipliers from the
            form schema.
    """

    def __init__(self, calculations: CalculationSchema) -> None:
        self._calculations = calculations

    def calculate(self, values: Mapping[str, object]) -> EmissionsResult:
        """Compute the emissions estimate for one set of form values."""
        factors = self._calculations.emission_factors
        fuel_type = values.get("fuelType")
        if not isinstance(fuel_type, str):
            fuel_type = ""

        if fuel_type in ELECTRIC_FUEL_TYPES:
            consumption = parse_number_or(values.get("electricityConsumption"), 0.0)
            factor = factors.get(ELECTRIC_FACTOR_KEY, 0.0)
        elif fuel_type in factors:
            consumption = parse_number_or(values.get("fuelConsumption"), 0.0)
            factor = factors[fuel_type]
        else:
            consumption = 0.0
            factor = 0.0

        multiplier = self._condition_multiplier(values.get("operatingConditions"))
        hours = parse_number_or(values.get("operationHours"), 0.0)

        return EmissionsResult(
            total_emissions=round2(consumption * factor * multiplier * hours),
            emission_factor=factor,
            condition_multiplier=multiplier,
            base_consumption=consumption,
            operation_hours=hours,
        )

    def should_preview(self, values: Mapping[str, object]) -> bool:
        """Whether enough is filled in for a meaningful live preview."""
        has_consumption = not (
            is_blank(values.get("fuelConsumption"))
            and is_blank(values.get("electricityConsumption"))
        )
        return (
            not is_blank(values.get("fuelType"))
            and has_consumption
            and not is_blank(values.get("operationHours"))
        )

    def preview(self, values: Mapping[str, object]) -> EmissionsResult | None:
        """Live-preview estimate, or None until the key fields are filled."""
        if not self.should_preview(values):
            return None
        return self.calculate(values)

    def _condition_multiplier(self, condition: object) -> float:
        key = DEFAULT_CONDITION if is_blank(condition) else str(condition)
        return self._calculations.condition_multipliers.get(key, NEUTRAL_MULTIPLIER)


def total_emissions(entries: Iterable[Entry]) -> float:
    """Sum of the entries' emissions; entries without a footprint count 0."""
    total = sum(
        entry.carbon_footprint.total_emissions
        for entry in entries
        if entry.carbon_footprint is not None
    )
    return round2(total)
