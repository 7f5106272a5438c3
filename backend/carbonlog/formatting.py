"""Formatting helpers for emissions output.

Provides the human-readable strings the UI shows next to entries and in
the submission overview (e.g. '1,072.00 kg CO₂' and '03/2025').
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from carbonlog.models.entry import Entry, Identification


def format_bound(value: float) -> str:
    """Format a schema min/max bound without a spurious '.0'."""
    if value.is_integer():
        return str(int(value))
    return str(value)


def format_emissions(kg: float) -> str:
    """Format an emissions amount in kilograms of CO₂, two decimals."""
    return f"{kg:,.2f} kg CO₂"


def format_period(identification: Identification) -> str:
    """Format the reporting period as 'MM/YYYY'."""
    return f"{identification.reporting_month}/{identification.reporting_year}"


def format_entry_label(entry: Entry) -> str:
    """Short label for an entry: '<equipment type> - <model>'."""
    equipment_type = entry.data.get("equipmentType") or "Unknown"
    model = entry.data.get("equipmentModel") or "N/A"
    return f"{equipment_type} - {model}"


def format_consumption(entry: Entry) -> str:
    """Consumption with its unit, liters for fuel and kWh for electricity."""
    fuel = entry.data.get("fuelConsumption")
    if fuel:
        return f"{fuel}L"
    electricity = entry.data.get("electricityConsumption")
    if electricity:
        return f"{electricity}kWh"
    return "N/A"
