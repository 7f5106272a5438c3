"""Built-in schemas used when a schema document cannot be loaded."""

from carbonlog.models.enums import FieldType
from carbonlog.models.schema import (
    CalculationSchema,
    FormField,
    FormSchema,
    IdentificationSchema,
    Section,
    SelectOption,
)

_MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

DEFAULT_FORM_SCHEMA = FormSchema(
    title="Carbon Footprint Equipment Logger",
    description=(
        "Track and monitor the carbon footprint of various machinery "
        "and equipment"
    ),
    sections=(
        Section(
            name="Equipment Information",
            description="Basic information about the equipment",
            fields=(
                FormField(
                    name="equipmentType",
                    label="Equipment Type",
                    type=FieldType.SELECT,
                    required=True,
                    options=(
                        SelectOption(value="excavator", label="Excavator"),
                        SelectOption(value="crane", label="Crane"),
                        SelectOption(value="forklift", label="Forklift"),
                        SelectOption(value="truck", label="Truck"),
                        SelectOption(value="generator", label="Generator"),
                        SelectOption(value="other", label="Other"),
                    ),
                ),
                FormField(
                    name="equipmentModel",
                    label="Equipment Model/Brand",
                    type=FieldType.TEXT,
                    required=True,
                    placeholder="e.g., Caterpillar 320D, Volvo EC140D",
                ),
                FormField(
                    name="equipmentId",
                    label="Equipment ID/Serial Number",
                    type=FieldType.TEXT,
                    required=True,
                    placeholder="Unique identifier for tracking",
                ),
            ),
        ),
        Section(
            name="Usage Information",
            description="Details about equipment usage",
            fields=(
                FormField(
                    name="operationDate",
                    label="Operation Date",
                    type=FieldType.DATE,
                    required=True,
                ),
                FormField(
                    name="operationHours",
                    label="Hours of Operation",
                    type=FieldType.NUMBER,
                    required=True,
                    min=0,
                    max=24,
                    step=0.1,
                    placeholder="Hours worked during the day",
                ),
                FormField(
                    name="fuelType",
                    label="Fuel Type",
                    type=FieldType.SELECT,
                    required=True,
                    options=(
                        SelectOption(value="diesel", label="Diesel"),
                        SelectOption(value="gasoline", label="Gasoline"),
                        SelectOption(value="electric", label="Electric"),
                        SelectOption(value="hybrid", label="Hybrid"),
                    ),
                ),
                FormField(
                    name="fuelConsumption",
                    label="Fuel Consumption (Liters)",
                    type=FieldType.NUMBER,
                    required=True,
                    min=0,
                    step=0.1,
                    placeholder="Liters consumed",
                ),
            ),
        ),
    ),
    calculations=CalculationSchema(
        emission_factors={
            "diesel": 2.68,
            "gasoline": 2.31,
            "electric": 0.5,
            "hybrid": 1.0,
        },
        condition_multipliers={
            "light": 0.8,
            "normal": 1.0,
            "heavy": 1.3,
            "extreme": 1.6,
        },
    ),
)

DEFAULT_IDENTIFICATION_SCHEMA = IdentificationSchema(
    title="Project Identification",
    description=(
        "Please provide the following information to identify your project "
        "and reporting period"
    ),
    fields=(
        FormField(
            name="company",
            label="Company Name",
            type=FieldType.TEXT,
            required=True,
            placeholder="Enter your company name",
            save_previous=True,
        ),
        FormField(
            name="reporter",
            label="Reporter Name",
            type=FieldType.TEXT,
            required=True,
            placeholder="Enter reporter's full name",
            save_previous=True,
        ),
        FormField(
            name="project",
            label="Project Name",
            type=FieldType.TEXT,
            required=True,
            placeholder="Enter project name or identifier",
            save_previous=True,
        ),
        FormField(
            name="reportingMonth",
            label="Reporting Month",
            type=FieldType.SELECT,
            required=True,
            options=tuple(
                SelectOption(value=f"{number:02d}", label=month)
                for number, month in enumerate(_MONTHS, start=1)
            ),
        ),
        FormField(
            name="reportingYear",
            label="Reporting Year",
            type=FieldType.SELECT,
            required=True,
            options=(
                SelectOption(value="2024", label="2024"),
                SelectOption(value="2023", label="2023"),
                SelectOption(value="2025", label="2025"),
            ),
        ),
    ),
)
