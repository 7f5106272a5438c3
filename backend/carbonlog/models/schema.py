"""Schema models describing the dynamic forms and the calculation tables.

Schema documents use camelCase keys (``conditionalShow``, ``emissionFactors``).
The models accept either those aliases or the snake_case attribute names and
are frozen: once loaded a schema does not change for the session.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from carbonlog.models.enums import FieldType


class SchemaModel(BaseModel):
    """Base for frozen, camelCase-aliased schema models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SelectOption(SchemaModel):
    """A value/label pair offered by a select field."""

    value: str
    label: str

    @field_validator("value", "label", mode="before")
    @classmethod
    def coerce_to_str(cls, v: object) -> object:
        # YAML decodes ``2024`` or ``01`` style values as numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class ConditionalShow(SchemaModel):
    """Show a field only when another field holds one of ``values``."""

    field: str
    values: tuple[str, ...]

    @field_validator("values", mode="before")
    @classmethod
    def coerce_values(cls, v: object) -> object:
        if isinstance(v, (list, tuple)):
            return tuple(str(item) for item in v)
        return v


class FormField(SchemaModel):
    """A single input in a form schema."""

    name: str = Field(min_length=1)
    label: str
    type: FieldType
    required: bool = False
    placeholder: str | None = None
    min: float | None = None
    max: float | None = None
    step: float | None = None
    rows: int | None = None
    options: tuple[SelectOption, ...] = ()
    conditional_show: ConditionalShow | None = None
    save_previous: bool = False

    @model_validator(mode="after")
    def select_has_options(self) -> FormField:
        if self.type == FieldType.SELECT and not self.options:
            msg = f"Select field '{self.name}' must declare at least one option"
            raise ValueError(msg)
        return self

    def option_values(self) -> list[str]:
        return [option.value for option in self.options]


class Section(SchemaModel):
    """A named, ordered group of fields."""

    name: str
    description: str | None = None
    fields: tuple[FormField, ...] = ()


class CalculationSchema(SchemaModel):
    """Constants for the linear emissions formula."""

    emission_factors: dict[str, float] = Field(default_factory=dict)
    condition_multipliers: dict[str, float] = Field(default_factory=dict)

    @field_validator("emission_factors", "condition_multipliers")
    @classmethod
    def must_be_positive(cls, v: dict[str, float]) -> dict[str, float]:
        for key, value in v.items():
            if value <= 0:
                msg = f"'{key}' must be positive, got {value}"
                raise ValueError(msg)
        return v


class FormSchema(SchemaModel):
    """The equipment entry form: sections of fields plus calculation tables."""

    title: str
    description: str = ""
    sections: tuple[Section, ...]
    calculations: CalculationSchema = Field(default_factory=CalculationSchema)

    @model_validator(mode="after")
    def field_names_unique(self) -> FormSchema:
        seen: set[str] = set()
        for field in self.iter_fields():
            if field.name in seen:
                msg = f"Duplicate field name '{field.name}'"
                raise ValueError(msg)
            seen.add(field.name)
        return self

    def iter_fields(self) -> Iterator[FormField]:
        """Yield every field of every section in schema order."""
        for section in self.sections:
            yield from section.fields

    def get_field(self, name: str) -> FormField | None:
        for field in self.iter_fields():
            if field.name == name:
                return field
        return None


class IdentificationSchema(SchemaModel):
    """The session identification form (text and select fields only)."""

    title: str
    description: str = ""
    fields: tuple[FormField, ...]

    @field_validator("fields")
    @classmethod
    def text_or_select_only(
        cls, v: tuple[FormField, ...]
    ) -> tuple[FormField, ...]:
        for field in v:
            if field.type not in (FieldType.TEXT, FieldType.SELECT):
                msg = (
                    f"Identification field '{field.name}' has unsupported "
                    f"type '{field.type}'"
                )
                raise ValueError(msg)
        return v

    def iter_fields(self) -> Iterator[FormField]:
        yield from self.fields
