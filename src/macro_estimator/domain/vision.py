"""Models for label and recipe photo extraction."""

from pydantic import BaseModel, Field, field_validator


class ParsedLabelRecord(BaseModel):
    """Macros read off a nutrition label or estimated from a recipe photo."""

    description: str | None = None
    serving_size: str | None = None
    serving_unit: str | None = None
    calories: float | None = Field(default=None, ge=0.0)
    protein_g: float = Field(default=0.0, ge=0.0)
    fat_g: float = Field(default=0.0, ge=0.0)
    carbs_g: float = Field(default=0.0, ge=0.0)

    @field_validator("protein_g", "fat_g", "carbs_g", mode="before")
    @classmethod
    def _missing_macro_is_zero(cls, value: object) -> object:
        return 0.0 if value is None else value

    @field_validator("serving_size", mode="before")
    @classmethod
    def _serving_size_as_text(cls, value: object) -> object:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return f"{value:g}"
        return value


class InlineImage(BaseModel):
    """Base64 image payload sent alongside a prompt."""

    mime_type: str
    data: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"
