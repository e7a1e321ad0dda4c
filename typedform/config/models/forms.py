"""Form casting and validation configuration."""

from pydantic import BaseModel, Field


class FormsConfig(BaseModel):
    """Casting and constraint-dispatch behavior shared by every form."""

    empty_values: list[str] = Field(
        default_factory=lambda: [""],
        description="Raw string values cast to None for every field type",
    )
    trim_strings: bool = Field(
        default=False,
        description="Strip surrounding whitespace from string input before casting",
    )
    strict_constraints: bool = Field(
        default=True,
        description="Raise on constraint signatures with no registered validator",
    )
