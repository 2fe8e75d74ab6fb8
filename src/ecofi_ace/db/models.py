"""Data models describing how Ecofi columns map onto ACE fields."""

from pydantic import BaseModel, ConfigDict, Field


class FieldMapping(BaseModel):
    """One entry of a rename table: an Ecofi column and its ACE field."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(min_length=1, description="Column name in the Ecofi table")
    ace: str = Field(min_length=1, description="ACE variable name")
    description: str = Field(default="", description="Meaning of the value")
    units: str = Field(default="", description="Units of the emitted ACE value")
    transform: str = Field(
        default="", description="Conversion applied on the way to ACE, if any"
    )
