from pydantic import BaseModel, Field, field_validator


class ImageSearchExtraction(BaseModel):
    """
    Schema for search hints read from a car photo.
    """
    make: str = ""
    body_type: str = ""
    color: str = ""
    confidence: float = Field(0.0, ge=0.0, le=1.0)

    @field_validator("make", "body_type", "color", mode="before")
    @classmethod
    def to_text(cls, value):
        return "" if value is None else str(value)


class CarImageExtraction(BaseModel):
    """
    Schema for listing fields read from a car photo.
    """
    make: str
    model: str
    year: str
    color: str
    body_type: str
    mileage: str
    fuel_type: str
    transmission: str
    price: str
    description: str
    confidence: float = Field(..., ge=0.0, le=1.0)

    @field_validator(
        "make",
        "model",
        "year",
        "color",
        "body_type",
        "mileage",
        "fuel_type",
        "transmission",
        "price",
        "description",
        mode="before",
    )
    @classmethod
    def to_text(cls, value):
        return "" if value is None else str(value)
