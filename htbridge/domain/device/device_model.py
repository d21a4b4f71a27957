from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeatureMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    get_topic: Optional[str] = Field(None, alias="getTopic")
    set_topic: Optional[str] = Field(None, alias="setTopic")


class DeviceMeta(BaseModel):
    """Announcement payload published by a Hemtjanst device."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    topic: str
    name: str = ""
    type: str = ""
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = Field(None, alias="serialNumber")
    feature: Dict[str, FeatureMeta] = Field(default_factory=dict)

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, value: str) -> str:
        normalized = value.strip().strip("/")
        if not normalized:
            raise ValueError("topic must not be empty")
        return normalized

    @field_validator("feature", mode="before")
    @classmethod
    def default_features(cls, value):
        # Devices without features announce `"feature": null`.
        return value or {}
