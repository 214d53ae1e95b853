from pydantic import BaseModel, ConfigDict, Field, JsonValue, ValidationInfo, field_validator
from datetime import datetime
from enum import Enum


class Importance(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class WireModel(BaseModel):
    """Base for wire records: JSON null reads the same as an absent key."""

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value, info: ValidationInfo):
        if value is not None:
            return value
        field = cls.model_fields[info.field_name]
        # Required fields keep the null so validation still fails
        if field.is_required():
            return value
        return field.get_default(call_default_factory=True)


class Envelope(WireModel):
    """Generic universal message header, sniffed before full decoding."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    version: int = Field(default=0, alias="message_ver")
    type: str = Field(default="", alias="message_type")
    valid: bool = False

    @property
    def accepted(self) -> bool:
        """Whether the message is a valid version 1 event."""
        return self.type == "event" and self.version == 1 and self.valid


class EventSource(WireModel):
    key: str = ""
    label: str = ""
    value: str = ""
    url: str | None = None


class EventLocation(WireModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    address: str = ""


class EventDevice(WireModel):
    identifier: str = Field(default="", description='Either "imei" or "code"')
    imei: str = ""
    serial_no: str = ""
    firm_ver: str = ""
    type: str = ""
    model: str = ""
    url: str | None = None

    @property
    def primary_id(self) -> str:
        """The identifier selected by the ``identifier`` tag."""
        if self.identifier == "imei":
            return self.imei
        if self.identifier == "code":
            return self.serial_no
        return self.imei or self.serial_no


class DataField(WireModel):
    key: str = ""
    label: str = ""
    value: JsonValue = None
    url: str | None = None


class Event(Envelope):
    timestamp: datetime
    gateway: str = ""
    code: str = ""
    message: str = ""
    port: int = 0
    transmission: str = ""
    importance: str = Field(default="", description="high, medium or low")
    alert_level: int = Field(default=0, description="Nominal score 0..10")
    color: str = Field(default="", description="HTML color, e.g. #FF8000")
    state: str = Field(default="", description="start/end for paired events, empty when standalone")
    ticket: bool = False
    source: EventSource = Field(default_factory=EventSource)
    location: EventLocation | None = None
    device: EventDevice = Field(default_factory=EventDevice)
    data: list[DataField] = Field(default_factory=list)
    pools: list[str] = Field(default_factory=list)

    @property
    def importance_level(self) -> Importance | None:
        """Importance as an enum member, None for levels outside high/medium/low."""
        try:
            return Importance(self.importance.lower())
        except ValueError:
            return None
