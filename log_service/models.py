import json
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import InvalidPayloadError

_DECODER = json.JSONDecoder()


def _replace_lone_surrogates(value: str) -> str:
    """Swap unpaired UTF-16 surrogates (from \\ud800-style escapes) for U+FFFD."""
    return value.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")


class DeviceRecord(BaseModel):
    """One device registration as posted by a client"""

    # Missing keys decode to "", unknown keys are dropped, numbers are not coerced
    model_config = ConfigDict(extra="ignore", strict=True)

    DeviceName: str = ""
    DeviceType: str = ""
    IPAddress: str = ""
    RoutingType: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _utf8_safe(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _replace_lone_surrogates(value)
        return value

    @classmethod
    def _match_fields(cls, payload: Dict[str, Any]) -> Dict[str, Any]:
        # keys match field names case-insensitively, later keys win, null leaves the field empty
        names = {name.lower(): name for name in cls.model_fields}
        matched = {}
        for key, value in payload.items():
            name = names.get(key.lower())
            if name is None or value is None:
                continue
            matched[name] = value
        return matched

    @classmethod
    def from_json(cls, raw: Union[bytes, str]) -> 'DeviceRecord':
        """Decode the first JSON value of a request body into a record.

        A top-level null yields an empty record; anything after the first value
        is ignored. Non-object documents and non-string fields raise
        InvalidPayloadError.
        """
        text = raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw
        try:
            payload, _ = _DECODER.raw_decode(text.lstrip(" \t\r\n"))
        except json.JSONDecodeError as e:
            raise InvalidPayloadError(str(e)) from e
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise InvalidPayloadError(f"expected a JSON object, got {type(payload).__name__}")
        try:
            return cls.model_validate(cls._match_fields(payload))
        except ValidationError as e:
            raise InvalidPayloadError(str(e)) from e

    def log_line(self, timestamp: str) -> str:
        return (
            f"[{timestamp}] Name={self.DeviceName}, Type={self.DeviceType}, "
            f"IP={self.IPAddress}, Routing={self.RoutingType}\n"
        )
