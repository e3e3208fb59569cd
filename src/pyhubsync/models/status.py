"""Hub status payload and per-device state models."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, ValidationError

from pyhubsync.exceptions import HubSyncPayloadError


def to_snapshot(values: Iterable[float | bool]) -> str:
    """Render on/off values as the hub's ``'0'``/``'1'`` bitstring.

    Only values equal to ``1`` (or ``True``) count as on.
    """
    return "".join("1" if value == 1 else "0" for value in values)


class DeviceState(BaseModel):
    """On/off state of a single device slot."""

    model_config = ConfigDict(extra="forbid")

    index: int = Field(..., ge=0)
    is_on: bool = False


class StatusPayload(BaseModel):
    """Full state vector as exchanged with the hub: ``{"st": [0|1, ...]}``.

    Entries must be JSON numbers; only a value equal to ``1`` means on.
    Strings, booleans and nulls are rejected. Unknown top-level keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    st: list[StrictInt | StrictFloat]

    @classmethod
    def parse_for(cls, body: str | bytes, device_count: int) -> StatusPayload:
        """Parse a JSON body and check it carries exactly *device_count* entries.

        Raises :class:`HubSyncPayloadError` on malformed JSON, bad entries
        or a length mismatch.
        """
        try:
            payload = cls.model_validate_json(body)
        except ValidationError as exc:
            raise HubSyncPayloadError(f"Invalid status payload: {exc.error_count()} error(s)") from exc
        if len(payload.st) != device_count:
            raise HubSyncPayloadError(f"Status payload has {len(payload.st)} entries, expected {device_count}")
        return payload

    def snapshot(self) -> str:
        return to_snapshot(self.st)
