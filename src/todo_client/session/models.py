# src/todo_client/session/models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Python attribute -> wire name for editable profile fields.
PROFILE_FIELDS: dict[str, str] = {
    "name": "name",
    "profile_picture": "profilePicture",
    "phone": "phone",
    "address": "address",
    "document_id": "documentId",
    "location": "location",
}


@dataclass(frozen=True, slots=True)
class Location:
    latitude: float
    longitude: float

    @classmethod
    def from_api(cls, data: Any) -> Location:
        if not isinstance(data, dict):
            raise ValueError("location must be an object")
        try:
            return cls(latitude=float(data["latitude"]), longitude=float(data["longitude"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid location: {data!r}") from e

    def to_api(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


def _opt_str(data: dict[str, Any], key: str) -> str | None:
    val = data.get(key)
    if val is None:
        return None
    if not isinstance(val, str):
        raise ValueError(f"{key} must be a string")
    return val


@dataclass(slots=True)
class User:
    id: int
    email: str
    name: str | None = None
    profile_picture: str | None = None
    phone: str | None = None
    address: str | None = None
    document_id: str | None = None
    location: Location | None = None

    @classmethod
    def from_api(cls, data: Any) -> User:
        if not isinstance(data, dict):
            raise ValueError(f"Expected user object, got {type(data).__name__}")

        raw_id = data.get("id")
        if not isinstance(raw_id, int) or isinstance(raw_id, bool):
            raise ValueError(f"User id must be an integer, got {raw_id!r}")

        email = data.get("email")
        if not isinstance(email, str) or not email:
            raise ValueError("User email is missing")

        loc = data.get("location")
        return cls(
            id=raw_id,
            email=email,
            name=_opt_str(data, "name"),
            profile_picture=_opt_str(data, "profilePicture"),
            phone=_opt_str(data, "phone"),
            address=_opt_str(data, "address"),
            document_id=_opt_str(data, "documentId"),
            location=Location.from_api(loc) if loc is not None else None,
        )

    @property
    def display_name(self) -> str:
        return self.name or self.email


def profile_payload(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Translate a partial profile update into its wire form.

    Accepts both Python names (document_id) and wire names (documentId).
    Unknown keys raise ValueError so nothing half-valid is sent.
    """
    wire_names = set(PROFILE_FIELDS.values())
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if key in PROFILE_FIELDS:
            wire = PROFILE_FIELDS[key]
        elif key in wire_names:
            wire = key
        else:
            raise ValueError(f"Unknown profile field: {key}")

        if isinstance(value, Location):
            value = value.to_api()
        out[wire] = value
    return out
