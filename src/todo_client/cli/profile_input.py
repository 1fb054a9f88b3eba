# src/todo_client/cli/profile_input.py

"""Turn console arguments into profile fields (picture file, coordinates, plain text)."""

from __future__ import annotations

import base64
from pathlib import Path
from typing import Any

from ..session.models import Location

# Console key -> profile field name accepted by SessionManager.update_profile().
PROFILE_KEYS = {
    "name": "name",
    "phone": "phone",
    "address": "address",
    "document": "document_id",
    "document_id": "document_id",
    "picture": "profile_picture",
    "location": "location",
}


def encode_profile_picture(path: str | Path) -> str:
    """Read an image file into the data URL form the backend stores."""
    raw = Path(path).expanduser().read_bytes()
    return "data:image/jpeg;base64," + base64.b64encode(raw).decode("ascii")


def parse_location(raw: str) -> Location:
    """Parse "lat,lon" into a Location, validating the coordinate ranges."""
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 2:
        raise ValueError("location must look like <latitude>,<longitude>")
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise ValueError(f"invalid coordinates: {raw}") from e
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise ValueError(f"coordinates out of range: {raw}")
    return Location(latitude=lat, longitude=lon)


def parse_profile_args(args: list[str]) -> dict[str, Any]:
    """
    Parse ["name=Ana", "picture=~/me.jpg", "location=4.6,-74.1"] into update fields.

    Values may contain spaces if the console split them; a token without "="
    is glued onto the previous value.
    """
    pairs: list[list[str]] = []
    for arg in args:
        if "=" in arg:
            key, _, value = arg.partition("=")
            pairs.append([key.strip().lower(), value])
        elif pairs:
            pairs[-1][1] += " " + arg
        else:
            raise ValueError(f"expected key=value, got {arg!r}")

    fields: dict[str, Any] = {}
    for key, value in pairs:
        field = PROFILE_KEYS.get(key)
        if field is None:
            raise ValueError(f"unknown profile key: {key}")
        if field == "profile_picture":
            fields[field] = encode_profile_picture(value)
        elif field == "location":
            fields[field] = parse_location(value)
        else:
            fields[field] = value
    return fields
