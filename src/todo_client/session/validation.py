# src/todo_client/session/validation.py

"""Credential checks run by the front end before anything is sent to the server."""

from __future__ import annotations

import re
from dataclasses import dataclass

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
_SPECIAL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def validate_email(email: str) -> bool:
    return len(email) > 0 and _EMAIL_RE.search(email) is not None


@dataclass(frozen=True, slots=True)
class PasswordRequirements:
    length: bool
    uppercase: bool
    lowercase: bool
    number: bool
    special: bool

    @property
    def all_met(self) -> bool:
        return self.length and self.uppercase and self.lowercase and self.number and self.special

    def missing(self) -> list[str]:
        labels = {
            "length": "at least 8 characters",
            "uppercase": "an uppercase letter",
            "lowercase": "a lowercase letter",
            "number": "a number",
            "special": "a special character",
        }
        return [text for name, text in labels.items() if not getattr(self, name)]


def validate_password(password: str) -> PasswordRequirements:
    return PasswordRequirements(
        length=len(password) >= 8,
        uppercase=re.search(r"[A-Z]", password) is not None,
        lowercase=re.search(r"[a-z]", password) is not None,
        number=re.search(r"[0-9]", password) is not None,
        special=_SPECIAL_RE.search(password) is not None,
    )
