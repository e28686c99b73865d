"""Normalised e-mail address used for accounts and establishment contacts."""

import re
from dataclasses import dataclass

from ..exceptions import ValidationError

_ADDRESS = re.compile(r'^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$')


@dataclass(frozen=True)
class Email:
    """Lower-cased, trimmed address. Compares equal to the raw string it was built from."""

    value: str

    def __post_init__(self):
        raw = (self.value or '').strip()
        if not raw:
            raise ValidationError("L'adresse e-mail est obligatoire.", "email")

        address = raw.lower()
        if not _ADDRESS.match(address):
            raise ValidationError(f"Adresse e-mail invalide : {raw}", "email")
        object.__setattr__(self, 'value', address)

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other) -> bool:
        if isinstance(other, str):
            other = other.strip().lower()
        elif isinstance(other, Email):
            other = other.value
        else:
            return NotImplemented
        return self.value == other

    def __hash__(self) -> int:
        return hash(self.value)
