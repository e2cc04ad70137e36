"""
Name normalization

Callers send either a single `name` or separate firstName/lastName.
Both shapes are reduced to one canonical record here. A missing half is
filled with the endpoint's placeholder instead of being rejected.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional, Union


@dataclass(frozen=True)
class FullName:
    text: str


@dataclass(frozen=True)
class NameParts:
    first: str = ""
    last: str = ""


NameInput = Union[FullName, NameParts]


class NormalizedName(NamedTuple):
    first_name: str
    last_name: str
    display_name: str


def name_input_from(
    name: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> NameInput:
    """A lone `name` is a FullName; any first/last part wins over it."""
    if name and not first_name and not last_name:
        return FullName(name)
    return NameParts(first_name or "", last_name or "")


def normalize_name(
    value: NameInput,
    first_placeholder: str = "User",
    last_placeholder: str = "User",
) -> NormalizedName:
    if isinstance(value, FullName):
        parts = value.text.strip().split(" ", 1)
        first = parts[0]
        last = parts[1] if len(parts) > 1 else ""
    else:
        first, last = value.first, value.last

    first = first or first_placeholder
    last = last or last_placeholder

    if isinstance(value, FullName):
        display = value.text.strip() or f"{first} {last}"
    else:
        # Raw parts only; placeholders show up in the display name when both are empty
        display = f"{value.first} {value.last}".strip() or f"{first} {last}"

    return NormalizedName(first, last, display)
