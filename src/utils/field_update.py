"""Per-field update instructions for partial writes.

A partial payload has to tell apart three intents for every field:

* ``UNSET``: leave the stored value alone,
* ``CLEAR``: wipe the stored value,
* ``SetValue(v)``: store ``v`` (which may itself be an empty string).
"""
import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class _Marker(enum.Enum):
    UNSET = "unset"
    CLEAR = "clear"

    def __repr__(self) -> str:
        return self.name


UNSET = _Marker.UNSET
CLEAR = _Marker.CLEAR


@dataclass(frozen=True)
class SetValue(Generic[T]):
    value: T


FieldUpdate = Union[_Marker, SetValue[T]]


def from_payload(fields_set: set, name: str, value: Any) -> FieldUpdate:
    """Derive a field instruction from a parsed request body.

    ``fields_set`` holds the names the client actually sent; a sent ``null``
    means CLEAR, an absent key means UNSET.
    """
    if name not in fields_set:
        return UNSET
    if value is None:
        return CLEAR
    return SetValue(value)
