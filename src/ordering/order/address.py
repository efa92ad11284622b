"""Order address: either a single freeform line or structured parts."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from ordering.domain import ordering


class AddressKind(Enum):
    FREEFORM = "freeform"
    STRUCTURED = "structured"


_PARTS = ("street", "area", "city", "zone", "country")


@ordering.value_object(part_of="Order")
class OrderAddress:
    kind = String(required=True, choices=AddressKind)
    text = String(max_length=500)
    street = String(max_length=255)
    area = String(max_length=120)
    city = String(max_length=120)
    zone = String(max_length=120)
    country = String(max_length=80)

    @invariant.post
    def shape_must_match_kind(self):
        if self.kind == AddressKind.FREEFORM.value:
            if not (self.text or "").strip():
                raise ValidationError({"address": ["Freeform address requires text"]})
            if any(getattr(self, part) for part in _PARTS):
                raise ValidationError({"address": ["Freeform address cannot carry structured parts"]})
        elif not any(getattr(self, part) for part in _PARTS):
            raise ValidationError({"address": ["Structured address requires at least one part"]})

    @classmethod
    def freeform(cls, text: str) -> "OrderAddress":
        return cls(kind=AddressKind.FREEFORM.value, text=text.strip())

    @classmethod
    def structured(cls, street=None, area=None, city=None, zone=None, country=None) -> "OrderAddress":
        return cls(
            kind=AddressKind.STRUCTURED.value,
            street=street,
            area=area,
            city=city,
            zone=zone,
            country=country,
        )

    def as_payload(self) -> dict:
        if self.kind == AddressKind.FREEFORM.value:
            return {"kind": self.kind, "text": self.text}
        return {"kind": self.kind, **{part: getattr(self, part) for part in _PARTS}}


def render_address(address: OrderAddress | None) -> str:
    """Single display line for either address shape."""
    if address is None:
        return ""
    if address.kind == AddressKind.FREEFORM.value:
        return address.text
    return ", ".join(getattr(address, part) for part in _PARTS if getattr(address, part))
