"""Domain events for the Special aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from promotions.domain import promotions


@promotions.event(part_of="Special")
class SpecialSaved:
    """A special was created or edited."""

    __version__ = 1

    special_id = Identifier(required=True)
    title = String(required=True)
    scope = String(required=True)
    target_ids = Text()  # JSON list of product or bundle ids
    discount_type = String(required=True)
    discount_value = Float(required=True)
    starts_at = DateTime(required=True)
    ends_at = DateTime(required=True)
    saved_at = DateTime(required=True)

