"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from promotions.domain import promotions


@promotions.event(part_of="Coupon")
class CouponSaved:
    """A coupon was created or edited."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    coupon_type = String(required=True)
    value = Float(required=True)
    is_active = String(required=True)  # "True" / "False"
    saved_at = DateTime(required=True)


@promotions.event(part_of="Coupon")
class CouponDeactivated:
    """A coupon was switched off and can no longer be applied."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    deactivated_at = DateTime(required=True)


@promotions.event(part_of="Coupon")
class CouponRedeemed:
    """A coupon was used on an order."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True)
    order_id = Identifier()
    used_count = Integer(required=True)
    redeemed_at = DateTime(required=True)
