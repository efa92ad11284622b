"""Read-side helpers for course bookings."""

from protean.utils.globals import current_domain
from shared.utils.dates import store_date

from courses.purchase.purchase import CoursePurchase


def purchases_for_order(order_id: str) -> list:
    return current_domain.repository_for(CoursePurchase)._dao.query.filter(order_id=order_id).limit(None).all().items


def list_purchases(
    course_slug: str | None = None,
    buyer_email: str | None = None,
    invitation_status: str | None = None,
    created_from: str | None = None,
    created_to: str | None = None,
) -> list:
    """Bookings, newest first. Dates are inclusive ``YYYY-MM-DD`` bounds on the store-local creation day."""
    filters = {}
    if course_slug:
        filters["course_slug"] = course_slug.strip().lower()
    if invitation_status:
        filters["invitation_status"] = invitation_status.strip().lower()

    query = current_domain.repository_for(CoursePurchase)._dao.query.limit(None)
    purchases = query.filter(**filters).all().items if filters else query.all().items

    if buyer_email:
        needle = buyer_email.strip().lower()
        purchases = [purchase for purchase in purchases if needle in purchase.buyer_email]
    if created_from:
        purchases = [purchase for purchase in purchases if store_date(purchase.created_at) >= created_from]
    if created_to:
        purchases = [purchase for purchase in purchases if store_date(purchase.created_at) <= created_to]

    return sorted(purchases, key=lambda purchase: purchase.created_at, reverse=True)
