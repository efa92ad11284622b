"""Special aggregate: a time-windowed discount over products, bundles or the whole store.

A special's status is never stored; it is derived from a reference time and
the special's window:

    now < starts_at            → scheduled
    starts_at <= now <= ends_at → active
    now > ends_at              → expired
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, String, Text

from promotions.domain import promotions
from promotions.pricing import (
    DiscountLabel,
    SpecialDiscountType,
    calc_special_price,
    discount_label,
    special_discount_type,
)


class SpecialScope(Enum):
    PRODUCT = "product"
    BUNDLE = "bundle"
    SITEWIDE = "sitewide"


class SpecialStatus(Enum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    EXPIRED = "expired"


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so windows compare safely."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


@promotions.aggregate
class Special:
    title = String(required=True, max_length=200)
    description = Text()
    scope = String(required=True, choices=SpecialScope)
    target_ids = Text()  # JSON list; empty for sitewide specials
    discount_type = String(required=True, choices=SpecialDiscountType)
    discount_value = Float(required=True, min_value=0.0)
    starts_at = DateTime(required=True)
    ends_at = DateTime(required=True)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def window_must_be_ordered(self):
        if self.starts_at and self.ends_at and as_utc(self.ends_at) <= as_utc(self.starts_at):
            raise ValidationError({"ends_at": ["A special must end after it starts"]})

    @invariant.post
    def targets_must_match_scope(self):
        targets = self.targets
        if self.scope == SpecialScope.SITEWIDE.value and targets:
            raise ValidationError({"target_ids": ["Sitewide specials cannot target individual items"]})
        if self.scope != SpecialScope.SITEWIDE.value and not targets:
            raise ValidationError({"target_ids": [f"A {self.scope} special needs at least one target"]})

    @invariant.post
    def percent_cannot_exceed_hundred(self):
        if self.discount_type == SpecialDiscountType.PERCENT.value and (self.discount_value or 0) > 100:
            raise ValidationError({"discount_value": ["Percent discounts cannot exceed 100"]})

    @property
    def targets(self) -> list[str]:
        return json.loads(self.target_ids) if self.target_ids else []

    def status_at(self, now: datetime | None = None) -> SpecialStatus:
        now = as_utc(now or datetime.now(UTC))
        if now < as_utc(self.starts_at):
            return SpecialStatus.SCHEDULED
        if now > as_utc(self.ends_at):
            return SpecialStatus.EXPIRED
        return SpecialStatus.ACTIVE

    def is_live(self, now: datetime | None = None) -> bool:
        return bool(self.is_active) and self.status_at(now) is SpecialStatus.ACTIVE

    def applies_to(self, kind: str, target_id: str) -> bool:
        if self.scope == SpecialScope.SITEWIDE.value:
            return True
        return self.scope == kind and str(target_id) in self.targets

    def price_for(self, base_price_cents: int) -> int:
        return calc_special_price(base_price_cents, self.discount_type, self.discount_value)

    def label_for(self, base_price_cents: int) -> DiscountLabel | None:
        return discount_label(base_price_cents, self.price_for(base_price_cents))

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, **details):
        now = datetime.now(UTC)
        special = cls(**_normalised(details), created_at=now, updated_at=now)
        special._raise_saved(now)
        return special

    def revise(self, **details) -> None:
        now = datetime.now(UTC)
        with atomic_change(self):
            for field_name, value in _normalised(details).items():
                setattr(self, field_name, value)
            self.updated_at = now
        self._raise_saved(now)

    def _raise_saved(self, now: datetime) -> None:
        from promotions.special.events import SpecialSaved

        self.raise_(
            SpecialSaved(
                special_id=str(self.id),
                title=self.title,
                scope=self.scope,
                target_ids=self.target_ids,
                discount_type=self.discount_type,
                discount_value=self.discount_value,
                starts_at=self.starts_at,
                ends_at=self.ends_at,
                saved_at=now,
            )
        )


def _normalised(details: dict) -> dict:
    details = dict(details)
    if "discount_type" in details:
        details["discount_type"] = special_discount_type(details["discount_type"]).value
    if "target_ids" in details and not isinstance(details["target_ids"], str):
        details["target_ids"] = json.dumps([str(target) for target in details["target_ids"] or []])
    if details.get("scope") == SpecialScope.SITEWIDE.value and not details.get("target_ids"):
        details["target_ids"] = json.dumps([])
    return details


def best_special(specials, kind: str, target_id: str, base_price_cents: int, now: datetime | None = None):
    """The live special giving the lowest price for one item, or None."""
    candidates = [special for special in specials if special.is_live(now) and special.applies_to(kind, target_id)]
    if not candidates:
        return None
    return min(candidates, key=lambda special: special.price_for(base_price_cents))
