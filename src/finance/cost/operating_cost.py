"""OperatingCost aggregate: a business expense on a given day."""

from datetime import UTC, date, datetime

from protean.fields import Date, DateTime, Identifier, Integer, String, Text

from finance.domain import finance


@finance.event(part_of="OperatingCost")
class OperatingCostRecorded:
    __version__ = 1

    cost_id: Identifier(required=True)
    occurred_on: Date(required=True)
    category: String(required=True)
    amount_cents: Integer(required=True)
    recorded_at: DateTime(required=True)


@finance.aggregate
class OperatingCost:
    occurred_on: Date(required=True)
    category: String(required=True, max_length=100)
    description: Text()
    amount_cents: Integer(required=True, min_value=1)
    created_at: DateTime()

    @classmethod
    def record(cls, occurred_on: date, category: str, amount_cents: int, description: str | None = None):
        now = datetime.now(UTC)
        cost = cls(
            occurred_on=occurred_on,
            category=category,
            amount_cents=amount_cents,
            description=description,
            created_at=now,
        )
        cost.raise_(
            OperatingCostRecorded(
                cost_id=str(cost.id),
                occurred_on=occurred_on,
                category=category,
                amount_cents=amount_cents,
                recorded_at=now,
            )
        )
        return cost

