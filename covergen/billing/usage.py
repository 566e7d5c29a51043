from dataclasses import dataclass
from datetime import datetime

from covergen.billing.standing import Standing, get_standing
from covergen.extensions import db
from covergen.models import GenerationAction


def month_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Current calendar month in server-local time as ``[start, next_start)``.
    Same span as first-day 00:00:00 through last-day 23:59:59, without
    dropping the fractional last second.
    """
    now = now or datetime.now()
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def count_this_month(account_id: str, now: datetime | None = None) -> int:
    start, end = month_window(now)
    return (
        db.session.query(GenerationAction)
        .filter(
            GenerationAction.user_id == str(account_id),
            GenerationAction.created_at >= start,
            GenerationAction.created_at < end,
        )
        .count()
    )


@dataclass(frozen=True)
class UsageSummary:
    usage_count: int
    quota: int | None
    plan_name: str

    @property
    def unlimited(self) -> bool:
        return self.quota is None

    @property
    def remaining(self) -> int | None:
        if self.quota is None:
            return None
        return max(self.quota - self.usage_count, 0)

    @property
    def can_generate(self) -> bool:
        return self.quota is None or self.usage_count < self.quota

    def to_dict(self) -> dict:
        return {
            "usageCount": self.usage_count,
            "quota": self.quota,
            "remainingCount": self.remaining,
            "canGenerate": self.can_generate,
            "unlimited": self.unlimited,
            "planName": self.plan_name,
        }


def check_usage(account_id: str, now: datetime | None = None, standing: Standing | None = None) -> UsageSummary:
    """Monthly usage against the account's quota; subscribers are never capped."""
    standing = standing or get_standing(account_id)
    return UsageSummary(
        usage_count=count_this_month(account_id, now=now),
        quota=standing.quota,
        plan_name=standing.plan_name,
    )
