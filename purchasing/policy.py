import math

from pydantic import BaseModel, ConfigDict

from . import settings
from .schemas import ReconciledInventoryItem, ReferenceData, ReorderInfo


class ReorderPolicy(BaseModel):
    """Constants of the reorder calculation. Defaults come from settings."""

    model_config = ConfigDict(frozen=True)

    days_in_month: int = settings.DAYS_IN_MONTH
    safety_stock_days: int = settings.SAFETY_STOCK_DAYS
    target_stock_multiplier: float = settings.TARGET_STOCK_MULTIPLIER
    long_lead_time_safety_factor: float = settings.LONG_LEAD_TIME_SAFETY_FACTOR
    default_lead_time: int = settings.VENDOR_LEAD_TIMES["DEFAULT"]
    overstock_months_threshold: float = settings.OVERSTOCK_MONTHS_THRESHOLD
    lead_time_warning_days: int = settings.LEAD_TIME_WARNING_DAYS
    watch_threshold_multiplier: float = settings.WATCH_THRESHOLD_MULTIPLIER

    @classmethod
    def for_reference(cls, reference: ReferenceData, **overrides) -> "ReorderPolicy":
        """A policy whose default lead time is the reference table's DEFAULT entry."""
        return cls(default_lead_time=reference.default_lead_time, **overrides)


DEFAULT_POLICY = ReorderPolicy()


def calculate_reorder_info(
    item: ReconciledInventoryItem, policy: ReorderPolicy = DEFAULT_POLICY
) -> ReorderInfo:
    """
    Derives reorder point, target stock, days of supply and the suggested
    order quantity for one inventory record.

    - Safety stock is a fixed number of days, plus ceil(lead time x factor)
      extra days once the lead time exceeds the default.
    - ERP min/max, when positive, replace the computed reorder point and
      target stock outright.
    - Without consumption history days of supply is infinite.
    """
    daily_avg = (item.monthly_avg or 0) / policy.days_in_month
    lead_time = item.lead_time or policy.default_lead_time

    effective_safety_days = policy.safety_stock_days
    if lead_time > policy.default_lead_time:
        effective_safety_days += math.ceil(lead_time * policy.long_lead_time_safety_factor)

    calculated_reorder_point = daily_avg * (lead_time + effective_safety_days)
    reorder_point = item.min_level if item.min_level > 0 else calculated_reorder_point

    calculated_target_stock = reorder_point * policy.target_stock_multiplier
    target_stock = item.max_level if item.max_level > 0 else calculated_target_stock

    days_of_supply = item.available / daily_avg if daily_avg > 0 else math.inf
    needs_reorder = item.available <= reorder_point

    suggested = 0
    if needs_reorder:
        suggested = max(0, math.ceil(target_stock - item.available))

    return ReorderInfo(
        reorder_point=reorder_point,
        target_stock=target_stock,
        days_of_supply=days_of_supply,
        needs_reorder=needs_reorder,
        suggested=suggested,
    )


def is_overstock(item: ReconciledInventoryItem, policy: ReorderPolicy = DEFAULT_POLICY) -> bool:
    """More on hand than the overstock threshold's worth of monthly usage."""
    return item.available > (item.monthly_avg or 0) * policy.overstock_months_threshold


def is_long_lead_time(item: ReconciledInventoryItem, policy: ReorderPolicy = DEFAULT_POLICY) -> bool:
    return item.lead_time > policy.lead_time_warning_days


def stock_status(item: ReconciledInventoryItem, policy: ReorderPolicy = DEFAULT_POLICY) -> str:
    """'reorder' at or below the reorder point, 'watch' within the watch band above it, else 'ok'."""
    info = calculate_reorder_info(item, policy)
    if info.needs_reorder:
        return "reorder"
    if item.available <= info.reorder_point * policy.watch_threshold_multiplier:
        return "watch"
    return "ok"
