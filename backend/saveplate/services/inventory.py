from __future__ import annotations
import math
from dataclasses import dataclass, asdict

DEFAULT_SAFETY_STOCK_DAYS = 3
# extra cover ordered on top of the reorder point
ORDER_COVER_DAYS = 7


@dataclass(frozen=True)
class ReorderRecommendation:
    should_reorder: bool
    recommended_quantity: int
    reorder_point: float

    def to_dict(self):
        return asdict(self)


def reorder_recommendation(current_stock: float, avg_daily_sales: float, lead_time_days: float,
                           safety_stock_days: float = DEFAULT_SAFETY_STOCK_DAYS) -> ReorderRecommendation:
    """Reorder once stock covers no more than lead time plus safety days of sales.

    The recommended quantity tops stock up to a further week of cover.
    """
    reorder_point = avg_daily_sales * (lead_time_days + safety_stock_days)
    should_reorder = current_stock <= reorder_point
    quantity = 0
    if should_reorder:
        quantity = max(0, math.ceil(avg_daily_sales * (lead_time_days + safety_stock_days + ORDER_COVER_DAYS) - current_stock))
    return ReorderRecommendation(should_reorder, quantity, reorder_point)
