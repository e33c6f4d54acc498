from typing import Callable, Dict, Iterable, List, Optional

from hotel_analysis.models import GroupMetrics, GroupScore, MetricRange

FULL_SCORE = 100.0

PRICE = "price"
PROFIT_MARGIN = "profit_margin"
DISCOUNT = "discount"

_METRIC_GETTERS: Dict[str, Callable[[GroupMetrics], float]] = {
    PRICE: lambda g: g.avg_price,
    PROFIT_MARGIN: lambda g: g.avg_profit_margin,
    DISCOUNT: lambda g: g.avg_discount,
}


def compute_ranges(groups: Iterable[GroupMetrics]) -> Dict[str, MetricRange]:
    """Global min/max of each averaged metric across all groups."""
    groups = list(groups)
    if not groups:
        raise ValueError("cannot compute metric ranges without groups")

    ranges: Dict[str, MetricRange] = {}
    for name, getter in _METRIC_GETTERS.items():
        values = [getter(g) for g in groups]
        ranges[name] = MetricRange(name=name, minimum=min(values), maximum=max(values))
    return ranges


def inverted_score(value: float, rng: MetricRange) -> float:
    """Lower is better: min maps to 100, max maps to 0."""
    if rng.is_flat:
        return FULL_SCORE
    return (1.0 - (value - rng.minimum) / (rng.maximum - rng.minimum)) * FULL_SCORE


def direct_score(value: float, rng: MetricRange) -> float:
    """Higher is better: min maps to 0, max maps to 100."""
    if rng.is_flat:
        return FULL_SCORE
    return ((value - rng.minimum) / (rng.maximum - rng.minimum)) * FULL_SCORE


def score_groups(
    groups: Iterable[GroupMetrics],
    ranges: Optional[Dict[str, MetricRange]] = None,
) -> List[GroupScore]:
    """Normalize every group against the global extrema and combine the scores.

    Price and profit margin are inverted (cheaper / lower wins), discount is
    direct. The final score is the unweighted mean of the three. Pass
    ranges when they have already been computed for the same groups.
    """
    groups = list(groups)
    if not groups:
        return []

    if ranges is None:
        ranges = compute_ranges(groups)
    scores: List[GroupScore] = []
    for g in groups:
        price_score = inverted_score(g.avg_price, ranges[PRICE])
        profit_score = inverted_score(g.avg_profit_margin, ranges[PROFIT_MARGIN])
        discount_score = direct_score(g.avg_discount, ranges[DISCOUNT])
        scores.append(
            GroupScore(
                key=g.key,
                metrics=g,
                price_score=price_score,
                profit_score=profit_score,
                discount_score=discount_score,
                final_score=(price_score + profit_score + discount_score) / 3.0,
            )
        )
    return scores


def rank_groups(scores: Iterable[GroupScore]) -> List[GroupScore]:
    """Highest final score first; equal scores ordered by (country, hotel, city)."""
    return sorted(scores, key=lambda s: (-s.final_score, s.metrics.group_fields))


def best_value(scores: Iterable[GroupScore]) -> GroupScore:
    ranked = rank_groups(scores)
    if not ranked:
        raise ValueError("cannot pick best value without scored groups")
    return ranked[0]
