import logging
from typing import Dict, Iterable, List, Optional

from hotel_analysis.aggregator import aggregate_groups, count_by_destination_country
from hotel_analysis.models import (
    AnalysisReport,
    BookingRecord,
    CountryCount,
    GroupMetrics,
    GroupScore,
    MetricRange,
    ProfitEstimate,
)
from hotel_analysis.parser import ParseResult
from hotel_analysis.scoring import (
    DISCOUNT,
    PRICE,
    PROFIT_MARGIN,
    best_value,
    compute_ranges,
    rank_groups,
    score_groups,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 10
DEFAULT_BOTTOM_N = 5

KEY_WIDTH = 60
RULE_WIDTH = 130


def most_booked_country(counts: Dict[str, int]) -> Optional[CountryCount]:
    """Country with the most bookings; ties go to the alphabetically first name."""
    if not counts:
        return None
    country, bookings = min(counts.items(), key=lambda item: (-item[1], item[0]))
    return CountryCount(country=country, bookings=bookings)


def estimate_group_profit(group: GroupMetrics) -> ProfitEstimate:
    """Rough profit figure: all rooms in the group times the first booking's margin.

    Not an average-based total; the margin of one booking stands in for the
    whole group.
    """
    return ProfitEstimate(
        key=group.key,
        total_rooms=group.total_rooms,
        profit_margin=group.first_profit_margin,
        estimated_profit=group.total_rooms * group.first_profit_margin,
    )


def most_profitable_group(groups: Iterable[GroupMetrics]) -> Optional[ProfitEstimate]:
    pairs = [(g, estimate_group_profit(g)) for g in groups]
    if not pairs:
        return None
    _, best = min(pairs, key=lambda p: (-p[1].estimated_profit, p[0].group_fields))
    return best


def most_economical_booking(bookings: Iterable[BookingRecord]) -> Optional[BookingRecord]:
    """Booking with the lowest net price; the earliest one wins a tie."""
    cheapest: Optional[BookingRecord] = None
    for b in bookings:
        if cheapest is None or b.net_price < cheapest.net_price:
            cheapest = b
    return cheapest


def build_report(parsed: ParseResult) -> Optional[AnalysisReport]:
    """Run aggregation, scoring and headline selection over parsed bookings.

    Returns None when there is nothing to report (no valid bookings or no
    groups); that is a normal outcome, not an error.
    """
    bookings = parsed.bookings
    if not bookings:
        logger.info("No valid bookings, skipping aggregation")
        return None

    groups = aggregate_groups(bookings)
    if not groups:
        logger.info("No groups produced, skipping scoring")
        return None

    ranges = compute_ranges(groups.values())
    scores = score_groups(groups.values(), ranges)
    ranked = rank_groups(scores)
    country_counts = count_by_destination_country(bookings)

    logger.info("Scored %d hotel groups from %d bookings", len(ranked), len(bookings))

    return AnalysisReport(
        record_count=len(bookings),
        skipped_lines=parsed.skipped,
        ranges=ranges,
        ranked=ranked,
        top_country=most_booked_country(country_counts),
        best_value=best_value(scores),
        most_profitable=most_profitable_group(groups.values()),
        most_economical=most_economical_booking(bookings),
        country_counts=country_counts,
    )


def format_load_summary(record_count: int, skipped_lines: int = 0) -> List[str]:
    lines = [f"Successfully loaded {record_count} bookings."]
    if skipped_lines:
        lines.append(f"Skipped {skipped_lines} malformed or unparsable lines.")
    return lines


def format_ranges(ranges: Dict[str, MetricRange]) -> List[str]:
    price = ranges[PRICE]
    margin = ranges[PROFIT_MARGIN]
    discount = ranges[DISCOUNT]
    return [
        "Normalization ranges (across all hotel groups)",
        "=" * 50,
        f"{'Metric':20} {'Min':>12} {'Max':>12}",
        f"{'Average price':20} {price.minimum:12.2f} {price.maximum:12.2f}",
        f"{'Average margin':20} {margin.minimum:12.4f} {margin.maximum:12.4f}",
        f"{'Average discount':20} {discount.minimum:12.4f} {discount.maximum:12.4f}",
    ]


def _clip(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


def format_group_table(title: str, scores: Iterable[GroupScore]) -> List[str]:
    lines = [
        title,
        "=" * RULE_WIDTH,
        (
            f"{'Hotel group (country | hotel | city)':{KEY_WIDTH}} "
            f"{'Txns':>5} {'Avg price':>10} {'Final':>7} "
            f"{'Price':>7} {'Profit':>7} {'Disc':>7}"
        ),
        "-" * RULE_WIDTH,
    ]
    for s in scores:
        lines.append(
            f"{_clip(s.key, KEY_WIDTH):{KEY_WIDTH}} "
            f"{s.metrics.transaction_count:5d} "
            f"{s.metrics.avg_price:10.2f} "
            f"{s.final_score:7.2f} "
            f"{s.price_score:7.2f} "
            f"{s.profit_score:7.2f} "
            f"{s.discount_score:7.2f}"
        )
    return lines


def format_headlines(report: AnalysisReport) -> List[str]:
    top = report.top_country
    best = report.best_value
    profit = report.most_profitable

    lines = [
        "1. Country with the highest number of bookings:",
        f"   {top.country} (Total bookings: {top.bookings})",
        "",
        "2. Best overall value (price, margin and discount combined):",
        f"   Hotel group:    {best.key}",
        f"   Price score:    {best.price_score:.2f}",
        f"   Profit score:   {best.profit_score:.2f}",
        f"   Discount score: {best.discount_score:.2f}",
        f"   Final score:    {best.final_score:.2f}",
        "",
        "3. Most profitable hotel (total rooms x first booking margin):",
        f"   Hotel group:    {profit.key}",
        f"   Total rooms:    {profit.total_rooms}",
        f"   Margin used:    {profit.profit_margin:.4f}",
        f"   Est. profit:    {profit.estimated_profit:.2f}",
    ]

    cheap = report.most_economical
    if cheap is not None:
        lines.extend(
            [
                "",
                "4. Most economical booking (lowest net price):",
                f"   Hotel:          {cheap.hotel_name} ({cheap.destination_city}, {cheap.destination_country})",
                f"   Booking price:  {cheap.booking_price:.2f}",
                f"   Discount:       {cheap.discount * 100:.2f}%",
                f"   Net price:      {cheap.net_price:.2f}",
            ]
        )
    return lines


def render_report(
    report: AnalysisReport,
    top_n: int = DEFAULT_TOP_N,
    bottom_n: int = DEFAULT_BOTTOM_N,
) -> List[str]:
    """Full console output, in display order."""
    lines: List[str] = []
    lines.extend(format_load_summary(report.record_count, report.skipped_lines))
    lines.append("")
    lines.extend(format_ranges(report.ranges))
    lines.append("")
    lines.extend(format_group_table(f"Top {top_n} hotel groups by final score", report.ranked[:top_n]))
    lines.append("")
    bottom = report.ranked[-bottom_n:] if bottom_n > 0 else []
    lines.extend(format_group_table(f"Bottom {bottom_n} hotel groups by final score", bottom))
    lines.append("")
    lines.extend(format_headlines(report))
    return lines
