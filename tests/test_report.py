import pytest

from hotel_analysis.models import GroupMetrics
from hotel_analysis.parser import ParseResult, parse_lines
from hotel_analysis.report import (
    build_report,
    estimate_group_profit,
    format_group_table,
    format_ranges,
    most_booked_country,
    most_economical_booking,
    most_profitable_group,
    render_report,
)


def test_most_booked_country():
    top = most_booked_country({"Thailand": 4, "Singapore": 7, "Malaysia": 2})
    assert (top.country, top.bookings) == ("Singapore", 7)


def test_most_booked_country_tie_goes_to_first_name():
    top = most_booked_country({"Thailand": 3, "Singapore": 3})
    assert top.country == "Singapore"
    assert most_booked_country({}) is None


def test_profit_uses_first_margin_not_average(booking_line):
    bookings = parse_lines(
        [
            booking_line(hotel="A", margin="0.10", rooms="2"),
            booking_line(hotel="A", margin="0.90", rooms="2"),
            booking_line(hotel="B", margin="0.30", rooms="2"),
        ]
    ).bookings
    report = build_report(ParseResult(bookings=bookings))

    # A: 4 rooms * 0.10 = 0.4 (would be 2.0 with the average margin)
    # B: 2 rooms * 0.30 = 0.6
    assert report.most_profitable.key == "Singapore | B | Singapore"
    assert report.most_profitable.estimated_profit == pytest.approx(0.6)


def test_estimate_group_profit():
    g = GroupMetrics(
        key="k",
        destination_country="X",
        hotel_name="H",
        destination_city="Y",
        transaction_count=3,
        avg_price=100.0,
        avg_profit_margin=0.5,
        avg_discount=0.1,
        total_rooms=5,
        first_profit_margin=0.2,
    )
    estimate = estimate_group_profit(g)
    assert estimate.total_rooms == 5
    assert estimate.profit_margin == 0.2
    assert estimate.estimated_profit == pytest.approx(1.0)


def test_most_profitable_tie_goes_to_smallest_key(booking_line):
    bookings = parse_lines(
        [booking_line(hotel="Zed", margin="0.2"), booking_line(hotel="Abbey", margin="0.2")]
    ).bookings
    report = build_report(ParseResult(bookings=bookings))
    assert report.most_profitable.key == "Singapore | Abbey | Singapore"
    assert most_profitable_group([]) is None


def test_most_economical_booking(booking_line):
    bookings = parse_lines(
        [
            booking_line(booking_id="BK-1", price="100", discount="0%"),
            booking_line(booking_id="BK-2", price="120", discount="50%"),
            booking_line(booking_id="BK-3", price="60", discount="0%"),
        ]
    ).bookings
    assert most_economical_booking(bookings).booking_id == "BK-2"
    assert most_economical_booking([]) is None


def test_build_report_empty_returns_none():
    assert build_report(ParseResult()) is None
    assert build_report(ParseResult(skipped=4)) is None


def test_build_report_fields(booking_line):
    parsed = parse_lines(
        [
            booking_line(country="Thailand", city="Bangkok", hotel="Riverside", price="50"),
            booking_line(country="Thailand", city="Phuket", hotel="Andaman", price="150"),
            booking_line(country="Singapore", price="100"),
            "not,a,booking",
        ]
    )

    report = build_report(parsed)

    assert report.record_count == 3
    assert report.skipped_lines == 1
    assert report.group_count == 3
    assert report.top_country.country == "Thailand"
    assert report.best_value.key == "Thailand | Riverside | Bangkok"
    assert report.ranked[0].key == report.best_value.key
    assert report.country_counts == {"Thailand": 2, "Singapore": 1}


def test_format_ranges_precision(booking_line):
    report = build_report(
        parse_lines([booking_line(price="50", margin="0.12346"), booking_line(hotel="B", price="150.5")])
    )
    lines = format_ranges(report.ranges)
    assert any("50.00" in line and "150.50" in line for line in lines)
    assert any("0.1235" in line for line in lines)


def test_format_group_table_rows(booking_line):
    report = build_report(parse_lines([booking_line(price="80")]))
    lines = format_group_table("Top", report.ranked)
    assert lines[0] == "Top"
    assert "Singapore | Marina View Hotel | Singapore" in lines[-1]
    assert "80.00" in lines[-1]
    assert "100.00" in lines[-1]


def test_render_report_limits_tables(booking_line):
    lines_in = [booking_line(hotel=f"Hotel {i:02d}", price=str(100 + i)) for i in range(15)]
    report = build_report(parse_lines(lines_in))

    output = render_report(report, top_n=10, bottom_n=5)
    text = "\n".join(output)

    assert output[0] == "Successfully loaded 15 bookings."
    assert "Top 10 hotel groups by final score" in text
    assert "Bottom 5 hotel groups by final score" in text
    assert "1. Country with the highest number of bookings:" in text
    assert "2. Best overall value" in text
    assert "3. Most profitable hotel" in text

    top_start = output.index("Top 10 hotel groups by final score")
    bottom_start = output.index("Bottom 5 hotel groups by final score")
    top_rows = [l for l in output[top_start + 4:bottom_start] if l]
    assert len(top_rows) == 10
    assert "Hotel 00" in top_rows[0]
    assert "Hotel 14" in output[bottom_start + 4 + 4]


def test_report_scores_stay_in_range_with_bad_numbers(booking_line):
    parsed = parse_lines(
        [
            booking_line(hotel="A", price="nan"),
            booking_line(hotel="B", price="50", margin="inf"),
            booking_line(hotel="C", price="50"),
            booking_line(hotel="D", price="150"),
        ]
    )

    report = build_report(parsed)

    assert report.skipped_lines == 2
    assert (report.ranges["price"].minimum, report.ranges["price"].maximum) == (50.0, 150.0)
    for s in report.ranked:
        for value in (s.price_score, s.profit_score, s.discount_score, s.final_score):
            assert 0.0 <= value <= 100.0
    assert report.best_value.key == "Singapore | C | Singapore"
