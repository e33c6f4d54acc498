from collections import defaultdict
from typing import Dict, Iterable

from hotel_analysis.models import BookingRecord, GroupKey, GroupMetrics, make_group_key


class _GroupAccumulator:
    def __init__(self, first: BookingRecord):
        self.destination_country = first.destination_country
        self.hotel_name = first.hotel_name
        self.destination_city = first.destination_city
        self.first_profit_margin = first.profit_margin
        self.count = 0
        self.price_sum = 0.0
        self.margin_sum = 0.0
        self.discount_sum = 0.0
        self.rooms_sum = 0

    def add(self, booking: BookingRecord) -> None:
        self.count += 1
        self.price_sum += booking.booking_price
        self.margin_sum += booking.profit_margin
        self.discount_sum += booking.discount
        self.rooms_sum += booking.rooms


def aggregate_groups(bookings: Iterable[BookingRecord]) -> Dict[GroupKey, GroupMetrics]:
    """Partition bookings by (destination country, hotel, city) and average them.

    - Single forward pass; every booking lands in exactly one group.
    - Averages are plain arithmetic means, left unrounded.
    - Groups are keyed by the (country, hotel, city) tuple; the joined
      display key is built only for GroupMetrics.key.
    - The returned dict keeps groups in first-seen order, and each group
      remembers the profit margin of its first booking.

    An empty input gives an empty dict.
    """
    accumulators: Dict[GroupKey, _GroupAccumulator] = {}
    for b in bookings:
        key = b.group_fields
        acc = accumulators.get(key)
        if acc is None:
            acc = _GroupAccumulator(b)
            accumulators[key] = acc
        acc.add(b)

    groups: Dict[GroupKey, GroupMetrics] = {}
    for key, acc in accumulators.items():
        n = acc.count
        groups[key] = GroupMetrics(
            key=make_group_key(*key),
            destination_country=acc.destination_country,
            hotel_name=acc.hotel_name,
            destination_city=acc.destination_city,
            transaction_count=n,
            avg_price=acc.price_sum / n,
            avg_profit_margin=acc.margin_sum / n,
            avg_discount=acc.discount_sum / n,
            total_rooms=acc.rooms_sum,
            first_profit_margin=acc.first_profit_margin,
        )
    return groups


def count_by_destination_country(bookings: Iterable[BookingRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = defaultdict(int)
    for b in bookings:
        counts[b.destination_country] += 1
    return dict(counts)
