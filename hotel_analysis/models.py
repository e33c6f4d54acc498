from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


KEY_SEPARATOR = " | "

# (destination country, hotel name, destination city)
GroupKey = Tuple[str, str, str]


def make_group_key(destination_country: str, hotel_name: str, destination_city: str) -> str:
    return KEY_SEPARATOR.join((destination_country, hotel_name, destination_city))


@dataclass(frozen=True)
class BookingRecord:
    booking_id: str
    origin_country: str
    destination_country: str   # "Singapore"
    destination_city: str      # "Singapore"
    hotel_name: str
    booking_price: float
    discount: float            # fraction, "15%" -> 0.15
    profit_margin: float
    rooms: int

    @property
    def net_price(self) -> float:
        return self.booking_price * (1.0 - self.discount)

    @property
    def actual_profit(self) -> float:
        return self.booking_price * self.profit_margin

    @property
    def group_fields(self) -> GroupKey:
        return (self.destination_country, self.hotel_name, self.destination_city)

    @property
    def group_key(self) -> str:
        return make_group_key(*self.group_fields)


@dataclass
class GroupMetrics:
    key: str
    destination_country: str
    hotel_name: str
    destination_city: str
    transaction_count: int
    avg_price: float
    avg_profit_margin: float
    avg_discount: float
    total_rooms: int = 0
    # Margin of the first booking seen for this group (input order)
    first_profit_margin: float = 0.0

    @property
    def group_fields(self) -> GroupKey:
        return (self.destination_country, self.hotel_name, self.destination_city)


@dataclass
class MetricRange:
    name: str
    minimum: float
    maximum: float

    @property
    def is_flat(self) -> bool:
        return self.minimum == self.maximum


@dataclass
class GroupScore:
    key: str
    metrics: GroupMetrics
    price_score: float
    profit_score: float
    discount_score: float
    final_score: float


@dataclass
class ProfitEstimate:
    key: str
    total_rooms: int
    profit_margin: float
    estimated_profit: float


@dataclass
class CountryCount:
    country: str
    bookings: int


@dataclass
class AnalysisReport:
    record_count: int
    skipped_lines: int
    ranges: Dict[str, MetricRange]
    ranked: List[GroupScore]
    top_country: CountryCount
    best_value: GroupScore
    most_profitable: ProfitEstimate
    most_economical: Optional[BookingRecord] = None
    country_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def group_count(self) -> int:
        return len(self.ranked)
