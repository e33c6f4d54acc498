from typing import Callable

import pytest

HEADER = (
    "Booking ID,Date of Booking,Time,Customer ID,Gender,Age,Origin Country,State,"
    "Location,Destination Country,Destination City,No. Of People,Check-in date,"
    "No of Days,Check-Out Date,Rooms,Hotel Name,Hotel Rating,Payment Mode,Bank Name,"
    "Booking Price[SGD],Discount,GST,Profit Margin"
)


def make_line(
    booking_id: str = "BK-1",
    origin: str = "India",
    country: str = "Singapore",
    city: str = "Singapore",
    hotel: str = "Marina View Hotel",
    price: str = "100.00",
    discount: str = "10%",
    margin: str = "0.20",
    rooms: str = "1",
) -> str:
    cols = [""] * 24
    cols[0] = booking_id
    cols[6] = origin
    cols[9] = country
    cols[10] = city
    cols[15] = rooms
    cols[16] = hotel
    cols[20] = price
    cols[21] = discount
    cols[23] = margin
    return ",".join(cols)


@pytest.fixture
def booking_line() -> Callable[..., str]:
    return make_line


@pytest.fixture
def write_dataset(tmp_path):
    def _write(lines, name="bookings.csv", header=HEADER):
        path = tmp_path / name
        path.write_text("\n".join([header] + list(lines)) + "\n", encoding="ISO-8859-1")
        return path

    return _write
