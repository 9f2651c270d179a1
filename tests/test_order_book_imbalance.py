import pytest

from core.indicators.order_book import NEUTRAL_IMBALANCE, compute_depth_weighted_imbalance
from core.types import OrderBookSnapshot


def test_symmetric_book_is_neutral() -> None:
    book = {"bids": [[100, 10], [99, 5]], "asks": [[101, 10], [102, 5]]}

    assert compute_depth_weighted_imbalance(book) == pytest.approx(50.0)


def test_levels_weighted_by_distance_from_touch() -> None:
    book = {"bids": [[100, 10], [99, 5]], "asks": [[101, 5], [102, 10]]}

    # bids 10*2 + 5*1 = 25, asks 5*2 + 10*1 = 20
    assert compute_depth_weighted_imbalance(book) == pytest.approx(25 / 45 * 100)


def test_sides_weighted_by_their_own_depth() -> None:
    book = {"bids": [[100, 1], [99, 1], [98, 1]], "asks": [[101, 3]]}

    # bids 3 + 2 + 1 = 6, asks 3 * 1 = 3
    assert compute_depth_weighted_imbalance(book) == pytest.approx(6 / 9 * 100)


def test_exchange_strings_are_accepted() -> None:
    book = OrderBookSnapshot(symbol="BTCUSDT", bids=[["100.0", "3.0"]], asks=[["100.1", "1.0"]])

    assert compute_depth_weighted_imbalance(book) == pytest.approx(75.0)


def test_one_sided_book() -> None:
    assert compute_depth_weighted_imbalance({"bids": [[1, 2]], "asks": []}) == pytest.approx(100.0)
    assert compute_depth_weighted_imbalance({"bids": [], "asks": [[1, 2]]}) == pytest.approx(0.0)


@pytest.mark.parametrize(
    "book",
    [
        None,
        {},
        {"bids": [], "asks": []},
        {"bids": None, "asks": [[1, 2]]},
        {"bids": [["x", "y"]], "asks": [[1, 2]]},
        {"bids": [[1]], "asks": [[1, 2]]},
        OrderBookSnapshot(symbol="BTCUSDT"),
        "not a book",
        {"bids": [[100, 0]], "asks": [[101, 0]]},
    ],
)
def test_absent_empty_or_malformed_book_is_neutral(book) -> None:
    assert compute_depth_weighted_imbalance(book) == NEUTRAL_IMBALANCE
