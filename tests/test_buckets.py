from decimal import Decimal

import pytest

from conftest import tick

from liquidity_selector.buckets import bucket_count, bucket_ratio, fill_buckets, generate_buckets, graph_height
from liquidity_selector.types import Bucket, BucketBounds, GraphExtent


def extent(start, end):
    return GraphExtent(start=Decimal(start), end=Decimal(end))


def assert_contiguous(buckets):
    for previous, current in zip(buckets, buckets[1:]):
        assert previous.upper_bound == current.lower_bound
    for bucket in buckets:
        assert bucket.lower_bound < bucket.upper_bound


class TestBucketCount:
    def test_width_divided_by_bucket_width_plus_split(self):
        assert bucket_count(150) == 4
        assert bucket_count(151) == 5
        assert bucket_count(200, bucket_width_px=100) == 3

    def test_zero_width_still_has_split_bucket(self):
        assert bucket_count(0) == 1


class TestBucketRatio:
    def test_ratio_spans_extent(self):
        ratio = bucket_ratio(extent("0.5", "2.0"), 4)
        assert float(ratio) == pytest.approx(2 ** 0.5)
        assert float(ratio ** 4) == pytest.approx(4.0)

    @pytest.mark.parametrize(
        "start,end,count,width",
        [
            ("0.013", "870", 17, 900 / 0.01),
            ("3", "3.5", 9, 4 / 3),
            ("0.25", "4", 1, 4 / 0.2),
        ],
    )
    def test_ratio_power_matches_rounded_extent(self, start, end, count, width):
        ratio = bucket_ratio(extent(start, end), count)
        assert float(ratio) ** count == pytest.approx(width)

    def test_no_buckets_gives_unit_ratio(self):
        assert bucket_ratio(extent("0.5", "2"), 0) == 1
        assert bucket_ratio(extent("0.5", "2"), -3) == 1

    def test_degenerate_extent_gives_unit_ratio(self):
        assert bucket_ratio(extent("0", "2"), 4) == 1
        assert bucket_ratio(extent("2", "0.5"), 4) == 1
        assert bucket_ratio(extent("0.5", "0.5"), 4) == 1


class TestGenerateBuckets:
    """Geometric bucket bounds on both sides of the current price."""

    def test_scenario_half_to_double(self):
        ratio = bucket_ratio(extent("0.5", "2.0"), 4)
        low, high = generate_buckets(Decimal(1), ratio, 4, extent("0.5", "2.0"))

        assert_contiguous(low)
        assert_contiguous(high)
        assert low[-1].upper_bound == 1
        assert high[0].lower_bound == 1
        assert 2 <= len(low) <= 4
        assert 2 <= len(high) <= 4
        for position, bucket in enumerate(reversed(low), start=1):
            assert float(bucket.lower_bound) == pytest.approx(float(ratio) ** -position)
        for position, bucket in enumerate(high, start=1):
            assert float(bucket.upper_bound) == pytest.approx(float(ratio) ** position)
        assert float(low[0].lower_bound) <= 0.5 + 1e-12
        assert float(high[-1].upper_bound) >= 2.0 - 1e-12

    def test_stops_at_rounded_data_bounds(self):
        ratio = bucket_ratio(extent("0.5", "2.0"), 4)
        low, high = generate_buckets(Decimal(1), ratio, 4, extent("0.45", "2.2"))
        assert len(low) == 3
        assert len(high) == 3
        assert float(low[0].lower_bound) == pytest.approx(2 ** -1.5)
        assert float(high[-1].upper_bound) == pytest.approx(2 ** 1.5)

    def test_covers_extent(self):
        data = extent("0.013", "870")
        ratio = bucket_ratio(data, 12)
        low, high = generate_buckets(Decimal("3.7"), ratio, 12, data)
        assert_contiguous(low)
        assert_contiguous(high)
        assert low[0].lower_bound <= Decimal("0.013")
        assert high[-1].upper_bound >= Decimal("870")
        assert low[-1].upper_bound == high[0].lower_bound == Decimal("3.7")

    def test_price_above_extent_has_no_high_side(self):
        ratio = bucket_ratio(extent("0.5", "2"), 4)
        low, high = generate_buckets(Decimal(10), ratio, 4, extent("0.5", "2"))
        assert high == []
        assert len(low) == 4

    def test_price_below_extent_has_no_low_side(self):
        ratio = bucket_ratio(extent("0.5", "2"), 4)
        low, high = generate_buckets(Decimal("0.1"), ratio, 4, extent("0.5", "2"))
        assert low == []
        assert len(high) == 4

    def test_no_buckets_when_count_is_zero(self):
        assert generate_buckets(Decimal(1), Decimal(1), 0, extent("0.5", "2")) == ([], [])

    def test_unit_ratio_yields_single_bucket_per_side(self):
        low, high = generate_buckets(Decimal(1), Decimal(1), 5, extent("0.5", "2"))
        assert low == [BucketBounds(Decimal(1), Decimal(1))]
        assert high == [BucketBounds(Decimal(1), Decimal(1))]


class TestFillBuckets:
    """Reserve sums per bucket."""

    def test_scenario_two_ticks_in_one_bucket(self):
        ticks = [tick("1.05", reserve_a="10"), tick("1.15", reserve_a="20")]
        [bucket] = fill_buckets([BucketBounds(Decimal("1.0"), Decimal("1.2"))], ticks)
        assert bucket == Bucket(Decimal("1.0"), Decimal("1.2"), Decimal(30), Decimal(0))

    def test_both_bounds_inclusive(self):
        ticks = [tick("1.2", reserve_b="5")]
        bounds = [BucketBounds(Decimal("1.0"), Decimal("1.2")), BucketBounds(Decimal("1.2"), Decimal("1.4"))]
        filled = fill_buckets(bounds, ticks)
        assert [bucket.reserve_b for bucket in filled] == [Decimal(5), Decimal(5)]

    def test_empty_buckets_dropped(self):
        ticks = [tick("3", reserve_a="1")]
        bounds = [BucketBounds(Decimal(1), Decimal(2)), BucketBounds(Decimal(2), Decimal(4))]
        filled = fill_buckets(bounds, ticks)
        assert [bucket.lower_bound for bucket in filled] == [Decimal(2)]

    def test_no_ticks_no_buckets(self):
        assert fill_buckets([BucketBounds(Decimal(1), Decimal(2))], []) == []

    def test_sums_are_exact(self):
        ticks = [tick("1.1", reserve_a="0.1") for _ in range(10)]
        [bucket] = fill_buckets([BucketBounds(Decimal(1), Decimal(2))], ticks)
        assert bucket.reserve_a == Decimal("1.0")

    def test_matches_naive_scan(self):
        ticks = [
            tick(price, reserve_a=str(index % 3), reserve_b=str(index % 2))
            for index, price in enumerate(["0.6", "0.7", "0.9", "1", "1.3", "1.6", "1.9", "2.4", "0.6"])
        ]
        data = extent("0.5", "2.5")
        ratio = bucket_ratio(data, 6)
        low, high = generate_buckets(Decimal(1), ratio, 6, data)
        for bounds in (low, high):
            expected = []
            for bucket in bounds:
                inside = [t for t in ticks if bucket.lower_bound <= t.price <= bucket.upper_bound]
                a = sum((t.reserve_a for t in inside), Decimal(0))
                b = sum((t.reserve_b for t in inside), Decimal(0))
                if a or b:
                    expected.append(Bucket(bucket.lower_bound, bucket.upper_bound, a, b))
            assert fill_buckets(bounds, ticks) == expected

    def test_conservation_within_extent(self):
        ticks = [tick(price, reserve_a="2", reserve_b="3") for price in ["0.55", "0.8", "1.25", "1.7", "1.95"]]
        data = extent("0.55", "1.95")
        ratio = bucket_ratio(data, 5)
        low, high = generate_buckets(Decimal("1.1"), ratio, 5, data)
        filled = fill_buckets(low, ticks) + fill_buckets(high, ticks)
        assert sum((b.reserve_a for b in filled), Decimal(0)) == Decimal(10)
        assert sum((b.reserve_b for b in filled), Decimal(0)) == Decimal(15)


class TestGraphHeight:
    def test_max_single_side(self):
        a = [Bucket(Decimal(1), Decimal(2), Decimal(4), Decimal(1))]
        b = [Bucket(Decimal(2), Decimal(3), Decimal(0), Decimal(9))]
        assert graph_height(a, b) == Decimal(9)

    def test_empty_is_zero(self):
        assert graph_height([], []) == 0
