"""Tests for the TVL analysis engine and its formatted views."""

import math
from collections import defaultdict

import pytest

from helpers import (
    DAY,
    DEC_31_2023_NOON,
    FEB_15_2024,
    JAN_01_2024,
    JAN_15_2024,
    JAN_31_2024,
    MAR_15_2024,
    protocol_payload,
)
from llama_tvl.analysis.report import (
    format_chain_analysis,
    format_protocol_analysis,
    format_tvl_analysis,
)
from llama_tvl.analysis.tvl import (
    analyze_chain,
    analyze_protocol,
    extract_protocol_points,
    select_protocol_series,
)
from llama_tvl.exceptions import EmptySeriesError, InvalidShapeError


class TestSeriesSelection:
    """Tests for picking the raw series out of a protocol payload."""

    def test_prefers_series_of_declared_chain(self):
        """The declared chain's nested series beats the top-level one."""
        nested = [{"date": JAN_15_2024, "totalLiquidityUSD": 7}]
        payload = protocol_payload(
            [{"date": JAN_15_2024, "totalLiquidityUSD": 1}],
            chainTvls={"Ethereum": {"tvl": nested}, "Arbitrum": {"tvl": []}},
        )
        assert select_protocol_series(payload) == nested

    def test_falls_back_to_top_level_series(self):
        top = [{"date": JAN_15_2024, "totalLiquidityUSD": 1}]
        payload = protocol_payload(top, chainTvls={"Arbitrum": {"tvl": []}})
        assert select_protocol_series(payload) == top

    def test_missing_series_is_empty(self):
        payload = protocol_payload(None)
        del payload["tvl"]
        assert select_protocol_series(payload) == []

    def test_object_series_is_rejected(self):
        """A series that is not a list raises InvalidShapeError naming the protocol."""
        payload = protocol_payload({"date": JAN_15_2024, "totalLiquidityUSD": 1})
        with pytest.raises(InvalidShapeError, match="Test Protocol"):
            analyze_protocol(payload)

    def test_object_chain_series_is_rejected(self):
        payload = protocol_payload([], chainTvls={"Ethereum": {"tvl": {"0": 1}}})
        with pytest.raises(InvalidShapeError):
            analyze_protocol(payload)


class TestPointExtraction:
    """Tests for entry normalization and the validity filter."""

    def test_token_quantity_used_without_usd_value(self):
        """Without totalLiquidityUSD the first token quantity is the value."""
        payload = protocol_payload(
            [{"date": JAN_15_2024, "tokens": {"USDC": 42.0, "DAI": 9.0}}]
        )
        points = extract_protocol_points(payload)
        assert [p.value for p in points] == [42.0]

    def test_usd_value_wins_over_tokens(self):
        payload = protocol_payload(
            [{"date": JAN_15_2024, "totalLiquidityUSD": 5.0, "tokens": {"USDC": 42.0}}]
        )
        assert extract_protocol_points(payload)[0].value == 5.0

    def test_invalid_entries_are_dropped(self):
        """Non-numeric dates, missing or NaN values, booleans and nulls are skipped."""
        payload = protocol_payload(
            [
                {"date": "2024-01-15", "totalLiquidityUSD": 1},
                {"date": JAN_15_2024, "totalLiquidityUSD": None},
                {"date": JAN_15_2024, "totalLiquidityUSD": float("nan")},
                {"date": JAN_15_2024},
                {"date": True, "totalLiquidityUSD": 1},
                None,
                {"date": JAN_15_2024, "totalLiquidityUSD": 3},
            ]
        )
        points = extract_protocol_points(payload)
        assert [p.value for p in points] == [3.0]

    def test_timestamps_are_utc(self):
        points = extract_protocol_points(
            protocol_payload([{"date": JAN_01_2024, "totalLiquidityUSD": 1}])
        )
        assert points[0].timestamp.isoformat() == "2024-01-01T00:00:00+00:00"


class TestEmptySeries:
    def test_empty_protocol_series_names_protocol(self):
        with pytest.raises(EmptySeriesError, match="Test Protocol"):
            analyze_protocol(protocol_payload([]))

    def test_non_numeric_dates_name_protocol(self):
        payload = protocol_payload(
            [{"date": "yesterday", "totalLiquidityUSD": 1}, {"date": None, "totalLiquidityUSD": 2}]
        )
        with pytest.raises(EmptySeriesError, match="No valid TVL data found for protocol Test Protocol"):
            analyze_protocol(payload)

    def test_empty_chain_series_names_chain(self):
        with pytest.raises(EmptySeriesError, match="chain Ethereum"):
            analyze_chain([], chain="Ethereum")

    def test_chain_series_must_be_a_list(self):
        with pytest.raises(InvalidShapeError):
            analyze_chain({"date": JAN_15_2024, "tvl": 1})


class TestBucketing:
    """Tests for monthly/yearly grouping and per-bucket statistics."""

    def test_percent_change_increase_within_bucket(self):
        analysis = analyze_chain(
            [{"date": JAN_15_2024, "tvl": 100}, {"date": JAN_15_2024 + DAY, "tvl": 150}]
        )
        (month,) = analysis.by_month
        assert month.key == "2024-01"
        assert month.percent_change == 50.0
        assert format_tvl_analysis(analysis).monthly_analysis[0].percentage_change == "+50.00%"

    def test_percent_change_decrease_within_bucket(self):
        analysis = analyze_chain(
            [{"date": JAN_15_2024, "tvl": 150}, {"date": JAN_15_2024 + DAY, "tvl": 100}]
        )
        formatted = format_tvl_analysis(analysis)
        assert formatted.monthly_analysis[0].percentage_change == "-33.33%"

    def test_month_and_year_keys_use_utc(self):
        """Points either side of the UTC new year land in different buckets."""
        analysis = analyze_chain(
            [{"date": DEC_31_2023_NOON, "tvl": 1}, {"date": JAN_01_2024, "tvl": 2}]
        )
        assert [b.key for b in analysis.by_month] == ["2023-12", "2024-01"]
        assert [b.key for b in analysis.by_year] == [2023, 2024]

    def test_bucket_statistics(self, chain_series):
        analysis = analyze_chain(chain_series)
        january, february = analysis.by_month

        assert january.count == 2
        assert january.average == 1_250_000
        assert january.minimum == 1_000_000
        assert january.maximum == 1_500_000
        assert january.start_value == 1_000_000
        assert january.end_value == 1_500_000
        assert february.percent_change == 0.0

    def test_unordered_input_is_sorted_chronologically(self):
        """Shuffled input gives the same analysis, with start/end taken by timestamp."""
        ordered = [
            {"date": JAN_01_2024, "tvl": 100},
            {"date": JAN_15_2024, "tvl": 120},
            {"date": JAN_31_2024, "tvl": 90},
            {"date": FEB_15_2024, "tvl": 200},
        ]
        shuffled = [ordered[2], ordered[3], ordered[0], ordered[1]]

        assert analyze_chain(shuffled) == analyze_chain(ordered)
        january = analyze_chain(shuffled).by_month[0]
        assert (january.start_value, january.end_value) == (100, 90)

    def test_zero_start_value_has_no_percent_change(self):
        """A zero start value yields no percent change, rendered as N/A."""
        analysis = analyze_chain(
            [{"date": JAN_15_2024, "tvl": 0}, {"date": JAN_15_2024 + DAY, "tvl": 10}]
        )
        assert analysis.by_month[0].percent_change is None
        assert analysis.overall.percent_change is None

        formatted = format_tvl_analysis(analysis)
        assert formatted.monthly_analysis[0].percentage_change == "N/A"
        assert formatted.overall.total_change == "N/A"

    def test_every_point_in_one_month_and_one_year(self):
        """Each point is counted once per month and once per year, and months nest in years."""
        series = [{"date": DEC_31_2023_NOON - i * 9 * DAY, "tvl": 1_000 + i} for i in range(80)]
        analysis = analyze_chain(series)

        assert sum(b.count for b in analysis.by_month) == analysis.point_count
        assert sum(b.count for b in analysis.by_year) == analysis.point_count

        months_per_year = defaultdict(int)
        for bucket in analysis.by_month:
            months_per_year[int(bucket.key[:4])] += bucket.count
        assert dict(months_per_year) == {b.key: b.count for b in analysis.by_year}


class TestOverallSummary:
    def test_overall_figures(self, three_month_payload):
        overall = analyze_protocol(three_month_payload).tvl_analysis.overall

        assert overall.start_value == 100
        assert overall.current_value == 150
        assert overall.average == 150
        assert overall.minimum == 100
        assert overall.maximum == 200
        assert overall.percent_change == 50.0
        assert overall.volatility == pytest.approx(math.sqrt(5000 / 3))

    def test_conservation(self, chain_series):
        """Invalid entries are filtered and the average stays within min and max."""
        raw = chain_series + [{"date": "bad", "tvl": 5}, {"date": FEB_15_2024, "tvl": None}]
        analysis = analyze_chain(raw)

        assert analysis.point_count <= len(raw)
        assert analysis.point_count == 3
        overall = analysis.overall
        assert overall.minimum <= overall.average <= overall.maximum

    def test_analysis_is_idempotent(self, three_month_payload):
        assert analyze_protocol(three_month_payload) == analyze_protocol(three_month_payload)
        assert format_protocol_analysis(three_month_payload) == format_protocol_analysis(
            three_month_payload
        )


class TestFormattedAnalysis:
    """End-to-end tests for the string-rendered projections."""

    def test_three_month_scenario(self, three_month_payload):
        """Single-point months have zero change while the overall view spans all three."""
        formatted = format_protocol_analysis(three_month_payload)
        monthly = formatted.tvl_analysis.monthly_analysis

        assert len(monthly) == 3
        assert [m.percentage_change for m in monthly] == ["+0.00%", "+0.00%", "+0.00%"]
        assert [m.month for m in monthly] == ["January 2024", "February 2024", "March 2024"]
        assert [m.average for m in monthly] == ["$100.00", "$200.00", "$150.00"]
        assert formatted.tvl_analysis.overall.total_change == "+50.00%"

    def test_yearly_view(self, three_month_payload):
        (year,) = format_protocol_analysis(three_month_payload).tvl_analysis.yearly_analysis
        assert year.year == 2024
        assert year.starting_tvl == "$100.00"
        assert year.ending_tvl == "$150.00"
        assert year.maximum == "$200.00"
        assert year.percentage_change == "+50.00%"

    def test_volatility_stays_numeric(self, three_month_payload):
        """Volatility is left as a raw population standard deviation."""
        overall = format_protocol_analysis(three_month_payload).tvl_analysis.overall
        assert isinstance(overall.volatility, float)
        assert overall.volatility == pytest.approx(math.sqrt(5000 / 3))

    def test_protocol_info_rendering(self, three_month_payload):
        three_month_payload.update(
            {
                "twitter": "testproto",
                "github": ["test-org"],
                "audits": "3",
                "listedAt": 1600000000,
                "currentChainTvls": {"Ethereum": 1_500_000, "Arbitrum": 2_000},
            }
        )
        info = format_protocol_analysis(three_month_payload).protocol_info

        assert info.name == "Test Protocol"
        assert info.address == "0x123"
        assert info.audits == 3
        assert info.twitter == "https://x.com/testproto"
        assert info.github == ["https://github.com/test-org"]
        assert info.listed_at == "September 2020"
        assert info.current_chain_tvls == {"Ethereum": "$1.50M", "Arbitrum": "$2.00K"}

    def test_chain_view(self, chain_series):
        formatted = format_chain_analysis(chain_series, chain="Ethereum")
        overall = formatted.chain_analysis.overall

        assert overall.starting_tvl == "$1.00M"
        assert overall.current_tvl == "$2.00M"
        assert overall.total_change == "+100.00%"
        assert [m.month for m in formatted.chain_analysis.monthly_analysis] == [
            "January 2024",
            "February 2024",
        ]

    def test_serializes_with_camel_case_keys(self, three_month_payload):
        dumped = format_protocol_analysis(three_month_payload).model_dump(by_alias=True)

        assert set(dumped) == {"protocolInfo", "tvlAnalysis"}
        tvl = dumped["tvlAnalysis"]
        assert tvl["overall"]["totalChange"] == "+50.00%"
        assert tvl["monthlyAnalysis"][0]["percentageChange"] == "+0.00%"
        assert "startingTVL" in tvl["yearlyAnalysis"][0]
        assert "forkedFrom" in dumped["protocolInfo"]

    def test_single_point_in_billions(self):
        payload = protocol_payload([{"date": MAR_15_2024, "totalLiquidityUSD": 3_200_000_000}])
        overall = format_protocol_analysis(payload).tvl_analysis.overall
        assert overall.current_tvl == "$3.20B"
