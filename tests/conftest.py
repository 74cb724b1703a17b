"""Shared fixtures for llama-tvl tests."""

from unittest.mock import MagicMock

import httpx
import pytest

from llama_tvl.ingestion.base import HttpFetcher

from helpers import DAY, FEB_15_2024, JAN_15_2024, MAR_15_2024, protocol_payload


@pytest.fixture
def three_month_payload():
    """One point per month for Jan-Mar 2024 with values 100, 200, 150."""
    return protocol_payload(
        [
            {"date": JAN_15_2024, "totalLiquidityUSD": 100},
            {"date": FEB_15_2024, "totalLiquidityUSD": 200},
            {"date": MAR_15_2024, "totalLiquidityUSD": 150},
        ]
    )


@pytest.fixture
def chain_series():
    return [
        {"date": JAN_15_2024, "tvl": 1_000_000},
        {"date": JAN_15_2024 + DAY, "tvl": 1_500_000},
        {"date": FEB_15_2024, "tvl": 2_000_000},
    ]


@pytest.fixture
def make_fetcher():
    """Build an HttpFetcher whose httpx client is backed by a MockTransport."""

    def _make(handler, **kwargs):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        kwargs.setdefault("logger", MagicMock())
        return HttpFetcher(client=client, **kwargs)

    return _make
