"""Shared timestamps and payload builders for llama-tvl tests."""

# Mid-month UTC timestamps
JAN_15_2024 = 1705276800
FEB_15_2024 = 1707955200
MAR_15_2024 = 1710460800
DEC_31_2023_NOON = 1704024000
JAN_01_2024 = 1704067200
JAN_31_2024 = 1706659200
DAY = 86400


def protocol_payload(tvl, **overrides):
    """Minimal /protocol/{id} payload around a top-level TVL series."""
    payload = {
        "id": "test-protocol",
        "name": "Test Protocol",
        "address": "ethereum:0x123",
        "symbol": "TEST",
        "chain": "Ethereum",
        "chains": ["Ethereum"],
        "category": "Dexes",
        "tvl": tvl,
        "chainTvls": {},
    }
    payload.update(overrides)
    return payload
