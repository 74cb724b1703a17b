"""TVL analysis result models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class TVLPoint:
    """Single normalized TVL observation."""

    timestamp: datetime
    value: float


@dataclass(frozen=True)
class SeriesStats:
    """Summary statistics for a list of TVL values."""

    average: float
    minimum: float
    maximum: float
    volatility: float  # population standard deviation


@dataclass(frozen=True)
class BucketSummary:
    """Statistics for one month ("YYYY-MM") or year (int) bucket."""

    key: str | int
    average: float
    minimum: float
    maximum: float
    start_value: float
    end_value: float
    percent_change: float | None  # None when start_value is 0
    count: int = 0


@dataclass(frozen=True)
class OverallSummary:
    """Statistics over the whole series."""

    average: float
    minimum: float
    maximum: float
    start_value: float
    current_value: float
    percent_change: float | None
    volatility: float


@dataclass(frozen=True)
class TVLAnalysis:
    """Monthly, yearly and overall view of a TVL series."""

    by_month: list[BucketSummary]
    by_year: list[BucketSummary]
    overall: OverallSummary
    point_count: int


def _text(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) and value else default


def _text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _audit_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


@dataclass(frozen=True)
class ProtocolInfo:
    """Descriptive metadata of a protocol, with defaults for every missing field."""

    name: str = "Unknown"
    address: str = ""
    symbol: str = ""
    url: str = ""
    description: str = ""
    chains: list[str] = field(default_factory=list)
    logo: str = ""
    audits: int = 0
    audit_note: str | None = None
    category: str = "Unknown"
    oracles: list[str] = field(default_factory=list)
    forked_from: list[str] = field(default_factory=list)
    twitter: str = ""
    audit_links: list[str] = field(default_factory=list)
    listed_at: datetime | None = None
    github: list[str] = field(default_factory=list)
    current_chain_tvls: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ProtocolInfo":
        """Build the record from a raw /protocol/{id} payload."""
        address = _text(payload.get("address"))
        twitter = _text(payload.get("twitter"))
        listed_at = payload.get("listedAt")
        chain_tvls = payload.get("currentChainTvls")

        return cls(
            name=_text(payload.get("name"), "Unknown"),
            # "ethereum:0xabc" -> "0xabc"
            address=address.split(":", 1)[-1] if address else "",
            symbol=_text(payload.get("symbol")),
            url=_text(payload.get("url")),
            description=_text(payload.get("description")),
            chains=_text_list(payload.get("chains")),
            logo=_text(payload.get("logo")),
            audits=_audit_count(payload.get("audits")),
            audit_note=_text(payload.get("audit_note")) or None,
            category=_text(payload.get("category"), "Unknown"),
            oracles=_text_list(payload.get("oracles")),
            forked_from=_text_list(payload.get("forkedFrom")),
            twitter=f"https://x.com/{twitter}" if twitter else "",
            audit_links=_text_list(payload.get("audit_links")),
            listed_at=(
                datetime.fromtimestamp(listed_at, tz=timezone.utc)
                if isinstance(listed_at, (int, float)) and not isinstance(listed_at, bool)
                else None
            ),
            github=[f"https://github.com/{repo}" for repo in _text_list(payload.get("github"))],
            current_chain_tvls=(
                {
                    chain: float(value)
                    for chain, value in chain_tvls.items()
                    if isinstance(value, (int, float)) and not isinstance(value, bool)
                }
                if isinstance(chain_tvls, Mapping)
                else {}
            ),
        )


@dataclass(frozen=True)
class ProtocolAnalysis:
    """Protocol metadata together with its TVL analysis."""

    info: ProtocolInfo
    tvl_analysis: TVLAnalysis


# Formatted (string-rendered) views. Field names are snake_case; dumping with
# by_alias=True yields the camelCase keys the DeFi Llama ecosystem uses.


class _FormattedModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class FormattedOverall(_FormattedModel):
    current_tvl: str = Field(serialization_alias="currentTVL")
    starting_tvl: str = Field(serialization_alias="startingTVL")
    average_tvl: str = Field(serialization_alias="averageTVL")
    minimum_tvl: str = Field(serialization_alias="minimumTVL")
    maximum_tvl: str = Field(serialization_alias="maximumTVL")
    total_change: str = Field(serialization_alias="totalChange")
    volatility: float


class FormattedBucket(_FormattedModel):
    average: str
    minimum: str
    maximum: str
    starting_tvl: str = Field(serialization_alias="startingTVL")
    ending_tvl: str = Field(serialization_alias="endingTVL")
    percentage_change: str = Field(serialization_alias="percentageChange")


class FormattedYear(FormattedBucket):
    year: int


class FormattedMonth(FormattedBucket):
    month: str


class FormattedTVLAnalysis(_FormattedModel):
    overall: FormattedOverall
    yearly_analysis: list[FormattedYear] = Field(serialization_alias="yearlyAnalysis")
    monthly_analysis: list[FormattedMonth] = Field(serialization_alias="monthlyAnalysis")


class FormattedProtocolInfo(_FormattedModel):
    name: str
    address: str
    symbol: str
    url: str
    description: str
    chains: list[str]
    logo: str
    audits: int
    audit_note: str | None
    category: str
    oracles: list[str]
    forked_from: list[str] = Field(serialization_alias="forkedFrom")
    twitter: str
    audit_links: list[str]
    listed_at: str = Field(serialization_alias="listedAt")
    github: list[str]
    current_chain_tvls: dict[str, str] = Field(serialization_alias="currentChainTvls")


class FormattedProtocolAnalysis(_FormattedModel):
    protocol_info: FormattedProtocolInfo = Field(serialization_alias="protocolInfo")
    tvl_analysis: FormattedTVLAnalysis = Field(serialization_alias="tvlAnalysis")


class FormattedChainAnalysis(_FormattedModel):
    chain_analysis: FormattedTVLAnalysis = Field(serialization_alias="chainAnalysis")
