"""String-rendered views of TVL analyses."""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from llama_tvl.analysis.formatting import change_percent, compact_currency, month_year
from llama_tvl.analysis.tvl import analyze_chain, analyze_protocol
from llama_tvl.models.analysis import (
    BucketSummary,
    FormattedChainAnalysis,
    FormattedMonth,
    FormattedOverall,
    FormattedProtocolAnalysis,
    FormattedProtocolInfo,
    FormattedTVLAnalysis,
    FormattedYear,
    ProtocolInfo,
    TVLAnalysis,
)


def _bucket_fields(bucket: BucketSummary) -> dict[str, str]:
    return {
        "average": compact_currency(bucket.average),
        "minimum": compact_currency(bucket.minimum),
        "maximum": compact_currency(bucket.maximum),
        "starting_tvl": compact_currency(bucket.start_value),
        "ending_tvl": compact_currency(bucket.end_value),
        "percentage_change": change_percent(bucket.percent_change),
    }


def format_tvl_analysis(analysis: TVLAnalysis) -> FormattedTVLAnalysis:
    """Render every TVL figure of an analysis; volatility stays numeric."""
    overall = analysis.overall
    return FormattedTVLAnalysis(
        overall=FormattedOverall(
            current_tvl=compact_currency(overall.current_value),
            starting_tvl=compact_currency(overall.start_value),
            average_tvl=compact_currency(overall.average),
            minimum_tvl=compact_currency(overall.minimum),
            maximum_tvl=compact_currency(overall.maximum),
            total_change=change_percent(overall.percent_change),
            volatility=overall.volatility,
        ),
        yearly_analysis=[
            FormattedYear(year=bucket.key, **_bucket_fields(bucket))
            for bucket in analysis.by_year
        ],
        monthly_analysis=[
            FormattedMonth(
                month=month_year(datetime.strptime(bucket.key, "%Y-%m")),
                **_bucket_fields(bucket),
            )
            for bucket in analysis.by_month
        ],
    )


def format_protocol_info(info: ProtocolInfo) -> FormattedProtocolInfo:
    return FormattedProtocolInfo(
        name=info.name,
        address=info.address,
        symbol=info.symbol,
        url=info.url,
        description=info.description,
        chains=info.chains,
        logo=info.logo,
        audits=info.audits,
        audit_note=info.audit_note,
        category=info.category,
        oracles=info.oracles,
        forked_from=info.forked_from,
        twitter=info.twitter,
        audit_links=info.audit_links,
        listed_at=month_year(info.listed_at),
        github=info.github,
        current_chain_tvls={
            chain: compact_currency(value) for chain, value in info.current_chain_tvls.items()
        },
    )


def format_protocol_analysis(payload: Mapping[str, Any]) -> FormattedProtocolAnalysis:
    """Analyze a raw protocol payload and render it for display."""
    analysis = analyze_protocol(payload)
    return FormattedProtocolAnalysis(
        protocol_info=format_protocol_info(analysis.info),
        tvl_analysis=format_tvl_analysis(analysis.tvl_analysis),
    )


def format_chain_analysis(
    data: Sequence[Any], chain: str | None = None
) -> FormattedChainAnalysis:
    """Analyze a raw historical chain TVL series and render it for display."""
    return FormattedChainAnalysis(chain_analysis=format_tvl_analysis(analyze_chain(data, chain)))
