"""DeFi Llama API response models."""

from pydantic import BaseModel, ConfigDict, Field


class _ApiRecord(BaseModel):
    """Lenient base for upstream records: unknown fields are kept as extras."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Protocol(_ApiRecord):
    """Protocol entry from /protocols."""

    id: str | None = None
    name: str
    address: str | None = None
    symbol: str | None = None
    url: str | None = None
    description: str | None = None
    chain: str | None = None
    logo: str | None = None
    audits: str | int | None = None
    audit_note: str | None = None
    gecko_id: str | None = None
    cmc_id: str | int | None = Field(default=None, alias="cmcId")
    category: str | None = None
    chains: list[str] | None = None
    module: str | None = None
    twitter: str | None = None
    forked_from: list[str] | None = Field(default=None, alias="forkedFrom")
    oracles: list[str] | None = None
    listed_at: float | None = Field(default=None, alias="listedAt")
    tvl: float | None = None
    chain_tvls: dict[str, float | None] | None = Field(default=None, alias="chainTvls")
    change_1h: float | None = None
    change_1d: float | None = None
    change_7d: float | None = None
    methodology: str | None = None


class Chain(_ApiRecord):
    """Chain entry from /v2/chains."""

    name: str
    tvl: float | None = None
    token_symbol: str | None = Field(default=None, alias="tokenSymbol")
    cmc_id: str | int | None = Field(default=None, alias="cmcId")
    gecko_id: str | None = None
    chain_id: int | str | None = Field(default=None, alias="chainId")
