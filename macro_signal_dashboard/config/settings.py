"""Configuration settings for the dashboard."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv


load_dotenv()


# FRED series feeding the trading signals
SIGNAL_SERIES: dict[str, str] = {
    # Rates
    "FEDFUNDS": "Federal Funds Effective Rate",
    "GS10": "10-Year Treasury Constant Maturity Rate",
    "TB3MS": "3-Month Treasury Bill Secondary Market Rate",
    # Volatility
    "VIXCLS": "CBOE Volatility Index (VIX)",
    # Credit
    "BAA10Y": "Moody's Baa Corporate Yield Relative to 10Y Treasury",
    "AAA10Y": "Moody's Aaa Corporate Yield Relative to 10Y Treasury",
    # Housing
    "CSUSHPISA": "S&P/Case-Shiller U.S. National Home Price Index",
    "HOUST": "Housing Starts: Total New Privately Owned",
}

# Series that may be requested for normalization / blended exports
ALLOWED_SERIES: frozenset[str] = frozenset({
    # Key indicators
    "CPIAUCSL", "UNRATE", "GS10", "TB3MS", "FEDFUNDS", "A191RL1Q225SBEA", "SP500",
    # Inflation
    "CPILFESL", "PCEPI", "PCEPILFE", "CPIUFDSL", "CPIENGSL", "CUSR0000SAH", "CPIMEDSL",
    # Markets
    "NASDAQCOM", "DJIA", "VIXCLS", "BAA10Y", "AAA10Y", "NYA",
    # Employment
    "CIVPART", "PAYEMS", "ICSA", "AHETPI",
    # Economic growth
    "A191RP1Q027SBEA", "INDPRO", "RSAFS", "TCU",
    # Exchange rates
    "DTWEXBGS", "DEXUSEU", "DEXUSUK", "DEXJPUS", "DEXCHUS", "DEXMXUS", "DEXINUS",
    "DEXCAUS", "DEXUSAL",
    # Housing
    "CSUSHPISA", "HOUST", "PERMIT", "MORTGAGE30US", "FIXHAI", "HSN1F", "EXHOSLUSM495S",
    # Consumer
    "PCE", "PCEDG", "PCESV", "RSFSDP", "GAFO", "PSAVERT", "DSPI",
    # Credit & banking
    "BUSLOANS", "TOTALSL", "DRCCLACBS", "DRSFRMACBS", "BAMLC0A0CM",
    # Money supply
    "M1SL", "M2SL", "BOGMBASE",
})


def _default_cache_dir() -> Path:
    override = os.getenv("CACHE_DIR")
    if override:
        return Path(override)
    return Path(__file__).parent.parent.parent / "cache"


@dataclass
class Settings:
    """Application settings."""

    fred_api_key: str = field(default_factory=lambda: os.getenv("FRED_API_KEY", ""))
    cache_dir: Path = field(default_factory=_default_cache_dir)
    cache_ttl_hours: float = field(
        default_factory=lambda: float(os.getenv("FRED_CACHE_TTL_HOURS", "24"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("FRED_TIMEOUT", "30"))
    )
    max_fetch_workers: int = 8
    alert_poll_seconds: int = field(
        default_factory=lambda: int(os.getenv("ALERT_POLL_SECONDS", "60"))
    )
    db_path: Path = field(init=False)
    alert_db_path: Path = field(init=False)

    def __post_init__(self) -> None:
        self.cache_dir = Path(self.cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = self.cache_dir / "fred_data.db"
        self.alert_db_path = self.cache_dir / "alerts.db"

    def validate(self) -> None:
        """Validate required settings."""
        if not self.fred_api_key:
            raise ValueError(
                "FRED_API_KEY not set. Get one at: "
                "https://fred.stlouisfed.org/docs/api/api_key.html"
            )
