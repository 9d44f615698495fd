"""
Stock Dashboard — Configuration
─────────────────────────────────
Read once from the environment.

Environment variables:
  REFERENCE_DATE       anchor for every timeframe (default 2023-01-15)
  REDIS_URL            redis://host:6379, empty keeps the cache in memory
  APP_ENV              "development" exposes stack traces in 500 bodies
  LOG_LEVEL            INFO
  RATE_LIMIT_MAX       requests per window per client (100)
  RATE_LIMIT_WINDOW_S  window length in seconds (900)
  MAX_TICKERS          per batch request (50)
  API_TOKENS           "token:user_id,token2:user_id2"
  CORS_ORIGINS         comma-separated, default "*"
  PORT                 8000
"""

import os
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional

DEFAULT_REFERENCE_DATE = date(2023, 1, 15)


def parse_tokens(raw: str) -> Dict[str, str]:
    """'tok1:alice,tok2:bob' -> {'tok1': 'alice', 'tok2': 'bob'}"""
    tokens: Dict[str, str] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        token, sep, user_id = pair.partition(":")
        if not sep or not token or not user_id:
            raise ValueError(f"Malformed API_TOKENS entry: {pair!r}")
        tokens[token.strip()] = user_id.strip()
    return tokens


@dataclass
class Settings:
    reference_date:    date = DEFAULT_REFERENCE_DATE
    redis_url:         Optional[str] = None
    app_env:           str = "production"
    log_level:         str = "INFO"
    rate_limit_max:    int = 100
    rate_limit_window: int = 15 * 60
    max_tickers:       int = 50
    api_tokens:        Dict[str, str] = field(default_factory=dict)
    cors_origins:      List[str] = field(default_factory=lambda: ["*"])
    port:              int = 8000

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        ref = env.get("REFERENCE_DATE")
        origins = env.get("CORS_ORIGINS", "*")
        return cls(
            reference_date=date.fromisoformat(ref) if ref else DEFAULT_REFERENCE_DATE,
            redis_url=env.get("REDIS_URL") or None,
            app_env=env.get("APP_ENV", "production"),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            rate_limit_max=int(env.get("RATE_LIMIT_MAX", 100)),
            rate_limit_window=int(env.get("RATE_LIMIT_WINDOW_S", 15 * 60)),
            max_tickers=int(env.get("MAX_TICKERS", 50)),
            api_tokens=parse_tokens(env.get("API_TOKENS", "")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            port=int(env.get("PORT", 8000)),
        )
