from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class NerdGraphConfig:
    region: str
    endpoint: str
    api_key: str


def get_nerdgraph_config() -> NerdGraphConfig:
    """
    Load NerdGraph connector configuration from environment variables.

    Reads:
      NEW_RELIC_API_KEY (user key), NEW_RELIC_REGION (us|eu, default us)
    """
    region = os.getenv("NEW_RELIC_REGION", "us").strip().lower()
    return NerdGraphConfig(
        region=region,
        endpoint=_endpoint_for_region(region),
        api_key=_require_env("NEW_RELIC_API_KEY"),
    )


def _endpoint_for_region(region: str) -> str:
    if region == "us":
        return "https://api.newrelic.com/graphql"
    if region == "eu":
        return "https://api.eu.newrelic.com/graphql"
    raise ValueError("NEW_RELIC_REGION must be 'us' or 'eu'.")


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {name}")
    return value
