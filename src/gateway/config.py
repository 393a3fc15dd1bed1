import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Environment variables holding the store credentials
URL_ENV_VAR = "SUPABASE_URL"
KEY_ENV_VAR = "SUPABASE_ANON_KEY"

# REST prefix of the hosted store
REST_PATH = "/rest/v1"

# Seconds before an HTTP request is abandoned
REQUEST_TIMEOUT = 10.0


@dataclass(frozen=True)
class GatewaySettings:
    """Connection settings for the remote store."""

    url: str
    api_key: str
    timeout: float = REQUEST_TIMEOUT


def get_gateway_settings(environ: Optional[Mapping[str, str]] = None) -> GatewaySettings:
    """Read gateway settings from the environment.

    Raises:
        ValueError: If either variable is missing or blank.
    """
    env = os.environ if environ is None else environ
    url = (env.get(URL_ENV_VAR) or "").strip()
    api_key = (env.get(KEY_ENV_VAR) or "").strip()

    missing = [
        name
        for name, value in ((URL_ENV_VAR, url), (KEY_ENV_VAR, api_key))
        if not value
    ]
    if missing:
        raise ValueError(
            f"Missing gateway environment variables: {', '.join(missing)}. "
            f"Set {URL_ENV_VAR} and {KEY_ENV_VAR} before loading the league."
        )

    return GatewaySettings(url=url.rstrip("/"), api_key=api_key)
