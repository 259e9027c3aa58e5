"""
HTTP Utilities

Session and header helpers shared by the network adapters.
"""

from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter


POOL_SIZE = 10


def create_session(user_agent: str = "medscan/1.0", pool_size: int = POOL_SIZE) -> requests.Session:
    """
    Create a requests session with JSON defaults.

    The session is shared across worker threads (name searches query brand
    and generic labels concurrently). Adapters only set headers while they
    are constructed, so after that the connection pool is the only shared
    state.
    """
    session = requests.Session()
    session.headers.update({
        "Accept": "application/json",
        "User-Agent": user_agent,
    })
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def supabase_headers(anon_key: str, access_token: Optional[str] = None) -> Dict[str, str]:
    """
    Headers for Supabase REST and auth calls.

    The anon key always goes in ``apikey``. The bearer token is the user's
    access token when there is one (row-level security applies), otherwise
    the anon key.
    """
    return {
        "apikey": anon_key,
        "Authorization": f"Bearer {access_token or anon_key}",
        "Content-Type": "application/json",
    }


def error_message(response: requests.Response) -> str:
    """Best-effort error text from a JSON error body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}"
