from typing import Optional

import httpx


def make_httpx_client(
    timeout: httpx.Timeout,
    proxy_url: str = "",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    # an explicit transport (tests) bypasses the proxy
    if transport is not None:
        return httpx.AsyncClient(timeout=timeout, trust_env=False, transport=transport)
    return httpx.AsyncClient(timeout=timeout, trust_env=False, proxy=proxy_url or None)
