import json
from typing import Any, Optional, Tuple

import aiohttp


async def http_request(
        method: str, url: str, timeout: float,
        auth: aiohttp.BasicAuth = None, params: dict = None, json_: Any = None
) -> Tuple[int, Optional[Any]]:
    """Send over HTTP, decode JSON body if any"""
    request = aiohttp.request(
        method, url, params=params, json=json_, auth=auth,
        timeout=aiohttp.ClientTimeout(total=timeout)
    )
    async with request as resp:
        body = await resp.read()
        if not body:
            return resp.status, None
        try:
            return resp.status, json.loads(body.decode('utf-8'))
        except ValueError:
            return resp.status, body.decode('utf-8', errors='replace')
