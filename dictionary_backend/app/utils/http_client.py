# dictionary_backend/app/utils/http_client.py
from typing import Optional

import httpx

from dictionary_backend.app.core.config import config

# 测试时替换成 httpx.MockTransport
_transport: Optional[httpx.AsyncBaseTransport] = None


def set_transport(transport: Optional[httpx.AsyncBaseTransport]) -> None:
    global _transport
    _transport = transport


def get_http_client(**kwargs) -> httpx.AsyncClient:
    kwargs.setdefault("timeout", config.HTTP_TIMEOUT_SECONDS)
    return httpx.AsyncClient(transport=_transport, **kwargs)
