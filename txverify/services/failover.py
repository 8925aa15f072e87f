"""
엔드포인트 페일오버 클라이언트

하나의 논리적 조회를 순서가 정해진 엔드포인트 목록에 대해 실행하고,
처음으로 성공한 응답을 반환한다. 실패한 엔드포인트는 재시도하지 않고 바로 다음으로 넘어간다.
"""
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import certifi
import httpx

from ..configuration import DEFAULT_REQUEST_TIMEOUT, DEFAULT_USER_AGENT
from ..errors import AuthorizationError, EmptyResultError, EndpointError, EndpointsExhaustedError

logger = logging.getLogger(__name__)

_AUTH_HINTS = ("api key", "apikey", "unauthorized", "must be authenticated", "forbidden")


def _looks_like_auth_error(message) -> bool:
    text = str(message or "").lower()
    return any(hint in text for hint in _AUTH_HINTS)


@dataclass(frozen=True)
class JsonRpcRequest:
    """JSON-RPC 2.0 POST. 응답의 result 멤버를 반환"""
    method: str
    params: Sequence[Any] = ()
    request_id: int = 1

    def describe(self) -> str:
        return self.method

    async def send(self, client: httpx.AsyncClient, url: str, headers: Dict[str, str], timeout: float) -> httpx.Response:
        payload = {"jsonrpc": "2.0", "method": self.method, "params": list(self.params), "id": self.request_id}
        return await client.post(url, json=payload, headers={**headers, "Content-Type": "application/json"}, timeout=timeout)

    def extract(self, payload: Any, url: str) -> Any:
        if not isinstance(payload, dict):
            raise EndpointError(f"Unexpected JSON-RPC payload type: {type(payload).__name__}", url)
        if payload.get("error"):
            error = payload["error"]
            message = error.get("message") if isinstance(error, dict) else error
            if _looks_like_auth_error(message):
                raise AuthorizationError(f"RPC authorization error: {message}", url)
            raise EndpointError(f"RPC error: {message}", url)
        result = payload.get("result")
        if result is None or result == {} or result == []:
            raise EmptyResultError(f"{self.method} returned an empty result", url)
        return result


@dataclass(frozen=True)
class HttpGetRequest:
    """REST 형식 GET. unwrap으로 응답 봉투에서 레코드를 꺼내고, accept로 구조를 확인"""
    path: str = ""
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    unwrap: Optional[Callable[[Any], Any]] = None
    accept: Optional[Callable[[Any], bool]] = None
    name: str = "GET"

    def describe(self) -> str:
        return f"{self.name} {self.path}".strip()

    async def send(self, client: httpx.AsyncClient, url: str, headers: Dict[str, str], timeout: float) -> httpx.Response:
        target = url.rstrip("/") + self.path if self.path else url
        return await client.get(target, params=dict(self.params) or None, headers={**headers, **self.headers}, timeout=timeout)

    def extract(self, payload: Any, url: str) -> Any:
        record = self.unwrap(payload) if self.unwrap else payload
        if not record:
            raise EmptyResultError(f"{self.describe()} returned no record", url)
        if self.accept and not self.accept(record):
            raise EmptyResultError(f"{self.describe()} returned an incomplete record", url)
        return record


@dataclass(frozen=True)
class ScanApiRequest:
    """Etherscan 계열 module=proxy GET. api_key가 None이면 공개(무인증) 경로"""
    action: str
    params: Mapping[str, Any] = field(default_factory=dict)
    api_key: Optional[str] = None

    def describe(self) -> str:
        return f"scan:{self.action}" + ("" if self.api_key else " (public)")

    def without_key(self) -> "ScanApiRequest":
        return ScanApiRequest(action=self.action, params=self.params, api_key=None)

    async def send(self, client: httpx.AsyncClient, url: str, headers: Dict[str, str], timeout: float) -> httpx.Response:
        query = {"module": "proxy", "action": self.action, **self.params}
        if self.api_key:
            query["apikey"] = self.api_key
        return await client.get(url, params=query, headers=headers, timeout=timeout)

    def extract(self, payload: Any, url: str) -> Any:
        if not isinstance(payload, dict):
            raise EndpointError(f"Unexpected scan API payload type: {type(payload).__name__}", url)
        result = payload.get("result")
        # {"status": "0", "message": "NOTOK", "result": "Invalid API Key"}
        if payload.get("status") == "0" or payload.get("message") == "NOTOK":
            if _looks_like_auth_error(result) or _looks_like_auth_error(payload.get("message")):
                raise AuthorizationError(f"Scan API rejected the key: {result}", url)
            raise EndpointError(f"Scan API error: {result}", url)
        if payload.get("error"):
            error = payload["error"]
            message = error.get("message") if isinstance(error, dict) else error
            if _looks_like_auth_error(message):
                raise AuthorizationError(f"Scan API rejected the key: {message}", url)
            raise EndpointError(f"Scan API error: {message}", url)
        if isinstance(result, str):
            if _looks_like_auth_error(result):
                raise AuthorizationError(f"Scan API rejected the key: {result}", url)
            raise EndpointError(f"Scan API error: {result}", url)
        if not result:
            raise EmptyResultError(f"{self.describe()} returned an empty result", url)
        return result


class EndpointFailoverClient:
    """순서대로 엔드포인트를 시도하고 처음 성공한 응답을 반환 (엔드포인트당 한 번, 고정 타임아웃)"""

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._client = client

    @asynccontextmanager
    async def _session(self):
        if self._client is not None:
            # 외부에서 주입한 클라이언트는 호출자가 닫는다
            yield self._client
            return
        async with httpx.AsyncClient(verify=certifi.where(), timeout=self.timeout) as client:
            yield client

    async def call(self, endpoints: Sequence[str], request, label: str = "") -> Any:
        prefix = f"[{label}] " if label else ""
        if not endpoints:
            raise EndpointsExhaustedError([EndpointError("No endpoints configured")])

        errors: List[EndpointError] = []
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        async with self._session() as client:
            for index, url in enumerate(endpoints, 1):
                logger.debug(f"{prefix}{request.describe()} 시도 {index}/{len(endpoints)}: {url}")
                try:
                    result = await self._attempt(client, url, request, headers)
                except EndpointError as e:
                    errors.append(e)
                    if isinstance(e, EmptyResultError):
                        logger.debug(f"{prefix}{url} 결과 없음 → 다음 엔드포인트")
                    else:
                        logger.warning(f"{prefix}{url} 실패 → {e}")
                    continue
                logger.debug(f"{prefix}{request.describe()} 성공: {url}")
                return result

        raise EndpointsExhaustedError(errors)

    async def _attempt(self, client: httpx.AsyncClient, url: str, request, headers: Dict[str, str]) -> Any:
        try:
            response = await request.send(client, url, headers, self.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code in (401, 403):
                raise AuthorizationError(f"HTTP {status_code}", url) from e
            raise EndpointError(f"HTTP {status_code}", url) from e
        except httpx.TimeoutException as e:
            raise EndpointError(f"Timeout after {self.timeout}s", url) from e
        except httpx.RequestError as e:
            raise EndpointError(f"Request error: {e.__class__.__name__}: {e}", url) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise EndpointError(f"Malformed JSON (status {response.status_code}): {response.text[:200]}", url) from e

        return request.extract(payload, url)
