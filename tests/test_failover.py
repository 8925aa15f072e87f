"""
엔드포인트 페일오버 테스트
"""
import httpx
import pytest

from conftest import RecordingHandler, rpc_result
from txverify.errors import AuthorizationError, EmptyResultError, EndpointError, EndpointsExhaustedError
from txverify.services.failover import EndpointFailoverClient, HttpGetRequest, JsonRpcRequest, ScanApiRequest

ENDPOINTS = ["https://a.test", "https://b.test", "https://c.test"]


def make_client(handler):
    recorder = RecordingHandler(handler)
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return EndpointFailoverClient(timeout=5.0, client=client), recorder


@pytest.mark.asyncio
async def test_first_failures_then_success():
    def handler(request):
        if request.url.host == "c.test":
            return rpc_result({"hash": "0x1"})
        if request.url.host == "a.test":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(502, text="bad gateway")

    failover, recorder = make_client(handler)
    result = await failover.call(ENDPOINTS, JsonRpcRequest("eth_getTransactionByHash", ["0x1"]))

    assert result == {"hash": "0x1"}
    assert recorder.hosts() == ["a.test", "b.test", "c.test"]


@pytest.mark.asyncio
async def test_stops_at_first_success():
    failover, recorder = make_client(lambda request: rpc_result("0x1"))
    assert await failover.call(ENDPOINTS, JsonRpcRequest("eth_blockNumber")) == "0x1"
    assert recorder.call_count == 1


@pytest.mark.asyncio
async def test_all_fail_raises_exhausted_with_last_error():
    def handler(request):
        if request.url.host == "c.test":
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(500)

    failover, recorder = make_client(handler)
    with pytest.raises(EndpointsExhaustedError) as exc_info:
        await failover.call(ENDPOINTS, JsonRpcRequest("eth_getTransactionByHash", ["0x1"]))

    error = exc_info.value
    # 엔드포인트당 정확히 한 번
    assert recorder.call_count == len(ENDPOINTS)
    assert len(error.errors) == 3
    assert "Timeout" in str(error.last_error)
    assert error.last_error.endpoint == "https://c.test"
    assert str(error).startswith("All 3 endpoints failed")
    assert not error.answered_empty


@pytest.mark.asyncio
async def test_empty_result_advances_to_next_endpoint():
    def handler(request):
        if request.url.host == "a.test":
            return rpc_result(None)
        return rpc_result({"hash": "0x1"})

    failover, recorder = make_client(handler)
    assert await failover.call(ENDPOINTS, JsonRpcRequest("eth_getTransactionByHash", ["0x1"])) == {"hash": "0x1"}
    assert recorder.call_count == 2


@pytest.mark.asyncio
async def test_all_empty_is_reported_as_answered_empty():
    failover, _ = make_client(lambda request: rpc_result(None))
    with pytest.raises(EndpointsExhaustedError) as exc_info:
        await failover.call(ENDPOINTS, JsonRpcRequest("eth_getTransactionByHash", ["0x1"]))
    assert exc_info.value.answered_empty
    assert all(isinstance(e, EmptyResultError) for e in exc_info.value.errors)


@pytest.mark.asyncio
async def test_malformed_json_and_rpc_error_are_endpoint_failures():
    def handler(request):
        if request.url.host == "a.test":
            return httpx.Response(200, text="<html>oops</html>")
        if request.url.host == "b.test":
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "limit"}})
        return rpc_result("0x2")

    failover, recorder = make_client(handler)
    assert await failover.call(ENDPOINTS, JsonRpcRequest("eth_blockNumber")) == "0x2"
    assert recorder.call_count == 3


@pytest.mark.asyncio
async def test_http_401_is_authorization_error():
    failover, _ = make_client(lambda request: httpx.Response(401))
    with pytest.raises(EndpointsExhaustedError) as exc_info:
        await failover.call(ENDPOINTS[:1], JsonRpcRequest("eth_blockNumber"))
    assert isinstance(exc_info.value.last_error, AuthorizationError)
    assert exc_info.value.rejected_authorization


@pytest.mark.asyncio
async def test_no_endpoints_raises_without_calls():
    failover, recorder = make_client(lambda request: rpc_result("0x1"))
    with pytest.raises(EndpointsExhaustedError):
        await failover.call([], JsonRpcRequest("eth_blockNumber"))
    assert recorder.call_count == 0


@pytest.mark.asyncio
async def test_json_rpc_request_body_and_headers():
    captured = {}

    def handler(request):
        captured["body"] = request.content
        captured["user_agent"] = request.headers.get("User-Agent")
        return rpc_result("0x1")

    failover, _ = make_client(handler)
    failover.user_agent = "tests/1.0"
    await failover.call(ENDPOINTS[:1], JsonRpcRequest("eth_getTransactionByHash", ["0xabc"]))

    assert b'"method":"eth_getTransactionByHash"' in captured["body"].replace(b" ", b"")
    assert b'"params":["0xabc"]' in captured["body"].replace(b" ", b"")
    assert captured["user_agent"] == "tests/1.0"


@pytest.mark.asyncio
async def test_http_get_request_unwrap_and_accept():
    def handler(request):
        if request.url.host == "a.test":
            return httpx.Response(200, json={"data": []})
        if request.url.host == "b.test":
            return httpx.Response(200, json={"data": [{"partial": True}]})
        return httpx.Response(200, json={"data": [{"complete": True}]})

    request = HttpGetRequest(
        path="/v1/items",
        unwrap=lambda payload: (payload.get("data") or [None])[0],
        accept=lambda record: record.get("complete", False),
    )
    failover, recorder = make_client(handler)
    assert await failover.call(ENDPOINTS, request) == {"complete": True}
    assert [r.url.path for r in recorder.requests] == ["/v1/items"] * 3


@pytest.mark.asyncio
async def test_http_get_keeps_query_string_in_endpoint_url():
    failover, recorder = make_client(lambda request: httpx.Response(200, json={"txID": "1"}))
    await failover.call(["https://a.test/wallet/gettransactionbyid?value=abc"], HttpGetRequest())
    assert recorder.requests[0].url.params["value"] == "abc"


@pytest.mark.asyncio
async def test_scan_api_key_rejection_is_authorization_error():
    def handler(request):
        if request.url.params.get("apikey"):
            return httpx.Response(200, json={"status": "0", "message": "NOTOK", "result": "Invalid API Key"})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"hash": "0x1"}})

    failover, recorder = make_client(handler)
    request = ScanApiRequest(action="eth_getTransactionByHash", params={"txhash": "0x1"}, api_key="bad-key")

    with pytest.raises(EndpointsExhaustedError) as exc_info:
        await failover.call(ENDPOINTS[:1], request)
    assert exc_info.value.rejected_authorization

    assert await failover.call(ENDPOINTS[:1], request.without_key()) == {"hash": "0x1"}
    public = recorder.requests[-1].url.params
    assert public["module"] == "proxy"
    assert public["action"] == "eth_getTransactionByHash"
    assert "apikey" not in public


def test_scan_api_extract_classifies_errors():
    request = ScanApiRequest(action="eth_getTransactionReceipt")
    with pytest.raises(EmptyResultError):
        request.extract({"jsonrpc": "2.0", "id": 1, "result": None}, "https://scan.test")
    with pytest.raises(AuthorizationError):
        request.extract({"result": "Missing/Invalid API Key"}, "https://scan.test")
    with pytest.raises(EndpointError) as exc_info:
        request.extract({"status": "0", "message": "NOTOK", "result": "Max rate limit reached"}, "https://scan.test")
    assert not isinstance(exc_info.value, AuthorizationError)
