"""
테스트 공용 픽스처

실제 네트워크 대신 httpx.MockTransport로 체인 응답을 흉내 낸다.
"""
import json
import sys
from pathlib import Path

import httpx
import pytest

# 프로젝트 루트 경로 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from txverify.chain_configs import TRANSFER_EVENT_SIGNATURE, Network  # noqa: E402
from txverify.configuration import VerifierConfiguration  # noqa: E402
from txverify.services import TransactionVerificationService  # noqa: E402

TX_HASH = "0x" + "ab" * 32
RECIPIENT = "0xabc0000000000000000000000000000000000001"
SENDER = "0x0000000000000000000000000000000000000002"
BSC_USDT = "0x55d398326f99059ff775485246999027b3197955"

BSC_RPC = ("https://bsc-rpc-1.test", "https://bsc-rpc-2.test")
ETH_RPC = ("https://eth-rpc-1.test",)
POLYGON_RPC = ("https://polygon-rpc-1.test",)
TRON_API = ("https://tron-api.test",)


class RecordingHandler:
    """MockTransport 핸들러. 받은 요청을 모두 기록한다"""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def hosts(self):
        return [request.url.host for request in self.requests]


def rpc_method(request: httpx.Request):
    if request.method != "POST":
        return None
    return json.loads(request.content).get("method")


def rpc_result(result) -> httpx.Response:
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})


def padded_topic(address: str) -> str:
    return "0x" + "0" * 24 + address.lower()[2:]


def uint256(value: int) -> str:
    return "0x" + format(value, "x").rjust(64, "0")


def transfer_calldata(to_address: str, raw_amount: int) -> str:
    return "0xa9059cbb" + "0" * 24 + to_address.lower()[2:] + format(raw_amount, "x").rjust(64, "0")


def evm_token_tx(contract=BSC_USDT, to_address=RECIPIENT, raw_amount=0, block_number="0x1b4"):
    return {
        "hash": TX_HASH,
        "from": SENDER,
        "to": contract,
        "value": "0x0",
        "blockNumber": block_number,
        "gas": "0xfde8",
        "gasPrice": "0x3b9aca00",
        "input": transfer_calldata(to_address, raw_amount),
    }


def evm_token_receipt(contract=BSC_USDT, to_address=RECIPIENT, raw_amount=0, status="0x1", signature=TRANSFER_EVENT_SIGNATURE):
    return {
        "transactionHash": TX_HASH,
        "status": status,
        "gasUsed": "0xb411",
        "logs": [{
            "address": contract,
            "topics": [signature, padded_topic(SENDER), padded_topic(to_address)],
            "data": uint256(raw_amount),
        }],
    }


def make_config(**kwargs) -> VerifierConfiguration:
    overrides = {
        Network.BSC: BSC_RPC,
        Network.ETHEREUM: ETH_RPC,
        Network.POLYGON: POLYGON_RPC,
        Network.TRON: TRON_API,
    }
    overrides.update(kwargs.pop("endpoint_overrides", {}))
    return VerifierConfiguration(endpoint_overrides=overrides, **kwargs)


@pytest.fixture
def make_service():
    """핸들러를 받아 (서비스, 기록기) 반환"""

    def _make(handler, **config_kwargs):
        recorder = RecordingHandler(handler)
        client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        service = TransactionVerificationService(config=make_config(**config_kwargs), client=client)
        return service, recorder

    return _make
