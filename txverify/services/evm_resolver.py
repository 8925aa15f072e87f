"""
EVM 체인 트랜잭션 리졸버 (BSC, Ethereum, Polygon 공용)

1. eth_getTransactionByHash / eth_getTransactionReceipt를 공개 RPC 목록에 순서대로 요청
2. RPC가 모두 실패하면 체인의 scan API(module=proxy)로 폴백.
   API 키가 거부되면 키 없이 공개 경로로 다시 요청
3. 영수증에 Transfer 이벤트가 있으면 토큰 전송, 없으면 네이티브 코인 전송으로 해석
"""
import logging
from typing import Any, List, Optional, Tuple

from ..addresses import normalize_evm_address
from ..amounts import parse_quantity, to_decimal
from ..chain_configs import Network
from ..decoding import decode_transfer_calldata, decode_transfer_log, find_transfer_log
from ..errors import DecodeError, EndpointError, EndpointsExhaustedError, NotFoundError
from ..models import TransactionDetails
from ..validation import strip_hex_prefix
from .base_resolver import BaseResolver
from .failover import JsonRpcRequest, ScanApiRequest

logger = logging.getLogger(__name__)

TX_BY_HASH = "eth_getTransactionByHash"
TX_RECEIPT = "eth_getTransactionReceipt"


def _optional_quantity(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return parse_quantity(value)
    except ValueError:
        return None


class EVMTransactionResolver(BaseResolver):
    """EVM 체인 하나에 대한 리졸버. 체인별 차이는 설정(엔드포인트, scan API, 토큰)뿐"""

    def __init__(self, network: Network, config=None, failover=None, token_registry=None):
        if not network.is_evm:
            raise ValueError(f"{network.value} is not an EVM network")
        super().__init__(network, config=config, failover=failover, token_registry=token_registry)
        self.endpoints = self.config.endpoints_for(network)
        self.api_key = self.config.api_key_for(network)
        self.scan_api_url = self.config.fallback_url_for(network)

    def normalize_address(self, address: str) -> str:
        return normalize_evm_address(address)

    async def fetch_details(self, tx_hash: str) -> TransactionDetails:
        # EVM 노드는 0x 접두사 없는 해시를 거부한다
        tx_hash = "0x" + strip_hex_prefix(tx_hash).lower()
        tx, source = await self._fetch(TX_BY_HASH, tx_hash)
        if not isinstance(tx, dict) or not tx.get("hash") or tx.get("hash") == "0x":
            raise NotFoundError(f"Transaction not found on {self.label} blockchain")

        # 정상 트랜잭션인지 확인 (응답 껍데기만 있는 경우 제외)
        if not tx.get("to") or not tx.get("from") or tx.get("value") is None:
            logger.debug(
                f"[{self.label}] 잘못된 트랜잭션 데이터 - to: {tx.get('to')}, from: {tx.get('from')}, value: {tx.get('value')}"
            )
            raise DecodeError(f"Invalid transaction data on {self.label} blockchain")

        receipt, _ = await self._fetch(TX_RECEIPT, tx_hash)
        if receipt is not None and not isinstance(receipt, dict):
            raise DecodeError(f"Invalid transaction receipt on {self.label} blockchain")

        return self._decode(tx_hash, tx, receipt, source)

    def _decode(self, tx_hash: str, tx: dict, receipt: Optional[dict], source: str) -> TransactionDetails:
        block_number = _optional_quantity(tx.get("blockNumber"))
        is_confirmed = bool(block_number)
        receipt_status = _optional_quantity(receipt.get("status")) if receipt else None
        if receipt_status == 0:
            logger.debug(f"[{self.label}] 영수증 status=0 (실행 실패 트랜잭션)")
            is_confirmed = False

        common = {
            "transaction_hash": tx.get("hash") or tx_hash,
            "network": self.network,
            "block_number": block_number,
            "is_confirmed": is_confirmed,
            "gas_used": _optional_quantity(receipt.get("gasUsed")) if receipt else _optional_quantity(tx.get("gas")),
            "gas_price": _optional_quantity(tx.get("gasPrice")),
            "timestamp": _optional_quantity(tx.get("timestamp")),
            "source": source,
        }

        transfer_log = find_transfer_log(receipt.get("logs") if receipt else None)
        if transfer_log is not None:
            try:
                transfer = decode_transfer_log(transfer_log)
            except (KeyError, IndexError, ValueError) as e:
                raise DecodeError(f"Invalid Transfer event on {self.label} blockchain: {e}") from e
            logger.debug(f"[{self.label}] 토큰 전송 감지 (Transfer 이벤트): {transfer}")
            return self._token_details(common, transfer["from_address"], transfer["to_address"],
                                       transfer["raw_amount"], transfer["contract_address"])

        # 영수증이 아직 없으면(펜딩) calldata로 토큰 전송 여부 판단
        if receipt is None:
            call = decode_transfer_calldata(tx.get("input"))
            if call is not None:
                logger.debug(f"[{self.label}] 토큰 전송 감지 (calldata): {call}")
                return self._token_details(common, normalize_evm_address(tx.get("from")), call["to_address"],
                                           call["raw_amount"], normalize_evm_address(tx.get("to")))

        try:
            raw_value = parse_quantity(tx.get("value"))
        except ValueError as e:
            raise DecodeError(f"Invalid transaction value on {self.label} blockchain") from e

        return TransactionDetails(
            **common,
            recipient_address=normalize_evm_address(tx.get("to")),
            sender_address=normalize_evm_address(tx.get("from")),
            actual_amount=to_decimal(raw_value, self.chain.native_decimals),
            raw_amount=raw_value,
            is_token_transfer=False,
            token_symbol=self.chain.symbol,
            token_decimals=self.chain.native_decimals,
        )

    async def _fetch(self, method: str, tx_hash: str) -> Tuple[Optional[Any], Optional[str]]:
        """RPC 목록 → scan API 순서로 조회. 모두 '결과 없음'이면 (None, None)"""
        errors: List[EndpointError] = []
        try:
            result = await self.failover.call(self.endpoints, JsonRpcRequest(method, [tx_hash]), label=self.label)
            return result, "rpc"
        except EndpointsExhaustedError as e:
            errors.extend(e.errors)

        if self.scan_api_url:
            logger.debug(f"[{self.label}] RPC 엔드포인트 모두 실패, scan API로 폴백: {method}")
            try:
                return await self._scan_call(method, tx_hash), "scan_api"
            except EndpointsExhaustedError as e:
                errors.extend(e.errors)

        exhausted = EndpointsExhaustedError(errors)
        if exhausted.answered_empty:
            return None, None
        raise exhausted

    async def _scan_call(self, method: str, tx_hash: str) -> Any:
        request = ScanApiRequest(action=method, params={"txhash": tx_hash}, api_key=self.api_key)
        endpoints = [self.scan_api_url]
        try:
            return await self.failover.call(endpoints, request, label=self.label)
        except EndpointsExhaustedError as e:
            if not request.api_key or not e.rejected_authorization:
                raise
            logger.warning(f"[{self.label}] API 키가 거부되었습니다. 공개(무인증) 경로로 재시도합니다.")
            return await self.failover.call(endpoints, request.without_key(), label=self.label)
