"""
TRON 트랜잭션 리졸버

TronGrid REST(/v1/transactions) → /wallet/gettransactionbyid → /walletsolidity/gettransactionbyid 순서로
raw_data.contract[0].parameter.value가 있는 첫 응답을 사용한다.
모두 실패하면 Tronscan 공개 API(/api/transaction-info)로 폴백한다.
"""
import logging
from typing import List, Optional

from ..addresses import normalize_tron_address
from ..amounts import parse_quantity, to_decimal
from ..chain_configs import TRON_NATIVE_DECIMALS, TRON_SUCCESS_MARKER, UNKNOWN_TOKEN_SYMBOL, Network
from ..decoding import decode_transfer_calldata
from ..errors import DecodeError, EndpointError, EndpointsExhaustedError, NotFoundError
from ..models import TransactionDetails
from ..validation import strip_hex_prefix
from .base_resolver import BaseResolver
from .failover import HttpGetRequest

logger = logging.getLogger(__name__)

TRON_API_KEY_HEADER = "TRON-PRO-API-KEY"


def _unwrap_trongrid(payload):
    """v1 REST는 {"data": [tx]}, wallet API는 tx 자체"""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, list):
        return data[0] if data else None
    return payload


def _contract_value(tx) -> Optional[dict]:
    try:
        value = tx["raw_data"]["contract"][0]["parameter"]["value"]
    except (KeyError, IndexError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def _has_contract_parameters(tx) -> bool:
    return _contract_value(tx) is not None


def _unwrap_tronscan(payload):
    return payload if isinstance(payload, dict) else None


def _has_tronscan_hash(record) -> bool:
    return bool(record.get("hash"))


class TronResolver(BaseResolver):
    """TRON(TRX, TRC20) 리졸버"""

    def __init__(self, config=None, failover=None, token_registry=None):
        super().__init__(Network.TRON, config=config, failover=failover, token_registry=token_registry)
        self.base_urls = self.config.endpoints_for(Network.TRON)
        self.api_key = self.config.api_key_for(Network.TRON)
        self.fallback_url = self.config.fallback_url_for(Network.TRON)

    def normalize_address(self, address: str) -> str:
        return normalize_tron_address(address) or ""

    def _primary_endpoints(self, tx_hash: str) -> List[str]:
        endpoints = []
        for base in self.base_urls:
            base = base.rstrip("/")
            endpoints.extend([
                f"{base}/v1/transactions/{tx_hash}",
                f"{base}/wallet/gettransactionbyid?value={tx_hash}",
                f"{base}/walletsolidity/gettransactionbyid?value={tx_hash}",
            ])
        return endpoints

    async def fetch_details(self, tx_hash: str) -> TransactionDetails:
        tx_hash = strip_hex_prefix(tx_hash).lower()
        errors: List[EndpointError] = []

        headers = {TRON_API_KEY_HEADER: self.api_key} if self.api_key else {}
        primary = HttpGetRequest(
            headers=headers,
            unwrap=_unwrap_trongrid,
            accept=_has_contract_parameters,
            name="trongrid",
        )
        try:
            tx = await self.failover.call(self._primary_endpoints(tx_hash), primary, label=self.label)
            return self._decode_trongrid(tx_hash, tx)
        except EndpointsExhaustedError as e:
            errors.extend(e.errors)

        if self.fallback_url:
            logger.debug(f"[{self.label}] TronGrid 엔드포인트 모두 실패, Tronscan API로 폴백")
            fallback = HttpGetRequest(
                path="/api/transaction-info",
                params={"hash": tx_hash},
                unwrap=_unwrap_tronscan,
                accept=_has_tronscan_hash,
                name="tronscan",
            )
            try:
                record = await self.failover.call([self.fallback_url], fallback, label=self.label)
                return self._decode_tronscan(tx_hash, record)
            except EndpointsExhaustedError as e:
                errors.extend(e.errors)

        exhausted = EndpointsExhaustedError(errors)
        if exhausted.answered_empty:
            raise NotFoundError(f"Transaction not found on {self.label} blockchain")
        raise exhausted

    def _decode_trongrid(self, tx_hash: str, tx: dict) -> TransactionDetails:
        contract = tx["raw_data"]["contract"][0]
        value = _contract_value(tx)
        ret = tx.get("ret") or [{}]
        common = {
            "transaction_hash": tx.get("txID") or tx_hash,
            "network": self.network,
            "block_number": tx.get("blockNumber"),
            "is_confirmed": isinstance(ret[0], dict) and ret[0].get("contractRet") == TRON_SUCCESS_MARKER,
            "timestamp": tx.get("block_timestamp") or tx.get("blockTimeStamp") or tx["raw_data"].get("timestamp"),
            "source": "trongrid",
        }
        sender = normalize_tron_address(value.get("owner_address"))

        # TRC20: TriggerSmartContract + transfer(address,uint256) calldata
        if contract.get("type") == "TriggerSmartContract":
            call = decode_transfer_calldata(value.get("data"))
            if call is None or not value.get("contract_address"):
                raise DecodeError(f"Unsupported contract call on {self.label} blockchain")
            return self._token_details(
                common,
                sender=sender,
                recipient=normalize_tron_address(call["to_address"]),
                raw_amount=call["raw_amount"],
                contract_address=normalize_tron_address(value.get("contract_address")),
            )

        if not value.get("to_address") or not value.get("owner_address") or value.get("amount") is None:
            raise DecodeError(f"Invalid transaction data on {self.label} blockchain")
        try:
            raw_amount = parse_quantity(value.get("amount"))
        except ValueError as e:
            raise DecodeError(f"Invalid transaction amount on {self.label} blockchain") from e

        return TransactionDetails(
            **common,
            recipient_address=normalize_tron_address(value.get("to_address")),
            sender_address=sender,
            actual_amount=to_decimal(raw_amount, TRON_NATIVE_DECIMALS),
            raw_amount=raw_amount,
            is_token_transfer=False,
            token_symbol=self.chain.symbol,
            token_decimals=TRON_NATIVE_DECIMALS,
        )

    def _decode_tronscan(self, tx_hash: str, record: dict) -> TransactionDetails:
        is_confirmed = (
            str(record.get("contractRet", "")).upper() == TRON_SUCCESS_MARKER
            and record.get("confirmed") is not False
        )
        common = {
            "transaction_hash": record.get("hash") or tx_hash,
            "network": self.network,
            "block_number": record.get("block"),
            "is_confirmed": is_confirmed,
            "timestamp": record.get("timestamp"),
            "source": "tronscan",
        }

        transfer_info = (record.get("trc20TransferInfo") or [None])[0] or record.get("tokenTransferInfo")
        if transfer_info:
            try:
                raw_amount = parse_quantity(str(transfer_info.get("amount_str")))
            except ValueError as e:
                raise DecodeError(f"Invalid token amount on {self.label} blockchain") from e
            contract_address = transfer_info.get("contract_address")
            registered = self.token_registry.lookup(self.network, contract_address)
            decimals = transfer_info.get("decimals")
            if decimals is None:
                decimals = registered.decimals if registered else TRON_NATIVE_DECIMALS
            return TransactionDetails(
                **common,
                recipient_address=normalize_tron_address(transfer_info.get("to_address")),
                sender_address=normalize_tron_address(transfer_info.get("from_address")),
                actual_amount=to_decimal(raw_amount, int(decimals)),
                raw_amount=raw_amount,
                is_token_transfer=True,
                token_symbol=transfer_info.get("symbol") or (registered.symbol if registered else UNKNOWN_TOKEN_SYMBOL),
                token_decimals=int(decimals),
                contract_address=contract_address,
            )

        contract_data = record.get("contractData") or {}
        recipient = contract_data.get("to_address") or record.get("toAddress")
        sender = contract_data.get("owner_address") or record.get("ownerAddress")
        amount = contract_data.get("amount")
        if not recipient or not sender or amount is None:
            raise DecodeError(f"Invalid transaction data on {self.label} blockchain")
        try:
            raw_amount = parse_quantity(amount)
        except ValueError as e:
            raise DecodeError(f"Invalid transaction amount on {self.label} blockchain") from e

        return TransactionDetails(
            **common,
            recipient_address=normalize_tron_address(recipient),
            sender_address=normalize_tron_address(sender),
            actual_amount=to_decimal(raw_amount, TRON_NATIVE_DECIMALS),
            raw_amount=raw_amount,
            is_token_transfer=False,
            token_symbol=self.chain.symbol,
            token_decimals=TRON_NATIVE_DECIMALS,
        )

