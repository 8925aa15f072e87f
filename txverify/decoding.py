"""
ERC20 / TRC20 전송 데이터 디코딩

Transfer 이벤트: Transfer(address indexed from, address indexed to, uint256 value)
- topics[0]: 이벤트 시그니처
- topics[1]: from 주소 (32바이트 패딩)
- topics[2]: to 주소 (32바이트 패딩)
- data: value (uint256)

transfer(address,uint256) calldata: 4바이트 셀렉터 + 32바이트 주소 + 32바이트 금액
"""
from typing import Iterable, Optional

from .addresses import normalize_evm_address
from .amounts import parse_quantity
from .chain_configs import TRANSFER_EVENT_SIGNATURE, TRANSFER_METHOD_ID


def find_transfer_log(logs: Optional[Iterable[dict]]) -> Optional[dict]:
    """첫 번째 Transfer 이벤트 로그"""
    for log in logs or []:
        topics = log.get("topics") or []
        if len(topics) >= 3 and str(topics[0]).lower() == TRANSFER_EVENT_SIGNATURE:
            return log
    return None


def decode_transfer_log(log: dict) -> dict:
    """Transfer 로그 -> from, to, raw_amount, contract_address"""
    topics = log["topics"]
    data = log.get("data") or "0x0"
    return {
        "from_address": normalize_evm_address(topics[1]),
        "to_address": normalize_evm_address(topics[2]),
        "raw_amount": parse_quantity(data if data != "0x" else "0x0"),
        "contract_address": normalize_evm_address(log.get("address")) or None,
    }


def decode_transfer_calldata(data: Optional[str]) -> Optional[dict]:
    """transfer(address,uint256) 호출이면 to, raw_amount 반환, 아니면 None"""
    if not data or not isinstance(data, str):
        return None
    payload = data[2:] if data[:2] in ("0x", "0X") else data
    if len(payload) < 8 + 64 + 64 or payload[:8].lower() != TRANSFER_METHOD_ID:
        return None
    try:
        return {
            "to_address": normalize_evm_address(payload[8 + 24:8 + 64]),
            "raw_amount": int(payload[8 + 64:8 + 128], 16),
        }
    except ValueError:
        return None
