"""
주소 정규화 헬퍼 (EVM hex, TRON base58check)
"""
import re
from typing import Optional

import base58

EVM_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
TRON_HEX_PATTERN = re.compile(r"^41[0-9a-fA-F]{40}$")
TRON_BASE58_PATTERN = re.compile(r"^T[1-9A-HJ-NP-Za-km-z]{33}$")

TRON_ADDRESS_PREFIX = b"\x41"


def normalize_evm_address(address: Optional[str]) -> str:
    """소문자 + 0x 접두사. 이벤트 로그의 32바이트 패딩 값은 오른쪽 20바이트만 사용"""
    if not address:
        return ""
    address = address.lower()
    if not address.startswith("0x"):
        address = "0x" + address
    if len(address) > 42:
        address = "0x" + address[-40:]
    return address


def tron_hex_to_base58(hex_address: str) -> str:
    """41로 시작하는 hex 주소 -> T로 시작하는 base58check 주소"""
    raw = bytes.fromhex(hex_address[2:] if hex_address.lower().startswith("0x") else hex_address)
    return base58.b58encode_check(raw).decode("ascii")


def is_tron_base58(address: str) -> bool:
    if not isinstance(address, str) or not TRON_BASE58_PATTERN.match(address):
        return False
    try:
        raw = base58.b58decode_check(address)
    except ValueError:
        return False
    return len(raw) == 21 and raw[:1] == TRON_ADDRESS_PREFIX


def normalize_tron_address(address: Optional[str]) -> Optional[str]:
    """TRON 주소를 base58check 형식으로 통일 (알 수 없는 형식은 그대로 반환)"""
    if not address:
        return None
    if TRON_HEX_PATTERN.match(address):
        return tron_hex_to_base58(address)
    # TRC20 calldata에서 꺼낸 20바이트 주소
    if EVM_ADDRESS_PATTERN.match(address):
        return tron_hex_to_base58("41" + address[2:])
    return address


def addresses_equal(left: Optional[str], right: Optional[str]) -> bool:
    """대소문자 구분 없는 주소 비교"""
    if not left or not right:
        return False
    return left.strip().casefold() == right.strip().casefold()
