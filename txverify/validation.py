"""
네트워크 호출 전 입력 검증
"""
import re

from .addresses import EVM_ADDRESS_PATTERN, TRON_HEX_PATTERN, is_tron_base58
from .amounts import to_decimal_amount
from .chain_configs import Network
from .errors import ValidationError
from .models import VerificationRequest

_HEX_64 = re.compile(r"^[0-9a-fA-F]{64}$")


def strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def is_valid_hash(tx_hash) -> bool:
    """0x 접두사(선택) + 64자리 16진수"""
    if not tx_hash or not isinstance(tx_hash, str):
        return False
    return bool(_HEX_64.match(strip_hex_prefix(tx_hash)))


def is_valid_address(address, network: Network) -> bool:
    if not address or not isinstance(address, str):
        return False
    if network is Network.TRON:
        return bool(TRON_HEX_PATTERN.match(address)) or is_tron_base58(address)
    return bool(EVM_ADDRESS_PATTERN.match(address))


def validate_request(tx_hash, expected_address, expected_amount, network: Network) -> VerificationRequest:
    """검증 요청 입력을 확인하고 VerificationRequest 생성. 잘못된 입력은 ValidationError"""
    if not is_valid_hash(tx_hash):
        raise ValidationError("Invalid transaction hash format")
    if not is_valid_address(expected_address, network):
        raise ValidationError(f"Invalid {network.value} address format")
    try:
        amount = to_decimal_amount(expected_amount)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Invalid amount: {expected_amount!r}")
    return VerificationRequest(
        transaction_hash=tx_hash,
        expected_address=expected_address,
        expected_amount=amount,
        network=network,
    )
