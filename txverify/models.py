"""
검증 엔진 입출력 모델

모든 모델은 생성 후 변경되지 않는다 (frozen).
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .chain_configs import Network


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """camelCase 키의 JSON 호환 dict"""
        return self.model_dump(mode="json", by_alias=True)


class VerificationRequest(_FrozenModel):
    transaction_hash: str
    expected_address: str
    expected_amount: Decimal
    network: Network


class TransactionDetails(_FrozenModel):
    """엔드포인트 응답 형식과 무관하게 정규화된 트랜잭션 정보"""
    transaction_hash: str
    network: Network
    recipient_address: Optional[str] = None
    sender_address: Optional[str] = None
    actual_amount: Optional[Decimal] = None
    raw_amount: Optional[int] = None
    block_number: Optional[int] = None
    is_confirmed: bool = False
    is_token_transfer: bool = False
    token_symbol: Optional[str] = None
    token_decimals: Optional[int] = None
    contract_address: Optional[str] = None
    gas_used: Optional[int] = None
    gas_price: Optional[int] = None
    timestamp: Optional[int] = None
    # 어떤 엔드포인트 형식에서 왔는지 (rpc, scan_api, trongrid_rest, tronscan ...)
    source: Optional[str] = None


class VerifiedTransactionDetails(TransactionDetails):
    expected_amount: Decimal
    is_recipient_valid: bool
    is_amount_valid: bool


class VerificationResult(_FrozenModel):
    is_valid: bool
    error: Optional[str] = None
    details: Optional[VerifiedTransactionDetails] = None


class QueryResult(_FrozenModel):
    exists: bool
    error: Optional[str] = None
    # not_found, decode_error, endpoints_exhausted ...
    error_kind: Optional[str] = Field(default=None, exclude=True)
    details: Optional[TransactionDetails] = None


class NetworkProbeEntry(_FrozenModel):
    network: Network
    found: bool
    details: Optional[TransactionDetails] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


class ProbeResult(_FrozenModel):
    transaction_hash: Optional[str] = None
    found: bool
    found_on_network: Optional[Network] = None
    total_networks_checked: int = 0
    results: List[NetworkProbeEntry] = Field(default_factory=list)
    error: Optional[str] = None
