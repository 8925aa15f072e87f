"""
txverify - 멀티 체인 트랜잭션 검증 엔진 (BSC, Ethereum, Polygon, TRON)
"""
from .chain_configs import Network, TokenInfo, TokenRegistry, get_chain_configs
from .configuration import VerifierConfiguration
from .errors import (
    AuthorizationError,
    DecodeError,
    EmptyResultError,
    EndpointError,
    EndpointsExhaustedError,
    NotFoundError,
    TxVerifyError,
    UnsupportedNetworkError,
    ValidationError,
)
from .models import (
    NetworkProbeEntry,
    ProbeResult,
    QueryResult,
    TransactionDetails,
    VerificationRequest,
    VerificationResult,
    VerifiedTransactionDetails,
)
from .validation import is_valid_address, is_valid_hash
from .services import TransactionVerificationService

__all__ = [
    "Network",
    "TokenInfo",
    "TokenRegistry",
    "get_chain_configs",
    "VerifierConfiguration",
    "AuthorizationError",
    "DecodeError",
    "EmptyResultError",
    "EndpointError",
    "EndpointsExhaustedError",
    "NotFoundError",
    "TxVerifyError",
    "UnsupportedNetworkError",
    "ValidationError",
    "NetworkProbeEntry",
    "ProbeResult",
    "QueryResult",
    "TransactionDetails",
    "VerificationRequest",
    "VerificationResult",
    "VerifiedTransactionDetails",
    "is_valid_address",
    "is_valid_hash",
    "TransactionVerificationService",
]

__version__ = "1.0.0"
