"""
체인 리졸버 공통 로직

각 체인 리졸버는 fetch_details()로 응답을 TransactionDetails 하나로 정규화하기만 하면 되고,
유효성 판단(verify)과 조회(query)는 여기서 공통으로 처리한다.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..addresses import addresses_equal
from ..amounts import amounts_match, to_decimal
from ..chain_configs import CHAIN_CONFIGS, UNKNOWN_TOKEN_SYMBOL, Network, TokenRegistry
from ..configuration import VerifierConfiguration
from ..errors import EndpointsExhaustedError, TxVerifyError, ValidationError
from ..models import QueryResult, TransactionDetails, VerificationResult, VerifiedTransactionDetails
from ..utils import short_hash
from ..validation import is_valid_hash, validate_request
from .failover import EndpointFailoverClient

logger = logging.getLogger(__name__)


class BaseResolver(ABC):
    network: Network

    def __init__(
        self,
        network: Network,
        config: Optional[VerifierConfiguration] = None,
        failover: Optional[EndpointFailoverClient] = None,
        token_registry: Optional[TokenRegistry] = None,
    ):
        self.network = network
        self.chain = CHAIN_CONFIGS[network]
        self.config = config or VerifierConfiguration()
        self.failover = failover or EndpointFailoverClient(
            timeout=self.config.request_timeout,
            user_agent=self.config.user_agent,
        )
        self.token_registry = token_registry or TokenRegistry()

    @property
    def label(self) -> str:
        return self.network.value

    @abstractmethod
    async def fetch_details(self, tx_hash: str) -> TransactionDetails:
        """트랜잭션을 조회해 정규화. NotFoundError / DecodeError / EndpointsExhaustedError를 던질 수 있음"""

    @abstractmethod
    def normalize_address(self, address: str) -> str:
        """비교용 주소 표기 통일"""

    def describe_error(self, error: Exception) -> str:
        if isinstance(error, EndpointsExhaustedError):
            return f"All {self.label} endpoints failed: {error.last_error}"
        return str(error)

    def _token_details(self, common: dict, sender: Optional[str], recipient: Optional[str], raw_amount: int,
                       contract_address: Optional[str]) -> TransactionDetails:
        """토큰 전송 상세. 레지스트리에 없는 토큰은 기본 decimals와 UNKNOWN 심볼"""
        token = self.token_registry.lookup(self.network, contract_address)
        decimals = token.decimals if token else self.config.default_token_decimals
        if token is None:
            logger.debug(f"[{self.label}] 등록되지 않은 토큰 {contract_address} → decimals={decimals}")
        return TransactionDetails(
            **common,
            recipient_address=recipient,
            sender_address=sender,
            actual_amount=to_decimal(raw_amount, decimals),
            raw_amount=raw_amount,
            is_token_transfer=True,
            token_symbol=token.symbol if token else UNKNOWN_TOKEN_SYMBOL,
            token_decimals=decimals,
            contract_address=contract_address,
        )

    async def verify(self, tx_hash, expected_address, expected_amount) -> VerificationResult:
        """트랜잭션이 기대한 수신자/금액으로 확정되었는지 검증"""
        try:
            request = validate_request(tx_hash, expected_address, expected_amount, self.network)
        except ValidationError as e:
            logger.debug(f"[{self.label}] 입력 검증 실패: {e}")
            return VerificationResult(is_valid=False, error=str(e))

        logger.info(f"[{self.label}] 트랜잭션 검증: {short_hash(tx_hash)}")
        try:
            details = await self.fetch_details(request.transaction_hash)
        except TxVerifyError as e:
            logger.info(f"[{self.label}] 검증 실패 ({e.kind}): {e}")
            return VerificationResult(is_valid=False, error=self.describe_error(e))
        except Exception as e:
            logger.error(f"[{self.label}] 알 수 없는 오류 발생 → {e}", exc_info=True)
            return VerificationResult(is_valid=False, error=f"Unexpected error: {e}")

        is_recipient_valid = addresses_equal(
            details.recipient_address, self.normalize_address(request.expected_address)
        )
        is_amount_valid = amounts_match(
            details.actual_amount, request.expected_amount, self.config.amount_tolerance
        )
        verified = VerifiedTransactionDetails(
            **details.model_dump(),
            expected_amount=request.expected_amount,
            is_recipient_valid=is_recipient_valid,
            is_amount_valid=is_amount_valid,
        )
        is_valid = is_recipient_valid and is_amount_valid and details.is_confirmed
        logger.info(
            f"[{self.label}] 검증 결과: valid={is_valid} "
            f"(recipient={is_recipient_valid}, amount={is_amount_valid}, confirmed={details.is_confirmed})"
        )
        return VerificationResult(is_valid=is_valid, error=None, details=verified)

    async def query(self, tx_hash) -> QueryResult:
        """유효성 판단 없이 트랜잭션 정보만 조회"""
        if not is_valid_hash(tx_hash):
            return QueryResult(exists=False, error="Invalid transaction hash format", error_kind=ValidationError.kind)

        try:
            details = await self.fetch_details(tx_hash)
        except TxVerifyError as e:
            logger.debug(f"[{self.label}] 조회 실패 ({e.kind}): {e}")
            return QueryResult(exists=False, error=self.describe_error(e), error_kind=e.kind)
        except Exception as e:
            logger.error(f"[{self.label}] 알 수 없는 오류 발생 → {e}", exc_info=True)
            return QueryResult(exists=False, error=f"Unexpected error: {e}", error_kind=TxVerifyError.kind)

        return QueryResult(exists=True, error=None, details=details)
