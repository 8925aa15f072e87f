"""
트랜잭션 검증 서비스

설정 객체 하나로 리졸버(EVM x3, TRON), 라우터, 크로스 네트워크 조회를 구성하는 진입점.
"""
import logging
from typing import Dict, Optional

import httpx

from ..chain_configs import Network, TokenRegistry
from ..configuration import VerifierConfiguration
from ..models import ProbeResult, QueryResult, VerificationResult
from ..utils import short_hash
from .base_resolver import BaseResolver
from .evm_resolver import EVMTransactionResolver
from .failover import EndpointFailoverClient
from .prober import CrossNetworkProber
from .router import NetworkRouter
from .tron_resolver import TronResolver

logger = logging.getLogger(__name__)


def build_resolvers(
    config: VerifierConfiguration,
    failover: EndpointFailoverClient,
    token_registry: TokenRegistry,
) -> Dict[Network, BaseResolver]:
    resolvers: Dict[Network, BaseResolver] = {}
    for network in (Network.BSC, Network.ETHEREUM, Network.POLYGON):
        resolvers[network] = EVMTransactionResolver(
            network, config=config, failover=failover, token_registry=token_registry
        )
    resolvers[Network.TRON] = TronResolver(config=config, failover=failover, token_registry=token_registry)
    return resolvers


class TransactionVerificationService:
    """verify / query / probe 공개 연산. 어떤 실패도 예외로 새어 나가지 않고 결과 객체로 반환된다"""

    def __init__(
        self,
        config: Optional[VerifierConfiguration] = None,
        token_registry: Optional[TokenRegistry] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or VerifierConfiguration()
        self.token_registry = token_registry or TokenRegistry()
        self.failover = EndpointFailoverClient(
            timeout=self.config.request_timeout,
            user_agent=self.config.user_agent,
            client=client,
        )
        self.resolvers = build_resolvers(self.config, self.failover, self.token_registry)
        self.router = NetworkRouter(self.resolvers)
        self.prober = CrossNetworkProber(self.resolvers)

    @classmethod
    def from_env(cls, **kwargs) -> "TransactionVerificationService":
        return cls(config=VerifierConfiguration.from_env(), **kwargs)

    async def verify(self, tx_hash, expected_address, expected_amount, network) -> VerificationResult:
        logger.info(f"트랜잭션 검증 요청: {short_hash(tx_hash)} (network={network})")
        result = await self.router.verify(tx_hash, expected_address, expected_amount, network)
        logger.info(f"트랜잭션 검증 결과: valid={result.is_valid}, error={result.error}")
        return result

    async def query(self, tx_hash, network) -> QueryResult:
        logger.info(f"블록체인 트랜잭션 조회: {short_hash(tx_hash)} (network={network})")
        return await self.router.query(tx_hash, network)

    async def probe(self, tx_hash) -> ProbeResult:
        result = await self.prober.probe(tx_hash)
        logger.info(f"전체 네트워크 조회 완료: found={result.found}, network={result.found_on_network}")
        return result
