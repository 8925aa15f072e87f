"""
네트워크 라우터

네트워크 별칭(BEP20, TRC20, ERC20 ...)을 Network로 정규화한 뒤 해당 리졸버로 보낸다.
알 수 없는 별칭은 네트워크 호출 없이 바로 실패한다.
"""
import logging
from typing import Mapping

from ..chain_configs import NETWORK_ALIASES, Network
from ..errors import UnsupportedNetworkError
from ..models import QueryResult, VerificationResult
from .base_resolver import BaseResolver

logger = logging.getLogger(__name__)


def normalize_network(alias) -> Network:
    """대소문자 구분 없이 별칭 -> Network. 실패 시 UnsupportedNetworkError"""
    if isinstance(alias, Network):
        return alias
    if not isinstance(alias, str) or not alias.strip():
        raise UnsupportedNetworkError(alias)
    network = NETWORK_ALIASES.get(alias.strip().upper())
    if network is None:
        raise UnsupportedNetworkError(alias)
    return network


class NetworkRouter:
    normalize = staticmethod(normalize_network)

    def __init__(self, resolvers: Mapping[Network, BaseResolver]):
        self.resolvers = dict(resolvers)

    def resolver_for(self, network) -> BaseResolver:
        normalized = normalize_network(network)
        resolver = self.resolvers.get(normalized)
        if resolver is None:
            raise UnsupportedNetworkError(network)
        return resolver

    async def verify(self, tx_hash, expected_address, expected_amount, network) -> VerificationResult:
        try:
            resolver = self.resolver_for(network)
        except UnsupportedNetworkError as e:
            logger.warning(f"지원하지 않는 네트워크: {network}")
            return VerificationResult(is_valid=False, error=str(e))
        return await resolver.verify(tx_hash, expected_address, expected_amount)

    async def query(self, tx_hash, network) -> QueryResult:
        try:
            resolver = self.resolver_for(network)
        except UnsupportedNetworkError as e:
            logger.warning(f"지원하지 않는 네트워크: {network}")
            return QueryResult(exists=False, error=str(e), error_kind=e.kind)
        return await resolver.query(tx_hash)
