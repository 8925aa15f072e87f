"""
검증 엔진 설정

엔진은 생성 시 이 설정 객체를 명시적으로 전달받는다.
환경 변수(.env 포함)에서 읽으려면 VerifierConfiguration.from_env()를 사용한다.
"""
import os
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv

from .amounts import DEFAULT_TOLERANCE
from .chain_configs import CHAIN_CONFIGS, EVM_NATIVE_DECIMALS, EndpointSet, Network

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "txverify/1.0"

# 체인별 RPC URL 목록을 덮어쓰는 환경 변수 (쉼표 구분)
ENDPOINT_ENV_VARS: Mapping[Network, str] = MappingProxyType({
    Network.BSC: "BSC_RPC_URLS",
    Network.ETHEREUM: "ETHEREUM_RPC_URLS",
    Network.POLYGON: "POLYGON_RPC_URLS",
    Network.TRON: "TRON_API_URLS",
})


def _empty_mapping():
    return MappingProxyType({})


def _split_urls(raw: Optional[str]) -> EndpointSet:
    if not raw:
        return ()
    return tuple(url.strip() for url in raw.split(",") if url.strip())


@dataclass(frozen=True)
class VerifierConfiguration:
    """검증 엔진 설정 (불변)"""

    # 체인별 API 키 (없으면 공개 접근으로 동작)
    api_keys: Mapping[Network, str] = field(default_factory=_empty_mapping)
    # 체인별 엔드포인트 목록 덮어쓰기
    endpoint_overrides: Mapping[Network, EndpointSet] = field(default_factory=_empty_mapping)
    # 체인별 폴백 API (EVM: scan API, TRON: Tronscan) URL 덮어쓰기
    fallback_overrides: Mapping[Network, str] = field(default_factory=_empty_mapping)
    amount_tolerance: Decimal = DEFAULT_TOLERANCE
    default_token_decimals: int = EVM_NATIVE_DECIMALS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        # 호출자가 넘긴 dict가 나중에 바뀌어도 영향받지 않도록 복사
        object.__setattr__(self, "api_keys", MappingProxyType({
            Network(k): v for k, v in dict(self.api_keys).items() if v
        }))
        object.__setattr__(self, "endpoint_overrides", MappingProxyType({
            Network(k): tuple(v) for k, v in dict(self.endpoint_overrides).items() if v
        }))
        object.__setattr__(self, "fallback_overrides", MappingProxyType({
            Network(k): v for k, v in dict(self.fallback_overrides).items() if v
        }))
        object.__setattr__(self, "amount_tolerance", Decimal(str(self.amount_tolerance)))
        if self.amount_tolerance < 0:
            raise ValueError("amount_tolerance must be >= 0")
        if self.default_token_decimals < 0:
            raise ValueError("default_token_decimals must be >= 0")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")

    def api_key_for(self, network: Network) -> Optional[str]:
        return self.api_keys.get(network)

    def endpoints_for(self, network: Network) -> EndpointSet:
        """덮어쓴 목록이 있으면 그것을, 없으면 기본 목록을 반환"""
        return self.endpoint_overrides.get(network) or CHAIN_CONFIGS[network].endpoints

    def fallback_url_for(self, network: Network) -> Optional[str]:
        chain = CHAIN_CONFIGS[network]
        return self.fallback_overrides.get(network) or chain.scan_api_url or chain.fallback_api_url

    @classmethod
    def from_env(cls) -> "VerifierConfiguration":
        """환경 변수에서 설정 로드"""
        load_dotenv()

        api_keys = {}
        for network, chain in CHAIN_CONFIGS.items():
            value = os.getenv(chain.api_key_env_var) if chain.api_key_env_var else None
            if value:
                api_keys[network] = value
            else:
                logger.debug(f"[{network.value}] API 키 없음 ({chain.api_key_env_var}) - 공개 엔드포인트만 사용")

        overrides = {}
        for network, env_var in ENDPOINT_ENV_VARS.items():
            urls = _split_urls(os.getenv(env_var))
            if urls:
                overrides[network] = urls

        return cls(
            api_keys=api_keys,
            endpoint_overrides=overrides,
            amount_tolerance=Decimal(os.getenv("AMOUNT_TOLERANCE", str(DEFAULT_TOLERANCE))),
            default_token_decimals=int(os.getenv("DEFAULT_TOKEN_DECIMALS", str(EVM_NATIVE_DECIMALS))),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))),
            user_agent=os.getenv("TXVERIFY_USER_AGENT", DEFAULT_USER_AGENT),
        )
