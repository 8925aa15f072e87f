#chain_configs.py

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple


class Network(str, Enum):
    """지원 네트워크"""
    BSC = "BSC"
    ETHEREUM = "Ethereum"
    POLYGON = "Polygon"
    TRON = "TRON"

    @property
    def is_evm(self) -> bool:
        return self is not Network.TRON


# 대소문자 구분 없이 비교 (키는 대문자)
NETWORK_ALIASES: Mapping[str, Network] = MappingProxyType({
    "BSC": Network.BSC,
    "BEP20": Network.BSC,
    "BNB": Network.BSC,
    "ETHEREUM": Network.ETHEREUM,
    "ERC20": Network.ETHEREUM,
    "ETH": Network.ETHEREUM,
    "POLYGON": Network.POLYGON,
    "MATIC": Network.POLYGON,
    "TRON": Network.TRON,
    "TRC20": Network.TRON,
    "TRX": Network.TRON,
})

# 크로스 네트워크 조회 우선순위
PROBE_ORDER: Tuple[Network, ...] = (Network.BSC, Network.ETHEREUM, Network.POLYGON, Network.TRON)

# ERC20 Transfer(address indexed from, address indexed to, uint256 value)
TRANSFER_EVENT_SIGNATURE = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
# transfer(address,uint256)
TRANSFER_METHOD_ID = "a9059cbb"

EVM_NATIVE_DECIMALS = 18
TRON_NATIVE_DECIMALS = 6  # 1 TRX = 1,000,000 sun
TRON_SUCCESS_MARKER = "SUCCESS"

EndpointSet = Tuple[str, ...]


@dataclass(frozen=True)
class ChainConfig:
    """체인별 고정 설정 (엔드포인트 목록은 순서가 곧 우선순위)"""
    network: Network
    name: str
    symbol: str
    native_decimals: int
    explorer: str
    endpoints: EndpointSet
    scan_api_url: Optional[str] = None
    api_key_env_var: Optional[str] = None
    fallback_api_url: Optional[str] = None


CHAIN_CONFIGS: Mapping[Network, ChainConfig] = MappingProxyType({
    Network.BSC: ChainConfig(
        network=Network.BSC,
        name="BNB Smart Chain",
        symbol="BNB",
        native_decimals=EVM_NATIVE_DECIMALS,
        explorer="https://bscscan.com/tx/",
        # 공개 RPC (API 키 불필요)
        endpoints=(
            "https://bsc-dataseed.binance.org/",
            "https://bsc-dataseed1.defibit.io/",
            "https://bsc-dataseed1.ninicoin.io/",
            "https://bsc-dataseed2.defibit.io/",
            "https://bsc-dataseed3.defibit.io/",
        ),
        scan_api_url="https://api.bscscan.com/api",
        api_key_env_var="BSCSCAN_API_KEY",
    ),
    Network.ETHEREUM: ChainConfig(
        network=Network.ETHEREUM,
        name="Ethereum",
        symbol="ETH",
        native_decimals=EVM_NATIVE_DECIMALS,
        explorer="https://etherscan.io/tx/",
        endpoints=(
            "https://eth.llamarpc.com",
            "https://ethereum-rpc.publicnode.com",
            "https://rpc.ankr.com/eth",
        ),
        scan_api_url="https://api.etherscan.io/api",
        api_key_env_var="ETHERSCAN_API_KEY",
    ),
    Network.POLYGON: ChainConfig(
        network=Network.POLYGON,
        name="Polygon",
        symbol="MATIC",
        native_decimals=EVM_NATIVE_DECIMALS,
        explorer="https://polygonscan.com/tx/",
        endpoints=(
            "https://polygon-rpc.com/",
            "https://polygon-bor-rpc.publicnode.com",
            "https://polygon-mainnet.g.alchemy.com/v2/demo",
        ),
        scan_api_url="https://api.polygonscan.com/api",
        api_key_env_var="POLYGONSCAN_API_KEY",
    ),
    Network.TRON: ChainConfig(
        network=Network.TRON,
        name="Tron",
        symbol="TRX",
        native_decimals=TRON_NATIVE_DECIMALS,
        explorer="https://tronscan.org/#/transaction/",
        endpoints=("https://api.trongrid.io",),
        api_key_env_var="TRON_API_KEY",
        # 모든 TronGrid 호출이 실패하면 사용하는 공개 익스플로러 API
        fallback_api_url="https://apilist.tronscanapi.com",
    ),
})


@dataclass(frozen=True)
class TokenInfo:
    symbol: str
    decimals: int


UNKNOWN_TOKEN_SYMBOL = "UNKNOWN"

_DEFAULT_TOKENS: Dict[Tuple[Network, str], TokenInfo] = {
    # BSC
    (Network.BSC, "0x55d398326f99059ff775485246999027b3197955"): TokenInfo("USDT", 18),
    (Network.BSC, "0x8ac76a51cc950d9822d68b83fe1ad97b32cd580d"): TokenInfo("USDC", 18),
    (Network.BSC, "0xe9e7cea3dedca5984780bafc599bd69add087d56"): TokenInfo("BUSD", 18),
    # Ethereum
    (Network.ETHEREUM, "0xdac17f958d2ee523a2206206994597c13d831ec7"): TokenInfo("USDT", 6),
    (Network.ETHEREUM, "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"): TokenInfo("USDC", 6),
    # Polygon
    (Network.POLYGON, "0xc2132d05d31c914a87c6611c10748aeb04b58e8f"): TokenInfo("USDT", 6),
    (Network.POLYGON, "0x3c499c542cef5e3811e1192ce70d8cc03d5c3359"): TokenInfo("USDC", 6),
    (Network.POLYGON, "0x2791bca1f2de4661ed88a30c99a7a9449aa84174"): TokenInfo("USDC.e", 6),
    # TRON (base58 주소는 소문자로 키를 저장)
    (Network.TRON, "tr7nhqjekqxgtci8q8zy4pl8otszgjlj6t"): TokenInfo("USDT", 6),
    (Network.TRON, "tekxitehnzsmse2xqrbj4w32run966rdz8"): TokenInfo("USDC", 6),
}


@dataclass(frozen=True)
class TokenRegistry:
    """(네트워크, 컨트랙트 주소) -> 토큰 정보. 런타임에는 읽기 전용"""
    tokens: Mapping[Tuple[Network, str], TokenInfo] = field(
        default_factory=lambda: MappingProxyType(dict(_DEFAULT_TOKENS))
    )

    def lookup(self, network: Network, contract_address: Optional[str]) -> Optional[TokenInfo]:
        if not contract_address:
            return None
        return self.tokens.get((network, contract_address.lower()))

    def extend(self, entries: Iterable[Tuple[Network, str, TokenInfo]]) -> "TokenRegistry":
        """항목을 추가한 새 레지스트리 반환"""
        merged = dict(self.tokens)
        for network, address, info in entries:
            merged[(network, address.lower())] = info
        return TokenRegistry(tokens=MappingProxyType(merged))


def get_chain_configs() -> Mapping[Network, ChainConfig]:
    return CHAIN_CONFIGS
