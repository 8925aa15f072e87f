# Services package
from .failover import EndpointFailoverClient, HttpGetRequest, JsonRpcRequest, ScanApiRequest
from .base_resolver import BaseResolver
from .evm_resolver import EVMTransactionResolver
from .tron_resolver import TronResolver
from .router import NetworkRouter, normalize_network
from .prober import CrossNetworkProber
from .transaction_service import TransactionVerificationService, build_resolvers

__all__ = [
    "EndpointFailoverClient",
    "HttpGetRequest",
    "JsonRpcRequest",
    "ScanApiRequest",
    "BaseResolver",
    "EVMTransactionResolver",
    "TronResolver",
    "NetworkRouter",
    "normalize_network",
    "CrossNetworkProber",
    "TransactionVerificationService",
    "build_resolvers",
]
