"""
크로스 네트워크 조회

체인을 모를 때 모든 리졸버에 동시에 조회하고, 우선순위 순서(BSC → Ethereum → Polygon → TRON)로
결과를 확인해 처음 발견된 체인에서 멈춘다. 답이 정해지면 남은 조회 작업은 취소한다.
"""
import asyncio
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..chain_configs import PROBE_ORDER, Network
from ..models import NetworkProbeEntry, ProbeResult
from ..utils import short_hash
from ..validation import is_valid_hash
from .base_resolver import BaseResolver

logger = logging.getLogger(__name__)


class CrossNetworkProber:
    def __init__(self, resolvers: Mapping[Network, BaseResolver], order: Sequence[Network] = PROBE_ORDER):
        self.resolvers = dict(resolvers)
        self.order = tuple(network for network in order if network in self.resolvers)

    async def probe(self, tx_hash) -> ProbeResult:
        if not is_valid_hash(tx_hash):
            return ProbeResult(
                transaction_hash=tx_hash if isinstance(tx_hash, str) else None,
                found=False,
                total_networks_checked=0,
                error="Invalid transaction hash format",
            )

        logger.info(f"전체 네트워크에서 트랜잭션 조회: {short_hash(tx_hash)}")
        tasks: Dict[Network, asyncio.Task] = {
            network: asyncio.create_task(self.resolvers[network].query(tx_hash))
            for network in self.order
        }

        results: List[NetworkProbeEntry] = []
        found_on: Optional[Network] = None
        try:
            for network in self.order:
                query = await tasks[network]
                if query.exists:
                    found_on = network
                    results.append(NetworkProbeEntry(network=network, found=True, details=query.details))
                    logger.info(f"[{network.value}] 트랜잭션 발견")
                    break
                logger.debug(f"[{network.value}] 발견되지 않음 ({query.error_kind}): {query.error}")
                results.append(NetworkProbeEntry(
                    network=network,
                    found=False,
                    error=query.error,
                    error_kind=query.error_kind,
                ))
        finally:
            pending = [task for task in tasks.values() if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return ProbeResult(
            transaction_hash=tx_hash,
            found=found_on is not None,
            found_on_network=found_on,
            total_networks_checked=len(self.order),
            results=results,
        )

