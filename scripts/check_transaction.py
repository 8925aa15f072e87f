"""
트랜잭션 검증/조회 확인 스크립트

예:
    python scripts/check_transaction.py probe 0x...
    python scripts/check_transaction.py query 0x... --network BEP20
    python scripts/check_transaction.py verify 0x... --network TRC20 --address T... --amount 10
"""
import asyncio
import json
import sys
from pathlib import Path

# 프로젝트 루트 경로 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from txverify import TransactionVerificationService
from txverify.utils import setup_logging


async def check_transaction(command: str, tx_hash: str, network: str = None, address: str = None, amount: str = None):
    """명령에 따라 verify / query / probe 실행 후 결과 출력"""
    service = TransactionVerificationService.from_env()

    print(f"\n{'='*60}")
    print(f"{command}: {tx_hash}")
    print(f"{'='*60}\n")

    if command == "verify":
        result = await service.verify(tx_hash, address, amount, network)
        status = "✅ 유효" if result.is_valid else "❌ 무효"
    elif command == "query":
        result = await service.query(tx_hash, network)
        status = "✅ 존재" if result.exists else "❌ 없음"
    else:
        result = await service.probe(tx_hash)
        status = f"✅ {result.found_on_network}" if result.found else "❌ 어느 네트워크에서도 찾지 못함"

    print(f"결과: {status}")
    print("-" * 60)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return result


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='멀티 체인 트랜잭션 검증')
    parser.add_argument('command', choices=['verify', 'query', 'probe'], help='실행할 작업')
    parser.add_argument('tx_hash', help='트랜잭션 해시')
    parser.add_argument('--network', help='네트워크 (BSC, BEP20, ETHEREUM, ERC20, POLYGON, TRON, TRC20)')
    parser.add_argument('--address', help='기대 수신 주소 (verify)')
    parser.add_argument('--amount', help='기대 금액 (verify)')
    parser.add_argument('--log-level', default=None, help='로깅 레벨 (기본: LOG_LEVEL 환경 변수 또는 INFO)')
    args = parser.parse_args()

    if args.command in ('verify', 'query') and not args.network:
        parser.error(f"{args.command} 명령에는 --network가 필요합니다")
    if args.command == 'verify' and (not args.address or not args.amount):
        parser.error("verify 명령에는 --address와 --amount가 필요합니다")

    setup_logging(args.log_level)
    asyncio.run(check_transaction(args.command, args.tx_hash, args.network, args.address, args.amount))
