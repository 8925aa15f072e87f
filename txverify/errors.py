"""
검증 엔진 예외 정의

공개 연산(verify / query / probe)은 이 예외들을 잡아 구조화된 결과로 돌려준다.
"""
from typing import List, Optional


class TxVerifyError(Exception):
    """검증 엔진 기본 예외"""

    kind: str = "unexpected"


class ValidationError(TxVerifyError):
    """네트워크 호출 전에 걸러지는 잘못된 입력 (해시, 주소, 금액)"""

    kind = "validation_error"


class UnsupportedNetworkError(TxVerifyError):
    """지원하지 않는 네트워크 별칭"""

    kind = "unsupported_network"

    def __init__(self, network):
        self.network = network
        super().__init__(f"Unsupported network: {network}")


class NotFoundError(TxVerifyError):
    """요청은 정상이지만 체인에 해당 트랜잭션이 없음"""

    kind = "not_found"


class DecodeError(TxVerifyError):
    """응답은 있지만 필수 필드가 빠져 있음"""

    kind = "decode_error"


class EndpointError(TxVerifyError):
    """단일 엔드포인트 호출 실패 (전송 오류, 타임아웃, HTTP 오류, 잘못된 JSON)"""

    kind = "endpoint_error"

    def __init__(self, message: str, endpoint: Optional[str] = None):
        self.endpoint = endpoint
        super().__init__(message)


class EmptyResultError(EndpointError):
    """엔드포인트가 응답했지만 result가 비어 있음"""

    kind = "empty_result"


class AuthorizationError(EndpointError):
    """API 키가 거부됨 (401/403 또는 scan API의 키 오류)"""

    kind = "authorization_error"


class EndpointsExhaustedError(EndpointError):
    """모든 엔드포인트가 실패함"""

    kind = "endpoints_exhausted"

    def __init__(self, errors: List[EndpointError]):
        self.errors = list(errors)
        self.last_error = self.errors[-1] if self.errors else None
        detail = f": {self.last_error}" if self.last_error else ""
        super().__init__(f"All {len(self.errors)} endpoints failed{detail}")

    @property
    def answered_empty(self) -> bool:
        """적어도 하나의 엔드포인트가 '결과 없음'으로 정상 응답했는지"""
        return any(isinstance(e, EmptyResultError) for e in self.errors)

    @property
    def rejected_authorization(self) -> bool:
        return any(isinstance(e, AuthorizationError) for e in self.errors)
