"""
cwquery/exceptions.py - 통합 예외 계층 구조

파라미터 검증, 설정, API 호출에서 사용되는 예외 클래스들을 정의합니다.

예외 계층 구조:
    CWQueryError (베이스)
    ├── OptionValidationError (옵션 검증)
    │   ├── MissingRequiredField
    │   ├── InvalidFieldType
    │   ├── InvalidTimeRange
    │   └── InvalidEnumValue
    ├── UnknownOperationError (지원하지 않는 작업)
    ├── ConfigError (설정 관련)
    └── APICallError (CloudWatch API 호출)

Usage:
    from cwquery.exceptions import OptionValidationError

    try:
        params = build_request(GET_METRIC_STATISTICS, options)
    except OptionValidationError as e:
        print(e.field, e.to_dict())
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

# =============================================================================
# 베이스 예외
# =============================================================================


class CWQueryError(Exception):
    """cwquery 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 옵션 검증 예외
# =============================================================================


class OptionValidationError(CWQueryError):
    """옵션 검증 실패 베이스 예외

    네트워크 호출 전에 동기적으로 발생하며, 문제가 된 필드 이름을 담습니다.
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.details["field"] = field


class MissingRequiredField(OptionValidationError):
    """필수 필드 누락 (없음, None, 빈 문자열, 빈 목록)"""

    def __init__(self, field: str):
        super().__init__(field, f"필수 옵션 누락 [{field}]")


class InvalidFieldType(OptionValidationError):
    """필드 타입 불일치"""

    def __init__(self, field: str, expected_type: str, value: Any = None):
        super().__init__(
            field,
            f"타입 오류 [{field}]: 예상 타입 '{expected_type}', 실제 타입 '{type(value).__name__}'",
        )
        self.expected_type = expected_type
        self.value = value
        self.details.update({"expected_type": expected_type, "actual_type": type(value).__name__})


class InvalidTimeRange(OptionValidationError):
    """시작 시각이 종료 시각보다 앞서지 않음"""

    def __init__(self, start_time: datetime, end_time: datetime, field: str = "start_time"):
        super().__init__(
            field,
            f"시간 범위 오류: start_time({start_time.isoformat()})은 end_time({end_time.isoformat()})보다 앞서야 합니다",
        )
        self.start_time = start_time
        self.end_time = end_time
        self.details.update({"start_time": start_time.isoformat(), "end_time": end_time.isoformat()})


class InvalidEnumValue(OptionValidationError):
    """허용 목록에 없는 값"""

    def __init__(self, field: str, value: Any, allowed: frozenset[str] | list[str] | tuple[str, ...]):
        allowed_list = sorted(allowed)
        super().__init__(field, f"허용되지 않는 값 [{field}]: '{value}'. 허용 값: {', '.join(allowed_list)}")
        self.value = value
        self.allowed = frozenset(allowed)
        self.details.update({"value": str(value), "allowed": allowed_list})


# =============================================================================
# 작업/설정 예외
# =============================================================================


class UnknownOperationError(CWQueryError):
    """지원하지 않는 CloudWatch 작업 이름"""

    def __init__(self, name: str):
        super().__init__(f"지원하지 않는 작업: {name}")
        self.name = name
        self.details["operation"] = name


class ConfigError(CWQueryError):
    """설정 관련 예외"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Exception | None = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# API 호출 예외
# =============================================================================


class APICallError(CWQueryError):
    """CloudWatch API 호출 실패

    HTTP 4xx/5xx 응답 또는 전송 계층 오류를 래핑합니다.
    """

    def __init__(
        self,
        operation: str,
        error_code: str | None = None,
        error_message: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        message = f"monitoring.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.status_code = status_code
        self.details.update(
            {
                "operation": operation,
                "error_code": error_code,
                "status_code": status_code,
            }
        )


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================

THROTTLING_CODES = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "RateExceeded",
    }
)


def is_throttling(error: Exception) -> bool:
    """스로틀링 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        스로틀링 오류이면 True
    """
    if isinstance(error, APICallError):
        return error.error_code in THROTTLING_CODES
    return False


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, APICallError) and error.error_code:
        friendly_messages = {
            "AccessDenied": "권한이 없습니다. IAM 정책을 확인하세요.",
            "ExpiredToken": "인증 토큰이 만료되었습니다. 다시 로그인하세요.",
            "InvalidClientTokenId": "잘못된 자격 증명입니다.",
            "Throttling": "요청이 너무 많습니다. 잠시 후 다시 시도하세요.",
        }
        return friendly_messages.get(error.error_code, str(error))

    return str(error)
