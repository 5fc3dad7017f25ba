"""
cwquery/monitoring/validator.py - 작업 옵션 검증

호출자가 넘긴 옵션을 작업 명세(OperationSpec)의 규칙으로 검사합니다.
인코딩 전에 실패하므로 잘못된 요청은 전송되지 않습니다.

검증 순서 (첫 번째 위반만 보고, fail-fast):
    1. 필수 필드 존재 (presence)
    2. 타입 (type)
    3. 범위/순서 (range) - start_time < end_time
    4. 허용 값 (enumeration)

Usage:
    from cwquery.monitoring import GET_METRIC_STATISTICS, validate

    options = validate(GET_METRIC_STATISTICS, {
        "measure_name": "CPUUtilization",
        "statistics": "Average,Maximum",
        "start_time": start,
        "end_time": end,
    })
    # options["namespace"] == "AWS/EC2" (기본값 적용)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from cwquery.exceptions import InvalidEnumValue, InvalidFieldType, InvalidTimeRange, MissingRequiredField

from .parsing import split_csv, split_pairs
from .types import FieldShape, FieldSpec, FieldType, OperationSpec

logger = logging.getLogger(__name__)


def validate(operation: OperationSpec, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """옵션 검증 후 기본값이 적용된 옵션 반환

    Args:
        operation: 작업 명세
        options: 옵션 {snake_case 키: 값}. None 값은 생략한 것으로 취급

    Returns:
        명세 필드 순서대로 정리된 옵션 (생략된 선택 필드에는 기본값 적용)

    Raises:
        MissingRequiredField: 필수 필드 누락 또는 빈 값
        InvalidFieldType: 타입 불일치
        InvalidTimeRange: start_time이 end_time보다 앞서지 않음
        InvalidEnumValue: 허용되지 않는 값
    """
    options = options or {}

    unknown = [key for key in options if key not in operation.field_names]
    if unknown:
        logger.warning(f"{operation.name}: 알 수 없는 옵션 무시 - {', '.join(sorted(unknown))}")

    _check_presence(operation, options)
    _check_types(operation, options)
    _check_range(operation, options)
    _check_enums(operation, options)

    resolved: dict[str, Any] = {}
    for spec in operation.fields:
        value = options.get(spec.name)
        if value is not None:
            resolved[spec.name] = value
        elif spec.has_default:
            resolved[spec.name] = spec.default

    logger.debug(f"{operation.name} 옵션 검증 완료: {sorted(resolved)}")
    return resolved


# =============================================================================
# 규칙별 검사
# =============================================================================


def _check_presence(operation: OperationSpec, options: Mapping[str, Any]) -> None:
    for spec in operation.required_fields:
        if is_empty(spec, options.get(spec.name)):
            raise MissingRequiredField(spec.name)


def _check_types(operation: OperationSpec, options: Mapping[str, Any]) -> None:
    for spec in operation.fields:
        value = options.get(spec.name)
        if value is None:
            continue
        if not _matches_type(spec, value):
            raise InvalidFieldType(spec.name, spec.value_type.value, value)


def _check_range(operation: OperationSpec, options: Mapping[str, Any]) -> None:
    if not {"start_time", "end_time"} <= operation.field_names:
        return

    start_time = options.get("start_time")
    end_time = options.get("end_time")
    if start_time is None or end_time is None:
        return

    # 와이어 정밀도(초) 기준으로 비교
    if not _to_wire_precision(start_time) < _to_wire_precision(end_time):
        raise InvalidTimeRange(start_time, end_time)


def _check_enums(operation: OperationSpec, options: Mapping[str, Any]) -> None:
    for spec in operation.fields:
        if spec.allowed_values is None:
            continue
        value = options.get(spec.name)
        if value is None:
            continue

        candidates = split_csv(value) if spec.shape is FieldShape.CSV_LIST else [value]
        for candidate in candidates:
            if candidate not in spec.allowed_values:
                raise InvalidEnumValue(spec.name, candidate, spec.allowed_values)


# =============================================================================
# 헬퍼
# =============================================================================


def is_empty(spec: FieldSpec, value: Any) -> bool:
    """필드 값이 '없음'인지 확인

    None, 공백뿐인 문자열, 토큰이 없는 목록을 빈 값으로 봅니다.
    """
    if value is None:
        return True
    if spec.shape is FieldShape.CSV_LIST:
        return not split_csv(value)
    if spec.shape is FieldShape.KV_LIST:
        return not split_pairs(value)
    if isinstance(value, str):
        return not value.strip()
    return False


def _matches_type(spec: FieldSpec, value: Any) -> bool:
    value_type = spec.value_type
    if value_type is FieldType.TIMESTAMP:
        return isinstance(value, datetime)
    if value_type is FieldType.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if value_type is FieldType.NUMBER:
        if isinstance(value, float):
            return math.isfinite(value)
        if isinstance(value, Decimal):
            return value.is_finite()
        return isinstance(value, int) and not isinstance(value, bool)
    if value_type is FieldType.BOOLEAN:
        return isinstance(value, bool)
    if value_type is FieldType.LIST:
        if isinstance(value, Mapping):
            return spec.shape is FieldShape.KV_LIST
        return isinstance(value, (str, list, tuple))
    return isinstance(value, str)


def as_utc(value: datetime) -> datetime:
    """naive datetime은 UTC로 간주하여 aware datetime으로 변환"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_wire_precision(value: datetime) -> datetime:
    """인코더가 전송하는 초 단위로 절삭"""
    return as_utc(value).replace(microsecond=0)
