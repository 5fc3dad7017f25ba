"""
cwquery/monitoring/encoder.py - 쿼리 API 파라미터 인코딩

검증된 옵션을 CloudWatch 쿼리 API가 요구하는 평탄한 key/value 맵으로 변환합니다.

인코딩 형태:
    scalar   : Namespace=AWS/EC2
    csv-list : Statistics.member.1=Average, Statistics.member.2=Sum
    kv-list  : Dimensions.member.1.Name=InstanceId, Dimensions.member.1.Value=i-123

선택 필드는 호출자가 값을 넘긴 경우에만 키가 생성됩니다 (기본값이 있는 필드 제외).
인코딩 자체에는 실패 경로가 없으며, 같은 입력이면 항상 같은 맵을 반환합니다.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from .parsing import split_csv, split_pairs
from .types import FieldShape, OperationSpec
from .validator import validate

logger = logging.getLogger(__name__)

ParameterMap = dict[str, str]


def encode(operation: OperationSpec, options: Mapping[str, Any] | None = None) -> ParameterMap:
    """옵션을 와이어 파라미터 맵으로 변환

    Args:
        operation: 작업 명세
        options: 검증된 옵션 (validate() 반환값 권장)

    Returns:
        {와이어 키: 와이어 값} (명세 필드 순서)
    """
    options = options or {}
    params: ParameterMap = {}

    for spec in operation.fields:
        value = options.get(spec.name)
        if value is None:
            if not spec.has_default:
                continue
            value = spec.default

        if spec.shape is FieldShape.CSV_LIST:
            for index, token in enumerate(split_csv(value), start=1):
                params[f"{spec.wire_name}.member.{index}"] = token
        elif spec.shape is FieldShape.KV_LIST:
            for index, (name, pair_value) in enumerate(split_pairs(value), start=1):
                params[f"{spec.wire_name}.member.{index}.Name"] = name
                params[f"{spec.wire_name}.member.{index}.Value"] = pair_value
        else:
            params[spec.wire_name] = to_wire_value(value)

    logger.debug(f"{operation.name} 파라미터 {len(params)}개 인코딩")
    return params


def build_request(operation: OperationSpec, options: Mapping[str, Any] | None = None) -> ParameterMap:
    """검증 후 인코딩

    Raises:
        OptionValidationError: 검증 실패 (인코딩은 수행되지 않음)
    """
    return encode(operation, validate(operation, options))


def to_wire_value(value: Any) -> str:
    """스칼라 값을 와이어 문자열로 변환

    - datetime: 확장 ISO-8601 (초 단위, UTC는 "Z")
    - bool: "true" / "false"
    - 숫자: 10진 고정소수점 표기 (지수 표기 없음, 1e-07 → "0.0000001")
    """
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (float, Decimal)):
        return format(Decimal(str(value)), "f")
    return str(value)


def format_timestamp(value: datetime) -> str:
    """datetime을 확장 ISO-8601 문자열로 변환

    naive datetime은 UTC로 간주합니다.

    Example:
        format_timestamp(datetime(2024, 1, 1))  # "2024-01-01T00:00:00Z"
    """
    offset = value.utcoffset()
    if offset is None or offset == timedelta(0):
        return value.replace(tzinfo=None).isoformat(timespec="seconds") + "Z"
    return value.isoformat(timespec="seconds")
