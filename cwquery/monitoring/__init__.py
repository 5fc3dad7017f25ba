"""
cwquery/monitoring - CloudWatch 쿼리 API 파라미터 검증/인코딩 엔진

Usage:
    from cwquery.monitoring import PUT_METRIC_ALARM, build_request

    params = build_request(PUT_METRIC_ALARM, {
        "alarm_name": "cpu-high",
        ...
        "dimensions": ["InstanceId=i-123"],
    })
    # {"AlarmName": "cpu-high", ..., "Dimensions.member.1.Name": "InstanceId", ...}
"""

from .encoder import ParameterMap, build_request, encode, format_timestamp, to_wire_value
from .operations import (
    DELETE_ALARMS,
    GET_METRIC_STATISTICS,
    LIST_METRICS,
    OPERATIONS,
    PUT_METRIC_ALARM,
    VALID_COMPARISON_OPERATORS,
    VALID_STATISTICS,
    VALID_UNITS,
    get_operation,
)
from .options import (
    DeleteAlarmsOptions,
    GetMetricStatisticsOptions,
    ListMetricsOptions,
    OperationOptions,
    PutMetricAlarmOptions,
)
from .parsing import flatten, split_csv, split_pair, split_pairs
from .types import NO_DEFAULT, FieldShape, FieldSpec, FieldType, OperationSpec
from .validator import validate

__all__ = [
    # Types
    "FieldShape",
    "FieldSpec",
    "FieldType",
    "NO_DEFAULT",
    "OperationSpec",
    "ParameterMap",
    # Operations
    "LIST_METRICS",
    "GET_METRIC_STATISTICS",
    "DELETE_ALARMS",
    "PUT_METRIC_ALARM",
    "OPERATIONS",
    "VALID_STATISTICS",
    "VALID_COMPARISON_OPERATORS",
    "VALID_UNITS",
    "get_operation",
    # Validation / encoding
    "validate",
    "encode",
    "build_request",
    "to_wire_value",
    "format_timestamp",
    # Parsers
    "flatten",
    "split_csv",
    "split_pair",
    "split_pairs",
    # Typed options
    "OperationOptions",
    "ListMetricsOptions",
    "GetMetricStatisticsOptions",
    "DeleteAlarmsOptions",
    "PutMetricAlarmOptions",
]
