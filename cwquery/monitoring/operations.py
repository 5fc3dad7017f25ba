"""
cwquery/monitoring/operations.py - 지원 작업 명세 테이블

프로세스 시작 시 한 번 정의되는 CloudWatch 작업 명세입니다.

Usage:
    from cwquery.monitoring.operations import PUT_METRIC_ALARM, get_operation

    spec = get_operation("put_metric_alarm")
    assert spec is PUT_METRIC_ALARM
"""

from __future__ import annotations

import re

from cwquery.exceptions import UnknownOperationError

from .types import FieldShape, FieldSpec, FieldType, OperationSpec

# =============================================================================
# 허용 값
# =============================================================================

VALID_STATISTICS = frozenset({"SampleCount", "Average", "Sum", "Minimum", "Maximum"})

VALID_COMPARISON_OPERATORS = frozenset(
    {
        "GreaterThanOrEqualToThreshold",
        "GreaterThanThreshold",
        "LessThanThreshold",
        "LessThanOrEqualToThreshold",
    }
)

VALID_UNITS = frozenset(
    {
        "Seconds",
        "Microseconds",
        "Milliseconds",
        "Bytes",
        "Kilobytes",
        "Megabytes",
        "Gigabytes",
        "Terabytes",
        "Bits",
        "Kilobits",
        "Megabits",
        "Gigabits",
        "Terabits",
        "Percent",
        "Count",
        "Bytes/Second",
        "Kilobytes/Second",
        "Megabytes/Second",
        "Gigabytes/Second",
        "Terabytes/Second",
        "Bits/Second",
        "Kilobits/Second",
        "Megabits/Second",
        "Gigabits/Second",
        "Terabits/Second",
        "Count/Second",
        "None",
    }
)

DEFAULT_NAMESPACE = "AWS/EC2"
DEFAULT_PERIOD = 60

# =============================================================================
# 작업 명세
# =============================================================================

LIST_METRICS = OperationSpec(
    name="ListMetrics",
    description="계정에 연결된 CloudWatch 메트릭 목록 조회",
)

GET_METRIC_STATISTICS = OperationSpec(
    name="GetMetricStatistics",
    description="메트릭 통계 조회",
    fields=(
        FieldSpec("custom_unit", "CustomUnit"),
        FieldSpec("dimensions", "Dimensions", shape=FieldShape.KV_LIST, value_type=FieldType.LIST),
        FieldSpec("end_time", "EndTime", value_type=FieldType.TIMESTAMP, required=True),
        FieldSpec("measure_name", "MeasureName", required=True),
        FieldSpec("namespace", "Namespace", default=DEFAULT_NAMESPACE),
        FieldSpec("period", "Period", value_type=FieldType.INTEGER, default=DEFAULT_PERIOD),
        FieldSpec(
            "statistics",
            "Statistics",
            shape=FieldShape.CSV_LIST,
            value_type=FieldType.LIST,
            required=True,
            allowed_values=VALID_STATISTICS,
        ),
        FieldSpec("start_time", "StartTime", value_type=FieldType.TIMESTAMP, required=True),
        FieldSpec("unit", "Unit", allowed_values=VALID_UNITS),
    ),
)

DELETE_ALARMS = OperationSpec(
    name="DeleteAlarms",
    description="알람 삭제 (오류 시 아무 알람도 삭제되지 않음)",
    fields=(
        FieldSpec(
            "alarm_names",
            "AlarmNames",
            shape=FieldShape.CSV_LIST,
            value_type=FieldType.LIST,
            required=True,
        ),
    ),
)

PUT_METRIC_ALARM = OperationSpec(
    name="PutMetricAlarm",
    description="메트릭 알람 생성 또는 갱신",
    fields=(
        FieldSpec("alarm_name", "AlarmName", required=True),
        FieldSpec(
            "comparison_operator",
            "ComparisonOperator",
            required=True,
            allowed_values=VALID_COMPARISON_OPERATORS,
        ),
        FieldSpec("evaluation_periods", "EvaluationPeriods", value_type=FieldType.INTEGER, required=True),
        FieldSpec("metric_name", "MetricName", required=True),
        FieldSpec("namespace", "Namespace", required=True),
        FieldSpec("period", "Period", value_type=FieldType.INTEGER, required=True),
        FieldSpec("statistic", "Statistic", required=True, allowed_values=VALID_STATISTICS),
        FieldSpec("threshold", "Threshold", value_type=FieldType.NUMBER, required=True),
        FieldSpec("actions_enabled", "ActionsEnabled", value_type=FieldType.BOOLEAN),
        FieldSpec("alarm_actions", "AlarmActions", shape=FieldShape.CSV_LIST, value_type=FieldType.LIST),
        FieldSpec("alarm_description", "AlarmDescription"),
        FieldSpec("dimensions", "Dimensions", shape=FieldShape.KV_LIST, value_type=FieldType.LIST),
        FieldSpec("force", "Force", value_type=FieldType.BOOLEAN),
        FieldSpec(
            "insufficient_data_actions",
            "InsufficientDataActions",
            shape=FieldShape.CSV_LIST,
            value_type=FieldType.LIST,
        ),
        FieldSpec("ok_actions", "OKActions", shape=FieldShape.CSV_LIST, value_type=FieldType.LIST),
        FieldSpec("unit", "Unit", allowed_values=VALID_UNITS),
    ),
)

OPERATIONS: dict[str, OperationSpec] = {
    spec.name: spec for spec in (LIST_METRICS, GET_METRIC_STATISTICS, DELETE_ALARMS, PUT_METRIC_ALARM)
}


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


_BY_SNAKE_NAME = {_snake_case(name): spec for name, spec in OPERATIONS.items()}


def get_operation(name: str) -> OperationSpec:
    """작업 명세 조회

    Args:
        name: 와이어 작업 이름("PutMetricAlarm") 또는 snake_case 이름("put_metric_alarm")

    Returns:
        OperationSpec

    Raises:
        UnknownOperationError: 지원하지 않는 작업
    """
    spec = OPERATIONS.get(name) or _BY_SNAKE_NAME.get(name.replace("-", "_").lower())
    if spec is None:
        raise UnknownOperationError(name)
    return spec
