"""
cwquery/monitoring/options.py - 작업별 타입 옵션 구조체

자유 형식 dict 대신 이름/타입/기본값이 명시된 옵션 구조체입니다.
생성 시점(__post_init__)에 검증이 수행되므로 인스턴스는 항상 유효합니다.

Usage:
    from cwquery.monitoring.options import PutMetricAlarmOptions

    options = PutMetricAlarmOptions(
        alarm_name="cpu-high",
        comparison_operator="GreaterThanThreshold",
        evaluation_periods=3,
        metric_name="CPUUtilization",
        namespace="AWS/EC2",
        period=300,
        statistic="Average",
        threshold=80.0,
        dimensions=["InstanceId=i-1234567890abcdef0"],
    )
    params = options.encode()
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar

from .encoder import ParameterMap, encode
from .operations import (
    DEFAULT_NAMESPACE,
    DEFAULT_PERIOD,
    DELETE_ALARMS,
    GET_METRIC_STATISTICS,
    LIST_METRICS,
    PUT_METRIC_ALARM,
)
from .types import OperationSpec
from .validator import validate

# list[str] 또는 "a,b" 문자열
ListInput = Any


class OperationOptions:
    """옵션 구조체 공통 동작"""

    operation: ClassVar[OperationSpec]

    def __post_init__(self) -> None:
        validate(self.operation, self.to_option_set())

    def to_option_set(self) -> dict[str, Any]:
        """None이 아닌 필드만 담은 옵션 dict"""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def encode(self) -> ParameterMap:
        return encode(self.operation, self.to_option_set())


@dataclass(frozen=True)
class ListMetricsOptions(OperationOptions):
    """ListMetrics - 옵션 없음"""

    operation: ClassVar[OperationSpec] = LIST_METRICS


@dataclass(frozen=True)
class GetMetricStatisticsOptions(OperationOptions):
    """GetMetricStatistics 옵션

    Attributes:
        measure_name: 조회할 메트릭 이름
        statistics: 통계 목록 (SampleCount, Average, Sum, Minimum, Maximum)
        start_time: 조회 시작 시각 (end_time보다 앞서야 함)
        end_time: 조회 종료 시각
        namespace: 네임스페이스 (기본: AWS/EC2)
        period: 데이터포인트 간격 (초, 기본: 60)
        dimensions: 필터 차원 ("Name=Value" 목록)
        unit: 표준 단위
        custom_unit: 사용자 정의 단위
    """

    operation: ClassVar[OperationSpec] = GET_METRIC_STATISTICS

    measure_name: str
    statistics: ListInput
    start_time: datetime
    end_time: datetime
    namespace: str = DEFAULT_NAMESPACE
    period: int = DEFAULT_PERIOD
    dimensions: ListInput | None = None
    unit: str | None = None
    custom_unit: str | None = None

    @classmethod
    def for_last(
        cls,
        measure_name: str,
        statistics: ListInput,
        duration: timedelta = timedelta(days=1),
        end_time: datetime | None = None,
        **kwargs: Any,
    ) -> GetMetricStatisticsOptions:
        """최근 duration 구간 조회 옵션 생성 (기본: 지난 24시간)"""
        end_time = end_time or datetime.now(timezone.utc)
        return cls(
            measure_name=measure_name,
            statistics=statistics,
            start_time=end_time - duration,
            end_time=end_time,
            **kwargs,
        )


@dataclass(frozen=True)
class DeleteAlarmsOptions(OperationOptions):
    """DeleteAlarms 옵션

    Attributes:
        alarm_names: 삭제할 알람 이름 목록
    """

    operation: ClassVar[OperationSpec] = DELETE_ALARMS

    alarm_names: ListInput


@dataclass(frozen=True)
class PutMetricAlarmOptions(OperationOptions):
    """PutMetricAlarm 옵션

    Attributes:
        alarm_name: 알람 이름 (계정 내 고유)
        comparison_operator: Statistic과 Threshold 비교 연산자
        evaluation_periods: 임계값 비교 기간 수
        metric_name: 알람 대상 메트릭 이름
        namespace: 알람 대상 메트릭 네임스페이스
        period: 통계 적용 기간 (초)
        statistic: 통계 (SampleCount, Average, Sum, Minimum, Maximum)
        threshold: 비교 기준 값
        actions_enabled: 상태 변경 시 액션 실행 여부
        alarm_actions: ALARM 전환 시 실행할 ARN 목록
        alarm_description: 알람 설명
        dimensions: 메트릭 차원 ("Name=Value" 목록)
        force: 강제 갱신 여부
        insufficient_data_actions: INSUFFICIENT_DATA 전환 시 실행할 ARN 목록
        ok_actions: OK 전환 시 실행할 ARN 목록
        unit: 메트릭 단위
    """

    operation: ClassVar[OperationSpec] = PUT_METRIC_ALARM

    alarm_name: str
    comparison_operator: str
    evaluation_periods: int
    metric_name: str
    namespace: str
    period: int
    statistic: str
    threshold: float
    actions_enabled: bool | None = None
    alarm_actions: ListInput | None = None
    alarm_description: str | None = None
    dimensions: ListInput | None = None
    force: bool | None = None
    insufficient_data_actions: ListInput | None = None
    ok_actions: ListInput | None = None
    unit: str | None = None


OPTIONS_BY_OPERATION: dict[str, type[OperationOptions]] = {
    cls.operation.name: cls
    for cls in (ListMetricsOptions, GetMetricStatisticsOptions, DeleteAlarmsOptions, PutMetricAlarmOptions)
}
