"""
cwquery/client.py - CloudWatch 작업별 래퍼

각 메서드는 옵션 검증 → 파라미터 인코딩 → 전송 순서로 동작합니다.
검증에 실패하면 전송 계층은 호출되지 않습니다.

Usage:
    from cwquery.client import MonitoringClient

    client = MonitoringClient()

    # 지난 24시간 ELB 평균 요청 수
    response = client.get_metric_statistics(
        measure_name="RequestCount",
        statistics="Average",
        namespace="AWS/ELB",
        start_time=datetime.now(timezone.utc) - timedelta(days=1),
        end_time=datetime.now(timezone.utc),
    )
"""

from __future__ import annotations

import logging
from typing import Any

from cwquery.monitoring import (
    DELETE_ALARMS,
    GET_METRIC_STATISTICS,
    LIST_METRICS,
    PUT_METRIC_ALARM,
    OperationOptions,
    OperationSpec,
    build_request,
    get_operation,
)
from cwquery.transport import BotocoreQueryTransport, QueryResponse, QueryTransport

logger = logging.getLogger(__name__)


class MonitoringClient:
    """CloudWatch 쿼리 API 클라이언트

    Args:
        transport: 전송 계층 (None이면 BotocoreQueryTransport)
    """

    def __init__(self, transport: QueryTransport | None = None):
        self._transport = transport

    @property
    def transport(self) -> QueryTransport:
        if self._transport is None:
            self._transport = BotocoreQueryTransport()
        return self._transport

    def call(self, operation: OperationSpec | str, options: dict[str, Any] | None = None) -> QueryResponse:
        """임의의 지원 작업 호출

        Args:
            operation: 작업 명세 또는 작업 이름
            options: 옵션 dict

        Raises:
            OptionValidationError: 검증 실패 (전송하지 않음)
            UnknownOperationError: 지원하지 않는 작업
        """
        spec = get_operation(operation) if isinstance(operation, str) else operation
        params = build_request(spec, options)
        logger.debug(f"{spec.name} 호출 (파라미터 {len(params)}개)")
        return self.transport.send(spec.name, params)

    def send_options(self, options: OperationOptions) -> QueryResponse:
        """타입 옵션 구조체로 호출 (생성 시 이미 검증됨)"""
        return self.transport.send(options.operation.name, options.encode())

    def list_metrics(self) -> QueryResponse:
        """계정에 연결된 메트릭 목록 조회 (옵션 없음)"""
        return self.call(LIST_METRICS)

    def get_metric_statistics(self, **options: Any) -> QueryResponse:
        """메트릭 통계 조회

        필수: measure_name, statistics, start_time, end_time
        선택: namespace (기본 AWS/EC2), period (기본 60), dimensions, unit, custom_unit
        """
        return self.call(GET_METRIC_STATISTICS, options)

    def delete_alarms(self, **options: Any) -> QueryResponse:
        """알람 삭제

        필수: alarm_names
        """
        return self.call(DELETE_ALARMS, options)

    def put_metric_alarm(self, **options: Any) -> QueryResponse:
        """메트릭 알람 생성/갱신

        필수: alarm_name, comparison_operator, evaluation_periods, metric_name,
              namespace, period, statistic, threshold
        선택: actions_enabled, alarm_actions, alarm_description, dimensions, force,
              insufficient_data_actions, ok_actions, unit
        """
        return self.call(PUT_METRIC_ALARM, options)
