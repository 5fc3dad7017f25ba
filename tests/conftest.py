"""
tests/conftest.py - pytest 공통 픽스처

테스트용 AWS 환경 변수, 기본 옵션 세트, 전송 계층 모킹을 제공합니다.

Usage:
    def test_something(gms_options, mock_transport):
        client = MonitoringClient(transport=mock_transport)
        client.get_metric_statistics(**gms_options)
"""

import os
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from cwquery.transport import QueryResponse

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment():
    """테스트 환경 설정"""
    os.environ.setdefault("AWS_DEFAULT_REGION", "ap-northeast-2")
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

    yield


# =============================================================================
# 옵션 픽스처
# =============================================================================


@pytest.fixture
def window():
    """조회 구간 (start, end)"""
    return (
        datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc),
        datetime(2024, 1, 2, 0, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def gms_options(window):
    """GetMetricStatistics 최소 유효 옵션"""
    start, end = window
    return {
        "measure_name": "CPUUtilization",
        "statistics": "Average,Maximum",
        "start_time": start,
        "end_time": end,
    }


@pytest.fixture
def alarm_options():
    """PutMetricAlarm 필수 옵션"""
    return {
        "alarm_name": "cpu-high",
        "comparison_operator": "GreaterThanThreshold",
        "evaluation_periods": 3,
        "metric_name": "CPUUtilization",
        "namespace": "AWS/EC2",
        "period": 300,
        "statistic": "Average",
        "threshold": 80.0,
    }


# =============================================================================
# 전송 계층 모킹
# =============================================================================


@pytest.fixture
def mock_transport():
    """QueryTransport 모킹 (항상 200 응답)"""
    transport = MagicMock()

    def _send(action, params):
        return QueryResponse(
            action=action,
            status_code=200,
            body=f"<{action}Response/>",
            headers={"x-amzn-RequestId": "req-123"},
        )

    transport.send.side_effect = _send
    return transport
