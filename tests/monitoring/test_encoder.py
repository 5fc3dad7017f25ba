"""
tests/monitoring/test_encoder.py - 파라미터 인코딩 테스트
"""

import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest

from cwquery.exceptions import InvalidFieldType, InvalidTimeRange
from cwquery.monitoring import (
    DELETE_ALARMS,
    GET_METRIC_STATISTICS,
    LIST_METRICS,
    OPERATIONS,
    PUT_METRIC_ALARM,
    build_request,
    encode,
    format_timestamp,
    to_wire_value,
)


def _indices(params: dict, prefix: str) -> list[int]:
    pattern = re.compile(rf"^{re.escape(prefix)}\.member\.(\d+)(?:\.Name)?$")
    return [int(m.group(1)) for key in params if (m := pattern.match(key))]


class TestWireValues:
    """스칼라 값 변환"""

    def test_utc_timestamp(self):
        value = datetime(2024, 1, 1, 12, 30, 0, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-01-01T12:30:00Z"

    def test_naive_timestamp_is_utc(self):
        assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00Z"

    def test_offset_timestamp(self):
        value = datetime(2024, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=9)))
        assert format_timestamp(value) == "2024-01-01T09:00:00+09:00"

    def test_microseconds_dropped(self):
        value = datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-01-01T00:00:00Z"

    def test_booleans(self):
        assert to_wire_value(True) == "true"
        assert to_wire_value(False) == "false"

    def test_numbers(self):
        assert to_wire_value(60) == "60"
        assert to_wire_value(80.5) == "80.5"
        assert to_wire_value(Decimal("0.25")) == "0.25"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1e-7, "0.0000001"),
            (1e20, "100000000000000000000"),
            (Decimal("1E+2"), "100"),
            (Decimal("-2.5E-3"), "-0.0025"),
            (80.0, "80.0"),
        ],
    )
    def test_numbers_never_use_exponent(self, value, expected):
        assert to_wire_value(value) == expected

    def test_string_passthrough(self):
        assert to_wire_value("AWS/ELB") == "AWS/ELB"


class TestListMetrics:
    """ListMetrics 인코딩"""

    def test_no_options_empty_map(self):
        """옵션 없음 → 빈 파라미터 맵"""
        assert build_request(LIST_METRICS) == {}
        assert build_request(LIST_METRICS, {}) == {}


class TestGetMetricStatistics:
    """GetMetricStatistics 인코딩"""

    def test_minimal(self, gms_options):
        params = build_request(GET_METRIC_STATISTICS, gms_options)

        assert params == {
            "EndTime": "2024-01-02T00:00:00Z",
            "MeasureName": "CPUUtilization",
            "Namespace": "AWS/EC2",
            "Period": "60",
            "Statistics.member.1": "Average",
            "Statistics.member.2": "Maximum",
            "StartTime": "2024-01-01T00:00:00Z",
        }

    def test_csv_three_tokens_with_whitespace(self, gms_options):
        """'a,b,c' → 1,2,3 순서 (공백 무관)"""
        gms_options["statistics"] = " Sum , Minimum,Maximum "

        params = build_request(GET_METRIC_STATISTICS, gms_options)

        assert params["Statistics.member.1"] == "Sum"
        assert params["Statistics.member.2"] == "Minimum"
        assert params["Statistics.member.3"] == "Maximum"
        assert "Statistics.member.4" not in params

    def test_statistics_as_list(self, gms_options):
        gms_options["statistics"] = ["Sum", "SampleCount"]

        params = build_request(GET_METRIC_STATISTICS, gms_options)

        assert params["Statistics.member.1"] == "Sum"
        assert params["Statistics.member.2"] == "SampleCount"

    def test_dimensions_comma_string(self, gms_options):
        gms_options["dimensions"] = "InstanceId=i-123,InstanceType=t3.micro"

        params = build_request(GET_METRIC_STATISTICS, gms_options)

        assert params["Dimensions.member.1.Name"] == "InstanceId"
        assert params["Dimensions.member.1.Value"] == "i-123"
        assert params["Dimensions.member.2.Name"] == "InstanceType"
        assert params["Dimensions.member.2.Value"] == "t3.micro"

    def test_optional_unit_emitted_when_supplied(self, gms_options):
        gms_options["unit"] = "Percent"
        gms_options["custom_unit"] = "Widgets"

        params = build_request(GET_METRIC_STATISTICS, gms_options)

        assert params["Unit"] == "Percent"
        assert params["CustomUnit"] == "Widgets"

    def test_optional_unit_absent(self, gms_options):
        params = build_request(GET_METRIC_STATISTICS, gms_options)

        assert "Unit" not in params
        assert "CustomUnit" not in params
        assert not any(key.startswith("Dimensions") for key in params)

    def test_invalid_range_performs_no_encoding(self, gms_options):
        """InvalidTimeRange 시 encode가 호출되지 않음"""
        gms_options["start_time"], gms_options["end_time"] = gms_options["end_time"], gms_options["start_time"]

        with patch("cwquery.monitoring.encoder.encode") as mock_encode:
            with pytest.raises(InvalidTimeRange):
                build_request(GET_METRIC_STATISTICS, gms_options)

        mock_encode.assert_not_called()

    def test_sub_second_window_performs_no_encoding(self, gms_options):
        """같은 초로 잘리는 구간은 StartTime == EndTime으로 전송되지 않음"""
        gms_options["start_time"] = datetime(2024, 1, 1, 0, 0, 0, 100000, tzinfo=timezone.utc)
        gms_options["end_time"] = datetime(2024, 1, 1, 0, 0, 0, 900000, tzinfo=timezone.utc)

        with pytest.raises(InvalidTimeRange):
            build_request(GET_METRIC_STATISTICS, gms_options)


class TestDeleteAlarms:
    """DeleteAlarms 인코딩"""

    def test_alarm_names_list(self):
        params = build_request(DELETE_ALARMS, {"alarm_names": ["alarm-a", "alarm-b"]})

        assert params == {"AlarmNames.member.1": "alarm-a", "AlarmNames.member.2": "alarm-b"}

    def test_alarm_names_nested_list(self):
        params = build_request(DELETE_ALARMS, {"alarm_names": [["alarm-a"], "alarm-b"]})

        assert params == {"AlarmNames.member.1": "alarm-a", "AlarmNames.member.2": "alarm-b"}

    def test_single_alarm_name_string(self):
        assert build_request(DELETE_ALARMS, {"alarm_names": "only-one"}) == {"AlarmNames.member.1": "only-one"}

    def test_mapping_rejected(self):
        """dict가 문자열 토큰 하나로 전송되지 않음"""
        with pytest.raises(InvalidFieldType):
            build_request(DELETE_ALARMS, {"alarm_names": {"a": "b"}})


class TestPutMetricAlarm:
    """PutMetricAlarm 인코딩"""

    def test_required_only(self, alarm_options):
        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert params == {
            "AlarmName": "cpu-high",
            "ComparisonOperator": "GreaterThanThreshold",
            "EvaluationPeriods": "3",
            "MetricName": "CPUUtilization",
            "Namespace": "AWS/EC2",
            "Period": "300",
            "Statistic": "Average",
            "Threshold": "80.0",
        }

    @pytest.mark.parametrize("threshold, expected", [(1e-7, "0.0000001"), (1e20, "100000000000000000000")])
    def test_threshold_fixed_point(self, alarm_options, threshold, expected):
        alarm_options["threshold"] = threshold

        assert build_request(PUT_METRIC_ALARM, alarm_options)["Threshold"] == expected

    def test_nan_threshold_rejected(self, alarm_options):
        alarm_options["threshold"] = float("nan")

        with pytest.raises(InvalidFieldType):
            build_request(PUT_METRIC_ALARM, alarm_options)

    def test_single_dimension(self, alarm_options):
        """dimensions=['Name=Instance1'] → Name/Value 키"""
        alarm_options["dimensions"] = ["Name=Instance1"]

        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert params["Dimensions.member.1.Name"] == "Name"
        assert params["Dimensions.member.1.Value"] == "Instance1"
        assert "Dimensions.member.2.Name" not in params

    def test_kv_list_two_entries(self, alarm_options):
        alarm_options["dimensions"] = ["Name=X", "Other=Y"]

        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert params["Dimensions.member.1.Name"] == "Name"
        assert params["Dimensions.member.1.Value"] == "X"
        assert params["Dimensions.member.2.Name"] == "Other"
        assert params["Dimensions.member.2.Value"] == "Y"

    def test_dimension_without_equals_yields_empty_value(self, alarm_options):
        """'=' 없는 차원 → 빈 Value (허용적 분리)"""
        alarm_options["dimensions"] = ["Instance1"]

        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert params["Dimensions.member.1.Name"] == "Instance1"
        assert params["Dimensions.member.1.Value"] == ""

    def test_dimensions_as_mapping(self, alarm_options):
        alarm_options["dimensions"] = {"InstanceId": "i-123"}

        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert params["Dimensions.member.1.Name"] == "InstanceId"
        assert params["Dimensions.member.1.Value"] == "i-123"

    def test_actions(self, alarm_options):
        alarm_options["alarm_actions"] = ["arn:aws:sns:ap-northeast-2:123456789012:alerts"]
        alarm_options["ok_actions"] = "arn:a,arn:b"
        alarm_options["insufficient_data_actions"] = ["arn:c"]

        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert params["AlarmActions.member.1"] == "arn:aws:sns:ap-northeast-2:123456789012:alerts"
        assert params["OKActions.member.1"] == "arn:a"
        assert params["OKActions.member.2"] == "arn:b"
        assert params["InsufficientDataActions.member.1"] == "arn:c"

    def test_optional_flags_only_when_supplied(self, alarm_options):
        alarm_options["force"] = False
        alarm_options["actions_enabled"] = True
        alarm_options["alarm_description"] = "CPU over 80%"

        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert params["Force"] == "false"
        assert params["ActionsEnabled"] == "true"
        assert params["AlarmDescription"] == "CPU over 80%"

    def test_absent_optionals_never_emitted(self, alarm_options):
        params = build_request(PUT_METRIC_ALARM, alarm_options)

        for key in ("Force", "ActionsEnabled", "AlarmDescription", "Unit"):
            assert key not in params
        assert not any(".member." in key for key in params)

    def test_empty_optional_list_emits_nothing(self, alarm_options):
        alarm_options["alarm_actions"] = []

        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert not any(key.startswith("AlarmActions") for key in params)

    def test_empty_description_is_emitted(self, alarm_options):
        """제공된 선택 값은 빈 문자열이어도 포함"""
        alarm_options["alarm_description"] = ""

        params = build_request(PUT_METRIC_ALARM, alarm_options)

        assert params["AlarmDescription"] == ""


class TestProperties:
    """인코딩 공통 속성"""

    def _full_options(self, gms_options, alarm_options):
        return {
            "ListMetrics": {},
            "GetMetricStatistics": {
                **gms_options,
                "dimensions": ["InstanceId=i-1", "AutoScalingGroupName=web"],
                "unit": "Percent",
            },
            "DeleteAlarms": {"alarm_names": "a,b,c"},
            "PutMetricAlarm": {
                **alarm_options,
                "dimensions": ["InstanceId=i-1"],
                "alarm_actions": ["arn:1", "arn:2"],
                "ok_actions": ["arn:3"],
                "force": True,
            },
        }

    def test_required_wire_keys_present(self, gms_options, alarm_options):
        """필수 필드의 와이어 키가 빠지지 않음"""
        for name, options in self._full_options(gms_options, alarm_options).items():
            spec = OPERATIONS[name]
            params = build_request(spec, options)

            for field_spec in spec.required_fields:
                assert any(
                    key == field_spec.wire_name or key.startswith(f"{field_spec.wire_name}.member.1")
                    for key in params
                ), f"{name}: {field_spec.wire_name} 누락"

    def test_indices_contiguous_from_one(self, gms_options, alarm_options):
        """인덱스 그룹은 1부터 연속"""
        for name, options in self._full_options(gms_options, alarm_options).items():
            spec = OPERATIONS[name]
            params = build_request(spec, options)

            for field_spec in spec.fields:
                indices = _indices(params, field_spec.wire_name)
                assert indices == list(range(1, len(indices) + 1))

    def test_idempotent(self, gms_options, alarm_options):
        """같은 옵션 두 번 인코딩 → 동일 맵"""
        for name, options in self._full_options(gms_options, alarm_options).items():
            spec = OPERATIONS[name]
            first = build_request(spec, options)
            second = build_request(spec, dict(options))

            assert first == second
            assert list(first) == list(second)
            assert first is not second

    def test_all_values_are_strings(self, gms_options, alarm_options):
        for name, options in self._full_options(gms_options, alarm_options).items():
            params = build_request(OPERATIONS[name], options)

            assert all(isinstance(k, str) and isinstance(v, str) for k, v in params.items())

    def test_encode_without_validation_uses_defaults(self):
        """encode 단독 호출 시에도 기본값 필드는 포함"""
        params = encode(GET_METRIC_STATISTICS, {})

        assert params == {"Namespace": "AWS/EC2", "Period": "60"}

    def test_concurrent_encoding(self, gms_options, alarm_options):
        """여러 스레드에서 동시에 인코딩해도 결과 동일"""
        cases = list(self._full_options(gms_options, alarm_options).items()) * 25
        expected = {name: build_request(OPERATIONS[name], options) for name, options in cases}

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda case: (case[0], build_request(OPERATIONS[case[0]], case[1])), cases))

        for name, params in results:
            assert params == expected[name]
