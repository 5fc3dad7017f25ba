"""
cwquery/cli/app.py - 메인 CLI 엔트리포인트

Click 기반 CLI입니다. 옵션을 검증/인코딩한 파라미터 맵을 미리 확인하거나
(--send) 실제로 CloudWatch에 전송합니다.

명령어 구조:
    cwq --version
    cwq operations                      # 지원 작업 및 필드 목록
    cwq encode <operation> -o k=v ...   # 파라미터 맵 출력 (dry-run)
    cwq encode <operation> ... --send   # 검증 후 실제 전송

    예시:
    cwq encode GetMetricStatistics \\
        -o measure_name=CPUUtilization -o statistics=Average,Maximum \\
        -o start_time=2024-01-01T00:00:00Z -o end_time=2024-01-02T00:00:00Z
    cwq encode put_metric_alarm -o dimensions=InstanceId=i-123 -o dimensions=AutoScalingGroupName=web ...
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

import click
from click import Context
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cwquery import __version__
from cwquery.exceptions import CWQueryError, format_error_for_user
from cwquery.monitoring import FieldType, OperationSpec, build_request, get_operation
from cwquery.monitoring.operations import OPERATIONS

console = Console()

_TRUE_VALUES = {"true", "yes", "1", "on"}
_FALSE_VALUES = {"false", "no", "0", "off"}


@click.group()
@click.version_option(__version__, prog_name="cwq")
@click.option("--debug", is_flag=True, help="DEBUG 로그 출력")
@click.pass_context
def cli(ctx: Context, debug: bool) -> None:
    """cwq - CloudWatch 쿼리 API 파라미터 도구"""
    # WARNING 레벨로 설정하여 INFO 로그가 도구 출력에 섞이지 않도록 함
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command("operations")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
def operations_command(as_json: bool) -> None:
    """지원 작업 목록

    \b
    Examples:
        cwq operations
        cwq operations --json
    """
    if as_json:
        output_data = [
            {
                "operation": spec.name,
                "required": [f.wire_name for f in spec.required_fields],
                "optional": [f.wire_name for f in spec.optional_fields],
            }
            for spec in OPERATIONS.values()
        ]
        click.echo(json.dumps(output_data, ensure_ascii=False, indent=2))
        return

    table = Table(title="CloudWatch 작업", show_header=True, header_style="bold magenta")
    table.add_column("작업", style="cyan")
    table.add_column("필수", style="white")
    table.add_column("선택", style="dim")

    for spec in OPERATIONS.values():
        required = ", ".join(f.wire_name for f in spec.required_fields) or "-"
        optional = ", ".join(_describe_optional(f) for f in spec.optional_fields) or "-"
        table.add_row(spec.name, required, optional)

    console.print(table)


@cli.command("encode")
@click.argument("operation")
@click.option("-o", "--option", "raw_options", multiple=True, help="옵션 key=value (반복 가능, 같은 키 반복 시 목록)")
@click.option("--json", "as_json", is_flag=True, help="JSON 형식으로 출력")
@click.option("--send", is_flag=True, help="검증 후 CloudWatch에 실제 전송")
def encode_command(operation: str, raw_options: tuple[str, ...], as_json: bool, send: bool) -> None:
    """옵션 검증 후 쿼리 파라미터 출력

    \b
    Examples:
        cwq encode ListMetrics
        cwq encode delete_alarms -o alarm_names=a,b
        cwq encode DeleteAlarms -o alarm_names=a -o alarm_names=b --json
    """
    try:
        spec = get_operation(operation)
        options = parse_options(spec, raw_options)
        params = build_request(spec, options)
    except CWQueryError as e:
        console.print(f"[red]{escape(format_error_for_user(e))}[/red]")
        raise SystemExit(1) from e

    if as_json:
        click.echo(json.dumps(params, ensure_ascii=False, indent=2))
    else:
        table = Table(title=f"{spec.name} 파라미터", show_header=True, header_style="bold magenta")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="white")
        for key, value in params.items():
            table.add_row(key, value)
        console.print(table)

    if send:
        from cwquery.transport import BotocoreQueryTransport

        try:
            response = BotocoreQueryTransport().send(spec.name, params)
        except CWQueryError as e:
            console.print(f"[red]{escape(format_error_for_user(e))}[/red]")
            raise SystemExit(1) from e

        console.print(f"[green]HTTP {response.status_code}[/green] [dim]{response.request_id or ''}[/dim]")
        click.echo(response.body)


# =============================================================================
# 옵션 파싱
# =============================================================================


def parse_options(spec: OperationSpec, raw_options: tuple[str, ...] | list[str]) -> dict[str, Any]:
    """CLI의 key=value 옵션을 필드 타입에 맞게 변환

    같은 키를 반복하면 목록이 됩니다. 알 수 없는 키는 문자열 그대로 전달되어
    검증 단계에서 경고 후 무시됩니다.

    Raises:
        click.BadParameter: 형식 오류 또는 타입 변환 실패
    """
    collected: dict[str, list[str]] = {}
    for raw in raw_options:
        key, sep, value = raw.partition("=")
        key = key.strip().replace("-", "_")
        if not sep or not key:
            raise click.BadParameter(f"key=value 형식이어야 합니다: {raw!r}", param_hint="--option")
        collected.setdefault(key, []).append(value)

    options: dict[str, Any] = {}
    for key, values in collected.items():
        value_type = spec.field(key).value_type if key in spec.field_names else FieldType.STRING
        if value_type is FieldType.LIST:
            options[key] = values if len(values) > 1 else values[0]
        else:
            options[key] = _convert(key, value_type, values[-1])
    return options


def _convert(key: str, value_type: FieldType, value: str) -> Any:
    try:
        if value_type is FieldType.TIMESTAMP:
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return datetime.fromisoformat(text)
        if value_type is FieldType.INTEGER:
            return int(value)
        if value_type is FieldType.NUMBER:
            return float(value)
    except ValueError as e:
        raise click.BadParameter(f"{key}: {value_type.value} 형식이 아닙니다: {value!r}", param_hint="--option") from e

    if value_type is FieldType.BOOLEAN:
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise click.BadParameter(f"{key}: boolean 형식이 아닙니다: {value!r}", param_hint="--option")

    return value


def _describe_optional(field_spec: Any) -> str:
    if field_spec.has_default:
        return f"{field_spec.wire_name}={field_spec.default}"
    return field_spec.wire_name


def main() -> None:
    """cwq 콘솔 스크립트 진입점"""
    cli()


if __name__ == "__main__":
    main()
