"""
cwquery/config.py - 클라이언트 설정

리전, 엔드포인트, 타임아웃, 재시도 설정입니다.
환경 변수에서 읽어올 수 있습니다.

환경 변수:
    CWQUERY_REGION (없으면 AWS_REGION, AWS_DEFAULT_REGION)
    CWQUERY_ENDPOINT_URL
    CWQUERY_CONNECT_TIMEOUT
    CWQUERY_READ_TIMEOUT
    CWQUERY_MAX_RETRIES
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from cwquery.exceptions import ConfigError

API_VERSION = "2010-08-01"
SERVICE_NAME = "monitoring"

DEFAULT_REGION = "ap-northeast-2"
DEFAULT_CONNECT_TIMEOUT = 10  # 초
DEFAULT_READ_TIMEOUT = 30  # 초
DEFAULT_MAX_RETRIES = 3


@dataclass(frozen=True)
class ClientConfig:
    """CloudWatch 쿼리 클라이언트 설정

    Attributes:
        region: AWS 리전
        endpoint_url: 엔드포인트 (None이면 리전 기본 엔드포인트)
        api_version: 쿼리 API 버전
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        max_retries: Throttling 시 재시도 횟수
    """

    region: str = DEFAULT_REGION
    endpoint_url: str | None = None
    api_version: str = API_VERSION
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    read_timeout: int = DEFAULT_READ_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES

    @property
    def endpoint(self) -> str:
        """요청 URL"""
        if self.endpoint_url:
            return self.endpoint_url
        return f"https://{SERVICE_NAME}.{self.region}.amazonaws.com/"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """환경 변수에서 설정 생성

        Raises:
            ConfigError: 숫자 설정 값이 올바르지 않은 경우
        """
        env = os.environ if environ is None else environ

        region = env.get("CWQUERY_REGION") or env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or DEFAULT_REGION

        return cls(
            region=region,
            endpoint_url=env.get("CWQUERY_ENDPOINT_URL") or None,
            connect_timeout=_int_setting(env, "CWQUERY_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            read_timeout=_int_setting(env, "CWQUERY_READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
            max_retries=_int_setting(env, "CWQUERY_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        )


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(key, f"정수가 아닙니다: {raw!r}", cause=e) from e
    if value < 0:
        raise ConfigError(key, f"음수는 허용되지 않습니다: {value}")
    return value
