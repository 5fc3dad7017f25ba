"""
cwquery/transport.py - CloudWatch 쿼리 API 전송 계층

인코딩된 파라미터 맵을 SigV4로 서명하여 전송합니다.
응답 본문은 해석하지 않고 그대로 반환합니다.

주요 구성 요소:
- QueryTransport: 전송 계층 프로토콜 (테스트/대체 구현용)
- QueryResponse: HTTP 응답 (상태 코드 + 본문)
- BotocoreQueryTransport: botocore 기반 기본 구현 (Throttling 시 exponential backoff)

Example:
    from cwquery.transport import BotocoreQueryTransport

    transport = BotocoreQueryTransport()
    response = transport.send("ListMetrics", {})
    print(response.status_code, response.body)
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol
from urllib.parse import urlencode

from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError
from botocore.httpsession import URLLib3Session

from cwquery.config import SERVICE_NAME, ClientConfig
from cwquery.exceptions import APICallError, ConfigError, is_throttling

if TYPE_CHECKING:
    import boto3

logger = logging.getLogger(__name__)

_ERROR_CODE_RE = re.compile(r"<Code>(.*?)</Code>", re.DOTALL)
_ERROR_MESSAGE_RE = re.compile(r"<Message>(.*?)</Message>", re.DOTALL)


@dataclass
class QueryResponse:
    """쿼리 API 응답

    Attributes:
        action: 호출한 작업 이름
        status_code: HTTP 상태 코드
        body: 응답 본문 (XML 원문)
        headers: 응답 헤더
    """

    action: str
    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def request_id(self) -> str | None:
        return self.headers.get("x-amzn-RequestId") or self.headers.get("x-amzn-requestid")


class QueryTransport(Protocol):
    """전송 계층 프로토콜"""

    def send(self, action: str, params: dict[str, str]) -> QueryResponse: ...


class BotocoreQueryTransport:
    """botocore 서명/HTTP 세션을 사용하는 기본 전송 계층

    Args:
        session: boto3 Session (None이면 config.region으로 생성)
        config: 클라이언트 설정 (None이면 환경 변수에서 로드)
        http_session: HTTP 세션 (None이면 URLLib3Session 생성)
    """

    def __init__(
        self,
        session: boto3.Session | None = None,
        config: ClientConfig | None = None,
        http_session: URLLib3Session | None = None,
    ):
        self.config = config or ClientConfig.from_env()
        self._session = session
        self._http = http_session or URLLib3Session(
            timeout=(self.config.connect_timeout, self.config.read_timeout),
        )

    @property
    def session(self) -> boto3.Session:
        if self._session is None:
            import boto3

            self._session = boto3.Session(region_name=self.config.region)
        return self._session

    def send(self, action: str, params: dict[str, str]) -> QueryResponse:
        """요청 전송 (Throttling 시 재시도)

        Args:
            action: 작업 이름 (예: "PutMetricAlarm")
            params: 인코딩된 파라미터 맵

        Returns:
            QueryResponse

        Raises:
            APICallError: HTTP 오류 응답 또는 연결 실패
            ConfigError: 자격 증명을 찾을 수 없는 경우
        """
        retries = 0
        while True:
            try:
                return self._send_once(action, params)
            except APICallError as e:
                if is_throttling(e) and retries < self.config.max_retries:
                    retries += 1
                    wait_time = 2**retries  # Exponential backoff
                    logger.warning(f"CloudWatch Throttling, retry {retries}/{self.config.max_retries} after {wait_time}s")
                    time.sleep(wait_time)
                    continue
                raise

    def build_request(self, action: str, params: dict[str, str]) -> AWSRequest:
        """서명된 AWSRequest 생성"""
        credentials = self.session.get_credentials()
        if credentials is None:
            raise ConfigError("credentials", "AWS 자격 증명을 찾을 수 없습니다")

        body = {"Action": action, "Version": self.config.api_version, **params}
        request = AWSRequest(
            method="POST",
            url=self.config.endpoint,
            data=urlencode(body).encode("utf-8"),
            headers={"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"},
        )
        SigV4Auth(credentials.get_frozen_credentials(), SERVICE_NAME, self.config.region).add_auth(request)
        return request

    def _send_once(self, action: str, params: dict[str, str]) -> QueryResponse:
        request = self.build_request(action, params)
        logger.debug(f"CloudWatch {action} 요청: {self.config.endpoint} (파라미터 {len(params)}개)")

        try:
            response = self._http.send(request.prepare())
        except BotoCoreError as e:
            raise APICallError(operation=action, error_message=str(e), cause=e) from e

        body = response.text
        result = QueryResponse(
            action=action,
            status_code=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

        if response.status_code >= 400:
            code_match = _ERROR_CODE_RE.search(body)
            message_match = _ERROR_MESSAGE_RE.search(body)
            raise APICallError(
                operation=action,
                error_code=code_match.group(1).strip() if code_match else None,
                error_message=message_match.group(1).strip() if message_match else None,
                status_code=response.status_code,
            )

        return result
