"""
cwquery/monitoring/types.py - 작업/필드 명세 타입

CloudWatch 쿼리 API 작업 하나를 설명하는 정적 명세입니다.

주요 구성 요소:
- FieldShape: 와이어 인코딩 형태 (scalar, csv-list, kv-list)
- FieldType: 값 타입 (검증용)
- FieldSpec: 필드 하나의 규칙 (필수 여부, 기본값, 허용 값)
- OperationSpec: 작업 이름 + 필드 명세 목록
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FieldShape(Enum):
    """와이어 인코딩 형태"""

    SCALAR = "scalar"  # Name=value
    CSV_LIST = "csv-list"  # Name.member.N=value
    KV_LIST = "kv-list"  # Name.member.N.Name / Name.member.N.Value


class FieldType(Enum):
    """필드 값 타입"""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    LIST = "list"


class _NoDefault:
    """기본값 없음 표시용 sentinel"""

    _instance: _NoDefault | None = None

    def __new__(cls) -> _NoDefault:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False


NO_DEFAULT: Any = _NoDefault()


@dataclass(frozen=True)
class FieldSpec:
    """작업 필드 명세

    Attributes:
        name: 옵션 키 (snake_case, 예: "measure_name")
        wire_name: 와이어 키 (예: "MeasureName")
        shape: 인코딩 형태
        value_type: 검증용 값 타입
        required: 필수 여부
        default: 생략 시 사용되는 기본값 (NO_DEFAULT이면 기본값 없음)
        allowed_values: 허용 값 집합 (None이면 열거형 아님)
    """

    name: str
    wire_name: str
    shape: FieldShape = FieldShape.SCALAR
    value_type: FieldType = FieldType.STRING
    required: bool = False
    default: Any = NO_DEFAULT
    allowed_values: frozenset[str] | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @property
    def is_enumerated(self) -> bool:
        return self.allowed_values is not None


@dataclass(frozen=True)
class OperationSpec:
    """CloudWatch 작업 명세

    Attributes:
        name: 요청에 그대로 사용되는 작업 이름 (예: "PutMetricAlarm")
        fields: 필드 명세 (인코딩 순서)
        description: 작업 설명
    """

    name: str
    fields: tuple[FieldSpec, ...] = ()
    description: str = ""

    @property
    def required_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.required)

    @property
    def optional_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if not f.required)

    @property
    def defaults(self) -> dict[str, Any]:
        """선택 필드의 기본값 {옵션 키: 기본값}"""
        return {f.name: f.default for f in self.fields if f.has_default}

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(f.name for f in self.fields)

    def field(self, name: str) -> FieldSpec:
        """옵션 키로 필드 명세 조회

        Raises:
            KeyError: 해당 필드가 없는 경우
        """
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(f"{self.name}: 알 수 없는 필드 '{name}'")
