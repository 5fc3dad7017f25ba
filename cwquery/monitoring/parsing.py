"""
cwquery/monitoring/parsing.py - 문자열 형태 목록 입력 파서

구조화된 목록/쌍 입력 외에 "Average,Sum" 또는 "InstanceId=i-123" 같은
문자열 입력을 계속 받기 위한 호환 파서입니다.

규칙:
- 콤마 목록: 토큰 양쪽 공백 제거, 빈 토큰은 버림, 순서 유지, 중복 제거 없음
- key=value: 첫 번째 "=" 기준으로 분리, "="가 없으면 값은 빈 문자열
- list는 재귀적으로 평탄화, tuple은 이미 분리된 (name, value) 쌍으로 취급
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def flatten(value: Any) -> list[Any]:
    """중첩 list를 평탄화

    문자열과 tuple은 하나의 원소로 취급합니다.

    Args:
        value: 단일 값 또는 (중첩) list

    Returns:
        평탄화된 list (None이면 빈 list)
    """
    if value is None:
        return []
    if not isinstance(value, list):
        return [value]

    result: list[Any] = []
    for item in value:
        result.extend(flatten(item))
    return result


def split_csv(value: Any) -> list[str]:
    """콤마 구분 목록 파싱

    Args:
        value: "Average, Sum" 형태의 문자열 또는 문자열 시퀀스

    Returns:
        토큰 목록 (입력 순서)

    Example:
        split_csv("a, b ,c")  # ["a", "b", "c"]
        split_csv(["a", ["b"]])  # ["a", "b"]
    """
    if value is None:
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = flatten(list(value))
    else:
        items = [value]

    tokens = [str(item).strip() for item in items if item is not None]
    return [token for token in tokens if token]


def split_pair(entry: str) -> tuple[str, str]:
    """'key=value' 문자열을 (key, value)로 분리

    첫 번째 "="에서만 분리하므로 값에 "="가 포함될 수 있습니다.
    "="가 없으면 값은 빈 문자열이 됩니다 (오류로 처리하지 않음).

    Example:
        split_pair("InstanceId=i-123")  # ("InstanceId", "i-123")
        split_pair("Query=a=b")  # ("Query", "a=b")
        split_pair("Instance1")  # ("Instance1", "")
    """
    name, _, value = entry.partition("=")
    return name.strip(), value.strip()


def split_pairs(value: Any) -> list[tuple[str, str]]:
    """key=value 목록 파싱

    허용 입력:
        - "A=1,B=2" (콤마 구분 문자열)
        - ["A=1", "B=2"] (중첩 list 허용)
        - [("A", "1"), ("B", "2")] (이미 분리된 쌍)
        - {"A": "1", "B": "2"} (매핑, 삽입 순서 유지)

    Returns:
        (name, value) 쌍 목록 (입력 순서)
    """
    if value is None:
        return []
    if isinstance(value, Mapping):
        return [(str(k).strip(), "" if v is None else str(v).strip()) for k, v in value.items()]
    if isinstance(value, str):
        entries: list[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        entries = flatten(list(value))
    else:
        entries = [value]

    pairs: list[tuple[str, str]] = []
    for entry in entries:
        if isinstance(entry, tuple):
            name = entry[0] if entry else ""
            pair_value = entry[1] if len(entry) > 1 else ""
            pairs.append((str(name).strip(), "" if pair_value is None else str(pair_value).strip()))
            continue
        text = str(entry).strip()
        if not text:
            continue
        pairs.append(split_pair(text))
    return pairs
