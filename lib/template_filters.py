# Jinja2 Templates 사용자 정의 필터
# ============================================================================
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def datetime_format(value: Optional[Union[date, datetime]],
                    fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    """게시글 등록일시 등을 출력 형식에 맞춰 문자열로 변환합니다.
    - 값이 없으면 빈 문자열을 반환합니다.

    Args:
        value (date | datetime, optional): 날짜 또는 일시
        fmt (str, optional): strftime 형식. Defaults to "%Y-%m-%d %H:%M:%S".

    Returns:
        str: 형식이 적용된 문자열
    """
    if value is None:
        return ""
    return value.strftime(fmt)


def number_format(value: Union[int, float, Decimal, None], decimals: int = 0) -> str:
    """전체 건수 등의 숫자에 천단위 구분기호를 넣습니다.
    - 숫자가 아닌 값은 "0" 으로 출력합니다.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return "0"
    return f"{value:,.{decimals}f}"
