"""목록을 여러 페이지로 나누어 출력하는 페이징 모듈

Pager 는 한 페이지에 해당하는 항목만 보관합니다.
요청 매개변수명(key)을 페이저마다 다르게 지정하면
한 화면에 여러 개의 페이저를 함께 사용할 수 있습니다.
SQL 목록은 LIMIT/OFFSET 으로 현재 페이지만 조회합니다.

예시:
    articles, pager = paginate(request, Article, db=db, limit=10)

    items = ["item1", "item2", ...]
    entries, pager = paginate(request, items, limit=10)

    {% for article in articles %}
        <li>{{ article.title }}</li>
    {% endfor %}
    {{ pager.navigation() }}
"""
import abc
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from fastapi import Request
from markupsafe import Markup, escape
from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from core.exception import PagerLimitError, PagerSourceError
from core.settings import settings

logger = logging.getLogger(__name__)

# 현재 페이지 앞/뒤로 표시할 페이지 번호 개수
NAV_PAGES_BEFORE = 5
NAV_PAGES_WIDTH = 10

# SQL OFFSET 으로 전달할 수 있는 최댓값 (부호 있는 64비트 정수)
MAX_OFFSET = 2 ** 63 - 1


@dataclass
class PagerConfig:
    """페이징 기본 설정"""
    limit: int = 10
    key: str = "_page"

    @classmethod
    def from_settings(cls) -> "PagerConfig":
        """.env 설정값(PAGER_LIMIT, PAGER_KEY)으로 설정 객체를 생성합니다."""
        return cls(limit=settings.PAGER_LIMIT, key=settings.PAGER_KEY)


class PageKind(str, Enum):
    """링크를 생성할 수 있는 페이지 종류"""
    FIRST = "first"
    LAST = "last"
    PREVIOUS = "previous"
    NEXT = "next"


def parse_page(value: Any, limit: int = 1) -> int:
    """요청 매개변수의 페이지 번호를 정수로 변환합니다.
    - 값이 없거나 정수로 변환할 수 없거나 1보다 작으면 1을 반환합니다.
    - 페이지의 offset 이 MAX_OFFSET 을 넘는 값도 잘못된 값으로 보고 1을 반환합니다.

    Args:
        value (Any): 요청 매개변수 값
        limit (int, optional): 한 페이지당 항목 수. Defaults to 1.

    Returns:
        int: 1 이상의 페이지 번호
    """
    if value is None:
        return 1
    try:
        page = int(value)
    except (ValueError, TypeError):
        logger.debug(f"invalid page parameter: {value!r}")
        return 1

    if page < 1:
        return 1
    if (page - 1) * limit > MAX_OFFSET:
        logger.debug(f"page parameter out of range: {value!r}")
        return 1
    return page


class Pager:
    """목록의 페이지/오프셋 계산과 페이지 이동 링크 출력을 담당하는 클래스

    Attributes:
        page (int): 현재 페이지
        limit (int): 한 페이지당 항목 수
        total_count (int): 전체 항목 수
        page_count (int): 전체 페이지 수
        start_idx (int): 현재 페이지 첫 항목의 위치 (0부터 시작)
        page_items (list): 현재 페이지의 항목 목록
    """

    def __init__(self,
                 request: Request,
                 limit: int,
                 total_count: int,
                 key: Optional[str] = None,
                 config: Optional[PagerConfig] = None):
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise PagerLimitError(limit)

        config = config or PagerConfig.from_settings()

        self.request = request
        self.key = key or config.key
        self.limit = limit
        self.page = parse_page(request.query_params.get(self.key), limit)
        self.page_items: List[Any] = []
        self.set_count(total_count)

    def set_count(self, total_count: int) -> None:
        """전체 항목 수를 변경하고 파생값을 함께 다시 계산합니다."""
        self.total_count = max(int(total_count), 0)
        self.page_count = math.ceil(self.total_count / self.limit)
        self.start_idx = (self.page - 1) * self.limit

    @property
    def offset(self) -> int:
        return self.start_idx

    @property
    def first_page(self) -> int:
        return 1

    @property
    def last_page(self) -> int:
        return self.page_count

    @property
    def previous_page(self) -> int:
        return max(self.page - 1, 1)

    @property
    def next_page(self) -> int:
        return min(self.page + 1, self.page_count)

    @property
    def is_first_page(self) -> bool:
        return self.page == 1

    @property
    def is_last_page(self) -> bool:
        return self.page == self.page_count

    @property
    def is_empty(self) -> bool:
        """항목이 하나도 없는지 여부"""
        return self.page_count < 1

    @property
    def size(self) -> int:
        return self.total_count

    def __len__(self) -> int:
        return self.total_count

    def __iter__(self) -> Iterator[Any]:
        return iter(self.page_items)

    def enumerate_items(self) -> Iterator[Tuple[int, Any]]:
        """현재 페이지 항목을 전체 목록 기준 번호(1부터 시작)와 함께 반환합니다."""
        for idx, item in enumerate(self.page_items, start=self.start_idx + 1):
            yield idx, item

    @property
    def page_range(self) -> Tuple[int, int]:
        """현재 페이지 항목의 전체 목록 기준 위치 범위 (0부터 시작, 끝 포함)"""
        end = min(self.start_idx + self.limit, self.total_count) - 1
        return self.start_idx, end

    @property
    def limit_options(self) -> Dict[str, int]:
        """LIMIT/OFFSET 쿼리 옵션
        - offset 이 0 이면 limit 만 반환합니다.
        """
        if self.start_idx > 0:
            return {"limit": self.limit, "offset": self.start_idx}
        return {"limit": self.limit}

    def nav_range(self) -> range:
        """페이지 번호 목록 범위
        - 현재 페이지 앞쪽으로 최대 5페이지, 전체 최대 10페이지를 표시합니다.
        """
        start = max(self.page - NAV_PAGES_BEFORE, 1)
        end = min(start + NAV_PAGES_WIDTH - 1, self.page_count)
        return range(start, end + 1)

    @property
    def has_navigation(self) -> bool:
        """페이지 이동 링크를 출력할 필요가 있는지 여부"""
        return self.page_count > 1

    def target_uri(self, page: int) -> str:
        """현재 요청의 매개변수를 유지하고 페이지 번호만 변경한 URL을 반환합니다.

        Args:
            page (int): 이동할 페이지 번호

        Returns:
            str: 페이지 URL
        """
        return str(self.request.url.include_query_params(**{self.key: page}))

    def page_url(self, kind: PageKind) -> str:
        """처음/마지막/이전/다음 페이지 URL"""
        pages = {
            PageKind.FIRST: self.first_page,
            PageKind.LAST: self.last_page,
            PageKind.PREVIOUS: self.previous_page,
            PageKind.NEXT: self.next_page,
        }
        return self.target_uri(pages[PageKind(kind)])

    @property
    def first_page_url(self) -> str:
        return self.page_url(PageKind.FIRST)

    @property
    def last_page_url(self) -> str:
        return self.page_url(PageKind.LAST)

    @property
    def previous_page_url(self) -> str:
        return self.page_url(PageKind.PREVIOUS)

    @property
    def next_page_url(self) -> str:
        return self.page_url(PageKind.NEXT)

    def navigation(self) -> Markup:
        """페이지 이동 HTML 코드
        - 클래스명(first, previous, last, next, active)은 기존 스타일시트와의 호환을 위해 유지합니다.
        - 다른 마크업이 필요하면 상속하여 재정의합니다.

        Returns:
            Markup: 페이징 HTML 코드
        """
        nav = []

        if not self.is_first_page:
            nav.append(f'<div class="first"><a href="{escape(self.first_page_url)}">First</a></div>')
            nav.append(f'<div class="previous"><a href="{escape(self.previous_page_url)}">Previous</a></div>')

        if not self.is_last_page:
            nav.append(f'<div class="last"><a href="{escape(self.last_page_url)}">Last</a></div>')
            nav.append(f'<div class="next"><a href="{escape(self.next_page_url)}">Next</a></div>')

        nav.append('<ul>')
        for i in self.nav_range():
            if i == self.page:
                nav.append(f'<li class="active">{i}</li>')
            else:
                nav.append(f'<li><a href="{escape(self.target_uri(i))}">{i}</a></li>')
        nav.append('</ul>')

        return Markup("\n".join(nav))

    def __repr__(self) -> str:
        return (f"<Pager key={self.key!r} page={self.page} limit={self.limit} "
                f"total_count={self.total_count} page_count={self.page_count}>")


class PageSource(metaclass=abc.ABCMeta):
    """페이징할 수 있는 컬렉션의 기본이 되는 추상 기반 클래스
    - 전체 항목 수를 조회할 수 있고, offset/limit 범위의 항목을 가져올 수 있어야 합니다.
    """

    @abc.abstractmethod
    def count(self) -> int:
        """전체 항목 수"""

    @abc.abstractmethod
    def fetch(self, offset: int = 0, limit: Optional[int] = None) -> List[Any]:
        """offset 부터 limit 개의 항목을 반환합니다."""


class SequencePageSource(PageSource):
    """메모리에 있는 list/tuple 을 페이징합니다."""

    def __init__(self, items: Sequence[Any]):
        self.items = items

    def count(self) -> int:
        return len(self.items)

    def fetch(self, offset: int = 0, limit: Optional[int] = None) -> List[Any]:
        end = None if limit is None else offset + limit
        return list(self.items[offset:end])


class SelectPageSource(PageSource):
    """SQLAlchemy Select 문을 페이징합니다.
    - 전체 항목 수는 서브쿼리 COUNT 로 조회합니다.
    - 현재 페이지 항목은 LIMIT/OFFSET 을 추가하여 다시 조회합니다.
    """

    def __init__(self, db: Session, statement: Select):
        self.db = db
        self.statement = statement

    def count(self) -> int:
        count_query = select(func.count()).select_from(self.statement.order_by(None).subquery())
        return self.db.scalar(count_query) or 0

    def fetch(self, offset: int = 0, limit: Optional[int] = None) -> List[Any]:
        query = self.statement
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.scalars(query).all())


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def get_page_source(items: Any, db: Optional[Session] = None, **options) -> PageSource:
    """컬렉션을 PageSource 로 변환합니다.

    Args:
        items (Any): list/tuple, SQLAlchemy Select, 모델 클래스 또는 PageSource
        db (Session, optional): SQL 조회에 사용할 세션. Defaults to None.
        **options: SQL 조회 옵션 (where, order_by)

    Raises:
        PagerSourceError: 세션 없이 SQL 조회를 요청했거나 페이징할 수 없는 컬렉션인 경우

    Returns:
        PageSource: 페이징 가능한 컬렉션
    """
    if isinstance(items, PageSource):
        return items

    if isinstance(items, (list, tuple)):
        return SequencePageSource(items)

    if isinstance(items, Select):
        statement = items
    elif isinstance(items, type) and hasattr(items, "__table__"):
        # 모델 클래스
        statement = select(items)
    else:
        raise PagerSourceError(f"cannot paginate {type(items).__name__} objects")

    if db is None:
        raise PagerSourceError("a database session is required to paginate a query")

    for clause in _as_list(options.get("where")):
        statement = statement.where(clause)
    order_by = _as_list(options.get("order_by"))
    if order_by:
        statement = statement.order_by(*order_by)

    return SelectPageSource(db, statement)


def paginate(request: Request,
             items: Any,
             limit: Optional[int] = None,
             pager_key: Optional[str] = None,
             db: Optional[Session] = None,
             config: Optional[PagerConfig] = None,
             **options) -> Tuple[List[Any], Pager]:
    """컬렉션의 현재 페이지 항목과 Pager 객체를 반환합니다.

    Args:
        request (Request): FastAPI Request 객체
        items (Any): 페이징할 컬렉션
        limit (int, optional): 한 페이지당 항목 수. Defaults to PAGER_LIMIT.
        pager_key (str, optional): 현재 페이지 요청 매개변수명. Defaults to PAGER_KEY.
        db (Session, optional): SQL 조회에 사용할 세션. Defaults to None.
        config (PagerConfig, optional): 페이징 기본 설정. Defaults to None.
        **options: SQL 조회 옵션 (where, order_by)

    Returns:
        Tuple[List[Any], Pager]: 현재 페이지 항목, Pager 객체
    """
    config = config or PagerConfig.from_settings()
    limit = config.limit if limit is None else limit
    pager_key = pager_key or config.key

    source = get_page_source(items, db, **options)
    pager = Pager(request, limit, source.count(), pager_key, config)

    page_items = source.fetch(**pager.limit_options)
    pager.page_items = page_items

    return page_items, pager
