from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from starlette.requests import Request

from core.database import DBConnect
from core.models import Article, Base


def build_request(path: str = "/articles", query_string: str = "", headers: dict = None) -> Request:
    """테스트용 Request 객체 생성"""
    raw_headers = [(b"host", b"testserver")]
    for name, value in (headers or {}).items():
        raw_headers.append((name.lower().encode(), value.encode()))

    scope = {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": path,
        "query_string": query_string.encode(),
        "headers": raw_headers,
    }
    return Request(scope)


@pytest.fixture
def make_request():
    return build_request


@pytest.fixture
def db() -> Generator[Session, None, None]:
    engine = DBConnect().engine
    Base.metadata.create_all(bind=engine)
    session = DBConnect().sessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def articles(db: Session):
    """게시글 25건"""
    rows = [Article(title=f"article {i}") for i in range(1, 26)]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    from main import app

    with TestClient(app) as c:
        yield c
