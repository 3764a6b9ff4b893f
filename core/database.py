import logging
from typing import AsyncGenerator, Union

from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, URL
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from typing_extensions import Annotated

from core.settings import Settings, settings

logger = logging.getLogger(__name__)

# DB_ENGINE 별 SQLAlchemy 드라이버
SUPPORTED_ENGINES = {
    "mysql": "mysql+pymysql",
    "postgresql": "postgresql+psycopg2",
    "sqlite": "sqlite",
}


def create_db_url(config: Settings) -> Union[str, URL]:
    """설정값으로 데이터베이스 URL을 생성합니다.
    - DB_URL 이 지정된 경우 그대로 사용합니다.
    - sqlite 는 DB_NAME 이 없으면 메모리 DB를 사용합니다.
    - 지원하지 않는 DB_ENGINE 은 메모리 DB로 대체합니다.

    Args:
        config (Settings): .env 설정 객체

    Returns:
        Union[str, URL]: 데이터베이스 URL
    """
    if config.DB_URL:
        return config.DB_URL

    db_driver = SUPPORTED_ENGINES.get(config.DB_ENGINE)
    if db_driver is None:
        logger.warning(f"unsupported DB_ENGINE {config.DB_ENGINE!r}, using in-memory sqlite")
        return "sqlite://"

    if config.DB_ENGINE == "sqlite":
        return f"sqlite:///{config.DB_NAME}" if config.DB_NAME else "sqlite://"

    if config.DB_ENGINE == "mysql":
        query_option = {"charset": config.DB_CHARSET}
    elif config.DB_CHARSET in ("utf8mb4", "utf8"):
        # psycopg2 드라이버 인코딩은 utf8 을 사용
        query_option = {"client_encoding": "utf8"}
    else:
        query_option = {"client_encoding": config.DB_CHARSET}

    return URL.create(
        drivername=db_driver,
        username=config.DB_USER or None,
        password=config.DB_PASSWORD or None,
        host=config.DB_HOST or None,
        port=config.DB_PORT,
        database=config.DB_NAME or None,
        query=query_option,
    )


class DBSetting:
    """
    데이터베이스 설정 클래스
    """

    _url: Annotated[Union[str, URL], ""]
    _instance: Annotated['DBSetting', None] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        super().__init__()
        if not hasattr(DBSetting, "_setting_init"):
            DBSetting._setting_init = True
            self.create_url()

    @property
    def url(self) -> Union[str, URL]:
        return self._url

    @url.setter
    def url(self, url: Union[str, URL]) -> None:
        self._url = url

    @property
    def is_memory_sqlite(self) -> bool:
        return str(self._url) in ("sqlite://", "sqlite:///:memory:")

    def create_url(self) -> None:
        self._url = create_db_url(settings)


class DBConnect(DBSetting):
    """
    데이터베이스 연결 클래스
    - 데이터베이스 연결을 위한 engine 및 session 생성
    - 싱글톤 패턴 구현 (단일 engine 및 session 유지)
    """
    _engine: Annotated[Engine, None]
    _sessionLocal: Annotated[sessionmaker[Session], None]
    _instance: Annotated['DBConnect', None] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def engine(self) -> Engine:
        return self._engine

    @engine.setter
    def engine(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def sessionLocal(self) -> sessionmaker[Session]:
        return self._sessionLocal

    def create_engine(self) -> None:
        if self.is_memory_sqlite:
            # 메모리 DB는 연결마다 새로운 DB가 생성되므로 하나의 연결을 공유
            self.engine = create_engine(
                self._url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                self._url,
                poolclass=QueuePool,
                pool_size=20,
                max_overflow=40,
                pool_timeout=60
            )

        self.create_sessionmaker()

    def create_sessionmaker(self) -> None:
        self._sessionLocal = sessionmaker(autocommit=False, autoflush=False,
                                          bind=self.engine, expire_on_commit=True)


db_connect = DBConnect()
db_connect.create_engine()


# 데이터베이스 세션을 가져오는 의존성 함수
async def get_db() -> AsyncGenerator[Session, None]:
    db = DBConnect().sessionLocal()
    try:
        yield db
    finally:
        db.close()


# Annotated를 사용하여 의존성 주입
db_session = Annotated[Session, Depends(get_db)]
