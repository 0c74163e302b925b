from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from rbac.config import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    SQLAlchemy 엔진을 생성합니다.

    SQLite의 경우 connect_args로 thread-safe 설정을 끄고,
    연결마다 외래 키 제약을 활성화합니다. (role_accesses의 CASCADE 삭제, users.role_id 참조 무결성)
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    new_engine = create_engine(database_url, echo=echo, connect_args=connect_args)

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


def build_session_factory(bind: Engine) -> sessionmaker:
    # autocommit=False, autoflush=False: 트랜잭션 경계(TransactionScope)에서만 commit 합니다.
    # expire_on_commit=False: commit 이후에도 서비스가 반환한 객체를 그대로 읽을 수 있습니다.
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


# 연결 문자열은 rbac.config.Settings (RBAC_DATABASE_URL)에서 가져옵니다.
engine = build_engine(settings.database_url, echo=settings.database_echo)

SessionLocal = build_session_factory(engine)

# 모든 모델 클래스가 상속받을 Base 클래스
Base = declarative_base()
