"""
pytest 공용 Fixture.

- 서비스 단위 테스트: MagicMock(spec=Session) 위에 실제 TransactionScope를 올려 commit/rollback 호출을 검증합니다.
- 리포지토리/시나리오 테스트: 테스트마다 새로 만드는 in-memory SQLite 엔진을 사용합니다.
"""
import os

# 설정이 로드되기 전에 파일 DB 대신 in-memory DB를 사용하도록 지정
os.environ.setdefault("RBAC_DATABASE_URL", "sqlite://")

import pytest
from unittest.mock import MagicMock
from sqlalchemy.orm import Session

from rbac.container import create_services
from rbac.database import models  # noqa: F401 - 테이블 메타데이터 등록
from rbac.database.database import Base, build_engine, build_session_factory
from rbac.database.transaction import TransactionScope


@pytest.fixture
def mock_session() -> MagicMock:
    """SQLAlchemy Session에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=Session)


@pytest.fixture
def tx(mock_session: MagicMock) -> TransactionScope:
    """모의 세션 위에서 동작하는 실제 TransactionScope를 생성합니다."""
    return TransactionScope(mock_session)


@pytest.fixture
def engine():
    """테이블이 생성된 in-memory SQLite 엔진을 생성하고, 테스트가 끝나면 정리합니다."""
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine):
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def services(db_session):
    """실제 SQLAlchemy 리포지토리로 연결된 서비스 묶음."""
    return create_services(db_session)
