from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.orm import Session, sessionmaker

from rbac.database.database import SessionLocal


@contextmanager
def session_scope(session_factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """
    요청 하나 동안 사용할 DB 세션을 열고, 블록이 끝나면 항상 닫습니다.

    commit/rollback은 여기서 하지 않습니다. 트랜잭션 경계는 서비스의 TransactionScope가 담당합니다.

    사용 예시:
        with session_scope() as db:
            services = create_services(db)
            services.roles.create_role("admin")
    """
    factory = session_factory or SessionLocal
    db_session = factory()
    try:
        yield db_session
    finally:
        db_session.close()
