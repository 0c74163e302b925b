import logging
from typing import Optional

from sqlalchemy.engine import Engine

from rbac.config import settings
from .database import engine as default_engine, build_session_factory, Base
from .models import Access, Role, RoleAccess

logger = logging.getLogger(__name__)

# (이름, 설명, 모듈, 동작 유형)
DEFAULT_ACCESSES = [
    ("VIEW_REPORT", "View reports", "reports", "VIEW"),
    ("CREATE_REPORT", "Create reports", "reports", "CREATE"),
    ("READ_USERS", "Read user accounts", "users", "READ"),
    ("MANAGE_USERS", "Create, update and delete user accounts", "users", "UPDATE"),
    ("MANAGE_ROLES", "Create, update and delete roles and their accesses", "roles", "UPDATE"),
]

# member 역할은 조회성 권한만 가집니다. admin은 모든 기본 권한을 가집니다.
MEMBER_ACTIONS = {"VIEW", "READ"}


def initialize_db(bind: Optional[Engine] = None, seed: Optional[bool] = None) -> bool:
    """
    DB와 테이블을 생성하고, 필요하면 기본 역할/권한 데이터를 삽입합니다.

    Args:
        bind: 사용할 엔진. 생략하면 설정(RBAC_DATABASE_URL)으로 만든 기본 엔진을 사용합니다.
        seed: 기본 데이터 삽입 여부. 생략하면 RBAC_SEED_DEFAULTS 설정을 따릅니다.

    Returns:
        기본 데이터를 새로 삽입했으면 True, 건너뛰었으면 False.
    """
    bind = bind or default_engine
    seed = settings.seed_defaults if seed is None else seed

    logger.info("Initializing database schema")
    # 모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    Base.metadata.create_all(bind=bind)

    if not seed:
        return False

    db = build_session_factory(bind)()
    try:
        # 역할이 하나라도 있으면 이미 초기화된 DB로 봅니다.
        if db.query(Role).first():
            logger.info("Default data already present, skipping seed")
            return False

        admin_role = Role(name="admin", description="Full administrative access")
        member_role = Role(name="member", description="Read-only access")
        roles = [admin_role, member_role]
        db.add_all(roles)

        accesses = [
            Access(name=name, description=description, module_name=module, action_type=action)
            for name, description, module, action in DEFAULT_ACCESSES
        ]
        db.add_all(accesses)

        # 연결 테이블에 넣기 전에 각 객체의 id를 할당받습니다.
        db.flush()

        for access in accesses:
            db.add(RoleAccess(role_id=admin_role.id, access_id=access.id))
            if access.action_type in MEMBER_ACTIONS:
                db.add(RoleAccess(role_id=member_role.id, access_id=access.id))

        db.commit()
        logger.info("Seeded %d roles and %d accesses", len(roles), len(accesses))
        return True
    except Exception:
        logger.exception("Failed to seed default data")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    initialize_db()
