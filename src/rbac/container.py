from typing import NamedTuple

from sqlalchemy.orm import Session

from rbac.database.transaction import TransactionScope
from rbac.repositories.sqlalchemy import (
    SqlalchemyAccessRepository, SqlalchemyRoleRepository,
    SqlalchemyRoleAccessRepository, SqlalchemyUserRepository
)
from rbac.services.access_service import AccessService
from rbac.services.role_service import RoleService
from rbac.services.user_service import UserService


class Services(NamedTuple):
    accesses: AccessService
    roles: RoleService
    users: UserService
    tx: TransactionScope


def create_services(db_session: Session) -> Services:
    """
    하나의 DB 세션을 공유하는 리포지토리와 서비스를 생성합니다. (Repositories -> Services)
    세 서비스는 같은 TransactionScope를 사용하므로, 호출 측에서 범위를 열면 하나의 트랜잭션으로 묶입니다.

    사용 예시:
        with session_scope() as db:
            services = create_services(db)
            role = services.roles.create_role("auditor")
            with services.tx():
                ...
    """
    tx = TransactionScope(db_session)

    access_repo = SqlalchemyAccessRepository(db_session)
    role_repo = SqlalchemyRoleRepository(db_session)
    role_access_repo = SqlalchemyRoleAccessRepository(db_session)
    user_repo = SqlalchemyUserRepository(db_session)

    return Services(
        accesses=AccessService(access_repo, tx),
        roles=RoleService(role_repo, access_repo, role_access_repo, tx),
        users=UserService(user_repo, role_repo, tx),
        tx=tx,
    )
