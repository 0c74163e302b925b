from .sqlalchemy_access_repository import SqlalchemyAccessRepository
from .sqlalchemy_role_repository import SqlalchemyRoleRepository
from .sqlalchemy_role_access_repository import SqlalchemyRoleAccessRepository
from .sqlalchemy_user_repository import SqlalchemyUserRepository

__all__ = [
    "SqlalchemyAccessRepository",
    "SqlalchemyRoleRepository",
    "SqlalchemyRoleAccessRepository",
    "SqlalchemyUserRepository",
]
