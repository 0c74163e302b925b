from .access import IAccessRepository
from .role import IRoleRepository
from .role_access import IRoleAccessRepository
from .user import IUserRepository

__all__ = ["IAccessRepository", "IRoleRepository", "IRoleAccessRepository", "IUserRepository"]
