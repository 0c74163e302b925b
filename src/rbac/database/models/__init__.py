from .access import Access
from .role import Role
from .user import User
from .association import RoleAccess

__all__ = ["Access", "Role", "User", "RoleAccess"]
