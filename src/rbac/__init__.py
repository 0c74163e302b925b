"""RBAC bookkeeping: users, roles and access grants over SQLAlchemy."""

__version__ = "0.1.0"
