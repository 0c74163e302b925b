from typing import List, Optional
from sqlalchemy.orm import Session
from rbac.database import models
from rbac.repositories.interfaces import IUserRepository

ACTIVE = 1

class SqlalchemyUserRepository(IUserRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, user_model: models.User) -> models.User:
        self.db.add(user_model)
        self.db.flush()
        self.db.refresh(user_model)
        return user_model

    def find_by_id(self, user_id: int) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    def find_by_username(self, username: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.username == username).first()

    def find_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.email == email).first()

    def update(self, user: models.User) -> models.User:
        self.db.flush()
        self.db.refresh(user)
        return user

    def delete(self, user: models.User) -> bool:
        if user:
            self.db.delete(user)
            self.db.flush()
            return True
        return False

    def list_all(self) -> List[models.User]:
        return self.db.query(models.User).order_by(models.User.username.asc()).all()

    def list_by_role(self, role_id: int) -> List[models.User]:
        return self.db.query(models.User).filter(
            models.User.role_id == role_id
        ).order_by(models.User.username.asc()).all()

    def list_active(self) -> List[models.User]:
        return self.db.query(models.User).filter(
            models.User.is_active == ACTIVE
        ).order_by(models.User.username.asc()).all()

    def list_active_by_role(self, role_id: int) -> List[models.User]:
        return self.db.query(models.User).filter(
            models.User.role_id == role_id,
            models.User.is_active == ACTIVE
        ).order_by(models.User.username.asc()).all()

    def exists_by_username(self, username: str) -> bool:
        return self.db.query(models.User).filter(models.User.username == username).count() > 0

    def exists_by_email(self, email: str) -> bool:
        return self.db.query(models.User).filter(models.User.email == email).count() > 0
