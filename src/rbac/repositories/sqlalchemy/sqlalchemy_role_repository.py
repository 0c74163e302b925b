from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from rbac.database import models
from rbac.repositories.interfaces import IRoleRepository

class SqlalchemyRoleRepository(IRoleRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, role_model: models.Role) -> models.Role:
        self.db.add(role_model)
        self.db.flush()
        self.db.refresh(role_model)
        return role_model

    def find_by_id(self, role_id: int) -> Optional[models.Role]:
        return self.db.query(models.Role).filter(models.Role.id == role_id).first()

    def find_with_accesses(self, role_id: int) -> Optional[models.Role]:
        # populate_existing: 세션에 캐시된 역할이 있어도 accesses 컬렉션을 다시 채웁니다.
        return self.db.query(models.Role).options(
            selectinload(models.Role.accesses)
        ).populate_existing().filter(models.Role.id == role_id).first()

    def find_by_name(self, name: str) -> Optional[models.Role]:
        return self.db.query(models.Role).filter(models.Role.name == name).first()

    def update(self, role: models.Role) -> models.Role:
        self.db.flush()
        self.db.refresh(role)
        return role

    def delete(self, role: models.Role) -> bool:
        if role:
            self.db.delete(role)
            self.db.flush()
            return True
        return False

    def list_all(self) -> List[models.Role]:
        return self.db.query(models.Role).order_by(models.Role.name.asc()).all()

    def exists_by_name(self, name: str) -> bool:
        return self.db.query(models.Role).filter(models.Role.name == name).count() > 0

    def count_users(self, role_id: int) -> int:
        return self.db.query(models.User).filter(models.User.role_id == role_id).count()
