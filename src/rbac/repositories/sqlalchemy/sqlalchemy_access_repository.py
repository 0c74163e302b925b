from typing import List, Optional
from sqlalchemy.orm import Session
from rbac.database import models
from rbac.repositories.interfaces import IAccessRepository

class SqlalchemyAccessRepository(IAccessRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, access_model: models.Access) -> models.Access:
        self.db.add(access_model)
        self.db.flush()
        self.db.refresh(access_model)
        return access_model

    def find_by_id(self, access_id: int) -> Optional[models.Access]:
        return self.db.query(models.Access).filter(models.Access.id == access_id).first()

    def find_by_name(self, name: str) -> Optional[models.Access]:
        return self.db.query(models.Access).filter(models.Access.name == name).first()

    def update(self, access: models.Access) -> models.Access:
        self.db.flush()
        self.db.refresh(access)
        return access

    def delete(self, access: models.Access) -> bool:
        if access:
            self.db.delete(access)
            self.db.flush()
            return True
        return False

    def list_all(self) -> List[models.Access]:
        return self.db.query(models.Access).order_by(models.Access.name.asc()).all()

    def list_by_module(self, module_name: str) -> List[models.Access]:
        return self.db.query(models.Access).filter(
            models.Access.module_name == module_name
        ).order_by(models.Access.name.asc()).all()

    def list_by_action_type(self, action_type: str) -> List[models.Access]:
        return self.db.query(models.Access).filter(
            models.Access.action_type == action_type
        ).order_by(models.Access.name.asc()).all()

    def list_by_role(self, role_id: int) -> List[models.Access]:
        return self.db.query(models.Access).join(
            models.RoleAccess, models.RoleAccess.access_id == models.Access.id
        ).filter(models.RoleAccess.role_id == role_id).order_by(models.Access.name.asc()).all()

    def exists_by_name(self, name: str) -> bool:
        return self.db.query(models.Access).filter(models.Access.name == name).count() > 0
