from sqlalchemy import insert
from sqlalchemy.orm import Session
from rbac.database import models
from rbac.repositories.interfaces import IRoleAccessRepository

class SqlalchemyRoleAccessRepository(IRoleAccessRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def link(self, role_id: int, access_id: int) -> None:
        # ORM 객체를 거치지 않고 바로 INSERT 합니다. 중복 연결은 DB의 PK 제약(IntegrityError)이 막습니다.
        self.db.execute(
            insert(models.RoleAccess).values(role_id=role_id, access_id=access_id)
        )

    def unlink(self, role_id: int, access_id: int) -> bool:
        deleted = self.db.query(models.RoleAccess).filter(
            models.RoleAccess.role_id == role_id,
            models.RoleAccess.access_id == access_id
        ).delete(synchronize_session=False)
        return deleted > 0

    def exists(self, role_id: int, access_id: int) -> bool:
        return self.db.query(models.RoleAccess).filter(
            models.RoleAccess.role_id == role_id,
            models.RoleAccess.access_id == access_id
        ).count() > 0
