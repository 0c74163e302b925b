from sqlalchemy import Column, Integer, ForeignKey
from ..database import Base

class RoleAccess(Base):
    """
    역할(Role)과 권한(Access) 사이의 다대다(many-to-many) 관계를
    연결하는 연관 테이블(Association Table) 모델입니다.
    역할이나 권한이 삭제되면 해당 연결 행도 DB 수준에서 함께 삭제됩니다.
    """
    __tablename__ = 'role_accesses'
    role_id = Column(Integer, ForeignKey('roles.id', ondelete="CASCADE"), primary_key=True)
    access_id = Column(Integer, ForeignKey('accesses.id', ondelete="CASCADE"), primary_key=True)
