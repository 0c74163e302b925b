from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base

class Access(Base):
    """
    시스템의 특정 모듈/동작에 대한 단일 권한(Permission)을 나타냅니다.
    (예: 'VIEW_REPORT' = reports 모듈의 VIEW 동작).
    여러 역할(Role)이 같은 권한을 가질 수 있으며, 연결은 role_accesses 테이블이 담당합니다.
    """
    __tablename__ = "accesses"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(255))
    module_name = Column(String(50), index=True)
    action_type = Column(String(50))  # CREATE, READ, UPDATE, DELETE, VIEW, CLOSE ...
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # 읽기 전용: 연결 추가/삭제는 role_accesses 리포지토리(link/unlink)로만 수행합니다.
    roles = relationship("Role", secondary="role_accesses", viewonly=True, order_by="Role.name")

    def __repr__(self):
        return f"<Access id={self.id} name={self.name!r}>"
