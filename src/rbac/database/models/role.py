from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base

class Role(Base):
    """
    사용자에게 부여되는 권한(Access)의 묶음을 정의합니다.
    (예: 'admin', 'member').
    RBAC(역할 기반 접근 제어)의 핵심 요소이며, role_accesses 연관 테이블의 소유자입니다.
    사용자가 한 명이라도 참조하는 역할은 삭제할 수 없습니다.
    """
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(String(255))
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # passive_deletes="all": 역할 삭제 시 users.role_id를 NULL로 바꾸지 않고 DB 제약에 맡깁니다.
    users = relationship("User", back_populates="role", passive_deletes="all")
    # 읽기 전용: 연결 추가/삭제는 role_accesses 리포지토리(link/unlink)로만 수행합니다.
    accesses = relationship("Access", secondary="role_accesses", viewonly=True, order_by="Access.name")

    def __repr__(self):
        return f"<Role id={self.id} name={self.name!r}>"
