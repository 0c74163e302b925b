from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base

class User(Base):
    """
    시스템 계정을 나타냅니다.
    사용자는 항상 정확히 하나의 역할(Role)에 속합니다.
    password는 해시 여부와 관계없이 불투명한 값으로 그대로 저장합니다.
    """
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    # 1 = 활성, 0 = 비활성. 다른 정수 값도 그대로 저장합니다.
    is_active = Column(Integer, nullable=False, default=1, server_default="1")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    role_id = Column(Integer, ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False, index=True)
    role = relationship("Role", back_populates="users", lazy="joined")

    def __repr__(self):
        return f"<User id={self.id} username={self.username!r}>"
