from abc import ABC, abstractmethod
from typing import List, Optional
from rbac.database import models

class IUserRepository(ABC):
    @abstractmethod
    def create(self, user_model: models.User) -> models.User:
        """새로운 사용자를 데이터베이스에 추가하고, 할당된 ID와 함께 반환합니다."""
        pass

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[models.User]:
        """고유 ID로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[models.User]:
        """사용자 이름으로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[models.User]:
        """이메일로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def update(self, user: models.User) -> models.User:
        """변경된 사용자 정보를 데이터베이스에 반영합니다."""
        pass

    @abstractmethod
    def delete(self, user: models.User) -> bool:
        """특정 사용자를 데이터베이스에서 삭제합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.User]:
        """모든 사용자의 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_by_role(self, role_id: int) -> List[models.User]:
        """특정 역할을 가진 사용자 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_active(self) -> List[models.User]:
        """활성(is_active == 1) 사용자 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_active_by_role(self, role_id: int) -> List[models.User]:
        """특정 역할을 가진 활성 사용자 목록을 조회합니다."""
        pass

    @abstractmethod
    def exists_by_username(self, username: str) -> bool:
        """해당 사용자 이름이 이미 사용 중인지 확인합니다."""
        pass

    @abstractmethod
    def exists_by_email(self, email: str) -> bool:
        """해당 이메일이 이미 사용 중인지 확인합니다."""
        pass
