from abc import ABC, abstractmethod
from typing import List, Optional
from rbac.database import models

class IRoleRepository(ABC):
    @abstractmethod
    def create(self, role_model: models.Role) -> models.Role:
        """새로운 역할을 데이터베이스에 추가하고, 할당된 ID와 함께 반환합니다."""
        pass

    @abstractmethod
    def find_by_id(self, role_id: int) -> Optional[models.Role]:
        """고유 ID로 특정 역할의 요약 정보를 조회합니다. (권한 목록은 미리 불러오지 않음)"""
        pass

    @abstractmethod
    def find_with_accesses(self, role_id: int) -> Optional[models.Role]:
        """
        고유 ID로 역할을 조회하면서 연결된 권한 목록을 함께 불러옵니다.

        세션에 이미 같은 역할 객체가 있더라도 권한 목록은 DB의 최신 상태로 다시 채워집니다.
        (link/unlink 직후 호출해도 변경 내용이 반영됨)
        """
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[models.Role]:
        """이름으로 특정 역할을 조회합니다."""
        pass

    @abstractmethod
    def update(self, role: models.Role) -> models.Role:
        """변경된 역할 정보를 데이터베이스에 반영합니다."""
        pass

    @abstractmethod
    def delete(self, role: models.Role) -> bool:
        """특정 역할을 데이터베이스에서 삭제합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.Role]:
        """모든 역할의 목록을 이름 순으로 조회합니다."""
        pass

    @abstractmethod
    def exists_by_name(self, name: str) -> bool:
        """해당 이름의 역할이 이미 존재하는지 확인합니다."""
        pass

    @abstractmethod
    def count_users(self, role_id: int) -> int:
        """특정 역할을 가진 사용자의 수를 조회합니다."""
        pass
