from abc import ABC, abstractmethod
from typing import List, Optional
from rbac.database import models

class IAccessRepository(ABC):
    @abstractmethod
    def create(self, access_model: models.Access) -> models.Access:
        """새로운 권한을 데이터베이스에 추가하고, 할당된 ID와 함께 반환합니다."""
        pass

    @abstractmethod
    def find_by_id(self, access_id: int) -> Optional[models.Access]:
        """고유 ID로 특정 권한을 조회합니다."""
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[models.Access]:
        """이름으로 특정 권한을 조회합니다."""
        pass

    @abstractmethod
    def update(self, access: models.Access) -> models.Access:
        """변경된 권한 정보를 데이터베이스에 반영합니다."""
        pass

    @abstractmethod
    def delete(self, access: models.Access) -> bool:
        """특정 권한을 데이터베이스에서 삭제합니다. 역할과의 연결도 함께 삭제됩니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.Access]:
        """모든 권한의 목록을 이름 순으로 조회합니다."""
        pass

    @abstractmethod
    def list_by_module(self, module_name: str) -> List[models.Access]:
        """특정 모듈에 속한 권한 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_by_action_type(self, action_type: str) -> List[models.Access]:
        """특정 동작 유형(예: VIEW)의 권한 목록을 조회합니다."""
        pass

    @abstractmethod
    def list_by_role(self, role_id: int) -> List[models.Access]:
        """
        특정 역할에 연결된 권한 목록을 연관 테이블을 통해 조회합니다.

        Args:
            role_id: 권한을 조회할 역할의 ID.

        Returns:
            이름 순으로 정렬된 권한 모델의 리스트. 연결된 권한이 없으면 빈 리스트.
        """
        pass

    @abstractmethod
    def exists_by_name(self, name: str) -> bool:
        """해당 이름의 권한이 이미 존재하는지 확인합니다."""
        pass
