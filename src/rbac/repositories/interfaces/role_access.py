from abc import ABC, abstractmethod

class IRoleAccessRepository(ABC):
    """역할-권한 연관 테이블(role_accesses)을 직접 다루는 리포지토리입니다."""

    @abstractmethod
    def link(self, role_id: int, access_id: int) -> None:
        """역할에 권한을 연결합니다."""
        pass

    @abstractmethod
    def unlink(self, role_id: int, access_id: int) -> bool:
        """역할에서 권한 연결을 제거합니다. 연결이 없었으면 False를 반환합니다."""
        pass

    @abstractmethod
    def exists(self, role_id: int, access_id: int) -> bool:
        """역할과 권한이 연결되어 있는지 확인합니다."""
        pass
