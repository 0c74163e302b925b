import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError

from rbac.database import models
from rbac.database.transaction import TransactionScope
from rbac.repositories.interfaces import IRoleRepository, IAccessRepository, IRoleAccessRepository
from rbac.services.exceptions import (
    RoleNotFoundError, AccessNotFoundError, RoleAlreadyExistsError, RoleInUseError,
    AccessAlreadyAssignedError, AccessNotAssignedError
)
from rbac.services.validators import require_text, check_length, column_length

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = column_length(models.Role, "name")
DESCRIPTION_MAX_LENGTH = column_length(models.Role, "description")


class RoleService:
    """역할(Role) 관리와 역할-권한 연결을 담당하는 서비스입니다."""

    def __init__(self, role_repo: IRoleRepository, access_repo: IAccessRepository,
                 role_access_repo: IRoleAccessRepository, tx: TransactionScope):
        """
        RoleService를 초기화합니다.

        Args:
            role_repo: 역할 데이터에 접근하기 위한 리포지토리.
            access_repo: 권한 데이터에 접근하기 위한 리포지토리 (연결 대상 검증용).
            role_access_repo: 역할-권한 연관 테이블을 다루는 리포지토리.
            tx: 각 작업을 하나의 트랜잭션으로 묶는 범위 객체.
        """
        self.role_repo = role_repo
        self.access_repo = access_repo
        self.role_access_repo = role_access_repo
        self.tx = tx

    def _find_role_or_raise(self, role_id: int) -> models.Role:
        role = self.role_repo.find_by_id(role_id)
        if not role:
            raise RoleNotFoundError(f"Role with id '{role_id}' not found.")
        return role

    def _find_role_with_accesses_or_raise(self, role_id: int) -> models.Role:
        role = self.role_repo.find_with_accesses(role_id)
        if not role:
            raise RoleNotFoundError(f"Role with id '{role_id}' not found.")
        return role

    def _find_access_or_raise(self, access_id: int) -> models.Access:
        access = self.access_repo.find_by_id(access_id)
        if not access:
            raise AccessNotFoundError(f"Access with id '{access_id}' not found.")
        return access

    @staticmethod
    def _has_access(role: models.Role, access_id: int) -> bool:
        return any(a.id == access_id for a in role.accesses)

    # ------------------------------------------------------------------
    # 역할 CRUD
    # ------------------------------------------------------------------

    def create_role(self, name: str, description: Optional[str] = None) -> models.Role:
        """
        새로운 역할을 생성합니다.

        Raises:
            InvalidFieldError: 이름이 비어 있거나 필드 길이 제한을 넘을 때.
            RoleAlreadyExistsError: 동일한 이름의 역할이 이미 존재할 때.
        """
        require_text(name, "name", NAME_MAX_LENGTH)
        check_length(description, "description", DESCRIPTION_MAX_LENGTH)
        with self.tx():
            if self.role_repo.exists_by_name(name):
                logger.warning("Rejected duplicate role name '%s'", name)
                raise RoleAlreadyExistsError(f"Role '{name}' already exists.")
            try:
                created_role = self.role_repo.create(models.Role(name=name, description=description))
            except IntegrityError as e:
                raise RoleAlreadyExistsError(f"Role '{name}' already exists.") from e

        logger.info("Created role '%s' (id=%s)", created_role.name, created_role.id)
        return created_role

    def get_role(self, role_id: int) -> models.Role:
        """
        ID로 특정 역할을 조회합니다. 연결된 권한 목록도 함께 불러옵니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            return self._find_role_with_accesses_or_raise(role_id)

    def get_role_by_name(self, name: str) -> models.Role:
        """
        이름으로 특정 역할을 조회합니다.

        Raises:
            RoleNotFoundError: 해당 이름의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            role = self.role_repo.find_by_name(name)
            if not role:
                raise RoleNotFoundError(f"Role '{name}' not found.")
            return role

    def update_role(self, role_id: int, name: Optional[str] = None,
                    description: Optional[str] = None) -> models.Role:
        """
        역할 정보를 수정합니다. 이름은 실제로 바뀔 때만 중복 여부를 다시 확인합니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
            RoleAlreadyExistsError: 새 이름이 다른 역할과 겹칠 때.
            InvalidFieldError: 새 이름이 비어 있거나 필드 길이 제한을 넘을 때.
        """
        check_length(description, "description", DESCRIPTION_MAX_LENGTH)
        with self.tx():
            role = self._find_role_or_raise(role_id)

            if name is not None and name != role.name:
                require_text(name, "name", NAME_MAX_LENGTH)
                if self.role_repo.exists_by_name(name):
                    logger.warning("Rejected rename of role %s to duplicate name '%s'", role_id, name)
                    raise RoleAlreadyExistsError(f"Role '{name}' already exists.")
                role.name = name

            if description is not None:
                role.description = description

            try:
                updated_role = self.role_repo.update(role)
            except IntegrityError as e:
                raise RoleAlreadyExistsError(f"Role '{name}' already exists.") from e

        logger.info("Updated role %s", role_id)
        return updated_role

    def delete_role(self, role_id: int) -> bool:
        """
        역할을 삭제합니다. 단, 이 역할을 가진 사용자가 없어야 합니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
            RoleInUseError: 이 역할을 가진 사용자가 한 명 이상 존재할 때.
        """
        with self.tx():
            role = self._find_role_or_raise(role_id)
            # 실패한 flush 뒤에는 role 속성을 읽을 수 없으므로 이름을 미리 보관합니다.
            role_name = role.name

            user_count = self.role_repo.count_users(role_id)
            if user_count > 0:
                logger.warning("Rejected delete of role '%s': %d user(s) assigned", role_name, user_count)
                raise RoleInUseError(
                    f"Role '{role_name}' cannot be deleted: {user_count} user(s) still assigned."
                )

            try:
                self.role_repo.delete(role)
            except IntegrityError as e:
                raise RoleInUseError(f"Role '{role_name}' cannot be deleted: it is still referenced.") from e

        logger.info("Deleted role %s", role_id)
        return True

    def list_roles(self) -> List[models.Role]:
        """모든 역할의 목록을 조회합니다."""
        with self.tx():
            return self.role_repo.list_all()

    def role_name_exists(self, name: str) -> bool:
        """해당 이름의 역할이 이미 존재하는지 확인합니다."""
        with self.tx():
            return self.role_repo.exists_by_name(name)

    # ------------------------------------------------------------------
    # 역할-권한 연결
    # ------------------------------------------------------------------

    def add_access_to_role(self, role_id: int, access_id: int) -> models.Role:
        """
        역할에 권한 하나를 추가합니다.

        Returns:
            권한 목록이 갱신된 역할 모델.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
            AccessNotFoundError: 해당 ID의 권한을 찾을 수 없을 때.
            AccessAlreadyAssignedError: 권한이 이미 역할에 포함되어 있을 때.
        """
        with self.tx():
            role = self._find_role_with_accesses_or_raise(role_id)
            access = self._find_access_or_raise(access_id)

            message = f"Access '{access.name}' is already assigned to role '{role.name}'."

            if self._has_access(role, access.id):
                logger.warning(message)
                raise AccessAlreadyAssignedError(message)

            try:
                self.role_access_repo.link(role.id, access.id)
            except IntegrityError as e:
                raise AccessAlreadyAssignedError(message) from e
            role = self.role_repo.find_with_accesses(role_id)

        logger.info("Linked access %s to role %s", access_id, role_id)
        return role

    def remove_access_from_role(self, role_id: int, access_id: int) -> models.Role:
        """
        역할에서 권한 하나를 제거합니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
            AccessNotFoundError: 해당 ID의 권한을 찾을 수 없을 때.
            AccessNotAssignedError: 권한이 역할에 포함되어 있지 않을 때.
        """
        with self.tx():
            role = self._find_role_with_accesses_or_raise(role_id)
            access = self._find_access_or_raise(access_id)

            if not self._has_access(role, access.id):
                logger.warning("Access '%s' is not assigned to role '%s'", access.name, role.name)
                raise AccessNotAssignedError(
                    f"Access '{access.name}' is not assigned to role '{role.name}'."
                )

            self.role_access_repo.unlink(role.id, access.id)
            role = self.role_repo.find_with_accesses(role_id)

        logger.info("Unlinked access %s from role %s", access_id, role_id)
        return role

    def add_multiple_accesses_to_role(self, role_id: int, access_ids: Iterable[int]) -> models.Role:
        """
        역할에 여러 권한을 한 번에 추가합니다.
        이미 포함된 권한이나 목록 안에서 중복된 ID는 조용히 건너뜁니다.
        하나라도 존재하지 않는 권한이 있으면 전체 작업이 롤백됩니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
            AccessNotFoundError: 목록 중 존재하지 않는 권한 ID가 있을 때 (첫 번째 것 기준).
        """
        with self.tx():
            role = self._find_role_with_accesses_or_raise(role_id)
            assigned_ids = {a.id for a in role.accesses}

            linked = []
            for access_id in access_ids:
                access = self._find_access_or_raise(access_id)
                if access.id in assigned_ids:
                    continue
                self.role_access_repo.link(role.id, access.id)
                assigned_ids.add(access.id)
                linked.append(access.id)

            role = self.role_repo.find_with_accesses(role_id)

        logger.info("Linked accesses %s to role %s", linked, role_id)
        return role

    def get_role_accesses(self, role_id: int) -> List[models.Access]:
        """
        역할에 연결된 권한 목록을 조회합니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            self._find_role_or_raise(role_id)
            return self.access_repo.list_by_role(role_id)

    def role_has_access(self, role_id: int, access_id: int) -> bool:
        """
        역할이 특정 권한을 가지고 있는지 확인합니다. 권한 자체가 없으면 False입니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            role = self._find_role_with_accesses_or_raise(role_id)
            access = self.access_repo.find_by_id(access_id)
            if not access:
                return False
            return self._has_access(role, access.id)

    def role_has_access_by_name(self, role_id: int, access_name: str) -> bool:
        """
        역할이 해당 이름의 권한을 가지고 있는지 확인합니다. (대소문자 구분, 정확히 일치)

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            role = self._find_role_with_accesses_or_raise(role_id)
            return any(a.name == access_name for a in role.accesses)

    def get_user_count_by_role(self, role_id: int) -> int:
        """
        역할을 가진 사용자의 수를 조회합니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            self._find_role_or_raise(role_id)
            return self.role_repo.count_users(role_id)
