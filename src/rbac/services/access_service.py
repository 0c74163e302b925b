import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from rbac.database import models
from rbac.database.transaction import TransactionScope
from rbac.repositories.interfaces import IAccessRepository
from rbac.services.exceptions import AccessNotFoundError, AccessAlreadyExistsError
from rbac.services.validators import require_text, check_length, column_length

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = column_length(models.Access, "name")
DESCRIPTION_MAX_LENGTH = column_length(models.Access, "description")
MODULE_NAME_MAX_LENGTH = column_length(models.Access, "module_name")
ACTION_TYPE_MAX_LENGTH = column_length(models.Access, "action_type")


class AccessService:
    """권한(Access)의 생성, 조회, 수정, 삭제를 담당하는 서비스입니다."""

    def __init__(self, access_repo: IAccessRepository, tx: TransactionScope):
        """
        AccessService를 초기화합니다.

        Args:
            access_repo: 권한 데이터에 접근하기 위한 리포지토리.
            tx: 각 작업을 하나의 트랜잭션으로 묶는 범위 객체.
        """
        self.access_repo = access_repo
        self.tx = tx

    def _find_access_or_raise(self, access_id: int) -> models.Access:
        access = self.access_repo.find_by_id(access_id)
        if not access:
            raise AccessNotFoundError(f"Access with id '{access_id}' not found.")
        return access

    @staticmethod
    def _check_optional_fields(description, module_name, action_type):
        check_length(description, "description", DESCRIPTION_MAX_LENGTH)
        check_length(module_name, "module_name", MODULE_NAME_MAX_LENGTH)
        check_length(action_type, "action_type", ACTION_TYPE_MAX_LENGTH)

    def create_access(self, name: str, description: Optional[str] = None,
                      module_name: Optional[str] = None, action_type: Optional[str] = None) -> models.Access:
        """
        새로운 권한을 생성합니다.

        Args:
            name: 권한 이름. 전체 권한 중에서 유일해야 합니다.
            description: 권한 설명.
            module_name: 이 권한이 보호하는 모듈 이름 (예: 'reports').
            action_type: 동작 유형 (예: CREATE, READ, UPDATE, DELETE, VIEW).

        Returns:
            ID가 할당된 권한 모델.

        Raises:
            InvalidFieldError: 이름이 비어 있거나 필드 길이 제한을 넘을 때.
            AccessAlreadyExistsError: 동일한 이름의 권한이 이미 존재할 때.
        """
        require_text(name, "name", NAME_MAX_LENGTH)
        self._check_optional_fields(description, module_name, action_type)
        with self.tx():
            if self.access_repo.exists_by_name(name):
                logger.warning("Rejected duplicate access name '%s'", name)
                raise AccessAlreadyExistsError(f"Access '{name}' already exists.")

            new_access = models.Access(
                name=name,
                description=description,
                module_name=module_name,
                action_type=action_type,
            )
            try:
                created_access = self.access_repo.create(new_access)
            except IntegrityError as e:
                raise AccessAlreadyExistsError(f"Access '{name}' already exists.") from e

        logger.info("Created access '%s' (id=%s)", created_access.name, created_access.id)
        return created_access

    def get_access(self, access_id: int) -> models.Access:
        """
        ID로 특정 권한을 조회합니다.

        Raises:
            AccessNotFoundError: 해당 ID의 권한을 찾을 수 없을 때.
        """
        with self.tx():
            return self._find_access_or_raise(access_id)

    def get_access_by_name(self, name: str) -> models.Access:
        """
        이름으로 특정 권한을 조회합니다.

        Raises:
            AccessNotFoundError: 해당 이름의 권한을 찾을 수 없을 때.
        """
        with self.tx():
            access = self.access_repo.find_by_name(name)
            if not access:
                raise AccessNotFoundError(f"Access '{name}' not found.")
            return access

    def update_access(self, access_id: int, name: Optional[str] = None, description: Optional[str] = None,
                      module_name: Optional[str] = None, action_type: Optional[str] = None) -> models.Access:
        """
        권한 정보를 수정합니다. None으로 전달된 필드는 변경하지 않습니다.
        이름은 실제로 바뀔 때만 중복 여부를 다시 확인합니다.

        Raises:
            AccessNotFoundError: 해당 ID의 권한을 찾을 수 없을 때.
            AccessAlreadyExistsError: 새 이름이 다른 권한과 겹칠 때.
            InvalidFieldError: 새 이름이 비어 있거나 필드 길이 제한을 넘을 때.
        """
        self._check_optional_fields(description, module_name, action_type)
        with self.tx():
            access = self._find_access_or_raise(access_id)

            if name is not None and name != access.name:
                require_text(name, "name", NAME_MAX_LENGTH)
                if self.access_repo.exists_by_name(name):
                    logger.warning("Rejected rename of access %s to duplicate name '%s'", access_id, name)
                    raise AccessAlreadyExistsError(f"Access '{name}' already exists.")
                access.name = name

            if description is not None:
                access.description = description
            if module_name is not None:
                access.module_name = module_name
            if action_type is not None:
                access.action_type = action_type

            try:
                updated_access = self.access_repo.update(access)
            except IntegrityError as e:
                raise AccessAlreadyExistsError(f"Access '{name}' already exists.") from e

        logger.info("Updated access %s", access_id)
        return updated_access

    def delete_access(self, access_id: int) -> bool:
        """
        권한을 삭제합니다. 이 권한을 가진 역할들과의 연결도 함께 사라집니다.

        Raises:
            AccessNotFoundError: 해당 ID의 권한을 찾을 수 없을 때.
        """
        with self.tx():
            access = self._find_access_or_raise(access_id)
            self.access_repo.delete(access)
        logger.info("Deleted access %s", access_id)
        return True

    def list_accesses(self) -> List[models.Access]:
        """모든 권한의 목록을 조회합니다."""
        with self.tx():
            return self.access_repo.list_all()

    def list_accesses_by_module(self, module_name: str) -> List[models.Access]:
        """특정 모듈의 권한 목록을 조회합니다."""
        with self.tx():
            return self.access_repo.list_by_module(module_name)

    def list_accesses_by_action_type(self, action_type: str) -> List[models.Access]:
        """특정 동작 유형의 권한 목록을 조회합니다."""
        with self.tx():
            return self.access_repo.list_by_action_type(action_type)

    def list_accesses_by_role(self, role_id: int) -> List[models.Access]:
        """특정 역할에 연결된 권한 목록을 조회합니다. 역할 존재 여부는 확인하지 않습니다."""
        with self.tx():
            return self.access_repo.list_by_role(role_id)

    def access_name_exists(self, name: str) -> bool:
        """해당 이름의 권한이 이미 존재하는지 확인합니다."""
        with self.tx():
            return self.access_repo.exists_by_name(name)
