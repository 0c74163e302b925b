import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from rbac.database import models
from rbac.database.transaction import TransactionScope
from rbac.repositories.interfaces import IUserRepository, IRoleRepository
from rbac.services.exceptions import (
    UserNotFoundError, RoleNotFoundError, UsernameAlreadyExistsError,
    EmailAlreadyExistsError, InvalidPasswordError
)
from rbac.services.validators import require_text, check_length, column_length

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = column_length(models.User, "username")
EMAIL_MAX_LENGTH = column_length(models.User, "email")
PASSWORD_MAX_LENGTH = column_length(models.User, "password")
NAME_PART_MAX_LENGTH = column_length(models.User, "first_name")

ACTIVE = 1
INACTIVE = 0


class UserService:
    """사용자 계정 관리, 역할 변경, 활성화 상태 전환을 담당하는 서비스입니다."""

    def __init__(self, user_repo: IUserRepository, role_repo: IRoleRepository, tx: TransactionScope):
        """
        UserService를 초기화합니다.

        Args:
            user_repo: 사용자 데이터에 접근하기 위한 리포지토리.
            role_repo: 역할 데이터에 접근하기 위한 리포지토리 (역할 존재 여부 검증용).
            tx: 각 작업을 하나의 트랜잭션으로 묶는 범위 객체.
        """
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.tx = tx

    def _find_user_or_raise(self, user_id: int) -> models.User:
        user = self.user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User with id '{user_id}' not found.")
        return user

    def _find_role_or_raise(self, role_id: int) -> models.Role:
        role = self.role_repo.find_by_id(role_id)
        if not role:
            raise RoleNotFoundError(f"Role with id '{role_id}' not found.")
        return role

    @staticmethod
    def _check_name_parts(first_name, last_name):
        check_length(first_name, "first_name", NAME_PART_MAX_LENGTH)
        check_length(last_name, "last_name", NAME_PART_MAX_LENGTH)

    def _translate_integrity_error(self, e: IntegrityError, username: Optional[str], email: Optional[str]):
        # 애플리케이션 수준의 중복 검사를 통과했지만 DB 유일성 제약에 걸린 경우
        message = str(e.orig).lower()
        if "email" in message:
            return EmailAlreadyExistsError(f"Email '{email}' is already in use.")
        return UsernameAlreadyExistsError(f"Username '{username}' is already in use.")

    def create_user(self, username: str, email: str, password: str, first_name: Optional[str] = None,
                    last_name: Optional[str] = None, role_id: Optional[int] = None) -> models.User:
        """
        새로운 사용자를 생성합니다.

        검증은 사용자 이름 중복 -> 이메일 중복 -> 역할 존재 순서로 진행되며,
        가장 먼저 실패한 검증의 예외가 발생합니다. 실패 시 사용자는 저장되지 않습니다.

        Args:
            username: 로그인에 사용하는 사용자 이름 (유일).
            email: 이메일 주소 (유일).
            password: 저장할 자격 증명 값. 해시하지 않고 그대로 저장합니다.
            first_name: 이름.
            last_name: 성.
            role_id: 사용자에게 부여할 역할의 ID. 지정하지 않으면 역할 검증에서 RoleNotFoundError가 발생합니다.

        Returns:
            ID가 할당된 사용자 모델.

        Raises:
            InvalidFieldError: 사용자 이름, 이메일, 비밀번호 중 비어 있는 값이 있거나 필드 길이 제한을 넘을 때.
            UsernameAlreadyExistsError: 사용자 이름이 이미 사용 중일 때.
            EmailAlreadyExistsError: 이메일이 이미 사용 중일 때.
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        require_text(username, "username", USERNAME_MAX_LENGTH)
        require_text(email, "email", EMAIL_MAX_LENGTH)
        require_text(password, "password", PASSWORD_MAX_LENGTH)
        self._check_name_parts(first_name, last_name)

        with self.tx():
            if self.user_repo.exists_by_username(username):
                logger.warning("Rejected duplicate username '%s'", username)
                raise UsernameAlreadyExistsError(f"Username '{username}' is already in use.")

            if self.user_repo.exists_by_email(email):
                logger.warning("Rejected duplicate email '%s'", email)
                raise EmailAlreadyExistsError(f"Email '{email}' is already in use.")

            role = self._find_role_or_raise(role_id)

            new_user = models.User(
                username=username,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                is_active=ACTIVE,
                role=role,
            )
            try:
                created_user = self.user_repo.create(new_user)
            except IntegrityError as e:
                raise self._translate_integrity_error(e, username, email) from e

        logger.info("Created user '%s' (id=%s, role=%s)", created_user.username, created_user.id, role_id)
        return created_user

    def get_user(self, user_id: int) -> models.User:
        """
        ID로 특정 사용자를 조회합니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        with self.tx():
            return self._find_user_or_raise(user_id)

    def get_user_by_username(self, username: str) -> models.User:
        """
        사용자 이름으로 특정 사용자를 조회합니다.

        Raises:
            UserNotFoundError: 해당 사용자 이름의 사용자를 찾을 수 없을 때.
        """
        with self.tx():
            user = self.user_repo.find_by_username(username)
            if not user:
                raise UserNotFoundError(f"User with username '{username}' not found.")
            return user

    def get_user_by_email(self, email: str) -> models.User:
        """
        이메일로 특정 사용자를 조회합니다.

        Raises:
            UserNotFoundError: 해당 이메일의 사용자를 찾을 수 없을 때.
        """
        with self.tx():
            user = self.user_repo.find_by_email(email)
            if not user:
                raise UserNotFoundError(f"User with email '{email}' not found.")
            return user

    def update_user(self, user_id: int, email: Optional[str] = None, first_name: Optional[str] = None,
                    last_name: Optional[str] = None, role_id: Optional[int] = None,
                    is_active: Optional[int] = None) -> models.User:
        """
        사용자 정보를 수정합니다. None으로 전달된 필드는 변경하지 않습니다.

        이메일은 실제로 바뀔 때만 중복 여부를 확인하고, 역할도 바뀔 때만 존재 여부를 확인합니다.
        is_active 값은 검증 없이 그대로 저장합니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
            EmailAlreadyExistsError: 새 이메일이 이미 사용 중일 때.
            InvalidFieldError: 새 이메일이 비어 있거나 필드 길이 제한을 넘을 때.
            RoleNotFoundError: 새 역할을 찾을 수 없을 때.
        """
        self._check_name_parts(first_name, last_name)
        with self.tx():
            user = self._find_user_or_raise(user_id)
            # 실패한 flush 뒤에는 user 속성을 읽을 수 없으므로 미리 보관합니다.
            username = user.username

            if email is not None and email != user.email:
                require_text(email, "email", EMAIL_MAX_LENGTH)
                if self.user_repo.exists_by_email(email):
                    logger.warning("Rejected email change of user %s to duplicate '%s'", user_id, email)
                    raise EmailAlreadyExistsError(f"Email '{email}' is already in use.")
                user.email = email

            if first_name is not None:
                user.first_name = first_name
            if last_name is not None:
                user.last_name = last_name

            if role_id is not None and role_id != user.role_id:
                user.role = self._find_role_or_raise(role_id)

            if is_active is not None:
                user.is_active = is_active

            try:
                updated_user = self.user_repo.update(user)
            except IntegrityError as e:
                raise self._translate_integrity_error(e, username, email) from e

        logger.info("Updated user %s", user_id)
        return updated_user

    def delete_user(self, user_id: int) -> bool:
        """
        사용자를 삭제합니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        with self.tx():
            user = self._find_user_or_raise(user_id)
            self.user_repo.delete(user)
        logger.info("Deleted user %s", user_id)
        return True

    def list_users(self) -> List[models.User]:
        """모든 사용자의 목록을 조회합니다."""
        with self.tx():
            return self.user_repo.list_all()

    def list_users_by_role(self, role_id: int) -> List[models.User]:
        """
        특정 역할을 가진 사용자 목록을 조회합니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            self._find_role_or_raise(role_id)
            return self.user_repo.list_by_role(role_id)

    def list_active_users(self) -> List[models.User]:
        """활성 사용자 목록을 조회합니다."""
        with self.tx():
            return self.user_repo.list_active()

    def list_active_users_by_role(self, role_id: int) -> List[models.User]:
        """
        특정 역할을 가진 활성 사용자 목록을 조회합니다.

        Raises:
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            self._find_role_or_raise(role_id)
            return self.user_repo.list_active_by_role(role_id)

    def activate_user(self, user_id: int) -> models.User:
        """사용자를 활성 상태(1)로 전환합니다."""
        return self._set_active(user_id, ACTIVE)

    def deactivate_user(self, user_id: int) -> models.User:
        """사용자를 비활성 상태(0)로 전환합니다."""
        return self._set_active(user_id, INACTIVE)

    def _set_active(self, user_id: int, state: int) -> models.User:
        with self.tx():
            user = self._find_user_or_raise(user_id)
            user.is_active = state
            updated_user = self.user_repo.update(user)
        logger.info("Set is_active=%d on user %s", state, user_id)
        return updated_user

    def change_password(self, user_id: int, new_password: str) -> models.User:
        """
        사용자의 비밀번호를 변경합니다. 이전 값과 비교하거나 해시하지 않고 덮어씁니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
            InvalidPasswordError: 새 비밀번호가 None이거나 비어 있거나 공백뿐일 때.
            InvalidFieldError: 새 비밀번호가 길이 제한을 넘을 때.
        """
        with self.tx():
            user = self._find_user_or_raise(user_id)
            if new_password is None or not new_password.strip():
                raise InvalidPasswordError("Password must not be empty.")
            check_length(new_password, "password", PASSWORD_MAX_LENGTH)
            user.password = new_password
            updated_user = self.user_repo.update(user)
        logger.info("Changed password of user %s", user_id)
        return updated_user

    def change_user_role(self, user_id: int, role_id: int) -> models.User:
        """
        사용자의 역할을 변경합니다.

        Raises:
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
            RoleNotFoundError: 해당 ID의 역할을 찾을 수 없을 때.
        """
        with self.tx():
            user = self._find_user_or_raise(user_id)
            user.role = self._find_role_or_raise(role_id)
            updated_user = self.user_repo.update(user)
        logger.info("Moved user %s to role %s", user_id, role_id)
        return updated_user

    def username_exists(self, username: str) -> bool:
        """해당 사용자 이름이 이미 사용 중인지 확인합니다."""
        with self.tx():
            return self.user_repo.exists_by_username(username)

    def email_exists(self, email: str) -> bool:
        """해당 이메일이 이미 사용 중인지 확인합니다."""
        with self.tx():
            return self.user_repo.exists_by_email(email)
