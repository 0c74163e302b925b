# tests/services/test_role_service.py
import pytest
from unittest.mock import MagicMock, ANY, call
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.attributes import set_committed_value

from rbac.services.role_service import RoleService
from rbac.services.exceptions import *
from rbac.repositories.interfaces import IRoleRepository, IAccessRepository, IRoleAccessRepository
from rbac.database import models

# ===================================================================
#  Fixture 설정
# ===================================================================

@pytest.fixture
def mock_role_repo() -> MagicMock:
    """IRoleRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IRoleRepository)

@pytest.fixture
def mock_access_repo() -> MagicMock:
    """IAccessRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IAccessRepository)

@pytest.fixture
def mock_role_access_repo() -> MagicMock:
    """IRoleAccessRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IRoleAccessRepository)

@pytest.fixture
def role_service(mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock, tx) -> RoleService:
    """테스트에 사용될 RoleService 인스턴스를 생성하고, 의존성을 주입합니다."""
    return RoleService(mock_role_repo, mock_access_repo, mock_role_access_repo, tx)


def make_role(role_id, name, accesses=()):
    """권한 목록이 이미 로드된 상태의 역할 모델을 만듭니다."""
    role = models.Role(id=role_id, name=name)
    set_committed_value(role, "accesses", list(accesses))
    return role

VIEW_REPORT = dict(id=10, name="VIEW_REPORT", module_name="reports", action_type="VIEW")

# ===================================================================
#  역할 관리(Role Management) 테스트
# ===================================================================
class TestRoleManagement:
    def test_create_role_success(self, role_service: RoleService, mock_role_repo: MagicMock, mock_session: MagicMock):
        """역할 생성 성공 시나리오를 테스트합니다."""
        # === Arrange ===
        mock_role_repo.exists_by_name.return_value = False
        mock_role_repo.create.return_value = models.Role(id=5, name="Consultant")

        # === Act ===
        role = role_service.create_role("Consultant", "External consultants")

        # === Assert ===
        assert role.id == 5
        assert role.name == "Consultant"
        mock_role_repo.exists_by_name.assert_called_once_with("Consultant")
        mock_role_repo.create.assert_called_once_with(ANY)
        mock_session.commit.assert_called_once()

    def test_create_role_fails_if_name_exists(self, role_service: RoleService, mock_role_repo: MagicMock):
        """역할 이름이 중복될 경우 RoleAlreadyExistsError가 발생하는지 테스트합니다."""
        mock_role_repo.exists_by_name.return_value = True

        with pytest.raises(RoleAlreadyExistsError):
            role_service.create_role("admin")
        mock_role_repo.create.assert_not_called()

    def test_create_role_rejects_too_long_fields(self, role_service: RoleService, mock_role_repo: MagicMock):
        """컬럼 길이(이름 50자, 설명 255자)를 넘는 값은 저장 전에 InvalidFieldError로 거부됩니다."""
        with pytest.raises(InvalidFieldError, match="'name' must be at most 50"):
            role_service.create_role("R" * 51)
        with pytest.raises(InvalidFieldError, match="'description'"):
            role_service.create_role("Consultant", "d" * 256)

        mock_role_repo.exists_by_name.assert_not_called()
        mock_role_repo.create.assert_not_called()

    def test_update_role_rejects_too_long_name(self, role_service: RoleService, mock_role_repo: MagicMock):
        mock_role_repo.find_by_id.return_value = models.Role(id=1, name="member")

        with pytest.raises(InvalidFieldError):
            role_service.update_role(1, name="R" * 51)
        mock_role_repo.update.assert_not_called()

    def test_get_role_not_found(self, role_service: RoleService, mock_role_repo: MagicMock):
        mock_role_repo.find_with_accesses.return_value = None

        with pytest.raises(RoleNotFoundError):
            role_service.get_role(1)

    def test_get_role_by_name_not_found(self, role_service: RoleService, mock_role_repo: MagicMock):
        mock_role_repo.find_by_name.return_value = None

        with pytest.raises(RoleNotFoundError, match="Role 'ghost' not found"):
            role_service.get_role_by_name("ghost")

    def test_update_role_rename_to_existing_name(self, role_service: RoleService, mock_role_repo: MagicMock):
        """다른 역할이 사용 중인 이름으로 바꾸면 RoleAlreadyExistsError가 발생합니다."""
        mock_role_repo.find_by_id.return_value = models.Role(id=1, name="member")
        mock_role_repo.exists_by_name.return_value = True

        with pytest.raises(RoleAlreadyExistsError):
            role_service.update_role(1, name="admin")
        mock_role_repo.update.assert_not_called()

    def test_update_role_description_only(self, role_service: RoleService, mock_role_repo: MagicMock):
        role = models.Role(id=1, name="member")
        mock_role_repo.find_by_id.return_value = role
        mock_role_repo.update.side_effect = lambda r: r

        updated = role_service.update_role(1, description="Regular staff")

        assert updated.name == "member"
        assert updated.description == "Regular staff"
        mock_role_repo.exists_by_name.assert_not_called()

    def test_delete_role_success(self, role_service: RoleService, mock_role_repo: MagicMock):
        """사용자가 없는 역할 삭제 성공을 테스트합니다."""
        # === Arrange ===
        role = models.Role(id=2, name="unused")
        mock_role_repo.find_by_id.return_value = role
        mock_role_repo.count_users.return_value = 0

        # === Act ===
        result = role_service.delete_role(2)

        # === Assert ===
        assert result is True
        mock_role_repo.count_users.assert_called_once_with(2)
        mock_role_repo.delete.assert_called_once_with(role)

    def test_delete_role_in_use(self, role_service: RoleService, mock_role_repo: MagicMock, mock_session: MagicMock):
        """사용자가 있는 역할 삭제 시 RoleInUseError 예외를 테스트합니다."""
        # 시나리오: 역할에 사용자가 3명 존재함
        mock_role_repo.find_by_id.return_value = models.Role(id=1, name="admin")
        mock_role_repo.count_users.return_value = 3

        with pytest.raises(RoleInUseError, match="3 user"):
            role_service.delete_role(1)

        # 검증: delete는 호출되지 않았어야 함
        mock_role_repo.delete.assert_not_called()
        mock_session.rollback.assert_called_once()

    def test_delete_role_translates_foreign_key_violation(self, role_service: RoleService, mock_role_repo: MagicMock):
        """사용자 수 검사 이후 DB 외래 키 제약에 걸려도 RoleInUseError로 보고합니다."""
        mock_role_repo.find_by_id.return_value = models.Role(id=1, name="admin")
        mock_role_repo.count_users.return_value = 0
        mock_role_repo.delete.side_effect = IntegrityError(
            "DELETE FROM roles ...", {}, Exception("FOREIGN KEY constraint failed")
        )

        with pytest.raises(RoleInUseError):
            role_service.delete_role(1)

    def test_get_user_count_by_role(self, role_service: RoleService, mock_role_repo: MagicMock):
        mock_role_repo.find_by_id.return_value = models.Role(id=1, name="admin")
        mock_role_repo.count_users.return_value = 4

        assert role_service.get_user_count_by_role(1) == 4

    def test_get_user_count_by_missing_role(self, role_service: RoleService, mock_role_repo: MagicMock):
        mock_role_repo.find_by_id.return_value = None

        with pytest.raises(RoleNotFoundError):
            role_service.get_user_count_by_role(1)
        mock_role_repo.count_users.assert_not_called()

# ===================================================================
#  역할-권한 연결(Role Access) 테스트
# ===================================================================
class TestRoleAccessLinks:
    def test_add_access_to_role_success(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock):
        """역할에 권한 추가 성공 시 연관 테이블에 연결이 생성됩니다."""
        # === Arrange ===
        access = models.Access(**VIEW_REPORT)
        role_before = make_role(1, "Consultant")
        role_after = make_role(1, "Consultant", [access])
        mock_role_repo.find_with_accesses.side_effect = [role_before, role_after]
        mock_access_repo.find_by_id.return_value = access

        # === Act ===
        role = role_service.add_access_to_role(1, 10)

        # === Assert ===
        assert role is role_after
        assert access in role.accesses
        mock_role_access_repo.link.assert_called_once_with(1, 10)

    def test_add_access_twice_is_a_conflict(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock):
        """이미 포함된 권한을 다시 추가하면 AccessAlreadyAssignedError가 발생합니다."""
        access = models.Access(**VIEW_REPORT)
        mock_role_repo.find_with_accesses.return_value = make_role(1, "Consultant", [access])
        mock_access_repo.find_by_id.return_value = access

        with pytest.raises(AccessAlreadyAssignedError):
            role_service.add_access_to_role(1, 10)
        mock_role_access_repo.link.assert_not_called()

    def test_add_access_missing_role(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock):
        mock_role_repo.find_with_accesses.return_value = None

        with pytest.raises(RoleNotFoundError):
            role_service.add_access_to_role(1, 10)
        mock_access_repo.find_by_id.assert_not_called()

    def test_add_access_missing_access(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock):
        mock_role_repo.find_with_accesses.return_value = make_role(1, "Consultant")
        mock_access_repo.find_by_id.return_value = None

        with pytest.raises(AccessNotFoundError):
            role_service.add_access_to_role(1, 10)
        mock_role_access_repo.link.assert_not_called()

    def test_remove_access_from_role_success(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock):
        access = models.Access(**VIEW_REPORT)
        mock_role_repo.find_with_accesses.side_effect = [make_role(1, "Consultant", [access]), make_role(1, "Consultant")]
        mock_access_repo.find_by_id.return_value = access

        role = role_service.remove_access_from_role(1, 10)

        assert role.accesses == []
        mock_role_access_repo.unlink.assert_called_once_with(1, 10)

    def test_remove_unassigned_access_is_a_conflict(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock):
        """역할에 없는 권한을 제거하면 AccessNotAssignedError가 발생하고 연결은 그대로입니다."""
        other = models.Access(id=11, name="CREATE_REPORT")
        role = make_role(1, "Consultant", [other])
        mock_role_repo.find_with_accesses.return_value = role
        mock_access_repo.find_by_id.return_value = models.Access(**VIEW_REPORT)

        with pytest.raises(AccessNotAssignedError):
            role_service.remove_access_from_role(1, 10)

        mock_role_access_repo.unlink.assert_not_called()
        assert role.accesses == [other]

    def test_remove_access_missing_role(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock):
        mock_role_repo.find_with_accesses.return_value = None

        with pytest.raises(RoleNotFoundError):
            role_service.remove_access_from_role(1, 10)
        mock_access_repo.find_by_id.assert_not_called()
        mock_role_access_repo.unlink.assert_not_called()

    def test_remove_access_missing_access(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock):
        mock_role_repo.find_with_accesses.return_value = make_role(1, "Consultant")
        mock_access_repo.find_by_id.return_value = None

        with pytest.raises(AccessNotFoundError):
            role_service.remove_access_from_role(1, 10)
        mock_role_access_repo.unlink.assert_not_called()

    def test_add_multiple_accesses_skips_duplicates(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock):
        """이미 포함된 권한과 목록 안의 중복 ID는 건너뜁니다."""
        # === Arrange ===
        existing = models.Access(id=10, name="VIEW_REPORT")
        new_one = models.Access(id=11, name="CREATE_REPORT")
        accesses = {10: existing, 11: new_one}
        mock_role_repo.find_with_accesses.return_value = make_role(1, "Consultant", [existing])
        mock_access_repo.find_by_id.side_effect = lambda access_id: accesses.get(access_id)

        # === Act ===
        role_service.add_multiple_accesses_to_role(1, [10, 11, 11])

        # === Assert ===
        mock_role_access_repo.link.assert_called_once_with(1, 11)

    def test_add_multiple_accesses_stops_at_first_missing(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock, mock_role_access_repo: MagicMock, mock_session: MagicMock):
        """존재하지 않는 권한을 만나면 AccessNotFoundError가 발생하고 트랜잭션 전체가 롤백됩니다."""
        accesses = {11: models.Access(id=11, name="CREATE_REPORT")}
        mock_role_repo.find_with_accesses.return_value = make_role(1, "Consultant")
        mock_access_repo.find_by_id.side_effect = lambda access_id: accesses.get(access_id)

        with pytest.raises(AccessNotFoundError, match="'99'"):
            role_service.add_multiple_accesses_to_role(1, [11, 99, 12])

        mock_role_access_repo.link.assert_called_once_with(1, 11)
        assert mock_access_repo.find_by_id.call_args_list == [call(11), call(99)]
        mock_session.rollback.assert_called_once()
        mock_session.commit.assert_not_called()

    def test_role_has_access(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock):
        access = models.Access(**VIEW_REPORT)
        mock_role_repo.find_with_accesses.return_value = make_role(1, "Consultant", [access])
        mock_access_repo.find_by_id.return_value = access

        assert role_service.role_has_access(1, 10) is True

    def test_role_has_access_for_missing_access_is_false(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock):
        mock_role_repo.find_with_accesses.return_value = make_role(1, "Consultant")
        mock_access_repo.find_by_id.return_value = None

        assert role_service.role_has_access(1, 10) is False

    def test_role_has_access_by_name_is_case_sensitive(self, role_service: RoleService, mock_role_repo: MagicMock):
        mock_role_repo.find_with_accesses.return_value = make_role(1, "Consultant", [models.Access(**VIEW_REPORT)])

        assert role_service.role_has_access_by_name(1, "VIEW_REPORT") is True
        assert role_service.role_has_access_by_name(1, "view_report") is False

    def test_get_role_accesses_validates_role(self, role_service: RoleService, mock_role_repo: MagicMock, mock_access_repo: MagicMock):
        mock_role_repo.find_by_id.return_value = None

        with pytest.raises(RoleNotFoundError):
            role_service.get_role_accesses(1)
        mock_access_repo.list_by_role.assert_not_called()
