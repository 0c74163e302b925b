# rbac/services/exceptions.py

# --- Base Exceptions ---
class NotFoundError(Exception):
    """요청한 엔티티(ID, 이름, 사용자 이름, 이메일)를 찾을 수 없을 때"""
    pass

class ConflictError(Exception):
    """유일성, 관계 상태, 참조 무결성 규칙에 어긋날 때"""
    pass

class ValidationError(Exception):
    """단일 필드 입력 값이 올바르지 않을 때"""
    pass

# --- Not Found Exceptions ---
class AccessNotFoundError(NotFoundError):
    """권한을 찾을 수 없을 때"""
    pass

class RoleNotFoundError(NotFoundError):
    """역할을 찾을 수 없을 때"""
    pass

class UserNotFoundError(NotFoundError):
    """사용자를 찾을 수 없을 때"""
    pass

# --- Conflict Exceptions ---
class AccessAlreadyExistsError(ConflictError):
    """권한 이름이 이미 존재할 때"""
    pass

class RoleAlreadyExistsError(ConflictError):
    """역할 이름이 이미 존재할 때"""
    pass

class UsernameAlreadyExistsError(ConflictError):
    """사용자 이름이 이미 사용 중일 때"""
    pass

class EmailAlreadyExistsError(ConflictError):
    """이메일이 이미 사용 중일 때"""
    pass

class RoleInUseError(ConflictError):
    """사용자가 참조하고 있는 역할을 삭제하려고 할 때"""
    pass

class AccessAlreadyAssignedError(ConflictError):
    """이미 역할에 포함된 권한을 다시 추가하려고 할 때"""
    pass

class AccessNotAssignedError(ConflictError):
    """역할에 포함되지 않은 권한을 제거하려고 할 때"""
    pass

# --- Validation Exceptions ---
class InvalidFieldError(ValidationError):
    """필수 텍스트 필드(이름, 사용자 이름, 이메일 등)가 비어 있을 때"""
    pass

class InvalidPasswordError(ValidationError):
    """비밀번호가 비어 있거나 공백뿐일 때"""
    pass
