from typing import Optional

from rbac.services.exceptions import InvalidFieldError


def column_length(model, column_name: str) -> Optional[int]:
    """모델 컬럼에 선언된 String 길이를 반환합니다. 길이 제한이 없으면 None입니다."""
    return getattr(model.__table__.c[column_name].type, "length", None)


def check_length(value: Optional[str], field_name: str, max_length: Optional[int]) -> Optional[str]:
    """
    값이 최대 길이를 넘으면 InvalidFieldError를 발생시킵니다.
    None은 '값 없음'으로 보고 그대로 통과시킵니다.
    """
    if value is not None and max_length is not None and len(value) > max_length:
        raise InvalidFieldError(f"'{field_name}' must be at most {max_length} characters (got {len(value)}).")
    return value


def require_text(value: Optional[str], field_name: str, max_length: Optional[int] = None) -> str:
    """
    필수 텍스트 필드가 None이거나 공백뿐이면 InvalidFieldError를 발생시킵니다.
    max_length가 주어지면 길이도 확인합니다. 값 자체는 변형하지 않고 그대로 반환합니다.
    """
    if value is None or not value.strip():
        raise InvalidFieldError(f"'{field_name}' must not be empty.")
    return check_length(value, field_name, max_length)
