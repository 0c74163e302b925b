from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    RBAC 저장소 설정입니다.
    모든 값은 RBAC_ 접두사가 붙은 환경 변수나 .env 파일로 덮어쓸 수 있습니다.
    (예: RBAC_DATABASE_URL=postgresql://...)
    """

    database_url: str = Field(
        default="sqlite:///rbac_metadata.db",
        description="SQLAlchemy 데이터베이스 연결 문자열",
    )
    database_echo: bool = Field(
        default=False,
        description="True이면 실행되는 SQL을 로그로 출력합니다 (디버그 용도)",
    )
    seed_defaults: bool = Field(
        default=True,
        description="DB 초기화 시 기본 역할/권한 데이터를 삽입할지 여부",
    )

    model_config = SettingsConfigDict(
        env_prefix="RBAC_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
