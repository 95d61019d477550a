from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = Field(default="Todo Service", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    block_delete: bool = Field(default=True, alias="BLOCK_DELETE")
    delete_forbidden_message: str = Field(default="No tienes permiso para borrar.", alias="DELETE_FORBIDDEN_MESSAGE")
    tasks_redirect_status: int = Field(default=302, alias="TASKS_REDIRECT_STATUS")
    expand_location_header: bool = Field(default=False, alias="EXPAND_LOCATION_HEADER")

    @field_validator("tasks_redirect_status")
    @classmethod
    def _redirect_status_is_301_or_302(cls, value: int) -> int:
        if value not in (301, 302):
            raise ValueError("TASKS_REDIRECT_STATUS must be 301 or 302")
        return value

    @property
    def blocked_methods(self) -> frozenset[str]:
        return frozenset({"DELETE"}) if self.block_delete else frozenset()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
