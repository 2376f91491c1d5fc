import os
from dataclasses import dataclass, field
from typing import List


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass
class Settings:
    """Process settings, read from the environment by `from_env`."""
    host: str = "0.0.0.0"
    port: int = 5000
    app_env: str = "development"
    database_path: str = "todo.db"
    test_database_path: str = "todo_test.db"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            app_env=os.getenv("APP_ENV", "development").lower(),
            database_path=os.getenv("DATABASE_PATH", "todo.db"),
            test_database_path=os.getenv("TEST_DATABASE_PATH", "todo_test.db"),
            cors_origins=_env_list("CORS_ORIGINS", "*"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def store_path(self) -> str:
        if self.app_env == "test":
            return self.test_database_path
        return self.database_path
