"""PairDiary Server Configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    app_name: str = "PairDiary"
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Paths
    data_dir: Path = Path.home() / "pairdiary" / "data"

    # Database
    db_path: Path = Path.home() / "pairdiary" / "data" / "pairdiary.db"

    # Sessions
    session_max_age_seconds: int = 60 * 60 * 24 * 30  # 30 days
    session_cookie_name: str = "session_id"
    session_header_name: str = "X-Session-ID"

    # Accounts
    password_min_length: int = 8
    password_max_bytes: int = 72  # bcrypt only looks at the first 72 bytes
    bcrypt_rounds: int = 12
    username_max_length: int = 50
    account_id_length: int = 8

    # Diaries
    title_max_length: int = 200

    # Invite codes / generated identifiers
    invite_code_length: int = 8
    unique_code_max_attempts: int = 5

    model_config = {"env_prefix": "PAIRDIARY_"}

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)


settings = Settings()
settings.ensure_dirs()
