import os
import log
from dotenv import load_dotenv

# Load .env file into environment
load_dotenv()


def _split_tokens(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


class Config:
    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./experimentation.db")
        self.log_level = os.getenv("LOG_LEVEL", default="INFO")
        self.log_file = os.getenv("LOG_FILE", default="experiment_service.log")
        self.valid_tokens = _split_tokens(os.getenv("VALID_TOKENS"))
        self.celery_broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/1")
        self.celery_backend_url = os.getenv("CELERY_BACKEND_URL", "redis://localhost:6379/1")
        self.celery_task_always_eager = os.getenv("CELERY_TASK_ALWAYS_EAGER", "false").lower() in ("1", "true", "yes")

        # Call setup_logging when the application starts
        log.setup_logging(self.log_level, self.log_file)

    def __repr__(self):
        return f"<Settings db={self.database_url} loglevel={self.log_level}, broker_url:{self.celery_broker_url}, backend_url:{self.celery_backend_url}, eager:{self.celery_task_always_eager}>"

config = Config()
