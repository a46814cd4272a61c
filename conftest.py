import os

# Settings must be in place before config.py is first imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("VALID_TOKENS", "fake-client-token")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
