import os

SECRET_KEY = os.environ.get("SECRET_KEY", "TASKLINE_DEV_SECRET_KEY")
ALGORITHM = os.environ.get("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = float(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

# Default to local SQLite for dev/tests; override via env in Docker/Prod
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./taskline.db")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

DEFAULT_NODE_DESCRIPTION = os.environ.get("DEFAULT_NODE_DESCRIPTION", "New node")
MIN_PASSWORD_LENGTH = int(os.environ.get("MIN_PASSWORD_LENGTH", 6))
