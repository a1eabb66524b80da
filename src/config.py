from dotenv import load_dotenv
import os

load_dotenv()

DB_HOST = os.environ.get("DB_HOST", "localhost")
DB_PORT = os.environ.get("DB_PORT", "5432")
DB_NAME = os.environ.get("DB_NAME", "workforce")
DB_USER = os.environ.get("DB_USER", "postgres")
DB_PASS = os.environ.get("DB_PASS", "postgres")

DATABASE_URL = os.environ.get(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

REDIS_PORT = os.environ.get("REDIS_PORT", "6379")
REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")

SECRET = os.environ.get("SECRET", "change-me")

SUPER_ADMIN_ID = os.environ.get("SUPER_ADMIN_ID", "875626")
SUPER_ADMIN_EMAIL = os.environ.get("SUPER_ADMIN_EMAIL", "admin@example.com")
SUPER_ADMIN_PASSWORD = os.environ.get("SUPER_ADMIN_PASSWORD", "admin")
SUPER_ADMIN_FIRST_NAME = os.environ.get("SUPER_ADMIN_FIRST_NAME", "Admin")
SUPER_ADMIN_LAST_NAME = os.environ.get("SUPER_ADMIN_LAST_NAME", "User")

MEDIA_ROOT = os.environ.get("MEDIA_ROOT", "src/media")
MEDIA_URL = os.environ.get("MEDIA_URL", "/media")
PROFILE_PHOTO_BUCKET = os.environ.get("PROFILE_PHOTO_BUCKET", "profile-photos")

LOGIN_MAX_ATTEMPTS = int(os.environ.get("LOGIN_MAX_ATTEMPTS", "5"))
LOGIN_BLOCK_SECONDS = int(os.environ.get("LOGIN_BLOCK_SECONDS", str(10 * 60)))

ACTIVITY_LOG_PATH = os.environ.get("ACTIVITY_LOG_PATH", "logs/user_activity.log")
TRUSTED_PROXIES = [p.strip() for p in os.environ.get("TRUSTED_PROXIES", "127.0.0.1,172.20.0.1").split(",") if p.strip()]
