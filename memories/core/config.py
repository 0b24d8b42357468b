import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _csv(name: str, default: str = ""):
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


DATABASE_URL = os.getenv("DATABASE_URL") or (
    f"postgresql://{os.getenv('DB_USER', 'postgres')}:{os.getenv('DB_PASS', 'postgres')}"
    f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME', 'memories')}"
)

SECRET_KEY = os.getenv("JWT_SECRET")
if not SECRET_KEY:
    raise RuntimeError("JWT_SECRET must be set; refusing to sign tokens with a default secret")

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

PORT = int(os.getenv("PORT", "5000"))
CORS_ALLOW_ORIGINS = _csv("CORS_ALLOW_ORIGINS", "http://localhost:3000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

POSTS_PAGE_SIZE = int(os.getenv("POSTS_PAGE_SIZE", "8"))
POSTS_MAX_PAGE_SIZE = int(os.getenv("POSTS_MAX_PAGE_SIZE", "100"))
SEARCH_RESULT_LIMIT = int(os.getenv("SEARCH_RESULT_LIMIT", "20"))

# Registering with one of these emails creates an admin account
ADMIN_EMAILS = [email.lower() for email in _csv("ADMIN_EMAILS")]

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(30 * 1024 * 1024)))
