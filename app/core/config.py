import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./entitlements.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ✅ Limit-info backend (client-facing fetch)
LIMIT_INFO_API_URL = os.getenv("LIMIT_INFO_API_URL", "http://localhost:3001")
LIMIT_INFO_TIMEOUT_SECONDS = float(os.getenv("LIMIT_INFO_TIMEOUT_SECONDS", "5.0"))

# ✅ CORS
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]
