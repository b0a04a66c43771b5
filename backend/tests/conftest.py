import os

# Must be set before dialectbase.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from dialectbase.middleware import limiter  # noqa: E402

limiter.enabled = False
