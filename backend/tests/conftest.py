"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or identity provider
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("UPSTREAM_LOGIN_URL", "http://upstream.test/auth/login")
os.environ.setdefault("UPSTREAM_VERIFY_URL", "http://upstream.test/auth/verify")
os.environ.setdefault("LOG_FORMAT", "text")
