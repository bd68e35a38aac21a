"""Test-wide environment: cheap bcrypt rounds so hashing does not dominate the suite."""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "dev")
