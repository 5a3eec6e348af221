# utils/passwords.py
from passlib.context import CryptContext

import config

# Bcrypt
pwd_context = CryptContext(
     schemes=["bcrypt"],
     deprecated="auto",
     bcrypt__rounds=config.BCRYPT_ROUNDS,
)


def hash_password(plaintext: str) -> str:
     """Salted one-way hash; two calls on the same plaintext give different hashes."""
     return pwd_context.hash(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
     """Check a plaintext against a stored hash. Malformed or missing hashes never verify."""
     if not plaintext or not hashed:
          return False
     try:
          return pwd_context.verify(plaintext, hashed)
     except (ValueError, TypeError):
          return False
