"""Password hashing adapters."""

from .bcrypt_hasher import MAX_PASSWORD_BYTES, BcryptPasswordHasher

__all__ = ["BcryptPasswordHasher", "MAX_PASSWORD_BYTES"]
