"""Hash e verificação de senhas com bcrypt.

Password hashing utilities. Passwords are only ever stored as bcrypt hashes.
"""

import bcrypt


def hash_password(password: str) -> str:
    """Gera o hash bcrypt de uma senha em texto puro (salt aleatório por hash)."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compara uma senha em texto puro com o hash armazenado."""
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
