import bcrypt

BCRYPT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(BCRYPT_ROUNDS)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


def burn_password_check() -> None:
    """Spend the same time as a real check when there is no user to check against"""
    bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(BCRYPT_ROUNDS))
