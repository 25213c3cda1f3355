import bcrypt

SALT_WORK_FACTOR = 10


class PasswordHasher:
    """bcrypt hashing for account passwords; the work factor comes from app config."""

    def __init__(self, rounds=SALT_WORK_FACTOR):
        self.rounds = rounds

    def init_app(self, app):
        self.rounds = int(app.config.get("BCRYPT_LOG_ROUNDS", SALT_WORK_FACTOR))

    def hash(self, plain_password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, candidate: str, password_hash: str) -> bool:
        if not candidate or not password_hash:
            return False
        try:
            return bcrypt.checkpw(candidate.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # stored value is not a bcrypt hash
            return False

    def needs_hash(self, value: str, current_hash: str = None) -> bool:
        """
        True when `value` must be hashed before it is written.

        A value identical to the stored hash, or a plaintext that already matches
        it, is left alone so unrelated saves never change the stored hash.
        """
        if current_hash is None:
            return True
        if value == current_hash:
            return False
        return not self.verify(value, current_hash)


password_hasher = PasswordHasher()
