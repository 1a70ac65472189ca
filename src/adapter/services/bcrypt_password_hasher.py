import bcrypt

from src.app.services.password_hasher import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """
    bcrypt-backed password hasher.

    bcrypt only looks at the first 72 bytes of its input; the password policy
    keeps new passwords inside that limit and verify() treats anything longer
    as a mismatch.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except ValueError:
            return False

    def dummy_verify(self, password: str) -> None:
        try:
            bcrypt.checkpw(password.encode(), self._dummy_hash)
        except ValueError:
            pass
