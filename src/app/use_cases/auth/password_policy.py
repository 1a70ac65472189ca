from libs.result import Error, Result, Return

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64
# bcrypt ignores input beyond 72 bytes
PASSWORD_MAX_BYTES = 72


def validate_password(password: str) -> Result[None]:
    """
    Validate password against the credential policy.

    Args:
        password: Password to validate

    Returns:
        Result with None if valid, or Error(INVALID_PASSWORD)
    """
    if password is None or not (
        PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH
    ):
        return Return.err(
            Error(
                "INVALID_PASSWORD",
                f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters long",
            )
        )

    if len(password.encode()) > PASSWORD_MAX_BYTES:
        return Return.err(Error("INVALID_PASSWORD", "Password is too long"))

    return Return.ok(None)
