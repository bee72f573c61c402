from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import generate_password_hash, check_password_hash

from carrental.exceptions import InvalidTokenError

TOKEN_SALT = "carrental-auth"


def generate_hash(password: str) -> str:
    return generate_password_hash(password)


def check_hash(password: str, hashed: str) -> bool:
    try:
        return check_password_hash(hashed, password)
    except Exception:
        return False


def _serializer(secret: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret, salt=TOKEN_SALT)


def issue_token(user_id: str, secret: str) -> str:
    """Sign the user id together with the current timestamp."""
    return _serializer(secret).dumps({"id": str(user_id)})


def verify_token(token: str, secret: str, max_age: int) -> str:
    """Return the user id carried by `token` or raise InvalidTokenError."""
    try:
        data = _serializer(secret).loads(token, max_age=max_age)
    except SignatureExpired:
        raise InvalidTokenError("Error: token expired")
    except BadSignature:
        raise InvalidTokenError()

    user_id = data.get("id") if isinstance(data, dict) else None
    if not user_id:
        raise InvalidTokenError()
    return user_id
