"""Account registration, login and lookup (``users`` table)."""

from passlib.context import CryptContext

from src.models.user import AuthResult, Identity, LoginRequest, RegisterRequest, User
from src.services.supabase_client import SupabaseClient, USERS_TABLE, first_row
from src.services.token_verifier import create_access_token, get_jwt_secret
from src.utils.errors import (
    AuthenticationError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    SupabaseError,
    is_invalid_input,
    is_unique_violation,
)
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

PUBLIC_COLUMNS = "id, email, username, created_at"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        # Unrecognised hash format
        return False


def _public_user(row: dict) -> User:
    return User(
        id=str(row["id"]),
        email=row["email"],
        username=row.get("username"),
        created_at=row.get("created_at"),
    )


async def register(request: RegisterRequest) -> AuthResult:
    """Create an account and issue its first token."""
    email = (request.email or "").strip().lower()
    username = (request.username or "").strip()
    if not email or not request.password or not username:
        raise InvalidRequestError("Email, password and username are required")
    # Signing must be possible before the account exists
    get_jwt_secret()

    async with SupabaseClient() as client:
        try:
            existing = client.table(USERS_TABLE).select("id").eq("email", email).limit(1).execute()
            if first_row(existing) is not None:
                raise ConflictError("User already exists")
            result = client.table(USERS_TABLE).insert({
                "email": email,
                "username": username,
                "password_hash": hash_password(request.password),
            }).execute()
        except ConflictError:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError("User already exists")
            raise SupabaseError(f"Failed to register user: {e}")

    row = first_row(result)
    if row is None:
        raise SupabaseError("Failed to register user: no data returned")
    user = _public_user(row)
    logger.info("User registered", user_id=mask_user_id(user.id))
    return AuthResult(token=create_access_token(user), user=user)


async def login(request: LoginRequest) -> AuthResult:
    """Check credentials and issue a token."""
    email = (request.email or "").strip().lower()
    if not email or not request.password:
        raise InvalidRequestError("Email and password are required")

    async with SupabaseClient() as client:
        try:
            result = client.table(USERS_TABLE).select("*").eq("email", email).limit(1).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to load user: {e}")

    row = first_row(result)
    if row is None or not verify_password(request.password, row.get("password_hash", "")):
        raise AuthenticationError("Invalid credentials")
    user = _public_user(row)
    return AuthResult(token=create_access_token(user), user=user)


async def get_user(identity: Identity) -> User:
    """Current account for a verified identity."""
    async with SupabaseClient() as client:
        try:
            result = client.table(USERS_TABLE).select(PUBLIC_COLUMNS).eq("id", identity.id).limit(1).execute()
        except Exception as e:
            if is_invalid_input(e):
                raise NotFoundError("User not found")
            raise SupabaseError(f"Failed to load user: {e}")

    row = first_row(result)
    if row is None:
        raise NotFoundError("User not found")
    return _public_user(row)
