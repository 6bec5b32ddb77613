import logging
from typing import Optional, Tuple

from splitledger.core.auth import create_access_token
from splitledger.core.errors import AlreadyExists, Unauthorized
from splitledger.core.security import hash_password, verify_password
from splitledger.models.user import User
from splitledger.repositories.protocols import AccountStore, UnitOfWork

logger = logging.getLogger(__name__)


class AuthService:
    """Signup and password login; both hand back a bearer token."""

    def __init__(self, uow: UnitOfWork, accounts: AccountStore):
        self.uow = uow
        self.accounts = accounts

    async def signup(
        self,
        username: str,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> Tuple[User, str]:
        if await self.accounts.username_exists(username):
            raise AlreadyExists(f"Username already exists: {username}")
        if await self.accounts.email_exists(email):
            raise AlreadyExists(f"Email already exists: {email}")

        user = User(
            username=username,
            email=email,
            full_name=full_name,
            phone_number=phone_number,
            password_hash=hash_password(password),
        )
        async with self.uow.transaction() as session:
            await self.accounts.create_user(user, session=session)

        logger.info("Created user %s", username, extra={"user_id": user.id})
        return user, create_access_token(user.id)

    async def login(self, username_or_email: str, password: str) -> Tuple[User, str]:
        user = await self.accounts.find_by_login(username_or_email)
        if user is None or not user.password_hash or not verify_password(password, user.password_hash):
            raise Unauthorized("Incorrect username/email or password")
        return user, create_access_token(user.id)
