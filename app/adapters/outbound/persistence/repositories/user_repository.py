# app/adapters/outbound/persistence/repositories/user_repository.py

"""
Async repository for User entity (user_repository.py).

Handles credential lookup and verification, token version bumps, password
changes and the encrypted phone column. Encryption happens here, explicitly,
on write and on read: the ORM model only ever holds the envelope.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from app.adapters.outbound.persistence.models import User
from app.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from app.adapters.outbound.security.auth_user_manager import UserAuthManager
from app.application.ports.outbound import IUserRepository, IFieldCipher
from app.domain.exceptions import DatabaseOperationException, ValidationException
from app.domain.models.encrypted_value import EncryptedValue
from app.domain.models.identity_claims import UserRole
from app.shared.utils.input_validation import InputValidator


class AsyncUserCRUD(AsyncCRUDBase[User], IUserRepository):
    """
    Concrete repository for User entity, fully async.

    Extends AsyncCRUDBase and implements IUserRepository.
    """

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        """Exact, case-sensitive lookup."""
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.unique().scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Database error while fetching user by username: {e}")
            raise DatabaseOperationException("Error fetching user by username.", original_error=e)

    async def create_with_password(
            self,
            db: AsyncSession,
            *,
            username: str,
            password: str,
            role: str = UserRole.STUDENT.value,
            organization_id: Optional[int] = None,
            email: Optional[str] = None,
            is_active: bool = True,
    ) -> User:
        """
        Provision a user with a bcrypt-hashed password.

        Raises:
            ValidationException: If the username or email is malformed
        """
        is_valid, error_msg = InputValidator.validate_username(username)
        if not is_valid:
            raise ValidationException(message=error_msg)
        if email is not None:
            is_valid, error_msg = InputValidator.validate_email(email)
            if not is_valid:
                raise ValidationException(message=error_msg)

        password_hash = await UserAuthManager.hash_password(password)
        return await self.create(db, obj_in={
            "username": username,
            "password_hash": password_hash,
            "role": role,
            "organization_id": organization_id,
            "email": email,
            "is_active": is_active,
            "token_version": 0,
        })

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> Optional[User]:
        """
        Return the user if the credentials match, None otherwise.

        Unknown user, wrong password and inactive account all return None, and
        an unknown user still pays for one bcrypt comparison.
        """
        db_user = await self.get_by_username(db, username)

        if not db_user:
            await UserAuthManager.dummy_verify()
            self.logger.info("Authentication failed: unknown username")
            return None

        if not await UserAuthManager.verify_password(password, db_user.password_hash):
            self.logger.info(f"Authentication failed: wrong password for user_id={db_user.id}")
            return None

        if not db_user.is_active:
            self.logger.info(f"Authentication failed: inactive user_id={db_user.id}")
            return None

        return db_user

    async def bump_token_version(self, db: AsyncSession, user: User) -> int:
        """Increment token_version in the database; every previously issued token becomes stale."""
        user = await self.update(db, db_obj=user, obj_in={"token_version": User.token_version + 1})
        self.logger.info(f"token_version of user_id={user.id} is now {user.token_version}")
        return user.token_version

    async def update_password(self, db: AsyncSession, user: User, new_password: str) -> User:
        """Store a new bcrypt hash and end every other session of the user."""
        password_hash = await UserAuthManager.hash_password(new_password)
        return await self.update(db, db_obj=user, obj_in={
            "password_hash": password_hash,
            "token_version": User.token_version + 1,
        })

    # ———— ENCRYPTED COLUMNS ————

    def get_phone(self, user: User, cipher: IFieldCipher) -> Optional[str]:
        """Decrypt the stored phone envelope. A tampered envelope raises DecryptionException."""
        if not user.phone:
            return None
        return cipher.decrypt(EncryptedValue(user.phone))

    async def set_phone(self, db: AsyncSession, user: User, phone: Optional[str], cipher: IFieldCipher) -> User:
        envelope = cipher.encrypt_value(phone).envelope if phone else None
        return await self.update(db, db_obj=user, obj_in={"phone": envelope})


# Public instance for use
user_repository = AsyncUserCRUD(User)
