from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from liturgi.domain.entities import EmailVerification, PasswordReset


class IPasswordResetRepository(ABC):
    """PasswordReset repository interface - application layer"""

    @abstractmethod
    async def create(self, reset: PasswordReset) -> PasswordReset:
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordReset]:
        pass

    @abstractmethod
    async def update(self, reset: PasswordReset) -> PasswordReset:
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: UUID) -> int:
        pass


class IEmailVerificationRepository(ABC):
    """EmailVerification repository interface - application layer"""

    @abstractmethod
    async def create(self, verification: EmailVerification) -> EmailVerification:
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[EmailVerification]:
        pass

    @abstractmethod
    async def update(self, verification: EmailVerification) -> EmailVerification:
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: UUID) -> int:
        pass
