"""
UserService -- maps external identities to ledger owners.

The identity provider is trusted: an ``external_auth_id`` reaching the
kernel is already authenticated.  This service only resolves it to the
internal ``User`` row (or provisions one on first sight).
"""

from sqlalchemy import select

from ledger_kernel.exceptions import UnauthorizedError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.user import User
from ledger_kernel.services.base import BaseService

logger = get_logger("services.user")


class UserService(BaseService[User]):
    """Identity resolution and provisioning."""

    def _find(self, external_auth_id: str) -> User | None:
        return self.session.execute(
            select(User).where(User.external_auth_id == external_auth_id)
        ).scalar_one_or_none()

    def resolve(self, external_auth_id: str | None) -> User:
        """
        Return the User for ``external_auth_id``.

        Raises:
            UnauthorizedError: If the id is empty or no user is mapped to it.
        """
        if not external_auth_id:
            raise UnauthorizedError()
        user = self._find(external_auth_id)
        if user is None:
            logger.warning("user_not_resolved", extra={"external_auth_id": external_auth_id})
            raise UnauthorizedError("User not found")
        return user

    def ensure_user(
        self,
        external_auth_id: str,
        email: str | None = None,
        name: str | None = None,
    ) -> User:
        """
        Return the User for ``external_auth_id``, creating it if needed.

        Idempotent.  Two concurrent first sights race on
        uq_user_external_auth_id; the loser fails with IntegrityError and
        its scope rolls back.
        """
        if not external_auth_id:
            raise UnauthorizedError()
        user = self._find(external_auth_id)
        if user is not None:
            return user

        user = User(external_auth_id=external_auth_id, email=email, name=name)
        self.session.add(user)
        self.session.flush()

        logger.info(
            "user_provisioned",
            extra={"user_id": str(user.id), "external_auth_id": external_auth_id},
        )
        return user
