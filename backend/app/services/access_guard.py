"""Access guard deciding whether a caller may view or delete a message.

Rules, evaluated in order:

- admins are always permitted,
- authenticated callers only for messages whose ``user`` is their own id,
- anonymous callers only for messages attributed to their fingerprint
  identity (``u-`` + hash of client address and agent).

The welcome path additionally requires the message to be the AI welcome
reply. Every denial carries the same message so callers cannot tell which
check failed.
"""

import logging

from app.core.identity import IdentityContext
from app.models.message import AUTHOR_AI, REPLY_TO_WELCOME, Message
from app.services.errors import UnauthorizedError

logger = logging.getLogger(__name__)

NO_PERMISSION = "No permission"


class AccessGuard:
    """Stateless authorization predicates over messages."""

    @staticmethod
    def can_access(identity: IdentityContext, message: Message) -> bool:
        if identity.is_admin:
            return True
        if not identity.is_anonymous:
            return identity.caller_identity == message.user
        return identity.fingerprint == message.user

    @staticmethod
    def is_welcome_message(message: Message) -> bool:
        return message.author == AUTHOR_AI and message.reply_to == REPLY_TO_WELCOME

    @classmethod
    def can_delete_welcome(cls, identity: IdentityContext, message: Message) -> bool:
        return cls.can_access(identity, message) and cls.is_welcome_message(message)

    @classmethod
    def require_access(cls, identity: IdentityContext, message: Message) -> None:
        if not cls.can_access(identity, message):
            logger.info("Denied access to message %s/%s", message.owner, message.name)
            raise UnauthorizedError(NO_PERMISSION)

    @classmethod
    def require_welcome_delete(cls, identity: IdentityContext, message: Message) -> None:
        if not cls.can_delete_welcome(identity, message):
            logger.info("Denied welcome deletion of message %s/%s", message.owner, message.name)
            raise UnauthorizedError(NO_PERMISSION)

    @staticmethod
    def require_admin(identity: IdentityContext) -> None:
        if not identity.is_admin:
            raise UnauthorizedError("this operation requires admin privilege")
