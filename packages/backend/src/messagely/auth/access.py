"""Message access rules.

Pure functions over a loaded message and the requesting username.
No database access and no state: the route loads the message, then asks
here whether the caller may see it or mark it read.

- Sender and recipient may read a message.
- Only the recipient may mark it read; the sender never can.
"""

from typing import Protocol

from messagely.errors import ForbiddenError


class AddressedMessage(Protocol):
    from_username: str
    to_username: str


def authorize_read(message: AddressedMessage, username: str) -> bool:
    """True iff the requester sent or received the message."""
    return username in (message.from_username, message.to_username)


def authorize_mark_read(message: AddressedMessage, username: str) -> bool:
    """True iff the requester is the message's recipient."""
    return username == message.to_username


def ensure_can_read(message: AddressedMessage, username: str) -> None:
    if not authorize_read(message, username):
        raise ForbiddenError("You are not authorized to see this message")


def ensure_can_mark_read(message: AddressedMessage, username: str) -> None:
    if not authorize_mark_read(message, username):
        raise ForbiddenError("Only the recipient can mark this message as read")


def ensure_same_user(identity_username: str, username: str) -> None:
    """A user's profile and mailboxes are visible only to that user."""
    if identity_username != username:
        raise ForbiddenError("You can only access your own account")
