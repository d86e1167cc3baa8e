from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from litverse.realtime.events import InboundEvent, OutboundEvent, club_room, user_room


@dataclass(frozen=True)
class Relay:
    outbound: OutboundEvent
    # None means every connected socket
    room: Optional[Callable] = None
    key: Optional[str] = None
    fields: Tuple[str, ...] = ()
    exclude_sender: bool = False
    stamp: bool = True


RELAY_RULES = {
    InboundEvent.BOOK_CLUB_MESSAGE: Relay(
        outbound=OutboundEvent.NEW_BOOK_CLUB_MESSAGE,
        room=club_room,
        key="clubId",
        fields=("clubId", "message", "userId", "username"),
    ),
    InboundEvent.READING_PROGRESS: Relay(
        outbound=OutboundEvent.READING_PROGRESS_UPDATE,
        room=user_room,
        key="userId",
        fields=("userId", "bookId", "progress", "page"),
    ),
    InboundEvent.BOOKSHELF_INTERACTION: Relay(
        outbound=OutboundEvent.BOOKSHELF_UPDATE,
        room=user_room,
        key="userId",
        fields=("userId", "bookId", "action"),
    ),
    InboundEvent.ACHIEVEMENT_EARNED: Relay(
        outbound=OutboundEvent.NEW_ACHIEVEMENT,
        room=user_room,
        key="userId",
        fields=("achievement",),
    ),
    InboundEvent.TYPING_START: Relay(
        outbound=OutboundEvent.USER_TYPING,
        room=club_room,
        key="clubId",
        fields=("userId", "username"),
        exclude_sender=True,
        stamp=False,
    ),
    InboundEvent.TYPING_STOP: Relay(
        outbound=OutboundEvent.USER_TYPING,
        room=club_room,
        key="clubId",
        fields=("userId",),
        exclude_sender=True,
        stamp=False,
    ),
}

# room builder and join flag; the payload is the bare id
MEMBERSHIP_RULES = {
    InboundEvent.JOIN_USER_ROOM: (user_room, True),
    InboundEvent.JOIN_BOOK_CLUB: (club_room, True),
    InboundEvent.LEAVE_BOOK_CLUB: (club_room, False),
}

PRESENCE_RULES = {
    InboundEvent.USER_ONLINE: "online",
    InboundEvent.USER_OFFLINE: "offline",
}
