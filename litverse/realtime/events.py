from enum import Enum


class InboundEvent(str, Enum):
    JOIN_USER_ROOM = "join-user-room"
    JOIN_BOOK_CLUB = "join-book-club"
    LEAVE_BOOK_CLUB = "leave-book-club"
    BOOK_CLUB_MESSAGE = "book-club-message"
    READING_PROGRESS = "reading-progress"
    BOOKSHELF_INTERACTION = "bookshelf-interaction"
    ACHIEVEMENT_EARNED = "achievement-earned"
    TYPING_START = "typing-start"
    TYPING_STOP = "typing-stop"
    USER_ONLINE = "user-online"
    USER_OFFLINE = "user-offline"


class OutboundEvent(str, Enum):
    NEW_BOOK_CLUB_MESSAGE = "new-book-club-message"
    READING_PROGRESS_UPDATE = "reading-progress-update"
    BOOKSHELF_UPDATE = "bookshelf-update"
    NEW_ACHIEVEMENT = "new-achievement"
    USER_TYPING = "user-typing"
    USER_STATUS_CHANGE = "user-status-change"


def user_room(user_id) -> str:
    return f"user-{user_id}"


def club_room(club_id) -> str:
    return f"club-{club_id}"
