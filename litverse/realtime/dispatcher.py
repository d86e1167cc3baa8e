import logging
from datetime import datetime, timezone
from typing import Any

from litverse.realtime.events import InboundEvent, OutboundEvent, user_room
from litverse.realtime.hub import RoomHub
from litverse.realtime.rules import MEMBERSHIP_RULES, PRESENCE_RULES, RELAY_RULES

logger = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc).isoformat()


async def dispatch_socket_event(hub: RoomHub, connection, message: Any):
    """
    Route one inbound ``{"event": ..., "data": ...}`` frame.

    Unknown events and frames missing their routing id are logged and
    ignored; nothing is sent back to the sender.
    """
    if not isinstance(message, dict) or "event" not in message:
        logger.warning(f"Ignoring malformed socket frame: {message!r}")
        return

    try:
        event = InboundEvent(message["event"])
    except ValueError:
        logger.warning(f"Ignoring unknown socket event: {message['event']}")
        return

    data = message.get("data")

    if event in MEMBERSHIP_RULES:
        room_for, joining = MEMBERSHIP_RULES[event]
        if data is None or isinstance(data, (dict, list)):
            logger.warning(f"{event.value} needs a bare id, got {data!r}")
            return
        room = room_for(data)
        if joining:
            hub.join(room, connection)
            logger.info(f"Socket joined {room}")
        else:
            hub.leave(room, connection)
            logger.info(f"Socket left {room}")
        return

    if event in PRESENCE_RULES:
        await hub.broadcast(
            OutboundEvent.USER_STATUS_CHANGE.value,
            {"userId": data, "status": PRESENCE_RULES[event], "timestamp": _now()},
            exclude=connection,
        )
        return

    rule = RELAY_RULES[event]
    if not isinstance(data, dict) or data.get(rule.key) is None:
        logger.warning(f"{event.value} is missing '{rule.key}'")
        return

    payload = {field: data.get(field) for field in rule.fields}
    if rule.outbound == OutboundEvent.USER_TYPING:
        payload["isTyping"] = event == InboundEvent.TYPING_START
    if rule.stamp:
        payload["timestamp"] = _now()

    await hub.publish(
        rule.room(data[rule.key]),
        rule.outbound.value,
        payload,
        exclude=connection if rule.exclude_sender else None,
    )


async def notify_achievements(hub: RoomHub, user_id: int, badges: list):
    """Server-side push of freshly earned badges to the reader's room."""
    for badge in badges:
        await hub.publish(
            user_room(user_id),
            OutboundEvent.NEW_ACHIEVEMENT.value,
            {"achievement": badge, "timestamp": _now()},
        )
