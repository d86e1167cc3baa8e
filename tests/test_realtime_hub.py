import asyncio

from litverse.realtime import RoomHub, dispatch_socket_event, notify_achievements


class FakeSocket:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_json(self, message):
        if self.fail:
            raise ConnectionError("gone")
        self.sent.append(message)


def run(coro):
    return asyncio.run(coro)


def test_club_message_reaches_every_member_including_sender():
    hub = RoomHub()
    alice, bob, outsider = FakeSocket(), FakeSocket(), FakeSocket()
    hub.connect(outsider)

    run(dispatch_socket_event(hub, alice, {"event": "join-book-club", "data": 4}))
    run(dispatch_socket_event(hub, bob, {"event": "join-book-club", "data": 4}))
    run(dispatch_socket_event(hub, alice, {
        "event": "book-club-message",
        "data": {"clubId": 4, "message": "hi", "userId": 1, "username": "alice"},
    }))

    assert alice.sent[0]["event"] == "new-book-club-message"
    assert bob.sent[0]["data"]["message"] == "hi"
    assert "timestamp" in bob.sent[0]["data"]
    assert outsider.sent == []


def test_typing_excludes_sender_and_flags_state():
    hub = RoomHub()
    alice, bob = FakeSocket(), FakeSocket()
    hub.join("club-2", alice)
    hub.join("club-2", bob)

    run(dispatch_socket_event(hub, alice, {"event": "typing-start", "data": {"clubId": 2, "userId": 1}}))
    run(dispatch_socket_event(hub, alice, {"event": "typing-stop", "data": {"clubId": 2, "userId": 1}}))

    assert alice.sent == []
    assert [m["data"]["isTyping"] for m in bob.sent] == [True, False]


def test_presence_broadcast_skips_sender():
    hub = RoomHub()
    alice, bob = FakeSocket(), FakeSocket()
    hub.connect(alice)
    hub.connect(bob)

    run(dispatch_socket_event(hub, alice, {"event": "user-online", "data": 1}))

    assert alice.sent == []
    assert bob.sent[0]["event"] == "user-status-change"
    assert bob.sent[0]["data"]["status"] == "online"


def test_leave_stops_delivery():
    hub = RoomHub()
    alice = FakeSocket()
    run(dispatch_socket_event(hub, alice, {"event": "join-book-club", "data": "9"}))
    run(dispatch_socket_event(hub, alice, {"event": "leave-book-club", "data": "9"}))

    assert run(hub.publish("club-9", "new-book-club-message", {})) == 0
    assert "club-9" not in hub.rooms


def test_unknown_and_malformed_frames_are_ignored():
    hub = RoomHub()
    alice = FakeSocket()
    hub.join("user-1", alice)

    run(dispatch_socket_event(hub, alice, {"event": "self-destruct", "data": {}}))
    run(dispatch_socket_event(hub, alice, "not a dict"))
    run(dispatch_socket_event(hub, alice, {"event": "reading-progress", "data": {"bookId": 3}}))

    assert alice.sent == []


def test_failed_send_drops_connection_from_every_room():
    hub = RoomHub()
    good, dead = FakeSocket(), FakeSocket(fail=True)
    hub.join("club-1", good)
    hub.join("club-1", dead)
    hub.join("user-5", dead)

    delivered = run(hub.publish("club-1", "new-book-club-message", {"message": "x"}))

    assert delivered == 1
    assert dead not in hub.connections
    assert hub.members("club-1") == {good}
    assert "user-5" not in hub.rooms


def test_notify_achievements_targets_user_room():
    hub = RoomHub()
    reader, other = FakeSocket(), FakeSocket()
    hub.join("user-3", reader)
    hub.join("user-4", other)

    run(notify_achievements(hub, 3, [{"name": "First Book"}]))

    assert reader.sent[0]["event"] == "new-achievement"
    assert reader.sent[0]["data"]["achievement"]["name"] == "First Book"
    assert other.sent == []
