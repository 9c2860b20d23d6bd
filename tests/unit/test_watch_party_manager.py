import asyncio

import pytest
from fakes import FakeWebSocket

from Public.WebSocket.Libs import WatchPartyManager
from Public.WebSocket.Libs.SessionAuthority import InvalidPosition


@pytest.fixture
def manager(tmp_path) -> WatchPartyManager:
    return WatchPartyManager(upload_dir=tmp_path, clock=lambda: 1_000)


def _join(manager: WatchPartyManager):
    socket = FakeWebSocket()
    return manager.join(socket), socket


def test_join_assigns_identity_and_registers(manager) -> None:
    participant, _ = _join(manager)

    assert manager.get_participant(participant.user_id) is participant
    assert manager.welcome(participant) == {
        "type": "welcome",
        "user_id": participant.user_id,
        "username": participant.username,
        "host_id": None,
    }


def test_play_broadcasts_to_others_only(manager) -> None:
    alice, alice_ws = _join(manager)
    _, bob_ws = _join(manager)
    _, carol_ws = _join(manager)

    asyncio.run(manager.play(alice, 12.5))

    assert alice_ws.sent == []
    for socket in (bob_ws, carol_ws):
        assert socket.sent == [{"type": "play", "time": 12.5, "triggered_by": alice.username}]
    assert manager.sync_state() == {"type": "syncState", "is_playing": True, "position": 12.5, "captured_at": 1_000}


def test_invalid_position_does_not_broadcast(manager) -> None:
    alice, _ = _join(manager)
    _, bob_ws = _join(manager)

    with pytest.raises(InvalidPosition):
        asyncio.run(manager.seek(alice, "nope"))

    assert bob_ws.sent == []


def test_become_host_announces_to_others(manager) -> None:
    alice, alice_ws = _join(manager)
    bob, bob_ws = _join(manager)

    asyncio.run(manager.become_host(alice))
    asyncio.run(manager.become_host(bob))

    assert manager.host.host_id == bob.user_id
    assert bob_ws.of_type("hostChanged") == [{"type": "hostChanged", "host_id": alice.user_id}]
    assert alice_ws.of_type("hostChanged") == [{"type": "hostChanged", "host_id": bob.user_id}]
    assert manager.welcome(alice)["host_id"] == bob.user_id


def test_host_leave_returns_host_left_event(manager) -> None:
    alice, _ = _join(manager)
    bob, _ = _join(manager)
    asyncio.run(manager.become_host(alice))

    left, event = manager.leave(bob.user_id)
    assert left is bob
    assert event is None

    left, event = manager.leave(alice.user_id)
    assert left is alice
    assert event.to_dict() == {"type": "hostLeft"}
    assert manager.host.host_id is None


def test_leave_unknown_participant(manager) -> None:
    assert manager.leave("missing") == (None, None)


def test_relay_signal_reaches_only_target(manager) -> None:
    alice, _ = _join(manager)
    bob, bob_ws = _join(manager)
    _, carol_ws = _join(manager)

    delivered = asyncio.run(manager.relay_signal(alice, bob.user_id, {"type": "offer", "sdp": "x"}))

    assert delivered is True
    assert bob_ws.sent == [{"type": "signal", "from": alice.user_id, "signal": {"type": "offer", "sdp": "x"}}]
    assert carol_ws.sent == []


def test_relay_signal_to_departed_target_is_dropped(manager) -> None:
    alice, alice_ws = _join(manager)
    bob, _ = _join(manager)
    manager.leave(bob.user_id)

    delivered = asyncio.run(manager.relay_signal(alice, bob.user_id, {"type": "answer", "sdp": "x"}))

    assert delivered is False
    assert alice_ws.sent == []


def test_broadcast_survives_failing_socket(manager) -> None:
    alice, _ = _join(manager)
    manager.join(FakeWebSocket(fail=True))
    _, carol_ws = _join(manager)

    asyncio.run(manager.pause(alice, 3.0))

    assert carol_ws.of_type("pause") == [{"type": "pause", "time": 3.0, "triggered_by": alice.username}]


def test_user_chat_goes_to_everyone_and_ignores_blank(manager) -> None:
    alice, alice_ws = _join(manager)
    _, bob_ws = _join(manager)

    assert asyncio.run(manager.user_chat(alice, "   ")) is None
    message = asyncio.run(manager.user_chat(alice, " merhaba "))

    assert message.text == "merhaba"
    for socket in (alice_ws, bob_ws):
        [chat] = socket.of_type("chatMessage")
        assert chat["kind"] == "user"
        assert chat["author"] == alice.username
        assert chat["text"] == "merhaba"


def test_media_uploaded_resets_playback_and_notifies_all(manager) -> None:
    alice, alice_ws = _join(manager)
    asyncio.run(manager.play(alice, 50.0))

    asyncio.run(manager.media_uploaded("/uploads/current_movie.mp4", "film.mp4"))

    assert manager.authority.state.is_playing is False
    assert manager.authority.state.position == 0.0
    assert alice_ws.of_type("videoUploaded") == [
        {"type": "videoUploaded", "url": "/uploads/current_movie.mp4", "filename": "film.mp4"}
    ]


def test_current_media_finds_uploaded_movie(manager, tmp_path) -> None:
    assert manager.current_media() is None

    (tmp_path / "current_movie.webm").write_bytes(b"x")

    assert manager.current_media() == {
        "type": "videoUploaded",
        "url": "/uploads/current_movie.webm",
        "filename": "Current Movie",
    }


def test_close_tears_down_sockets_and_state(manager) -> None:
    alice, alice_ws = _join(manager)
    asyncio.run(manager.become_host(alice))

    asyncio.run(manager.close())

    assert alice_ws.closed_with == 1001
    assert manager.participants == {}
    assert manager.host.host_id is None
