import asyncio

from fakes import FakePlayer, Outbox

from Public.WatchParty.Libs import SyncEngine, SyncMode


def _engine(player: FakePlayer | None = None, clock=None, **kwargs):
    player = player or FakePlayer()
    outbox = Outbox()
    engine = SyncEngine(player, outbox, clock=clock or (lambda: 0), **kwargs)
    player.engine = engine
    return engine, player, outbox


def test_local_actions_are_sent_with_current_position() -> None:
    engine, player, outbox = _engine()
    player.current_time = 7.25

    async def scenario():
        await engine.on_local_play()
        await engine.on_local_seek()
        await engine.on_local_pause()

    asyncio.run(scenario())

    assert outbox.messages == [
        {"type": "play", "time": 7.25},
        {"type": "seek", "time": 7.25},
        {"type": "pause", "time": 7.25},
    ]


def test_remote_events_do_not_echo_back() -> None:
    engine, player, outbox = _engine()

    async def scenario():
        await engine.apply_remote_play(30.0)
        await engine.apply_remote_seek(45.0)
        await engine.apply_remote_pause(45.0)

    asyncio.run(scenario())

    assert outbox.messages == []
    assert player.current_time == 45.0
    assert player.paused is True
    assert engine.mode is SyncMode.LOCAL


def test_small_drift_is_not_corrected() -> None:
    engine, player, _ = _engine()
    player.current_time = 10.3

    asyncio.run(engine.apply_remote_play(10.0))

    assert ("seek", 10.0) not in player.calls
    assert player.current_time == 10.3
    assert player.paused is False


def test_large_drift_forces_seek() -> None:
    engine, player, _ = _engine()
    player.current_time = 10.6

    asyncio.run(engine.apply_remote_pause(10.0))

    assert ("seek", 10.0) in player.calls
    assert player.current_time == 10.0
    assert player.paused is True


def test_join_extrapolates_elapsed_time_while_playing() -> None:
    engine, player, _ = _engine(clock=lambda: 1_700_000_003_000)
    snapshot = {"is_playing": True, "position": 10.0, "captured_at": 1_700_000_000_000}

    target = asyncio.run(engine.apply_sync_state(snapshot))

    assert target == 13.0
    assert player.current_time == 13.0
    assert player.paused is False


def test_paused_snapshot_is_idempotent() -> None:
    engine, player, outbox = _engine(clock=lambda: 99_000)
    snapshot = {"is_playing": False, "position": 21.5, "captured_at": 1_000}

    async def scenario():
        await engine.apply_sync_state(snapshot)
        first = player.current_time
        await engine.apply_sync_state(snapshot)
        return first

    first = asyncio.run(scenario())

    assert first == 21.5
    assert player.current_time == 21.5
    assert player.paused is True
    assert outbox.messages == []


def test_future_capture_time_is_not_rewound() -> None:
    engine, _, _ = _engine(clock=lambda: 1_000)

    assert engine.start_position({"is_playing": True, "position": 4.0, "captured_at": 5_000}) == 4.0


def test_mode_stays_applying_until_seek_completes() -> None:
    engine, player, outbox = _engine()

    async def scenario():
        player.seek_gate = asyncio.Event()
        task = asyncio.create_task(engine.apply_remote_seek(60.0))
        await asyncio.sleep(0)

        assert engine.mode is SyncMode.APPLYING
        # Uygulama sürerken oluşan oynatıcı olayı gönderilmez
        assert await engine.on_local_pause() is False

        player.seek_gate.set()
        await task

    asyncio.run(scenario())

    assert engine.mode is SyncMode.LOCAL
    assert outbox.messages == []


def test_overlapping_applications_keep_applying_until_all_finish() -> None:
    engine, player, _ = _engine()

    async def run():
        gate = asyncio.Event()
        player.seek_gate = gate
        slow = asyncio.create_task(engine.apply_remote_seek(5.0))
        await asyncio.sleep(0)

        player.seek_gate = None
        await engine.apply_remote_seek(8.0)
        assert engine.mode is SyncMode.APPLYING

        gate.set()
        await slow

    asyncio.run(run())

    assert engine.mode is SyncMode.LOCAL


def test_rejected_play_waits_for_gesture_then_retries() -> None:
    blocked = []
    engine, player, outbox = _engine(FakePlayer(reject_plays=1), on_play_blocked=blocked.append)

    asyncio.run(engine.apply_remote_play(0.0))

    assert engine.awaiting_gesture is True
    assert len(blocked) == 1
    assert player.paused is True
    assert engine.mode is SyncMode.LOCAL

    resumed = asyncio.run(engine.resume_after_gesture())

    assert resumed is True
    assert engine.awaiting_gesture is False
    assert player.paused is False
    assert outbox.messages == []


def test_resume_without_pending_gesture_is_noop() -> None:
    engine, player, _ = _engine()

    assert asyncio.run(engine.resume_after_gesture()) is False
    assert player.calls == []


def test_load_media_resets_to_start_paused() -> None:
    engine, player, outbox = _engine()
    player.current_time = 90.0
    player.paused = False

    asyncio.run(engine.load_media("/uploads/current_movie.mp4"))

    assert player.url == "/uploads/current_movie.mp4"
    assert player.current_time == 0.0
    assert player.paused is True
    assert outbox.messages == []


def test_convergence_between_two_participants() -> None:
    alice, alice_player, alice_out = _engine()
    bob, bob_player, _ = _engine()
    bob_player.current_time = 3.0

    async def scenario():
        for action, position in (("play", 12.0), ("seek", 40.0), ("pause", 41.2)):
            alice_player.current_time = position
            await getattr(alice, f"on_local_{action}")()
            sent = alice_out.messages[-1]
            await getattr(bob, f"apply_remote_{sent['type']}")(sent["time"])

    asyncio.run(scenario())

    assert bob_player.paused is True
    assert abs(bob_player.current_time - 41.2) <= 0.5
