# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Public.WebSocket.Libs import SyncProtocolHandler, DEBOUNCE_THRESHOLD
from conftest              import FakeSocket, drain
import json, pytest


async def _zamani_ayarla(ortam, actor, saniye: float):
    await actor.store.update_room(ortam.room_id, current_time=saniye)
    drain(ortam.alice)
    drain(ortam.bob)


class TestSync:

    @pytest.mark.asyncio
    async def test_small_drift_is_ignored(self, actor, room_with_two):
        ortam = room_with_two
        await _zamani_ayarla(ortam, actor, 10.0)

        for rapor in (10.2, 9.8, 10.0 + DEBOUNCE_THRESHOLD, 10.0 - DEBOUNCE_THRESHOLD):
            assert await actor.message(ortam.alice_ws, json.dumps({"type": "sync", "currentTime": rapor})) is False

        assert actor.store.get_room(ortam.room_id).current_time == 10.0
        assert drain(ortam.alice) == []
        assert drain(ortam.bob) == []

    @pytest.mark.asyncio
    async def test_large_drift_updates_and_broadcasts_once(self, actor, room_with_two):
        ortam = room_with_two
        await _zamani_ayarla(ortam, actor, 10.0)

        assert await actor.message(ortam.alice_ws, json.dumps({"type": "sync", "currentTime": 10.51})) is True

        room = actor.store.get_room(ortam.room_id)
        assert room.current_time == 10.51
        assert room.is_paused is True

        for baglanti in (ortam.alice, ortam.bob):
            [mesaj] = drain(baglanti)
            assert mesaj["currentTime"] == 10.51
            assert "info" not in mesaj

    @pytest.mark.asyncio
    async def test_sync_without_time_is_dropped(self, actor, room_with_two):
        ortam = room_with_two
        assert await actor.message(ortam.alice_ws, '{"type": "sync"}') is False
        assert drain(ortam.bob) == []


class TestGetState:

    @pytest.mark.asyncio
    async def test_state_goes_to_sender_only(self, actor, room_with_two):
        ortam = room_with_two

        assert await actor.message(ortam.bob_ws, '{"type": "getState"}') is True

        [mesaj] = drain(ortam.bob)
        assert mesaj == {
            "currentTime"   : 0.0,
            "isPaused"      : True,
            "clients"       : [
                {"id": ortam.alice.client_id, "name": "Alice"},
                {"id": ortam.bob.client_id,   "name": "Bob"},
            ],
            "roomId"        : ortam.room_id,
            "currentClient" : ortam.bob.client_id,
        }
        assert drain(ortam.alice) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [
        '{"type": "getState", "currentTime": -1}',
        '{"type": "getState", "currentTime": 12.5}',
        '{"type": "getState", "currentTime": null}',
    ])
    async def test_stray_time_does_not_block_reply(self, actor, room_with_two, raw):
        ortam = room_with_two

        assert await actor.message(ortam.bob_ws, raw) is True

        [mesaj] = drain(ortam.bob)
        assert mesaj["roomId"] == ortam.room_id
        assert mesaj["currentTime"] == 0.0
        assert actor.store.get_room(ortam.room_id).current_time == 0.0


class TestPlayPause:

    @pytest.mark.asyncio
    async def test_play_sets_time_and_resumes(self, actor, room_with_two):
        ortam = room_with_two

        await actor.message(ortam.bob_ws, '{"type": "play", "currentTime": 10.0}')

        room = actor.store.get_room(ortam.room_id)
        assert (room.current_time, room.is_paused) == (10.0, False)
        for baglanti in (ortam.alice, ortam.bob):
            [mesaj] = drain(baglanti)
            assert mesaj["info"] == "Bob resumed"
            assert mesaj["isPaused"] is False

    @pytest.mark.asyncio
    async def test_pause_sets_time_and_pauses(self, actor, room_with_two):
        ortam = room_with_two
        await actor.message(ortam.bob_ws, '{"type": "play", "currentTime": 1.0}')
        drain(ortam.alice)

        await actor.message(ortam.alice_ws, '{"type": "pause", "currentTime": 4.25}')

        room = actor.store.get_room(ortam.room_id)
        assert (room.current_time, room.is_paused) == (4.25, True)
        assert drain(ortam.alice)[-1]["info"] == "Alice paused"

    @pytest.mark.asyncio
    async def test_pause_below_threshold_still_applies(self, actor, room_with_two):
        ortam = room_with_two

        await actor.message(ortam.alice_ws, '{"type": "pause", "currentTime": 0.1}')

        assert actor.store.get_room(ortam.room_id).current_time == 0.1
        assert drain(ortam.bob)[0]["info"] == "Alice paused"

    @pytest.mark.asyncio
    async def test_unknown_client_name_falls_back(self, actor, room_with_two):
        ortam = room_with_two
        await actor.store.update_room(ortam.room_id, clients=[])
        drain(ortam.alice)

        await actor.message(ortam.alice_ws, '{"type": "play", "currentTime": 2.0}')

        assert drain(ortam.alice)[0]["info"] == "Anonymous resumed"


class TestMalformed:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [
        "not json",
        "[]",
        '{"currentTime": 3}',
        '{"type": "seek", "currentTime": 3}',
        '{"type": "play"}',
        '{"type": "pause", "currentTime": null}',
        '{"type": "play", "currentTime": -1}',
        '{"type": "play", "currentTime": "abc"}',
        '{"type": "play", "currentTime": true}',
        '{"type": "sync", "currentTime": "10"}',
        '{"type": "pause", "currentTime": false}',
        '{"type": "sync", "currentTime": -5}',
    ])
    async def test_dropped_without_effect(self, actor, room_with_two, raw):
        ortam = room_with_two

        assert await actor.message(ortam.alice_ws, raw) is False

        room = actor.store.get_room(ortam.room_id)
        assert (room.current_time, room.is_paused) == (0.0, True)
        assert drain(ortam.alice) == []
        assert drain(ortam.bob) == []

    def test_parse_accepts_integer_time(self):
        mesaj = SyncProtocolHandler.parse('{"type": "play", "currentTime": 3}')
        assert mesaj.currentTime == 3.0

    def test_parse_rejects_bool_and_string_time(self):
        assert SyncProtocolHandler.parse('{"type": "play", "currentTime": true}') is None
        assert SyncProtocolHandler.parse('{"type": "play", "currentTime": "10"}') is None

    @pytest.mark.asyncio
    async def test_integer_time_is_stored_as_float(self, actor, room_with_two):
        ortam = room_with_two

        assert await actor.message(ortam.alice_ws, '{"type": "pause", "currentTime": 7}') is True

        current_time = actor.store.get_room(ortam.room_id).current_time
        assert isinstance(current_time, float) and current_time == 7.0


class TestStaleTags:

    @pytest.mark.asyncio
    async def test_message_for_deleted_room_is_dropped(self, actor, room_with_two):
        ortam = room_with_two
        await actor.store.delete_room(ortam.room_id)

        assert await actor.message(ortam.alice_ws, '{"type": "play", "currentTime": 1.0}') is False
        assert ortam.room_id not in actor.store

    @pytest.mark.asyncio
    async def test_message_from_unknown_socket_is_dropped(self, actor):
        assert await actor.message(FakeSocket(), '{"type": "getState"}') is False
