"""End-to-end tests against a real radar WebSocket server."""

import asyncio
import contextlib
import json

import pytest
from websockets.asyncio.client import connect

from radar.ws.server import RadarWebSocketServer
from tests.fixtures.helpers import find_free_port, frame, wait_for_condition


async def recv_json(ws, timeout: float = 2.0) -> dict:
    return json.loads(await asyncio.wait_for(ws.recv(), timeout))


async def recv_type(ws, msg_type: str, timeout: float = 2.0) -> dict:
    """Read until a message of ``msg_type`` arrives."""
    while True:
        message = await recv_json(ws, timeout)
        if message["type"] == msg_type:
            return message


@pytest.fixture
async def running_server():
    port = find_free_port()
    server = RadarWebSocketServer(host="localhost", port=port)
    task = asyncio.create_task(server.start_server())

    async def listening():
        try:
            async with connect(f"ws://localhost:{port}"):
                return True
        except OSError:
            return False

    await wait_for_condition(listening, timeout=5.0)
    await wait_for_condition(lambda: len(server.registry) == 0)
    try:
        yield server, f"ws://localhost:{port}"
    finally:
        await server.shutdown()
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.wait_for(task, timeout=5.0)


@pytest.mark.integration
class TestRadarServer:

    @pytest.mark.asyncio
    async def test_join_update_and_leave(self, running_server):
        server, url = running_server

        async with connect(url) as a:
            welcome_a = await recv_json(a)
            assert welcome_a["type"] == "welcome"
            a_id = welcome_a["payload"]["selfId"]
            assert [u["id"] for u in welcome_a["payload"]["users"]] == [a_id]
            assert (await recv_json(a))["type"] == "user-joined"

            async with connect(url) as b:
                welcome_b = await recv_json(b)
                b_id = welcome_b["payload"]["selfId"]
                assert {u["id"] for u in welcome_b["payload"]["users"]} == {a_id, b_id}

                joined = await recv_type(a, "user-joined")
                assert joined["payload"]["user"]["id"] == b_id
                assert (await recv_type(b, "user-joined"))["payload"]["user"]["id"] == b_id

                await a.send(frame("update-profile", {"name": "X"}))
                for ws in (a, b):
                    updated = await recv_type(ws, "user-updated")
                    assert updated["payload"]["user"]["name"] == "X"
                    assert updated["payload"]["user"]["bio"] == ""
                    assert updated["payload"]["user"]["color"] == "#3bff99"

            left = await recv_type(a, "user-left")
            assert left["payload"] == {"id": b_id}

        await wait_for_condition(lambda: len(server.registry) == 0)
        assert server.connections == {}

    @pytest.mark.asyncio
    async def test_malformed_frames_get_no_reply(self, running_server):
        server, url = running_server

        async with connect(url) as a:
            await recv_type(a, "user-joined")

            await a.send("this is not json")
            await a.send(frame("chat-group", {"text": "after garbage"}))

            message = await recv_json(a)
            assert message["type"] == "chat-group"
            assert message["payload"]["text"] == "after garbage"

    @pytest.mark.asyncio
    async def test_status_reports_connections(self, running_server):
        server, url = running_server

        async with connect(url) as a:
            await recv_type(a, "user-joined")
            status = server.get_status()

            assert status["running"] is True
            assert status["total_connections"] == 1
            assert status["participants"] == 1
