import asyncio
import random

import pytest

from lifecycle.task_registry import TaskCategory
from models.color import Color
from models.errors import ActorNotRunningError, ReplyAbandonedError
from models.messages import QueryColorMessage
from services.blaster import Blaster
from services.color_transform import FadeTransform, GammaTransform, gamma_correct
from services.mailbox import ReplyChannel
from services.query_guard import QueryCompletionGuard


@pytest.mark.asyncio
async def test_set_black_then_query(blaster):
    await blaster.set_color(Color(0, 0, 0))
    assert await blaster.query_color() == Color(0, 0, 0)


@pytest.mark.asyncio
async def test_query_sees_preceding_set(blaster, sink):
    await blaster.set_color(Color(200, 200, 200))
    color = await blaster.query_color()

    assert color.to_hex() == "#c85d28"
    assert sink.lines[-3:] == ["17=0.784314", "22=0.364706", "27=0.156863"]
    assert blaster.last_result.requested == Color(200, 200, 200)


@pytest.mark.asyncio
async def test_start_syncs_device_with_initial_color(blaster, sink):
    await blaster.query_color()
    assert sink.lines[:3] == ["17=0.000000", "22=0.000000", "27=0.000000"]


@pytest.mark.asyncio
async def test_concurrent_sets_end_on_exactly_one_target(blaster):
    targets = [Color(i * 20, 255 - i * 20, i) for i in range(10)]

    await asyncio.gather(*(blaster.set_color(t) for t in targets))
    final = await blaster.query_color()

    assert final in {gamma_correct(t) for t in targets}
    assert blaster.sets_handled == len(targets)


@pytest.mark.asyncio
async def test_writes_never_interleave(writer, sink):
    blaster = Blaster(writer, FadeTransform(step_delay_s=0.001), QueryCompletionGuard(1.0))
    blaster.start()
    try:
        await asyncio.gather(
            blaster.set_color(Color(5, 0, 0)),
            blaster.set_color(Color(0, 0, 5)),
        )
        final = await blaster.query_color()
    finally:
        await blaster.stop()

    assert blaster.sets_handled == 2

    # skip the initial sync; the first fade only moves its own pin up to 5
    fade = [(pin, round(f * 255)) for pin, f in sink.commands()[3:]]
    first_pin = fade[0][0]
    assert first_pin in (17, 27)
    assert fade[:5] == [(first_pin, v) for v in range(1, 6)]

    # the second fade starts from the first one's target, every tick
    # writing red then blue
    rising = 27 if first_pin == 17 else 17
    second = []
    for tick in range(1, 6):
        for pin in (17, 27):
            second.append((pin, tick if pin == rising else 5 - tick))
    assert fade[5:] == second

    assert final == (Color(0, 0, 5) if first_pin == 17 else Color(5, 0, 0))


@pytest.mark.asyncio
async def test_unconsumed_reply_is_abandoned_without_blocking(blaster):
    reply = ReplyChannel()
    await blaster._query_box.send(QueryColorMessage(reply, "slow-caller"))

    # later messages are served well within the 0.1 s delivery bound
    await asyncio.wait_for(blaster.set_color(Color(255, 0, 0)), timeout=0.05)
    assert await asyncio.wait_for(blaster.query_color(), timeout=0.05) == Color(255, 0, 0)

    await asyncio.sleep(0.2)

    assert blaster.guard.abandoned == 1
    assert blaster.guard.delivered == 1
    assert reply.closed
    with pytest.raises(ReplyAbandonedError):
        await reply.receive()
    assert blaster.running


@pytest.mark.asyncio
async def test_query_deliveries_are_tracked_tasks(blaster, fresh_task_registry):
    await blaster.query_color()
    await asyncio.sleep(0)

    categories = [r.info.category for r in fresh_task_registry.list_all()]
    assert TaskCategory.ACTOR in categories
    assert TaskCategory.QUERY in categories


@pytest.mark.asyncio
async def test_queries_are_served_while_sets_queue_up(writer):
    blaster = Blaster(writer, GammaTransform(), QueryCompletionGuard(1.0), rng=random.Random(1))
    blaster.start()
    try:
        sets = [asyncio.create_task(blaster.set_color(Color(i, i, i))) for i in range(30)]
        color = await asyncio.wait_for(blaster.query_color(), timeout=1.0)
        await asyncio.gather(*sets)
    finally:
        await blaster.stop()

    assert isinstance(color, Color)


@pytest.mark.asyncio
async def test_handler_failure_does_not_stop_loop(writer):
    class BrokenTransform:
        name = "broken"

        async def apply(self, writer, current, target):
            raise RuntimeError("boom")

    blaster = Blaster(writer, BrokenTransform(), QueryCompletionGuard(1.0))
    blaster.start()
    try:
        await blaster.set_color(Color(1, 2, 3))
        assert await blaster.query_color() == Color.black()
        assert blaster.handler_errors == 1
        assert blaster.running
    finally:
        await blaster.stop()


@pytest.mark.asyncio
async def test_calls_before_start_fail(writer):
    blaster = Blaster(writer, GammaTransform(), QueryCompletionGuard(1.0))

    with pytest.raises(ActorNotRunningError):
        await blaster.set_color(Color.white())
    with pytest.raises(ActorNotRunningError):
        await blaster.query_color()


@pytest.mark.asyncio
async def test_stop_closes_device_and_rejects_calls(writer, sink):
    blaster = Blaster(writer, GammaTransform(), QueryCompletionGuard(1.0))
    blaster.start()
    await blaster.query_color()

    await blaster.stop()

    assert not blaster.running
    assert sink.closed
    with pytest.raises(ActorNotRunningError):
        await blaster.query_color()


@pytest.mark.asyncio
async def test_start_twice_fails(blaster):
    with pytest.raises(RuntimeError):
        blaster.start()


@pytest.mark.asyncio
async def test_stats(blaster):
    await blaster.set_color(Color(200, 200, 200))
    await blaster.query_color()

    stats = blaster.stats()
    assert stats["running"] is True
    assert stats["policy"] == "gamma"
    assert stats["sets_handled"] == 1
    assert stats["queries_handled"] == 1
    assert stats["device_writes"] == 6
    assert stats["last_result"]["applied"] == "#c85d28"
