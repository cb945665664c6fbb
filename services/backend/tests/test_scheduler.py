import asyncio

from infrastructure.scheduler import PeriodicTask


async def test_task_runs_until_stopped():
    calls = []

    async def job():
        calls.append(1)

    task = PeriodicTask("tick", 0.01, job)
    task.start()
    await asyncio.sleep(0.05)
    await task.stop()

    assert not task.running
    count = len(calls)
    assert count >= 2
    await asyncio.sleep(0.03)
    assert len(calls) == count


async def test_failing_job_is_retried_next_tick():
    attempts = []

    async def job():
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("database unavailable")

    task = PeriodicTask("flaky", 0.01, job)
    task.start()
    await asyncio.sleep(0.05)
    await task.stop()

    assert task.failures == 1
    assert len(attempts) >= 2


async def test_stop_waits_for_in_flight_run():
    finished = []
    started = asyncio.Event()

    async def job():
        started.set()
        await asyncio.sleep(0.05)
        finished.append(1)

    task = PeriodicTask("slow", 10, job)
    task.start()
    await started.wait()
    await task.stop()

    assert finished == [1]


async def test_delayed_start_can_stop_before_first_run():
    calls = []

    async def job():
        calls.append(1)

    task = PeriodicTask("later", 10, job, run_immediately=False)
    task.start()
    await asyncio.sleep(0)
    await task.stop()

    assert calls == []


async def test_core_schedulers_start_and_stop(core):
    core.start_schedulers()
    assert [task.name for task in core.tasks] == ["invite-expiry-sweep", "device-inactivity-check"]
    assert all(task.running for task in core.tasks)

    await core.stop_schedulers()
    assert not any(task.running for task in core.tasks)
