import io

import pytest

from noyau.kernel import BOOT_TASK, Kernel, KernelExit, TaskState
from noyau.serialio import SerialConsole


def make_kernel():
    output = io.StringIO()
    kernel = Kernel(SerialConsole(output, io.StringIO()))
    return kernel, output


def idle(kernel, arg):
    while True:
        yield


def _finish_at_once(kernel, arg):
    return None


def _recording_task(seen):
    def first(k, arg):
        seen.append((k.current, arg))
        while True:
            yield

    return first


def _logging_worker(log):
    def worker(k, name):
        while True:
            log.append(name)
            k.delay(5)
            yield

    return worker


def _priority_background(worker, ids):
    def background(k, arg):
        ids.append(k.create(worker, 1, "a"))
        ids.append(k.create(worker, 0, "b"))
        for task_id in ids:
            k.activate(task_id)
        k.delay(100)
        yield

    return background


def _sharing_background(ids):
    def background(k, arg):
        ids.append(k.create(idle, 1, None))
        ids.append(k.create(idle, 1, None))
        for task_id in ids:
            k.activate(task_id)
        k.delay(1000)
        yield

    return background


def _sleeper(log):
    def sleeper(k, arg):
        log.append("before")
        k.delay(3)
        yield
        log.append("after")
        k.delay(1000)
        yield

    return sleeper


def _spawning_background(task, priority, ids):
    def background(k, arg):
        task_id = k.create(task, priority, None)
        ids.append(task_id)
        k.activate(task_id)
        while True:
            yield

    return background


def _short_task(runs):
    def short(k, arg):
        runs.append(arg)
        yield

    return short


def _reactivating_background(short, ids):
    def background(k, arg):
        task_id = k.create(short, 0, "x")
        ids.append(task_id)
        k.activate(task_id)
        yield
        k.activate(task_id)
        while True:
            yield

    return background


def test_create_encodes_priority_and_slot():
    kernel, _ = make_kernel()
    first = kernel.create(idle, 2, None)
    second = kernel.create(idle, 2, None)
    assert first >> 3 == 2 and second >> 3 == 2
    assert second & 7 == (first & 7) + 1
    tcb = kernel.tcb(first)
    assert tcb.status is TaskState.CREATED
    assert tcb.priority == tcb.base_priority == 2


def test_too_many_tasks_at_one_priority_stops_kernel():
    kernel, output = make_kernel()
    for _ in range(8):
        kernel.create(idle, 3, None)
    with pytest.raises(KernelExit):
        kernel.create(idle, 3, None)
    assert "Plus de tâches disponibles pour la priorité 3" in output.getvalue()


def test_invalid_priority_rejected():
    kernel, _ = make_kernel()
    with pytest.raises(ValueError):
        kernel.create(idle, 8, None)


def test_activate_uncreated_task_stops_kernel():
    kernel, _ = make_kernel()
    with pytest.raises(KernelExit):
        kernel.activate(5)


def test_wake_uncreated_task_stops_kernel():
    kernel, _ = make_kernel()
    with pytest.raises(KernelExit):
        kernel.wake(12)


def test_start_runs_first_task_with_argument():
    kernel, _ = make_kernel()
    seen = []
    kernel.start(_recording_task(seen), "go")
    kernel.run(1)
    assert seen == [(BOOT_TASK, "go")]
    assert kernel.tcb(BOOT_TASK).status is TaskState.RUNNING
    assert kernel.activations[BOOT_TASK] == 2


def test_nothing_left_to_schedule_exits():
    kernel, output = make_kernel()
    kernel.start(_finish_at_once)
    with pytest.raises(KernelExit) as info:
        kernel.run(1)
    text = output.getvalue()
    assert "Plus rien à ordonnancer." in text
    assert "Sortie du noyau" in text
    assert kernel.tcb(BOOT_TASK).status is TaskState.CREATED
    assert info.value.activations[BOOT_TASK] == 1


def test_equal_priority_tasks_share_processor():
    kernel, _ = make_kernel()
    ids = []
    kernel.start(_sharing_background(ids))
    kernel.run(20)
    counts = [kernel.activations[task_id] for task_id in ids]
    assert min(counts) > 0
    assert abs(counts[0] - counts[1]) <= 1


def test_delay_process_wakes_task_when_count_expires():
    kernel, _ = make_kernel()
    task_id = kernel.create(idle, 3, None)
    tcb = kernel.tcb(task_id)
    tcb.status = TaskState.SUSPENDED
    tcb.delay = 2
    kernel.delay_process()
    assert tcb.delay == 1
    assert tcb.status is TaskState.SUSPENDED
    assert kernel.ready.next() is None
    kernel.delay_process()
    assert tcb.status is TaskState.RUNNING
    assert kernel.ready.next() == task_id


def test_delay_zero_keeps_task_running():
    kernel, _ = make_kernel()
    task_id = kernel.create(idle, 4, None)
    kernel.current = task_id
    kernel.tcb(task_id).status = TaskState.RUNNING
    kernel.delay(0)
    assert kernel.tcb(task_id).status is TaskState.RUNNING
    kernel.delay(3)
    assert kernel.tcb(task_id).status is TaskState.SUSPENDED
    assert kernel.tcb(task_id).delay == 3


def test_delayed_task_resumes_after_its_ticks():
    kernel, _ = make_kernel()
    log = []
    ids = []
    kernel.start(_spawning_background(_sleeper(log), 0, ids))
    kernel.run(2)
    assert log == ["before"]
    assert kernel.activations[ids[0]] >= 1
    kernel.run(3)
    assert log == ["before", "after"]
    assert kernel.activations[ids[0]] >= 2
    assert kernel.tcb(ids[0]).status is TaskState.SUSPENDED


def test_wake_resumes_suspended_task():
    kernel, _ = make_kernel()
    task_id = kernel.create(idle, 2, None)
    kernel.current = task_id
    kernel.tcb(task_id).status = TaskState.RUNNING
    kernel.ready.add(task_id)
    kernel.sleep()
    assert kernel.tcb(task_id).status is TaskState.SUSPENDED
    assert kernel.ready.next() is None
    kernel.wake(task_id)
    assert kernel.tcb(task_id).status is TaskState.RUNNING
    assert kernel.ready.next() == task_id


def test_task_switch_marks_ready_task_running_and_counts():
    kernel, _ = make_kernel()
    task_id = kernel.create(idle, 1, None)
    kernel.activate(task_id)
    assert kernel.tcb(task_id).status is TaskState.READY
    assert kernel.task_switch(False) == task_id
    assert kernel.current == task_id
    assert kernel.tcb(task_id).status is TaskState.RUNNING
    assert kernel.activations[task_id] == 1


def test_task_switch_with_empty_queue_exits():
    kernel, output = make_kernel()
    with pytest.raises(KernelExit):
        kernel.task_switch(True)
    assert "Plus rien à ordonnancer." in output.getvalue()


def test_exit_reports_every_task():
    kernel, output = make_kernel()
    with pytest.raises(KernelExit) as info:
        kernel.exit()
    text = output.getvalue()
    assert text.startswith("Sortie du noyau")
    assert "Activations tache 63 : 0" in text
    assert len(info.value.activations) == 64


def test_finished_task_can_be_activated_again():
    kernel, _ = make_kernel()
    runs = []
    ids = []
    kernel.start(_reactivating_background(_short_task(runs), ids))
    kernel.run(6)
    assert runs == ["x", "x"]
    assert kernel.activations[ids[0]] >= 2