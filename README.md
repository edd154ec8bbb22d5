# noyau

`noyau` is a small real-time kernel that runs as a simulation in Python.
It has a scheduler with fixed priorities, tick-based delays, counting
semaphores and recursive mutexes with priority inheritance. It writes
its output to a serial-style console (newlines go out as CR LF). On
every task switch it draws a column of a chronogram showing which task
held the processor, using ANSI terminal escapes.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `noyau.serialio`: `sformat(fmt, *args)`, a small `printf` dialect
  (`%s`, `%d`, `%u`, `%x`, `%X`, `%c`, `%%`, with `-`, `0` and a
  width; integers wrap to 32 bits), and `SerialConsole(output, input)`
  with `write_char`, `write_line`, `printf` and `read_char`. The
  console uses `sys.stdout` / `sys.stdin` by default. `read_char`
  raises `EOFError` when there is no more input.
- `noyau.terminal`: functions that return ANSI escape strings:
  `font_color`, `background_color`, `font_color_rgb`,
  `background_color_rgb`, `cursor_up`, `cursor_down`, `cursor_right`,
  `cursor_left`, `cursor_column`, `cursor_position`, `clear_screen`,
  `clear_line`. There is also `color_demo()`, which returns a palette
  demonstration.
- `noyau.fifo`: `Fifo(capacity=8)`, a bounded queue with `push`, `pop`
  and `len()`. It raises `FifoFullError` / `FifoEmptyError`.
- `noyau.ready_queue`: `ReadyQueue`, which has one round-robin ring per
  priority level. It has `add`, `remove`, `next` (returns `None` when
  nothing is ready), `swap_ids` and `dump`.
- `noyau.chronogram`: `Chronogram.draw_tick(task_id, sep)` returns the
  escapes that draw one column. The drawing has one line per priority
  and wraps after 120 columns.
- `noyau.kernel`: `Kernel`, `TaskControlBlock`, `TaskState` and
  `KernelExit`.
- `noyau.sem`: `SemaphoreTable(kernel)` holds 16 semaphores, with
  `create`, `close`, `wait` and `signal`. Waiters are woken in the order
  they arrived.
- `noyau.mutex`: `MutexTable(kernel)` holds 8 recursive mutexes, with
  `create`, `acquire`, `release` and `destroy`. `create` raises
  `MutexTableFullError` when all 8 are in use.
- `noyau.demo`: `build_priority_demo`, `build_mutex_demo` and the
  `main` command.

## Tasks and identifiers

A task identifier holds the priority and a slot number together:
`priority << 3 | slot`. There are 8 priority levels and 8 slots per
level, so there are at most 64 tasks. Priority 0 is the most urgent.
`Kernel.create(task, priority, arg)` gives out slots in order within
each priority. `Kernel.start(task, arg)` resets the task table and
activates `task` at priority 7.

A task is a callable `task(kernel, arg)`:

- If it returns an iterable (usually it is a generator function), each
  item it yields is one step of work. The kernel may switch to another
  task between two steps.
- If it returns `None`, the whole task runs in a single step.
- When the task ends, it goes back to the created state and leaves the
  ready queue.

Services a task calls request a task switch; the switch happens when
the task next yields. These services are `activate`, `sleep`, `wake`,
`delay`, and a semaphore wait or a blocking mutex acquire.

`Kernel.run(ticks)` simulates `ticks` timer periods. In each period:

1. The current task runs one step.
2. Any switches it requested are served at once.
3. The timer tick then counts down delays and elects the next task.

`Kernel.exit()` prints the activation count of every task to the
console, then raises `KernelExit`. The counts are in its `activations`
attribute. The kernel also stops this way when:

- no task is ready;
- a priority has no free slot left;
- a semaphore or mutex is misused.

```python
import io

from noyau.kernel import Kernel
from noyau.serialio import SerialConsole

kernel = Kernel(SerialConsole(io.StringIO()))

def worker(k, period):
    while True:
        yield
        k.delay(period)
        yield

def boot(k, arg):
    k.activate(k.create(worker, 0, 3))
    while True:
        yield

kernel.start(boot)
kernel.run(50)
print(kernel.activations[0], kernel.activations[56])
```

## Quick examples

```python
from noyau.serialio import sformat

sformat("%05d", 42)      # '00042'
sformat("[%-4s]", "ab")  # '[ab  ]'
sformat("%x", 255)       # 'ff'
```

```python
from noyau.fifo import Fifo, FifoFullError

f = Fifo(2)
f.push(1)
f.push(2)
try:
    f.push(3)
except FifoFullError:
    pass
f.pop()   # 1
len(f)    # 1
```

```python
from noyau.ready_queue import ReadyQueue

q = ReadyQueue()
q.add(9)    # priority 1, slot 1
q.add(10)   # priority 1, slot 2
q.next()    # 9
q.next()    # 10
```

```python
from noyau import terminal

terminal.cursor_position(3, 1)   # '\x1b[3;1H'
terminal.font_color(15)          # '\x1b[38;5;15m'
```

## Demo command

```
noyau-demo [prio|mutex] [--ticks N] [--keys TEXT]
```

The command clears the screen and runs one of two workloads for `N`
timer ticks (default 1000). The chronogram is drawn on standard output.

- `prio` (the default) starts periodic tasks at every priority level.
  The background task waits for a key.
- `mutex` starts three tasks that contend for one mutex. Two of them
  take the mutex, at priorities 2 and 6, and one other task runs at
  priority 4. When a key arrives, the background task stops the kernel,
  and the activation counts are printed.

Keys are not read from the keyboard. They are the characters given
with `--keys`.

## What it does not do

- It does not drive any hardware and does not run in real time. Timer
  ticks are simulated steps.
- Preemption happens only between the steps a task yields. Code between
  two yields is never interrupted.
- Tasks do not have their own stacks or CPU context. A task's state is
  its generator.