"""A simulated preemptive, priority-based real-time kernel with semaphores, mutexes and a terminal chronogram."""

__version__ = "0.1.0"