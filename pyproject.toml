[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "noyau"
version = "0.1.0"
description = "A simulated preemptive, priority-based real-time kernel with semaphores, priority-inheritance mutexes and a terminal chronogram"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "rtos",
    "kernel",
    "scheduler",
    "real-time",
    "semaphore",
    "mutex",
    "priority-inheritance",
    "simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System Kernels",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
noyau-demo = "noyau.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["noyau"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
