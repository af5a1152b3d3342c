[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "weirkit"
version = "0.1.0"
description = "Thread-safe building blocks: atomics, semaphores, timers, a time wheel, a resource pool, rate limiters and a circuit breaker"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "resource-pool",
    "rate-limiter",
    "circuit-breaker",
    "sliding-window",
    "time-wheel",
    "semaphore",
    "timer",
    "atomic",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["weirkit"]

[tool.pytest.ini_options]
addopts = "-ra"
