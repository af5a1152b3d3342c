"""Thread-safe atomics, semaphores, timers, a time wheel, a resource pool, rate limiters and a circuit breaker."""

__version__ = "0.1.0"