# weirkit

Small, thread-safe building blocks for services that talk to backends:
atomic values, a counting semaphore, a double-buffered toggle, a periodic
timer, a jittered ticker, a time wheel, a resource pool, sliding-window
statistics, two rate limiters and a circuit breaker. It uses only the
standard library.

All durations given to the API are in seconds (as floats), except where a
name ends in `_ms`.

## Install

```
pip install weirkit
```

To run the tests:

```
pip install "weirkit[test]"
pytest
```

## Modules

| Module | What it provides |
| --- | --- |
| `weirkit.atomic` | `AtomicInt`, `AtomicDuration`, `AtomicBool`, `AtomicString` (a `value` property plus `compare_and_swap`; the numeric ones also `add`), and `BoolIndex` |
| `weirkit.semaphore` | `Semaphore`: counting semaphore with `acquire`, `try_acquire`, `release`, a `size` property and use as a context manager; a timeout of zero waits forever |
| `weirkit.toggle` | `Toggle`: stage a value with `swap_other`, make it `current` with `toggle`; toggling with nothing staged raises `ToggleNotPreparedError` |
| `weirkit.datastructure` | `string_slice_to_set` |
| `weirkit.errors` | `MyError` (a MySQL server error with `code`, `message`, `state`), `cause`, `is_error`, `check_and_get_my_error`, which follow the `__cause__` chain |
| `weirkit.rand` | `LockedRandom`: a `random.Random` behind a lock, with `int63`, `uint32`, `uint64`, `int31`, `int`, `int63n`, `int31n`, `intn`, `float64`, `float32` |
| `weirkit.astutil` | `with_table_name`, `table_name_from_context` (a table name carried in a plain dict), `uint32_to_bytes`, `bytes_to_uint32` (little-endian) |
| `weirkit.timer` | `Timer`: calls a function every `interval` seconds on a background thread; `set_interval`, `trigger`, `trigger_after`, `stop`, `running` |
| `weirkit.randticker` | `RandTicker`: ticks every interval plus or minus a random variance; `receive`, iteration, `stop` |
| `weirkit.time_wheel` | `TimeWheel`: delayed callbacks keyed by item; adding a key again replaces it, `remove` cancels it |
| `weirkit.pool` | `ResourcePool`, `PoolClosedError`, `PoolTimeoutError`, `PoolContextExpiredError` |
| `weirkit.sliding_window` | `SlidingWindow`, `Cell`, `now_ms` |
| `weirkit.circuit_breaker` | `CircuitBreaker`, `CircuitBreakerConfig`, `CircuitBreakerStatus`, `CircuitBreakError` |
| `weirkit.rate_limit` | `SlidingWindowRateLimiter`, `LeakyBucketRateLimiter`, `RateLimitedError` |

## Examples

### Resource pool

```python
from weirkit.pool import ResourcePool, PoolTimeoutError

# factory, capacity, max capacity, idle timeout (s), prefill parallelism, wait logger
pool = ResourcePool(open_connection, 5, 10, 60.0, 0, None)
conn = pool.get(1.0)      # waits at most a second, then raises PoolTimeoutError
try:
    conn.query("select 1")
finally:
    pool.put(conn)        # put(None) to have a broken resource replaced

pool.set_capacity(8)
print(pool.stats_json())
pool.close()
```

The factory takes no arguments and returns an object with a `close()`
method. With a non-zero idle timeout, resources left unused for longer are
closed and reopened. `get(None)` waits indefinitely; a timeout of zero or
less raises `PoolContextExpiredError` at once. Using a closed pool raises
`PoolClosedError`. The pool is also a context manager that closes on exit.

### Rate limiting

```python
from weirkit.rate_limit import SlidingWindowRateLimiter, RateLimitedError

limiter = SlidingWindowRateLimiter(100)   # 100 requests per second
try:
    limiter.limit()
except RateLimitedError:
    reject_request()
```

`LeakyBucketRateLimiter` instead blocks in `limit()` until its turn comes,
so requests go out evenly spaced. Both limiters accept
`change_qps_threshold`. Close a leaky bucket with `close()` (or use it in a
`with` block); requests still queued then raise `RuntimeError`.

### Circuit breaker

```python
from weirkit.circuit_breaker import CircuitBreaker, CircuitBreakerConfig

config = CircuitBreakerConfig(
    min_qps=10,
    failure_rate_threshold=10,        # percent
    open_status_duration_ms=10_000,
    size=10,
    cell_interval_ms=1000,
)
breaker = CircuitBreaker(config)
result = breaker.do(call_backend, lambda err: use_cached_value())
```

`do` returns what `run` returns. If `run` raises, or the breaker refuses the
call, the fallback is called with the exception and its result is returned;
without a fallback the exception is raised. When failures in the window
pass the threshold the breaker opens and refuses calls with a
`CircuitBreakError`. Once the open period is over, a single probe call
decides whether it closes again. Setting `failure_num` makes the breaker
open on the failure count of the current cell instead of the rate;
`force_open=True` keeps it open until `change_config` clears it.

### Time wheel

```python
from weirkit.time_wheel import TimeWheel

wheel = TimeWheel(1.0, 3600)                   # tick of one second, 3600 buckets
wheel.start()
wheel.add(30.0, session_id, expire_session)   # adding the key again resets its delay
wheel.remove(session_id)
wheel.stop()
```

Callbacks run on their own threads.

## What it does not do

This is a library only: it has no command, no server and no proxy of its
own. `weirkit.errors.MyError` is a plain exception class; nothing in the
package speaks the MySQL protocol. `weirkit.astutil` does not parse SQL; it
only carries a table name in a dict and packs 32-bit integers.