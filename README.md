# pulsetel

A small in-process telemetry library. You register handlers against event
names, trigger events with measurements and metadata, and time blocks of work
as spans. Handlers run inline or on a bounded worker pool. A `Mailer`
handler records events so that tests can make assertions about them.

## Installation

```
pip install .
```

The package has no dependencies outside the standard library.

## Configuring

```python
from pulsetel.config import (
    new_telemetry_config,
    with_allow_concurrent_execution,
    with_concurrent_pool_size,
    with_concurrent_buffer_size,
)

# Defaults: handlers run inline, pool size 0, buffer size 0.
config = new_telemetry_config()

# Run handlers on 5 worker threads with room for 10 queued jobs.
concurrent = new_telemetry_config(
    with_allow_concurrent_execution(True),
    with_concurrent_pool_size(5),
    with_concurrent_buffer_size(10),
)
```

`new_telemetry_config(*updates)` starts from a `TelemetryConfig` with its
defaults and applies each update in order. `TelemetryConfig` is a plain
dataclass, so it can also be built directly.

## Handlers

A handler is an object with `id()`, `attached_handlers()` and `config()`;
`pulsetel.handler.TelemetryHandler` is a ready base class that takes an id,
an optional config and a list of registrations. Each `EventRegistrar` pairs
an event name with a callable `(event, measurement, metadata, config)`; the
handler's `config()` is passed as the last argument.

```python
from pulsetel.handler import EventRegistrar, TelemetryHandler

def on_created(event, measurement, metadata, config):
    print(event, measurement, metadata)

orders = TelemetryHandler(
    "orders", registrars=[EventRegistrar("app.order.created", on_created)]
)
```

`pulsetel.log_handler.LogHandler(handler_id, config)` logs the
`gopulse.event.test` family of events through the standard `logging` module
(logger `pulsetel.log_handler`): `gopulse.event.test` and
`gopulse.event.test.end` at INFO, `.start` at DEBUG, `.error` at ERROR and
`.panic` at CRITICAL. `handle_event(level)` builds such a logging callback for
your own handlers; an unknown level name logs at INFO.

## Triggering events and spans

```python
from pulsetel.config import new_telemetry_config
from pulsetel.provider import Telemetry
from pulsetel.log_handler import LogHandler

telemetry = Telemetry(new_telemetry_config())
telemetry.add_handlers(LogHandler("log", None))

telemetry.trigger_event("gopulse.event.test", {"count": 1}, {"result": "ok"})

def work():
    # returns: result, error, measurement, metadata
    return 42, None, {}, {"result": "ok"}

result = telemetry.trigger_span("gopulse.event.test", {}, work)  # 42
```

- Handlers are keyed by their id: adding a handler whose id is already
  registered replaces the earlier one. `remove_handlers` unregisters by id and
  ignores ids it does not know.
- `trigger_event` calls every handler function registered for that event
  name. An exception raised inside a handler function is logged and does not
  reach the caller.
- `trigger_span` emits `<event>.start` with a `start_time` measurement and the
  given metadata, runs the function, then emits `<event>.end` with the
  function's measurement extended by `duration` and `end_time` (milliseconds)
  and the function's metadata. It returns the function's result; if the
  function returned an error, that error is raised after the end event.
- If the span function raises, `<event>.panic` is emitted with metadata
  `error`, `errorTime` and `stackTrace`, and the exception propagates.

With concurrent execution enabled, handler calls run on a
`pulsetel.pool.Pool`. Submitting never blocks: when the pool has no room the
call for that handler is dropped. Call `telemetry.close()` (or use the
provider as a context manager) to stop the workers; jobs still queued at that
point are dropped, running ones are waited for.

`Pool(workers, buffer_size)` can also be used on its own: `start_workers()`,
`submit(job)` which returns whether the job was accepted, and `stop()`. Used
as a context manager it starts on entry and stops on exit. Exceptions raised
by jobs are swallowed so a worker keeps running.

## Testing with the mailbox

```python
from pulsetel.mailbox import Mailer

mailer = Mailer("test").build_handlers("app.order.created")
telemetry.add_handlers(mailer)

telemetry.trigger_event("app.order.created", {"total": 10}, {"status": "ok"})

assert mailer.assert_received(
    "app.order.created",
    lambda event, box: any(mail.metadata["status"] == "ok" for mail in box),
)

# Wait up to 1000 ms for a matching event:
assert mailer.assert_receive("app.order.created", 1000, lambda event, box: bool(box))
```

The check is called with the event name and a list of `MailData` entries
(each with `measurement` and `metadata`). An event that never arrived fails
the check without calling it. `refute_receive` and `refute_received` return
the negations of the two checks.

## What it does not do

pulsetel only dispatches events inside the running process. It does not
store events, export them to a collector or over the network, aggregate
metrics, or provide a command-line tool; anything of that kind is up to the
handlers you register.

## Running the tests

```
pip install ".[test]"
pytest
```