# ocworker

Building blocks for a compute worker that takes jobs over a websocket and
runs numeric kernels on them.

## Installation

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## What is inside

- `ocworker.channels`: a fixed pool of ten thread-safe FIFO channels,
  numbered by slot id. `ChannelPool` has `send`, `recv` (blocking) and
  `try_recv` (non-blocking); the receive calls take the expected type and
  return `None` when the message is of another type (or, for `try_recv`, when
  the channel is empty). The module-level `send_msg`, `recv_msg` and
  `try_recv_msg` work on a shared pool. An index outside the pool raises
  `IndexError`. `ThreadManager` starts each given callable on its own thread;
  `join` waits for all of them and re-raises the first exception a task
  raised.
- `ocworker.task_channels`: the same pool for asyncio tasks.
  `AsyncChannelPool.recv` is awaited, `AsyncChannelPool.try_recv` returns
  `None` when nothing is queued. The module-level `send_msg`, `recv_msg` and
  `try_recv_msg` use a shared pool and filter by expected type. `spawn_task`
  schedules an awaitable on the running loop and keeps a reference to it
  until it finishes; `spawn_all` does the same for plain callables.
- `ocworker.ws_client`: a routed websocket client. Each frame is the byte
  length of a JSON header as at least four lowercase hex digits, the JSON
  header, then an optional big payload. `encode_frame` builds outgoing frames
  (header keys `t`, `r`, `p`); `decode_frame` parses incoming ones (header
  keys `c`, `p`, `r`) into a `Frame` and raises `FrameError` on malformed
  input. `WsClient.route` and `WsClient.route_big_payload` register async
  handlers by route name; `WsClient.dispatch` runs the matching handler for a
  raw frame, choosing the big-payload handler when a big payload is present.
  `WsClient.start` connects in the background and reconnects three seconds
  after every close or failure. `WsClient.send` and
  `WsClient.send_big_payload` queue outgoing frames; frames sent while no
  connection is open are dropped.
- `ocworker.compute`: `ComputeManager` with `add_u32` (wrap-around unsigned
  32-bit addition), `add` (element-wise sum of equally long vectors),
  `matrix_multiply` and `vec_matrix_multiply`, all in single precision and
  raising `ValueError` on mismatched sizes. `init_compute` creates the shared
  manager, `get_compute` returns it (raising `RuntimeError` if it was never
  created), and the module-level `matrix_multiply` and `vec_matrix_multiply`
  run through it.

## Examples

    from ocworker.compute import init_compute, matrix_multiply

    init_compute()
    print(matrix_multiply([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]],
                          [[7.0, 8.0], [9.0, 10.0], [11.0, 12.0]]))
    # [[58.0, 64.0], [139.0, 154.0]]

A client that answers one route:

    import asyncio
    from ocworker.ws_client import WsClient

    async def on_hello(code, payload):
        print("hello", code, payload)

    async def main():
        client = WsClient("token", "ws://localhost:1234/")
        client.route("worker/hello", on_hello)
        client.start()
        await client.send("worker/hello", "")
        await asyncio.Event().wait()

    asyncio.run(main())

## What it does not do

The package has no command and no ready-made worker process: it does not log
in to a server, send heartbeats, or handle job routes by itself. You wire the
client, channels and kernels together in your own program. It does not run
user-supplied scripts, and the compute kernels run on the CPU through NumPy,
not on a graphics device.