# tpcero

A minimal TCP client and server pair that talk over a simple binary protocol.

## Wire format

Every frame is laid out as:

| field          | size                                 |
|----------------|--------------------------------------|
| operation code | 4 bytes, little-endian signed int    |
| payload size   | 4 bytes, little-endian signed int    |
| payload        | `size` bytes                         |

There are two operations, given by `tpcero.protocol.OpCode`:

- `OpCode.MESSAGE` (0): the payload is one NUL-terminated UTF-8 string.
- `OpCode.PACKAGE` (1): the payload is a sequence of values. Each value is a
  4-byte little-endian length followed by that many bytes.

## Installation

```
pip install .
```

## Running the server

```
tpcero-server [--port PORT] [--log FILE]
```

The server listens on all IPv4 addresses on port 4444 (or `--port`) and accepts
a single client. It logs every message it receives and every value inside every
package, at DEBUG level and above, to the console and to `log.log` (or `--log`).
An unknown operation code is logged as a warning. When the client disconnects,
the server logs an error and exits with status 1.

## Running the client

Put a `cliente.config` file in the working directory. It holds `KEY=VALUE`
lines; blank lines and lines starting with `#` are ignored:

```
CLAVE=hello
IP=127.0.0.1
PUERTO=4444
```

Then start the client:

```
tpcero-client [--config FILE] [--log FILE]
```

The client logs the configured values, at INFO level and above, to the console
and to `tp0.log` (or `--log`). It reads one line from the console after a `>`
prompt and logs it. It then connects to the server, sends the value of `CLAVE`
as a message, asks for one more line and sends that line inside a package.

The client exits with status 1 if the configuration file cannot be read, if any
of `CLAVE`, `IP` or `PUERTO` is missing, or if the server cannot be reached.

## Using it as a library

```python
from tpcero.protocol import OpCode, Packet, encode_message, decode_values

frame = encode_message("hello")          # a MESSAGE frame

packet = Packet()                        # OpCode.PACKAGE by default
packet.add("first")                      # str values are sent NUL-terminated
packet.add(b"second\0")                  # bytes are sent unchanged
data = packet.serialize()

# The values of a package payload, once the 8-byte header is removed.
values = decode_values(data[8:])         # ["first", "second"]
```

`decode_values` raises `ValueError` on a truncated payload or a negative length.
`recv_exact(sock, size)` reads exactly `size` bytes from a socket and raises
`ConnectionError` if the peer closes first.

`tpcero.client` provides `start_logger`, `load_config` (raises `ConfigError`),
`read_console`, `create_connection` (raises `ConnectionError`), `send_message`,
`build_packet` and `send_packet`.

`tpcero.server` provides `start_server`, `wait_client`, `receive_operation`,
`receive_buffer`, `receive_message`, `receive_packet` and `serve_client`. The
receiving functions raise `ClientDisconnected` when the client closes the
connection; `serve_client` handles frames until then and returns the list of
`(OpCode, value)` pairs it received.

## Limitations

- The server serves one client and then exits; it does not accept further
  connections.
- When an unknown operation code arrives, the server logs a warning but does not
  skip that frame's payload, so the frames after it are read out of step.

## Tests

```
pip install .[test]
pytest
```