# ravenwire

`ravenwire` reads and writes the wire format of Media over QUIC Transport
(MoQT) control messages. It has no runtime dependencies.

## What it contains

- `ravenwire.varint` – QUIC variable-length integers and fixed-width
  unsigned integers:
  - `varint_size(value)` – number of bytes (1, 2, 4 or 8) the encoding takes.
  - `encode_varint(value)` – shortest encoding, as `bytes`.
  - `decode_varint(span)` – returns `(value, bytes_consumed)`.
  - `encode_uint(value, width, byteorder="big")` and
    `decode_uint(span, width, byteorder="big")` for widths 1, 2, 4 and 8 and
    byte order `"big"` or `"little"`.

  The decoders accept either a `NonContiguousSpan`, which they advance past
  the bytes they read, or a plain `bytes`/`bytearray`.
- `ravenwire.span.NonContiguousSpan(buffers, begin=0, end=None)` – a view
  over a list of buffers, indexed as one run of bytes without copying them
  together. It supports `len()`, indexing and slicing, iteration,
  `bytes()`, item assignment (for mutable buffers), `at(index)`,
  `advance(count)`, `copy_into(data, at=0)` and `copy_to(count, start=0)`.
- `ravenwire.messages` – dataclasses `ClientSetupMessage`,
  `ServerSetupMessage`, `SubscribeMessage`, `SubscribeUpdateMessage`,
  `StreamHeaderSubgroupMessage`, `ControlMessageHeader`, `Parameter` and
  `GroupObjectPair`, and the enums `MessageType`, `DataStreamType` and
  `FilterType`.
- `ravenwire.encoder` – `encode_message(message)` (type, length and body),
  `body_length(message)` and `serialize(*messages)`, which joins several
  encoded messages into one `bytes`.
- `ravenwire.decoder` – `decode_header(span)`, `decode_body(message_type, span)`,
  `decode_parameters(span)` and one decoder per control message:
  `decode_client_setup`, `decode_server_setup`, `decode_subscribe` and
  `decode_subscribe_update`. Each returns `(result, bytes_consumed)`.
- `ravenwire.deserializer.Deserializer(handler)` – collects buffers as they
  arrive and passes each complete message to `handler`, in order. Messages
  may be split across buffers at any byte. It also offers `len()` (unread
  bytes) and `at(index)`.

## Usage

Encode a message and decode it again:

```python
from ravenwire.messages import ClientSetupMessage
from ravenwire.encoder import encode_message
from ravenwire.decoder import decode_header, decode_body
from ravenwire.span import NonContiguousSpan

wire = encode_message(ClientSetupMessage(supported_versions=[1, 2]))

span = NonContiguousSpan([bytearray(wire)])
header, _ = decode_header(span)
message, _ = decode_body(header.message_type, span)
assert message == ClientSetupMessage(supported_versions=[1, 2])
```

Reassemble messages from fragments of a stream:

```python
from ravenwire.deserializer import Deserializer

received = []
deserializer = Deserializer(received.append)
for fragment in (wire[:3], wire[3:]):
    deserializer.append_buffer(fragment)
assert received == [ClientSetupMessage(supported_versions=[1, 2])]
```

Work with variable-length integers directly:

```python
from ravenwire.varint import encode_varint, decode_varint, varint_size

assert varint_size(15293) == 2
data = encode_varint(15293)
assert decode_varint(data) == (15293, 2)
```

## Errors

- Truncated input, values out of range and unknown message or filter type
  codes raise `ValueError`.
- Out-of-range indexes into a `NonContiguousSpan` or a `Deserializer` raise
  `IndexError`.
- Passing an object that is not one of the message classes to the encoder
  raises `TypeError`.

## What it does not do

- It does not open QUIC connections or streams and has no client or server;
  it only converts messages to and from bytes.
- `StreamHeaderSubgroupMessage` can be encoded but not decoded.
- `Deserializer` handles client setup, server setup and subscribe messages;
  any other message type raises `ValueError`, including subscribe update,
  which can still be decoded directly with `decode_subscribe_update`.

## Running the tests

```
pip install -e ".[test]"
pytest
```