"""Encoding of messages into their wire form."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ravenwire.messages import (
    ClientSetupMessage,
    DataStreamType,
    MessageType,
    Parameter,
    ServerSetupMessage,
    StreamHeaderSubgroupMessage,
    SubscribeMessage,
    SubscribeUpdateMessage,
)
from ravenwire.varint import encode_uint, encode_varint


def _binary(data: bytes) -> bytes:
    return encode_varint(len(data)) + data


def _text(text: str) -> bytes:
    return _binary(text.encode("utf-8"))


def _parameters(parameters: Iterable[Parameter]) -> bytes:
    parameters = list(parameters)
    out = bytearray(encode_varint(len(parameters)))
    for parameter in parameters:
        out += encode_varint(int(parameter.parameter_type))
        out += _binary(parameter.value)
    return bytes(out)


def _client_setup(msg: ClientSetupMessage) -> bytes:
    out = bytearray(encode_varint(len(msg.supported_versions)))
    for version in msg.supported_versions:
        out += encode_varint(version)
    out += _parameters(msg.parameters)
    return bytes(out)


def _server_setup(msg: ServerSetupMessage) -> bytes:
    return encode_varint(msg.selected_version) + _parameters(msg.parameters)


def _subscribe(msg: SubscribeMessage) -> bytes:
    out = bytearray()
    out += encode_varint(msg.subscribe_id)
    out += encode_varint(msg.track_alias)
    out += encode_varint(len(msg.track_namespace))
    for namespace in msg.track_namespace:
        out += _text(namespace)
    out += _text(msg.track_name)
    out += encode_uint(msg.subscriber_priority, 1)
    out += encode_uint(msg.group_order, 1)
    out += encode_varint(int(msg.filter_type))
    for pair in (msg.start, msg.end):
        if pair is not None:
            out += encode_varint(pair.group)
            out += encode_varint(pair.object)
    out += _parameters(msg.parameters)
    return bytes(out)


def _subscribe_update(msg: SubscribeUpdateMessage) -> bytes:
    out = bytearray()
    for value in (
        msg.subscribe_id,
        msg.start_group,
        msg.start_object,
        msg.end_group,
        msg.end_object,
    ):
        out += encode_varint(value)
    out += encode_uint(msg.subscriber_priority, 1)
    out += _parameters(msg.parameters)
    return bytes(out)


def _stream_header_subgroup(msg: StreamHeaderSubgroupMessage) -> bytes:
    return (
        encode_varint(msg.track_alias)
        + encode_varint(msg.group_id)
        + encode_varint(msg.subgroup_id)
        + encode_uint(msg.publisher_priority, 1)
    )


_ENCODERS: dict[type, tuple[int, Callable]] = {
    ClientSetupMessage: (MessageType.CLIENT_SETUP, _client_setup),
    ServerSetupMessage: (MessageType.SERVER_SETUP, _server_setup),
    SubscribeMessage: (MessageType.SUBSCRIBE, _subscribe),
    SubscribeUpdateMessage: (MessageType.SUBSCRIBE_UPDATE, _subscribe_update),
    StreamHeaderSubgroupMessage: (DataStreamType.STREAM_HEADER_SUBGROUP, _stream_header_subgroup),
}


def _lookup(message) -> tuple[int, Callable]:
    try:
        return _ENCODERS[type(message)]
    except KeyError:
        raise TypeError(f"cannot encode message of type {type(message).__name__}") from None


def body_length(message) -> int:
    """Return the length of ``message`` without its type and length header."""
    _, encode_body = _lookup(message)
    return len(encode_body(message))


def encode_message(message) -> bytes:
    """Encode one message with its type and length header."""
    type_code, encode_body = _lookup(message)
    body = encode_body(message)
    return encode_varint(int(type_code)) + encode_varint(len(body)) + body


def serialize(*args) -> bytes:
    """Encode the messages one after another into a single buffer."""
    return b"".join(encode_message(message) for message in args)