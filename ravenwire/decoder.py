"""Decoding of messages from their wire form."""

from __future__ import annotations

from collections.abc import Callable

from ravenwire.messages import (
    ClientSetupMessage,
    ControlMessageHeader,
    FilterType,
    GroupObjectPair,
    MessageType,
    Parameter,
    ServerSetupMessage,
    SubscribeMessage,
    SubscribeUpdateMessage,
)
from ravenwire.span import NonContiguousSpan
from ravenwire.varint import decode_uint, decode_varint

_VERSION_MASK = 0xFFFFFFFF


def _as_span(data):
    if isinstance(data, (bytes, bytearray, memoryview)):
        if len(data) == 0:
            raise ValueError("not enough bytes to decode")
        return NonContiguousSpan([bytearray(data)])
    return data


def _read_bytes(span, count: int) -> bytes:
    if count == 0:
        return b""
    if len(span) < count:
        raise ValueError("not enough bytes to decode")
    data = span.copy_to(count)
    span.advance(count)
    return data


def _read_binary(span) -> tuple[bytes, int]:
    length, consumed = decode_varint(span)
    return _read_bytes(span, length), consumed + length


def _read_text(span) -> tuple[str, int]:
    data, consumed = _read_binary(span)
    return data.decode("utf-8"), consumed


def _read_pair(span) -> tuple[GroupObjectPair, int]:
    group, used_group = decode_varint(span)
    obj, used_object = decode_varint(span)
    return GroupObjectPair(group, obj), used_group + used_object


def decode_parameters(span) -> tuple[list[Parameter], int]:
    """Read a counted list of parameters; return it and the bytes consumed."""
    span = _as_span(span)
    count, consumed = decode_varint(span)
    parameters = []
    for _ in range(count):
        parameter_type, used = decode_varint(span)
        consumed += used
        value, used = _read_binary(span)
        consumed += used
        parameters.append(Parameter(parameter_type, value))
    return parameters, consumed


def decode_header(span) -> tuple[ControlMessageHeader, int]:
    """Read the type and body length of a control message."""
    span = _as_span(span)
    message_type, used_type = decode_varint(span)
    length, used_length = decode_varint(span)
    return ControlMessageHeader(MessageType(message_type), length), used_type + used_length


def decode_client_setup(span) -> tuple[ClientSetupMessage, int]:
    """Read the body of a client setup message."""
    span = _as_span(span)
    count, consumed = decode_varint(span)
    versions = []
    for _ in range(count):
        version, used = decode_varint(span)
        consumed += used
        # Versions are 32-bit values on the wire.
        versions.append(version & _VERSION_MASK)
    parameters, used = decode_parameters(span)
    consumed += used
    return ClientSetupMessage(versions, parameters), consumed


def decode_server_setup(span) -> tuple[ServerSetupMessage, int]:
    """Read the body of a server setup message."""
    span = _as_span(span)
    selected_version, consumed = decode_varint(span)
    parameters, used = decode_parameters(span)
    return ServerSetupMessage(selected_version, parameters), consumed + used


def decode_subscribe(span) -> tuple[SubscribeMessage, int]:
    """Read the body of a subscribe message."""
    span = _as_span(span)
    consumed = 0

    subscribe_id, used = decode_varint(span)
    consumed += used
    track_alias, used = decode_varint(span)
    consumed += used

    namespace_count, used = decode_varint(span)
    consumed += used
    namespace = []
    for _ in range(namespace_count):
        part, used = _read_text(span)
        consumed += used
        namespace.append(part)

    track_name, used = _read_text(span)
    consumed += used

    subscriber_priority = decode_uint(span, 1)
    group_order = decode_uint(span, 1)
    consumed += 2

    filter_code, used = decode_varint(span)
    consumed += used
    filter_type = FilterType(filter_code)

    start = end = None
    if filter_type in (FilterType.ABSOLUTE_START, FilterType.ABSOLUTE_RANGE):
        start, used = _read_pair(span)
        consumed += used
    if filter_type is FilterType.ABSOLUTE_RANGE:
        end, used = _read_pair(span)
        consumed += used

    parameters, used = decode_parameters(span)
    consumed += used

    message = SubscribeMessage(
        subscribe_id=subscribe_id,
        track_alias=track_alias,
        track_namespace=namespace,
        track_name=track_name,
        subscriber_priority=subscriber_priority,
        group_order=group_order,
        filter_type=filter_type,
        start=start,
        end=end,
        parameters=parameters,
    )
    return message, consumed


def decode_subscribe_update(span) -> tuple[SubscribeUpdateMessage, int]:
    """Read the body of a subscribe update message."""
    span = _as_span(span)
    consumed = 0
    values = []
    for _ in range(5):
        value, used = decode_varint(span)
        consumed += used
        values.append(value)
    subscriber_priority = decode_uint(span, 1)
    consumed += 1
    parameters, used = decode_parameters(span)
    consumed += used
    subscribe_id, start_group, start_object, end_group, end_object = values
    message = SubscribeUpdateMessage(
        subscribe_id=subscribe_id,
        start_group=start_group,
        start_object=start_object,
        end_group=end_group,
        end_object=end_object,
        subscriber_priority=subscriber_priority,
        parameters=parameters,
    )
    return message, consumed


_DECODERS: dict[MessageType, Callable] = {
    MessageType.CLIENT_SETUP: decode_client_setup,
    MessageType.SERVER_SETUP: decode_server_setup,
    MessageType.SUBSCRIBE: decode_subscribe,
    MessageType.SUBSCRIBE_UPDATE: decode_subscribe_update,
}


def decode_body(message_type, span):
    """Read the body of a message of ``message_type``; return it and the bytes consumed."""
    try:
        decoder = _DECODERS[MessageType(message_type)]
    except (ValueError, KeyError):
        raise ValueError(f"unsupported message type: {message_type}") from None
    return decoder(span)