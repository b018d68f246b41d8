import pytest
from hypothesis import given
from hypothesis import strategies as st

from ravenwire.decoder import (
    decode_body,
    decode_client_setup,
    decode_header,
    decode_parameters,
    decode_server_setup,
    decode_subscribe,
    decode_subscribe_update,
)
from ravenwire.encoder import serialize
from ravenwire.messages import (
    ClientSetupMessage,
    FilterType,
    GroupObjectPair,
    MessageType,
    Parameter,
    ServerSetupMessage,
    SubscribeMessage,
    SubscribeUpdateMessage,
)
from ravenwire.span import NonContiguousSpan


def binary_string_to_bytes(text):
    bits = [c for c in text if c in "01"]
    assert len(bits) % 8 == 0
    return bytes(int("".join(bits[i:i + 8]), 2) for i in range(0, len(bits), 8))


def chunked_span(data):
    chunks = []
    position = 0
    while position < len(data):
        size = min((position % 3) + 1, len(data) - position)
        chunks.append(bytearray(data[position:position + size]))
        position += size
    return NonContiguousSpan(chunks)


def client_setup_message():
    return ClientSetupMessage(supported_versions=[0x12345678, 0x87654321])


def subscribe_message():
    return SubscribeMessage(
        subscribe_id=0x12345678,
        track_alias=0x87654321,
        track_namespace=["namespace1", "namespace2"],
        track_name="trackName",
        subscriber_priority=0x12,
        group_order=0x34,
        filter_type=FilterType.ABSOLUTE_RANGE,
        start=GroupObjectPair(0x5678, 0x1234),
        end=GroupObjectPair(0x5678, 0x1234),
        parameters=[Parameter()],
    )


def subscribe_update_message():
    return SubscribeUpdateMessage(
        subscribe_id=123456789,
        start_group=987654321,
        start_object=111111111,
        end_group=222222222,
        end_object=333333333,
        subscriber_priority=255,
        parameters=[Parameter(0, b"hello")],
    )


def test_client_setup_wire_and_round_trip():
    msg = client_setup_message()
    data = serialize(msg)
    expected = binary_string_to_bytes(
        "[01000000 01000000] [00001110] [00000010] [10010010 00110100 01010110 01111000] "
        "[11000000 00000000 00000000 00000000 10000111 01100101 01000011 00100001] [00000000]"
    )
    assert data == expected

    span = NonContiguousSpan([bytearray(data)])
    header, used = decode_header(span)
    assert header.message_type == MessageType.CLIENT_SETUP
    assert header.length == 14
    assert used == 3
    decoded, consumed = decode_client_setup(span)
    assert decoded == msg
    assert consumed == 14
    assert len(span) == 0


def test_server_setup_wire_and_round_trip():
    msg = ServerSetupMessage(selected_version=0x12345678)
    data = serialize(msg)
    expected = binary_string_to_bytes(
        "[01000000 01000001][00000101][10010010 00110100 01010110 01111000][00000000]"
    )
    assert data == expected

    span = NonContiguousSpan([bytearray(data)])
    header, _ = decode_header(span)
    assert header.message_type == MessageType.SERVER_SETUP
    assert header.length == 5
    decoded, consumed = decode_server_setup(span)
    assert decoded == msg
    assert consumed == 5


def test_subscribe_wire_and_round_trip():
    msg = subscribe_message()
    data = serialize(msg)
    expected = binary_string_to_bytes(
        "00000011 00111111 10010010 00110100 01010110 01111000 11000000 00000000 00000000 "
        "00000000 10000111 01100101 01000011 00100001 00000010 00001010 01101110 01100001 "
        "01101101 01100101 01110011 01110000 01100001 01100011 01100101 00110001 00001010 "
        "01101110 01100001 01101101 01100101 01110011 01110000 01100001 01100011 01100101 "
        "00110010 00001001 01110100 01110010 01100001 01100011 01101011 01001110 01100001 "
        "01101101 01100101 00010010 00110100 00000100 10000000 00000000 01010110 01111000 "
        "01010010 00110100 10000000 00000000 01010110 01111000 01010010 00110100 00000001 "
        "00000000 00000000"
    )
    assert data == expected

    span = NonContiguousSpan([bytearray(data)])
    header, _ = decode_header(span)
    assert header.message_type == MessageType.SUBSCRIBE
    assert header.length == 63
    decoded, consumed = decode_subscribe(span)
    assert decoded == msg
    assert consumed == 63


def test_subscribe_update_wire_and_round_trip():
    msg = subscribe_update_message()
    data = serialize(msg)
    expected = binary_string_to_bytes(
        "[ 00000010 ][ 00011101 ][ 10000111 ][ 01011011 ][ 11001101 ][ 00010101 ][ 10111010 ]"
        "[ 11011110 ][ 01101000 ][ 10110001 ][ 10000110 ][ 10011111 ][ 01101011 ][ 11000111 ]"
        "[ 10001101 ][ 00111110 ][ 11010111 ][ 10001110 ][ 10010011 ][ 11011110 ][ 01000011 ]"
        "[ 01010101 ][ 11111111 ][ 00000001 ][ 00000000 ][ 00000101 ][ 01101000 ][ 01100101 ]"
        "[ 01101100 ][ 01101100 ][ 01101111 ]"
    )
    assert data == expected

    span = NonContiguousSpan([bytearray(data)])
    header, _ = decode_header(span)
    assert header.message_type == MessageType.SUBSCRIBE_UPDATE
    assert header.length == 29
    decoded, consumed = decode_subscribe_update(span)
    assert decoded == msg
    assert consumed == 29


@pytest.mark.parametrize(
    "msg",
    [
        client_setup_message(),
        ServerSetupMessage(selected_version=1, parameters=[Parameter(2, b"path")]),
        subscribe_message(),
        subscribe_update_message(),
    ],
)
def test_decode_body_across_split_buffers(msg):
    span = chunked_span(serialize(msg))
    header, _ = decode_header(span)
    decoded, consumed = decode_body(header.message_type, span)
    assert decoded == msg
    assert consumed == header.length
    assert len(span) == 0


def test_decode_several_messages_in_sequence():
    first = ClientSetupMessage(supported_versions=[1, 2, 3])
    second = ServerSetupMessage(selected_version=1)
    span = chunked_span(serialize(first, second))
    results = []
    for _ in range(2):
        header, _ = decode_header(span)
        results.append(decode_body(header.message_type, span)[0])
    assert results == [first, second]


def test_decode_parameters_from_bytes():
    parameters, consumed = decode_parameters(b"\x01\x00\x05hello")
    assert parameters == [Parameter(0, b"hello")]
    assert consumed == 8


def test_client_setup_versions_are_truncated_to_32_bits():
    data = bytes([0x01, 0xC0, 0, 0, 0x01, 0, 0, 0, 0x01, 0x00])
    decoded, consumed = decode_client_setup(data)
    assert decoded.supported_versions == [1]
    assert consumed == 10


def test_subscribe_latest_group_has_no_range():
    msg = SubscribeMessage(
        subscribe_id=1,
        track_alias=2,
        track_namespace=["ns"],
        track_name="t",
        filter_type=FilterType.LATEST_GROUP,
    )
    span = NonContiguousSpan([bytearray(serialize(msg))])
    decode_header(span)
    decoded, _ = decode_subscribe(span)
    assert decoded.start is None
    assert decoded.end is None
    assert decoded == msg


def test_subscribe_absolute_start_reads_only_start():
    msg = SubscribeMessage(
        track_name="t",
        filter_type=FilterType.ABSOLUTE_START,
        start=GroupObjectPair(3, 4),
    )
    span = NonContiguousSpan([bytearray(serialize(msg))])
    decode_header(span)
    decoded, _ = decode_subscribe(span)
    assert decoded.start == GroupObjectPair(3, 4)
    assert decoded.end is None


def test_truncated_body_raises():
    data = serialize(subscribe_update_message())
    span = NonContiguousSpan([bytearray(data[:-2])])
    decode_header(span)
    with pytest.raises(ValueError):
        decode_subscribe_update(span)


def test_empty_input_raises():
    with pytest.raises(ValueError):
        decode_server_setup(b"")


def test_unsupported_message_type_raises():
    with pytest.raises(ValueError):
        decode_body(0x99, b"\x00")


def test_unknown_header_type_raises():
    with pytest.raises(ValueError):
        decode_header(b"\x3f\x00")


_varint = st.integers(min_value=0, max_value=(1 << 62) - 1)


@given(
    ids=st.lists(_varint, min_size=5, max_size=5),
    priority=st.integers(min_value=0, max_value=255),
    values=st.lists(st.binary(max_size=20), max_size=4),
)
def test_subscribe_update_round_trip(ids, priority, values):
    msg = SubscribeUpdateMessage(
        *ids,
        subscriber_priority=priority,
        parameters=[Parameter(i, v) for i, v in enumerate(values)],
    )
    span = chunked_span(serialize(msg))
    header, _ = decode_header(span)
    decoded, consumed = decode_body(header.message_type, span)
    assert decoded == msg
    assert consumed == header.length