"""Control and data stream messages exchanged by peers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Union


class MessageType(IntEnum):
    """Type codes of the control messages this package understands."""

    SUBSCRIBE_UPDATE = 0x02
    SUBSCRIBE = 0x03
    CLIENT_SETUP = 0x40
    SERVER_SETUP = 0x41


class DataStreamType(IntEnum):
    """Type codes that open a data stream."""

    STREAM_HEADER_SUBGROUP = 0x04


class FilterType(IntEnum):
    """Which objects a subscription asks for."""

    LATEST_GROUP = 0x01
    LATEST_OBJECT = 0x02
    ABSOLUTE_START = 0x03
    ABSOLUTE_RANGE = 0x04


def _as_bytes(value: Union[bytes, bytearray, str]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


@dataclass
class Parameter:
    """A typed setup or subscription parameter carrying opaque bytes."""

    parameter_type: int = 0
    value: bytes = b""

    def __post_init__(self) -> None:
        if self.parameter_type < 0:
            raise ValueError("parameter type must be non-negative")
        self.value = _as_bytes(self.value)


@dataclass
class GroupObjectPair:
    """A position in a track: a group and an object within it."""

    group: int = 0
    object: int = 0

    def __post_init__(self) -> None:
        if self.group < 0 or self.object < 0:
            raise ValueError("group and object must be non-negative")


def _as_pair(value) -> Optional[GroupObjectPair]:
    if value is None or isinstance(value, GroupObjectPair):
        return value
    group, obj = value
    return GroupObjectPair(group, obj)


@dataclass
class ControlMessageHeader:
    """The type and body length that precede every control message."""

    message_type: MessageType
    length: int = 0

    def __post_init__(self) -> None:
        self.message_type = MessageType(self.message_type)
        if self.length < 0:
            raise ValueError("length must be non-negative")


@dataclass
class ClientSetupMessage:
    """Sent by a client to offer the protocol versions it supports."""

    supported_versions: list[int] = field(default_factory=list)
    parameters: list[Parameter] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.supported_versions = list(self.supported_versions)
        self.parameters = list(self.parameters)


@dataclass
class ServerSetupMessage:
    """Sent by a server with the version it selected."""

    selected_version: int = 0
    parameters: list[Parameter] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.parameters = list(self.parameters)


@dataclass
class SubscribeMessage:
    """A request for the objects of one track."""

    subscribe_id: int = 0
    track_alias: int = 0
    track_namespace: list[str] = field(default_factory=list)
    track_name: str = ""
    subscriber_priority: int = 0
    group_order: int = 0
    filter_type: FilterType = FilterType.LATEST_GROUP
    start: Optional[GroupObjectPair] = None
    end: Optional[GroupObjectPair] = None
    parameters: list[Parameter] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.track_namespace = list(self.track_namespace)
        self.filter_type = FilterType(self.filter_type)
        self.start = _as_pair(self.start)
        self.end = _as_pair(self.end)
        self.parameters = list(self.parameters)


@dataclass
class SubscribeUpdateMessage:
    """Changes the range or priority of an existing subscription."""

    subscribe_id: int = 0
    start_group: int = 0
    start_object: int = 0
    end_group: int = 0
    end_object: int = 0
    subscriber_priority: int = 0
    parameters: list[Parameter] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.parameters = list(self.parameters)


@dataclass
class StreamHeaderSubgroupMessage:
    """The header that opens a data stream carrying one subgroup."""

    track_alias: int = 0
    group_id: int = 0
    subgroup_id: int = 0
    publisher_priority: int = 0