"""Wire format for Media over QUIC Transport control messages."""

__version__ = "0.1.0"
__all__ = ["span", "varint", "messages", "encoder", "decoder", "deserializer"]