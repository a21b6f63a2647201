"""Setting schema definitions.

This module provides the value types, wire tags and descriptors that the
registry, the store and the editor share. A descriptor never holds a value;
values live in the store as wire bytes and are parsed/formatted through the
descriptor's type.
"""

import ipaddress
import logging
import uuid
from dataclasses import dataclass
from enum import Enum

from ..errors import UnknownSettingError

logger = logging.getLogger(__name__)


# Wire tag layout: type in the top byte, read-only flag, then the number.
TAG_TYPE_SHIFT = 24
TAG_READONLY = 1 << 23
TAG_NUMBER_MASK = TAG_READONLY - 1


def make_tag(number: int, tag_type: int = 0, readonly: bool = False) -> int:
    """Build a wire tag.

    Args:
        number: Tag number within its type (bits 0..22).
        tag_type: Tag type used for scope relevance (bits 24..31).
        readonly: Whether the setting may be edited interactively.

    Returns:
        The encoded tag.
    """
    if not 0 <= number <= TAG_NUMBER_MASK:
        raise ValueError(f"Tag number out of range: {number}")
    if not 0 <= tag_type <= 0xFF:
        raise ValueError(f"Tag type out of range: {tag_type}")
    tag = (tag_type << TAG_TYPE_SHIFT) | number
    if readonly:
        tag |= TAG_READONLY
    return tag


def tag_type(tag: int) -> int:
    """Return the type byte of a tag (or of a scope's tag magic)."""
    return (tag >> TAG_TYPE_SHIFT) & 0xFF


def tag_readonly(tag: int) -> bool:
    """Return True if the tag carries the read-only flag."""
    return bool(tag & TAG_READONLY)


def dhcp_encap_opt(outer: int, inner: int) -> int:
    """Tag number of an encapsulated option (``outer.inner``)."""
    return (outer << 8) | inner


class SettingType(Enum):
    """Value types a setting can carry.

    Each type converts between the text an operator types and the wire
    bytes kept in the store.

    Attributes:
        STRING: UTF-8 text.
        IPV4: Dotted-quad IPv4 address, 4 bytes.
        INT8/INT16/INT32: Signed big-endian integers.
        UINT8/UINT16/UINT32: Unsigned big-endian integers.
        HEX: Colon-separated hex bytes (e.g. ``"aa:bb:cc"``).
        UUID: Canonical UUID text, 16 bytes.
    """

    STRING = "string"
    IPV4 = "ipv4"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    HEX = "hex"
    UUID = "uuid"

    def parse(self, text: str) -> bytes:
        """Convert operator text to wire bytes.

        Args:
            text: Text to parse.

        Returns:
            The wire representation.

        Raises:
            ValueError: If the text is not a valid value of this type.
        """
        match self:
            case SettingType.STRING:
                return text.encode("utf-8")
            case SettingType.IPV4:
                try:
                    return ipaddress.IPv4Address(text.strip()).packed
                except ValueError:
                    raise ValueError(f"invalid IPv4 address '{text}'") from None
            case SettingType.HEX:
                return _parse_hex(text)
            case SettingType.UUID:
                try:
                    return uuid.UUID(text.strip()).bytes
                except ValueError:
                    raise ValueError(f"invalid UUID '{text}'") from None
            case _:
                return _parse_int(self, text)

    def format(self, raw: bytes) -> str:
        """Convert wire bytes to display text.

        Raises:
            ValueError: If the bytes do not fit this type.
        """
        match self:
            case SettingType.STRING:
                return raw.decode("utf-8", errors="replace")
            case SettingType.IPV4:
                if len(raw) != 4:
                    raise ValueError(f"IPv4 address needs 4 bytes, got {len(raw)}")
                return str(ipaddress.IPv4Address(raw))
            case SettingType.HEX:
                return ":".join(f"{b:02x}" for b in raw)
            case SettingType.UUID:
                if len(raw) != 16:
                    raise ValueError(f"UUID needs 16 bytes, got {len(raw)}")
                return str(uuid.UUID(bytes=raw))
            case _:
                _, signed = _INT_WIDTHS[self]
                if not 1 <= len(raw) <= 4:
                    raise ValueError(f"integer needs 1..4 bytes, got {len(raw)}")
                return str(int.from_bytes(raw, "big", signed=signed))


# type -> (byte width, signed)
_INT_WIDTHS = {
    SettingType.INT8: (1, True),
    SettingType.INT16: (2, True),
    SettingType.INT32: (4, True),
    SettingType.UINT8: (1, False),
    SettingType.UINT16: (2, False),
    SettingType.UINT32: (4, False),
}


def _parse_int(setting_type: SettingType, text: str) -> bytes:
    """Parse a decimal, 0x-hex or 0o-octal integer into fixed-width bytes."""
    width, signed = _INT_WIDTHS[setting_type]
    try:
        value = int(text.strip(), 0)
    except ValueError:
        raise ValueError(f"invalid {setting_type.value} value '{text}'") from None
    try:
        return value.to_bytes(width, "big", signed=signed)
    except OverflowError:
        raise ValueError(f"{setting_type.value} value out of range: {value}") from None


def _parse_hex(text: str) -> bytes:
    """Parse colon-separated hex bytes."""
    out = bytearray()
    for part in text.strip().split(":"):
        if not 1 <= len(part) <= 2:
            raise ValueError(f"invalid hex string '{text}'")
        try:
            out.append(int(part, 16))
        except ValueError:
            raise ValueError(f"invalid hex string '{text}'") from None
    return bytes(out)


@dataclass(frozen=True)
class SettingDescriptor:
    """Definition of a single setting.

    Attributes:
        name: Setting name shown in the editor (e.g. "ip").
        description: Help text shown on the information row.
        tag: Wire tag; carries the tag type and the read-only flag.
        type: Value type used to parse and format values.
    """

    name: str
    description: str
    tag: int
    type: SettingType = SettingType.STRING

    @property
    def tag_type(self) -> int:
        """Tag type used by scope relevance matching."""
        return tag_type(self.tag)

    @property
    def readonly(self) -> bool:
        """Whether interactive edits and deletes are refused."""
        return tag_readonly(self.tag)

    def parse(self, text: str) -> bytes:
        """Parse operator text into wire bytes (see ``SettingType.parse``)."""
        return self.type.parse(text)

    def format(self, raw: bytes) -> str:
        """Format wire bytes, falling back to hex if they do not fit the type."""
        try:
            return self.type.format(raw)
        except ValueError as e:
            logger.debug(f"Formatting {self.name} as hex: {e}")
            return SettingType.HEX.format(raw)


def parse_tag_name(name: str) -> SettingDescriptor:
    """Build an ad-hoc descriptor from the ``tag[.tag]:type`` syntax.

    Example:
        parse_tag_name("175.3:hex")  # encapsulated option 175.3 as hex
        parse_tag_name("12")         # option 12 as a string

    Args:
        name: The setting name.

    Returns:
        A descriptor with tag type 0 that is not read-only.

    Raises:
        UnknownSettingError: If the name is not valid tag syntax.
    """
    tag_part, _, type_part = name.partition(":")
    try:
        setting_type = SettingType(type_part) if type_part else SettingType.STRING
    except ValueError:
        raise UnknownSettingError(name, f"no such type '{type_part}'") from None

    number = 0
    for part in tag_part.split("."):
        if not part.isdigit() or int(part) > 0xFF:
            raise UnknownSettingError(name, "expected tag numbers 0-255")
        number = (number << 8) | int(part)
    if number > TAG_NUMBER_MASK:
        raise UnknownSettingError(name, "tag too large")

    return SettingDescriptor(
        name=f"{tag_part}:{setting_type.value}",
        description=f"option {tag_part}",
        tag=make_tag(number),
        type=setting_type,
    )
