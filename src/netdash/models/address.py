"""Address and subnet value types.

Addresses are stored as unsigned integers and serialize as their canonical
strings. Subnet-derived attributes (netmask, broadcast, host range) are
computed from ``(network, prefix)`` on access and never stored.
"""

import ipaddress
import re
from enum import Enum
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_serializer,
    model_validator,
)
from typing import Any, ClassVar


IPV4_BITS = 32
IPV4_MAX = (1 << IPV4_BITS) - 1
IPV6_BITS = 128
IPV6_MAX = (1 << IPV6_BITS) - 1

_OCTET_RE = re.compile(r'[0-9]{1,3}')


# =============================================================================
# Bit primitives
# =============================================================================


def prefix_to_mask_int(prefix: int, bits: int = IPV4_BITS) -> int:
    """Network mask for ``prefix`` as an unsigned integer of width ``bits``.

    Prefix 0 yields 0 and prefix ``bits`` yields all ones.
    """
    if not 0 <= prefix <= bits:
        raise ValueError(f'Prefix length {prefix} out of range 0-{bits}')
    return ((1 << prefix) - 1) << (bits - prefix)


def host_mask_int(prefix: int, bits: int = IPV4_BITS) -> int:
    """Complement of the network mask (the wildcard / host bits)."""
    return prefix_to_mask_int(prefix, bits) ^ ((1 << bits) - 1)


def mask_to_prefix(mask: int, bits: int = IPV4_BITS) -> int | None:
    """Prefix length of a contiguous mask, or None when the 1-bits are not contiguous."""
    if not 0 <= mask <= (1 << bits) - 1:
        return None
    host_bits = ((1 << bits) - 1) ^ mask
    # Contiguous host bits are all ones below some position: h & (h + 1) == 0
    if host_bits & (host_bits + 1):
        return None
    return bits - host_bits.bit_length()


def ipv4_to_int(text: str) -> int | None:
    """Dotted-quad string to integer; None when the text is not four octets 0-255."""
    parts = text.strip().split('.')
    if len(parts) != 4:
        return None
    value = 0
    for part in parts:
        if not _OCTET_RE.fullmatch(part):
            return None
        octet = int(part)
        if octet > 255:
            return None
        value = (value << 8) | octet
    return value


def int_to_ipv4(value: int) -> str:
    return '.'.join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


# =============================================================================
# Address classes
# =============================================================================


class AddressClass(str, Enum):
    """IPv4 address category used for tagging."""

    PRIVATE_A = 'private-a'
    PRIVATE_B = 'private-b'
    PRIVATE_C = 'private-c'
    LOOPBACK = 'loopback'
    LINK_LOCAL = 'link-local'
    MULTICAST = 'multicast'
    PUBLIC = 'public'

    @property
    def is_private(self) -> bool:
        return self in (AddressClass.PRIVATE_A, AddressClass.PRIVATE_B, AddressClass.PRIVATE_C)


class IPv6AddressClass(str, Enum):
    """IPv6 address category used for tagging."""

    UNSPECIFIED = 'unspecified'
    LOOPBACK = 'loopback'
    LINK_LOCAL = 'link-local'
    UNIQUE_LOCAL = 'unique-local'
    MULTICAST = 'multicast'
    DOCUMENTATION = 'documentation'
    IPV4_MAPPED = 'ipv4-mapped'
    GLOBAL = 'global'


# =============================================================================
# Addresses
# =============================================================================


class IPv4Address(BaseModel):
    """An IPv4 address held as a 32-bit unsigned integer."""

    model_config = ConfigDict(frozen=True)

    version: ClassVar[int] = 4
    bits: ClassVar[int] = IPV4_BITS

    value: int = Field(ge=0, le=IPV4_MAX, description='Address as unsigned integer')

    @model_validator(mode='before')
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if isinstance(data, str):
            value = ipv4_to_int(data)
            if value is None:
                raise ValueError(f'Invalid IPv4 address: {data!r}')
            return {'value': value}
        if isinstance(data, int) and not isinstance(data, bool):
            return {'value': data}
        return data

    @model_serializer
    def _serialize(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return int_to_ipv4(self.value)

    def __repr__(self) -> str:
        return f"IPv4Address('{self}')"

    def __int__(self) -> int:
        return self.value

    @property
    def octets(self) -> tuple[int, int, int, int]:
        v = self.value
        return ((v >> 24) & 0xFF, (v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF)


class IPv6Address(BaseModel):
    """An IPv6 address held as a 128-bit unsigned integer.

    ``str()`` gives the RFC 5952 canonical form: lowercase hex, leading zeros
    dropped, and the longest run of two or more zero groups (leftmost on a tie)
    replaced by ``::``.
    """

    model_config = ConfigDict(frozen=True)

    version: ClassVar[int] = 6
    bits: ClassVar[int] = IPV6_BITS

    value: int = Field(ge=0, le=IPV6_MAX, description='Address as unsigned integer')

    @model_validator(mode='before')
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if isinstance(data, str):
            try:
                return {'value': int(ipaddress.IPv6Address(data.strip().strip('[]')))}
            except ValueError as e:
                raise ValueError(f'Invalid IPv6 address: {data!r}') from e
        if isinstance(data, int) and not isinstance(data, bool):
            return {'value': data}
        return data

    @model_serializer
    def _serialize(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return ipaddress.IPv6Address(self.value).compressed

    def __repr__(self) -> str:
        return f"IPv6Address('{self}')"

    def __int__(self) -> int:
        return self.value

    @property
    def exploded(self) -> str:
        return ipaddress.IPv6Address(self.value).exploded

    @property
    def groups(self) -> tuple[int, ...]:
        return tuple((self.value >> shift) & 0xFFFF for shift in range(112, -1, -16))


# =============================================================================
# Subnets
# =============================================================================


class Subnet(BaseModel):
    """An IPv4 network: a boundary-aligned address plus prefix length."""

    model_config = ConfigDict(frozen=True)

    version: ClassVar[int] = 4

    network: IPv4Address = Field(description='Network address (host bits zero)')
    prefix: int = Field(ge=0, le=IPV4_BITS, description='Prefix length')

    @model_validator(mode='after')
    def _check_boundary(self) -> 'Subnet':
        if self.network.value & host_mask_int(self.prefix):
            raise ValueError(f'{self.network}/{self.prefix} has host bits set')
        return self

    def __str__(self) -> str:
        return self.cidr

    @property
    def cidr(self) -> str:
        return f'{self.network}/{self.prefix}'

    @property
    def mask_int(self) -> int:
        return prefix_to_mask_int(self.prefix)

    @property
    def netmask(self) -> IPv4Address:
        return IPv4Address(value=self.mask_int)

    @property
    def wildcard(self) -> IPv4Address:
        return IPv4Address(value=host_mask_int(self.prefix))

    @property
    def first(self) -> int:
        """Lowest address in the block, as an integer."""
        return self.network.value

    @property
    def last(self) -> int:
        """Highest address in the block, as an integer."""
        return self.network.value | host_mask_int(self.prefix)

    @property
    def broadcast(self) -> IPv4Address:
        return IPv4Address(value=self.last)

    @property
    def total_address_count(self) -> int:
        return 1 << (IPV4_BITS - self.prefix)

    @property
    def usable_host_count(self) -> int:
        # RFC 3021: /31 and /32 have no network/broadcast reservation
        if self.prefix >= 31:
            return self.total_address_count
        return max(0, self.total_address_count - 2)

    @property
    def first_host(self) -> IPv4Address:
        if self.prefix >= 31:
            return self.network
        return IPv4Address(value=self.first + 1)

    @property
    def last_host(self) -> IPv4Address:
        if self.prefix == 32:
            return self.network
        if self.prefix == 31:
            return self.broadcast
        return IPv4Address(value=self.last - 1)


class IPv6Subnet(BaseModel):
    """An IPv6 network: a boundary-aligned address plus prefix length."""

    model_config = ConfigDict(frozen=True)

    version: ClassVar[int] = 6

    network: IPv6Address = Field(description='Network address (host bits zero)')
    prefix: int = Field(ge=0, le=IPV6_BITS, description='Prefix length')

    @model_validator(mode='after')
    def _check_boundary(self) -> 'IPv6Subnet':
        if self.network.value & host_mask_int(self.prefix, IPV6_BITS):
            raise ValueError(f'{self.network}/{self.prefix} has host bits set')
        return self

    def __str__(self) -> str:
        return self.cidr

    @property
    def cidr(self) -> str:
        return f'{self.network}/{self.prefix}'

    @property
    def first(self) -> int:
        return self.network.value

    @property
    def last(self) -> int:
        return self.network.value | host_mask_int(self.prefix, IPV6_BITS)

    @property
    def total_address_count(self) -> int:
        return 1 << (IPV6_BITS - self.prefix)


# =============================================================================
# Subnet facts
# =============================================================================


class SubnetFacts(BaseModel):
    """Everything the subnet calculator shows for one IPv4 network."""

    model_config = ConfigDict(frozen=True)

    network: IPv4Address = Field(description='Network address')
    prefix: int = Field(description='Prefix length')
    netmask: IPv4Address = Field(description='Dotted-decimal subnet mask')
    wildcard: IPv4Address = Field(description='Inverse of the netmask')
    broadcast: IPv4Address = Field(description='Last address in the block')
    first_host: IPv4Address = Field(description='First usable host')
    last_host: IPv4Address = Field(description='Last usable host')
    usable_host_count: int = Field(description='Usable hosts (RFC 3021 aware)')
    total_address_count: int = Field(description='All addresses in the block')
    address_class: AddressClass = Field(description='Category of the network address')

    @computed_field
    @property
    def cidr(self) -> str:
        return f'{self.network}/{self.prefix}'

    @property
    def subnet(self) -> Subnet:
        return Subnet(network=self.network, prefix=self.prefix)


class IPv6SubnetFacts(BaseModel):
    """Everything the IPv6 tools show for one IPv6 network."""

    model_config = ConfigDict(frozen=True)

    network: IPv6Address = Field(description='Network address')
    prefix: int = Field(description='Prefix length')
    expanded: str = Field(description='Fully expanded network address')
    host_bits: int = Field(description='Number of host bits')
    total_address_count: int = Field(description='All addresses in the block')
    address_class: IPv6AddressClass = Field(description='Category of the queried address')
    solicited_node: IPv6Address | None = Field(
        default=None, description='Solicited-node multicast group of the queried address'
    )

    @computed_field
    @property
    def compressed(self) -> str:
        return str(self.network)

    @computed_field
    @property
    def cidr(self) -> str:
        return f'{self.network}/{self.prefix}'


class AddressFormats(BaseModel):
    """One IPv4 address rendered in every notation the converter supports."""

    model_config = ConfigDict(frozen=True)

    dotted: str
    integer: int
    hex: str
    binary: str
    dotted_binary: str
    octal: str
    ipv6_mapped: str
    address_class: AddressClass
