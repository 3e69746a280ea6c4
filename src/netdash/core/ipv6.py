"""IPv6 parsing, canonical formatting and subnet facts."""

import ipaddress
from netdash.models.address import (
    IPV6_BITS,
    IPv6Address,
    IPv6AddressClass,
    IPv6Subnet,
    IPv6SubnetFacts,
    prefix_to_mask_int,
)
from netdash.utils.errors import AddressError, ErrorCodes


# (network, prefix, class) in match order
_CLASS_RANGES = [
    (0, 128, IPv6AddressClass.UNSPECIFIED),  # ::/128
    (1, 128, IPv6AddressClass.LOOPBACK),  # ::1/128
    (0xFFFF << 32, 96, IPv6AddressClass.IPV4_MAPPED),  # ::ffff:0:0/96
    (0xFE80 << 112, 10, IPv6AddressClass.LINK_LOCAL),  # fe80::/10
    (0xFC00 << 112, 7, IPv6AddressClass.UNIQUE_LOCAL),  # fc00::/7
    (0xFF00 << 112, 8, IPv6AddressClass.MULTICAST),  # ff00::/8
    (0x20010DB8 << 96, 32, IPv6AddressClass.DOCUMENTATION),  # 2001:db8::/32
]

_SOLICITED_NODE_PREFIX = 0xFF020000000000000000000000000000 | (0x1FF << 24)  # ff02::1:ff00:0/104


def parse_ipv6(text: str) -> IPv6Address | AddressError:
    """Parse any valid IPv6 notation (``::`` shorthand, embedded IPv4, brackets)."""
    raw = text.strip().strip('[]') if isinstance(text, str) else ''
    try:
        return IPv6Address(value=int(ipaddress.IPv6Address(raw)))
    except ValueError:
        return AddressError(
            error_code=ErrorCodes.INVALID_ADDRESS,
            message='Invalid IPv6 address',
            value=str(text),
            suggestion='Example: 2001:db8::1',
        )


def compress_ipv6(text: str) -> str | AddressError:
    """RFC 5952 canonical form of an address string."""
    address = parse_ipv6(text)
    if isinstance(address, AddressError):
        return address
    return str(address)


def expand_ipv6(text: str) -> str | AddressError:
    """Fully expanded eight-group form of an address string."""
    address = parse_ipv6(text)
    if isinstance(address, AddressError):
        return address
    return address.exploded


def parse_ipv6_prefix(text: str) -> int | AddressError:
    raw = text.strip().lstrip('/') if isinstance(text, str) else ''
    if raw.isascii() and raw.isdigit() and int(raw) <= IPV6_BITS:
        return int(raw)
    return AddressError(
        error_code=ErrorCodes.INVALID_MASK,
        message='Invalid IPv6 prefix length',
        value=str(text),
        suggestion='Use a prefix length between 0 and 128',
    )


def normalize_ipv6_network(address: IPv6Address, prefix: int) -> IPv6Subnet:
    return IPv6Subnet(
        network=IPv6Address(value=address.value & prefix_to_mask_int(prefix, IPV6_BITS)),
        prefix=prefix,
    )


def parse_ipv6_subnet(text: str, strict: bool = False) -> IPv6Subnet | AddressError:
    """Parse ``address/prefix``; off-boundary addresses normalize unless ``strict``."""
    raw = text.strip() if isinstance(text, str) else ''
    if '/' not in raw:
        return AddressError(
            error_code=ErrorCodes.INVALID_ADDRESS,
            message='Expected CIDR notation (address/prefix)',
            value=str(text),
            suggestion='Example: 2001:db8::/64',
        )
    address_text, prefix_text = raw.rsplit('/', 1)

    address = parse_ipv6(address_text)
    if isinstance(address, AddressError):
        return address.model_copy(update={'value': str(text)})
    prefix = parse_ipv6_prefix(prefix_text)
    if isinstance(prefix, AddressError):
        return prefix.model_copy(update={'value': str(text)})

    subnet = normalize_ipv6_network(address, prefix)
    if strict and subnet.network != address:
        return AddressError(
            error_code=ErrorCodes.INVALID_DEFINITION,
            message=f'{address} is not a network boundary for /{prefix}',
            value=str(text),
            suggestion=f'Use {subnet.cidr}',
        )
    return subnet


def classify_ipv6(address: IPv6Address) -> IPv6AddressClass:
    for network, prefix, address_class in _CLASS_RANGES:
        if address.value & prefix_to_mask_int(prefix, IPV6_BITS) == network:
            return address_class
    return IPv6AddressClass.GLOBAL


def solicited_node_address(address: IPv6Address) -> IPv6Address | None:
    """Solicited-node multicast group (ff02::1:ffXX:XXXX) of a unicast address."""
    if classify_ipv6(address) in (
        IPv6AddressClass.MULTICAST,
        IPv6AddressClass.LOOPBACK,
        IPv6AddressClass.UNSPECIFIED,
    ):
        return None
    return IPv6Address(value=_SOLICITED_NODE_PREFIX | (address.value & 0xFFFFFF))


def derive_ipv6_facts(address: IPv6Address, prefix: int) -> IPv6SubnetFacts:
    """Network, host bits, size and tags for ``address/prefix``.

    Classification and the solicited-node group describe ``address`` itself,
    not its network.
    """
    subnet = normalize_ipv6_network(address, prefix)
    return IPv6SubnetFacts(
        network=subnet.network,
        prefix=prefix,
        expanded=subnet.network.exploded,
        host_bits=IPV6_BITS - prefix,
        total_address_count=subnet.total_address_count,
        address_class=classify_ipv6(address),
        solicited_node=solicited_node_address(address),
    )


def calculate_ipv6_subnet(text: str) -> IPv6SubnetFacts | AddressError:
    """IPv6 calculator entry point: ``address/prefix`` or a bare address (/128)."""
    raw = text.strip() if isinstance(text, str) else ''
    if '/' in raw:
        address_text, prefix_text = raw.rsplit('/', 1)
    else:
        address_text, prefix_text = raw, str(IPV6_BITS)

    address = parse_ipv6(address_text)
    if isinstance(address, AddressError):
        return address
    prefix = parse_ipv6_prefix(prefix_text)
    if isinstance(prefix, AddressError):
        return prefix
    return derive_ipv6_facts(address, prefix)
