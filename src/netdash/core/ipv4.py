"""IPv4 parsing, mask arithmetic and subnet facts.

Every ``parse_*`` function is total: bad user input comes back as an
``AddressError`` value rather than an exception.
"""

import re
from collections.abc import Iterable, Iterator
from loguru import logger
from netdash.config import FIELD_BOUNDS, sanitize
from netdash.models.address import (
    IPV4_BITS,
    IPV4_MAX,
    AddressClass,
    AddressFormats,
    IPv4Address,
    IPv6Subnet,
    Subnet,
    SubnetFacts,
    host_mask_int,
    ipv4_to_int,
    mask_to_prefix,
    prefix_to_mask_int,
)
from netdash.utils.errors import AddressError, ErrorCodes


_PREFIX_RE = re.compile(r'/?[0-9]{1,3}')

# (network, prefix, class) in match order; loopback/link-local/multicast first
_CLASS_RANGES = [
    (0x7F000000, 8, AddressClass.LOOPBACK),  # 127.0.0.0/8
    (0xA9FE0000, 16, AddressClass.LINK_LOCAL),  # 169.254.0.0/16 (RFC 3927)
    (0xE0000000, 4, AddressClass.MULTICAST),  # 224.0.0.0/4 (RFC 5771)
    (0x0A000000, 8, AddressClass.PRIVATE_A),  # 10.0.0.0/8 (RFC 1918)
    (0xAC100000, 12, AddressClass.PRIVATE_B),  # 172.16.0.0/12
    (0xC0A80000, 16, AddressClass.PRIVATE_C),  # 192.168.0.0/16
]


# =============================================================================
# Parsing
# =============================================================================


def parse_ipv4(text: str) -> IPv4Address | AddressError:
    """Parse a dotted-quad address.

    Exactly four dot-separated decimal octets in 0-255. Leading zeros are
    accepted (``010`` is ten); signs, blanks and other characters are not.
    """
    value = ipv4_to_int(text) if isinstance(text, str) else None
    if value is None:
        return AddressError(
            error_code=ErrorCodes.INVALID_ADDRESS,
            message='Invalid IPv4 address',
            value=str(text),
            suggestion='Use four decimal octets 0-255, e.g. 192.168.1.10',
        )
    return IPv4Address(value=value)


def parse_netmask_or_prefix(text: str) -> int | AddressError:
    """Parse ``/24``, ``24`` or ``255.255.255.0`` into a prefix length.

    Dotted masks must be a contiguous run of 1-bits followed by 0-bits;
    ``255.0.255.0`` is rejected.
    """
    raw = text.strip() if isinstance(text, str) else ''

    if _PREFIX_RE.fullmatch(raw):
        prefix = int(raw.lstrip('/'))
        if prefix <= IPV4_BITS:
            return prefix
        return _mask_error(text, f'Prefix length {prefix} is out of range 0-32')

    if '.' in raw:
        mask = ipv4_to_int(raw)
        if mask is None:
            return _mask_error(text, 'Subnet mask is not a valid dotted-decimal value')
        prefix = mask_to_prefix(mask)
        if prefix is None:
            return _mask_error(text, 'Subnet mask must have contiguous 1 bits')
        return prefix

    return _mask_error(text, 'Invalid subnet mask')


def _mask_error(text: str, message: str) -> AddressError:
    return AddressError(
        error_code=ErrorCodes.INVALID_MASK,
        message=message,
        value=str(text),
        suggestion='Enter CIDR (/24), prefix length (24), or dotted decimal (255.255.255.0)',
    )


def parse_subnet(text: str, strict: bool = False) -> Subnet | AddressError:
    """Parse ``addr/prefix``, ``addr/dotted-mask`` or ``addr mask`` into a Subnet.

    An address with host bits set is normalized to its network unless
    ``strict`` is true, in which case it is an ``INVALID_DEFINITION``.
    """
    raw = text.strip() if isinstance(text, str) else ''
    if '/' in raw:
        address_text, mask_text = raw.split('/', 1)
    else:
        pieces = raw.split()
        if len(pieces) != 2:
            return AddressError(
                error_code=ErrorCodes.INVALID_ADDRESS,
                message='Expected CIDR notation (address/prefix)',
                value=str(text),
                suggestion='Example: 192.168.1.0/24',
            )
        address_text, mask_text = pieces

    address = parse_ipv4(address_text)
    if isinstance(address, AddressError):
        return address.model_copy(update={'value': str(text)})

    prefix = parse_netmask_or_prefix(mask_text)
    if isinstance(prefix, AddressError):
        return prefix.model_copy(update={'value': str(text)})

    subnet = normalize_to_network(address, prefix)
    if subnet.network != address:
        if strict:
            return AddressError(
                error_code=ErrorCodes.INVALID_DEFINITION,
                message=f'{address} is not a network boundary for /{prefix}',
                value=str(text),
                suggestion=f'Use {subnet.cidr}',
            )
        logger.debug(f'Normalized {text!r} to {subnet.cidr}')
    return subnet


# =============================================================================
# Masks
# =============================================================================


def prefix_to_netmask(prefix: int) -> IPv4Address:
    """Dotted netmask for a prefix length (0 gives 0.0.0.0)."""
    return IPv4Address(value=prefix_to_mask_int(prefix))


def prefix_to_wildcard(prefix: int) -> IPv4Address:
    """Wildcard (inverse) mask for a prefix length."""
    return IPv4Address(value=host_mask_int(prefix))


def netmask_to_prefix(netmask: IPv4Address) -> int | None:
    """Prefix length of a netmask, or None if the mask is not contiguous."""
    return mask_to_prefix(netmask.value)


# =============================================================================
# Subnet arithmetic
# =============================================================================


def normalize_to_network(address: IPv4Address, prefix: int) -> Subnet:
    """Mask ``address`` down to the network boundary of ``prefix``."""
    return Subnet(
        network=IPv4Address(value=address.value & prefix_to_mask_int(prefix)),
        prefix=prefix,
    )


def derive_subnet_facts(network: IPv4Address, prefix: int) -> SubnetFacts:
    """Compute broadcast, masks, host range and counts for a network.

    Usable hosts are ``2^(32-p) - 2`` up to /30 and ``2^(32-p)`` for /31 and
    /32 (RFC 3021 point-to-point and host routes).
    """
    subnet = normalize_to_network(network, prefix)
    return SubnetFacts(
        network=subnet.network,
        prefix=prefix,
        netmask=subnet.netmask,
        wildcard=subnet.wildcard,
        broadcast=subnet.broadcast,
        first_host=subnet.first_host,
        last_host=subnet.last_host,
        usable_host_count=subnet.usable_host_count,
        total_address_count=subnet.total_address_count,
        address_class=classify_ipv4(subnet.network),
    )


def calculate_subnet(address_text: str, mask_text: str | None = None) -> SubnetFacts | AddressError:
    """Subnet calculator entry point.

    ``address_text`` may carry its own mask (``10.1.2.3/24``); otherwise
    ``mask_text`` supplies it in any form ``parse_netmask_or_prefix`` accepts.
    """
    if mask_text is None or not str(mask_text).strip():
        subnet = parse_subnet(address_text)
        if isinstance(subnet, AddressError):
            return subnet
        return derive_subnet_facts(subnet.network, subnet.prefix)

    address = parse_ipv4(address_text)
    if isinstance(address, AddressError):
        return address
    prefix = parse_netmask_or_prefix(mask_text)
    if isinstance(prefix, AddressError):
        return prefix
    return derive_subnet_facts(address, prefix)


def subnets_overlap(a: Subnet | IPv6Subnet, b: Subnet | IPv6Subnet) -> bool:
    """True iff the closed ranges ``[first, last]`` of ``a`` and ``b`` intersect.

    Identical subnets overlap. Networks of different IP versions never do.
    """
    if a.version != b.version:
        return False
    return a.first <= b.last and b.first <= a.last


def subnet_contains(outer: Subnet | IPv6Subnet, inner: Subnet | IPv6Subnet) -> bool:
    """True when every address of ``inner`` lies inside ``outer``."""
    if outer.version != inner.version:
        return False
    return outer.first <= inner.first and inner.last <= outer.last


def address_in_subnet(address: IPv4Address, subnet: Subnet) -> bool:
    return subnet.first <= address.value <= subnet.last


def classify_ipv4(address: IPv4Address) -> AddressClass:
    """Tag an address by its RFC 1918 / 3927 / 5771 range."""
    for network, prefix, address_class in _CLASS_RANGES:
        if address.value & prefix_to_mask_int(prefix) == network:
            return address_class
    return AddressClass.PUBLIC


# =============================================================================
# Conversion, summarisation, enumeration
# =============================================================================


def address_formats(address: IPv4Address) -> AddressFormats:
    """Render an address in every notation the IP converter shows."""
    value = address.value
    return AddressFormats(
        dotted=str(address),
        integer=value,
        hex=f'0x{value:08X}',
        binary=f'{value:032b}',
        dotted_binary='.'.join(f'{octet:08b}' for octet in address.octets),
        octal=f'0o{value:o}',
        ipv6_mapped=f'::ffff:{address}',
        address_class=classify_ipv4(address),
    )


def parse_address_any(text: str, fmt: str = 'dotted') -> IPv4Address | AddressError:
    """Parse an address written as ``dotted``, ``decimal``, ``binary`` or ``hex``."""
    raw = text.strip() if isinstance(text, str) else ''
    value: int | None = None

    try:
        if fmt == 'dotted':
            return parse_ipv4(raw)
        if fmt == 'decimal' and raw.isascii() and raw.isdigit():
            value = int(raw, 10)
        elif fmt == 'binary':
            digits = raw.replace('.', '').replace(' ', '')
            if digits and len(digits) <= IPV4_BITS and set(digits) <= {'0', '1'}:
                value = int(digits, 2)
        elif fmt == 'hex':
            digits = raw.lower().removeprefix('0x').replace(':', '').replace('.', '')
            if digits and len(digits) <= 8:
                value = int(digits, 16)
    except ValueError:
        value = None

    if value is None or not 0 <= value <= IPV4_MAX:
        return AddressError(
            error_code=ErrorCodes.INVALID_ADDRESS,
            message=f'Invalid {fmt} IPv4 address',
            value=str(text),
        )
    return IPv4Address(value=value)


def summarize_subnets(subnets: Iterable[Subnet]) -> list[Subnet]:
    """Merge overlapping or adjacent networks into the fewest aligned CIDR blocks."""
    ranges = sorted((s.first, s.last) for s in subnets)
    if not ranges:
        return []

    merged: list[list[int]] = [list(ranges[0])]
    for start, end in ranges[1:]:
        if start <= merged[-1][1] + 1:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    result: list[Subnet] = []
    for start, end in merged:
        result.extend(range_to_subnets(start, end))
    return result


def range_to_subnets(start: int, end: int) -> list[Subnet]:
    """Cover the inclusive integer range ``[start, end]`` with aligned CIDR blocks."""
    blocks: list[Subnet] = []
    while start <= end:
        # Largest block aligned at start: limited by trailing zeros of start
        size = start & -start if start else 1 << IPV4_BITS
        while size > end - start + 1:
            size >>= 1
        prefix = IPV4_BITS - (size.bit_length() - 1)
        blocks.append(Subnet(network=IPv4Address(value=start), prefix=prefix))
        start += size
    return blocks


def iter_hosts(subnet: Subnet, limit: int | None = None) -> Iterator[IPv4Address]:
    """Yield usable host addresses, at most ``limit`` of them.

    ``limit`` is clamped to the enumeration bounds, so zero or a negative
    limit yields the first host only.

    /31 and /32 yield every address; larger blocks skip network and broadcast.
    """
    bounds = FIELD_BOUNDS['enumerate_limit']
    if limit is None:
        count = bounds.default
    elif limit < bounds.minimum:
        count = bounds.minimum
    else:
        count = sanitize(limit, bounds)
    first = subnet.first_host.value
    last = subnet.last_host.value
    for value in range(first, min(last, first + count - 1) + 1):
        yield IPv4Address(value=value)
