"""Overlap detection and routing statement validation.

Inputs are human-entered lists (VLAN subnets, OSPF/EIGRP network
statements, static routes) of at most a few hundred entries, so every pair
is compared directly.
"""

from collections.abc import Iterable, Sequence
from loguru import logger
from netdash.config import FIELD_BOUNDS, sanitize
from netdash.core.ipv4 import (
    normalize_to_network,
    parse_ipv4,
    parse_netmask_or_prefix,
    parse_subnet,
    subnets_overlap,
)
from netdash.core.ipv6 import parse_ipv6_subnet
from netdash.models.address import IPV4_MAX, IPv6Subnet, Subnet, mask_to_prefix
from netdash.models.overlap import (
    NamedCIDR,
    NetworkStatement,
    OverlapRelation,
    OverlapReport,
    OverlapResult,
    StaticRoute,
)
from netdash.models.vlan import VLAN
from netdash.utils.errors import AddressError, ErrorCodes


RESERVED_VLANS = (1, 1002, 1003, 1004, 1005)
VLAN_NAME_MAX = 32


# =============================================================================
# Overlaps
# =============================================================================


def _relation(a: Subnet | IPv6Subnet, b: Subnet | IPv6Subnet) -> OverlapRelation:
    if a.first == b.first and a.last == b.last:
        return OverlapRelation.IDENTICAL
    if a.first <= b.first and b.last <= a.last:
        return OverlapRelation.CONTAINS
    return OverlapRelation.CONTAINED_BY


def find_overlaps(entries: Sequence[NamedCIDR]) -> list[OverlapResult]:
    """Every overlapping pair ``(i, j)`` with ``i < j`` in input order.

    An entry is never compared with itself; two entries with the same
    network are reported as ``identical``.
    """
    overlaps: list[OverlapResult] = []
    for i in range(len(entries)):
        for j in range(i + 1, len(entries)):
            a, b = entries[i], entries[j]
            if subnets_overlap(a.subnet, b.subnet):
                overlaps.append(OverlapResult(a=a, b=b, relation=_relation(a.subnet, b.subnet)))
    return overlaps


def parse_any_subnet(text: str, strict: bool = False) -> Subnet | IPv6Subnet | AddressError:
    """Parse an IPv4 or IPv6 CIDR, choosing the family by the presence of ``:``."""
    if isinstance(text, str) and ':' in text:
        return parse_ipv6_subnet(text, strict=strict)
    return parse_subnet(text, strict=strict)


def validate_cidrs(definitions: Iterable[tuple[str, str]]) -> OverlapReport:
    """Parse ``(label, cidr)`` definitions and report errors and overlaps.

    Unparseable entries are reported and skipped. An entry whose address is
    not on its network boundary is reported as INVALID_DEFINITION but its
    normalized network still takes part in overlap checking.
    """
    entries: list[NamedCIDR] = []
    errors: list[AddressError] = []

    for label, text in definitions:
        subnet = parse_any_subnet(text)
        if isinstance(subnet, AddressError):
            errors.append(subnet.with_label(label))
            continue

        # Lenient parse succeeded, so a strict failure can only be off-boundary
        boundary = parse_any_subnet(text, strict=True)
        if isinstance(boundary, AddressError):
            errors.append(boundary.with_label(label))
        entries.append(NamedCIDR(label=label, subnet=subnet))

    overlaps = find_overlaps(entries)
    if overlaps:
        logger.debug(f'{len(overlaps)} overlapping pair(s) among {len(entries)} entries')
    return OverlapReport(entries=entries, overlaps=overlaps, errors=errors)


# =============================================================================
# Network statements and routes
# =============================================================================


def parse_wildcard(text: str) -> int | AddressError:
    """Prefix length of an OSPF/EIGRP wildcard mask (``0.0.0.255`` is /24).

    The inverted mask must be a contiguous netmask.
    """
    address = parse_ipv4(text)
    if isinstance(address, AddressError):
        return AddressError(
            error_code=ErrorCodes.INVALID_WILDCARD,
            message='Invalid wildcard mask',
            value=str(text),
            suggestion='Example: 0.0.0.255 for a /24',
        )
    prefix = mask_to_prefix(address.value ^ IPV4_MAX)
    if prefix is None:
        return AddressError(
            error_code=ErrorCodes.INVALID_WILDCARD,
            message='Wildcard must map to a contiguous subnet',
            value=str(text),
            suggestion='Wildcard bits must be a run of 0s followed by 1s',
        )
    return prefix


def evaluate_network_statement(
    address: str,
    wildcard: str | None = None,
    area: str | None = None,
) -> NetworkStatement | AddressError:
    """Validate a ``network <address> <wildcard>`` statement.

    ``address`` may be written in CIDR form, in which case the prefix wins
    over ``wildcard`` and a disagreeing wildcard is reported as a warning.
    A missing wildcard means a host statement (``0.0.0.0``).
    """
    warnings: list[str] = []
    raw = address.strip() if isinstance(address, str) else ''
    if not raw:
        return AddressError(
            error_code=ErrorCodes.INVALID_ADDRESS,
            message='Network address is required',
            value=str(address),
        )

    if '/' in raw:
        subnet = parse_subnet(raw)
        if isinstance(subnet, AddressError):
            return subnet
        declared = parse_ipv4(raw.split('/', 1)[0])
        if wildcard and wildcard.strip() and parse_wildcard(wildcard) != subnet.prefix:
            warnings.append(f'Wildcard {wildcard.strip()} ignored; using /{subnet.prefix} from CIDR')
    else:
        network = parse_ipv4(raw)
        if isinstance(network, AddressError):
            return network

        wildcard_text = (wildcard or '').strip()
        if not wildcard_text:
            wildcard_text = '0.0.0.0'
            warnings.append('Wildcard mask missing; assuming host-specific statement')

        prefix = parse_wildcard(wildcard_text)
        if isinstance(prefix, AddressError):
            return prefix
        subnet = normalize_to_network(network, prefix)
        declared = network

    if subnet.network != declared:
        warnings.append(f'Normalized network to {subnet.cidr}')

    return NetworkStatement(subnet=subnet, area=area.strip() if area else None, warnings=warnings)


def evaluate_static_route(
    destination: str,
    mask: str | None = None,
    next_hop: str | None = None,
    exit_interface: str | None = None,
    admin_distance: str | int | None = None,
) -> StaticRoute | AddressError:
    """Validate a static route.

    ``destination`` is CIDR or a bare address with ``mask`` as prefix or
    dotted mask. A next hop or an exit interface is required.
    """
    warnings: list[str] = []
    raw = destination.strip() if isinstance(destination, str) else ''
    if not raw:
        return AddressError(
            error_code=ErrorCodes.INVALID_ADDRESS,
            message='Destination network is required',
            value=str(destination),
        )

    if '/' in raw:
        subnet = parse_subnet(raw)
        if isinstance(subnet, AddressError):
            return subnet
        declared = parse_ipv4(raw.split('/', 1)[0])
        if mask and mask.strip() and parse_netmask_or_prefix(mask) != subnet.prefix:
            warnings.append(f'Mask {mask.strip()} ignored; using /{subnet.prefix} from CIDR')
    else:
        network = parse_ipv4(raw)
        if isinstance(network, AddressError):
            return network
        if not (mask or '').strip():
            return AddressError(
                error_code=ErrorCodes.INVALID_MASK,
                message='Subnet mask or prefix is required',
                value=raw,
            )
        prefix = parse_netmask_or_prefix(mask)
        if isinstance(prefix, AddressError):
            return prefix
        subnet = normalize_to_network(network, prefix)
        declared = network

    if subnet.network != declared:
        warnings.append(f'Destination normalized to {subnet.cidr}')

    hop = None
    if next_hop and next_hop.strip():
        hop = parse_ipv4(next_hop)
        if isinstance(hop, AddressError):
            return hop.model_copy(update={'message': 'Invalid next-hop address'})

    interface = exit_interface.strip() if exit_interface and exit_interface.strip() else None
    if hop is None and interface is None:
        return AddressError(
            error_code=ErrorCodes.INVALID_DEFINITION,
            message='Specify a next hop or exit interface',
            value=raw,
        )

    distance = None
    if admin_distance is not None and str(admin_distance).strip():
        distance = sanitize(admin_distance, FIELD_BOUNDS['admin_distance'])

    return StaticRoute(
        destination=subnet,
        next_hop=hop,
        exit_interface=interface,
        admin_distance=distance,
        warnings=warnings,
    )


# =============================================================================
# VLANs
# =============================================================================


def is_valid_vlan_id(vlan_id: int) -> bool:
    bounds = FIELD_BOUNDS['vlan_id']
    return bounds.minimum <= vlan_id <= bounds.maximum


def is_reserved_vlan(vlan_id: int, reserved: Sequence[int] = RESERVED_VLANS) -> bool:
    return vlan_id in reserved


def parse_vlan_list(text: str) -> list[int]:
    """Expand ``10,20,30-35`` into sorted unique VLAN IDs; invalid pieces are dropped."""
    vlans: set[int] = set()
    for part in (p.strip() for p in text.split(',')):
        if '-' in part:
            start_text, _, end_text = part.partition('-')
            start_text, end_text = start_text.strip(), end_text.strip()
            if not (start_text.isdigit() and end_text.isdigit()):
                continue
            start, end = int(start_text), int(end_text)
            if start <= end:
                vlans.update(v for v in range(start, end + 1) if is_valid_vlan_id(v))
        elif part.isdigit() and is_valid_vlan_id(int(part)):
            vlans.add(int(part))
    return sorted(vlans)


def check_vlan_subnets(vlans: Sequence[VLAN]) -> OverlapReport:
    """Validate every VLAN subnet and report overlaps between different VLANs.

    Blank names and duplicate VLAN IDs are reported as INVALID_DEFINITION.
    """
    seen: dict[int, VLAN] = {}
    definition_errors: list[AddressError] = []
    for vlan in vlans:
        if not vlan.name.strip():
            definition_errors.append(
                AddressError(
                    error_code=ErrorCodes.INVALID_DEFINITION,
                    message='VLAN name is required',
                    label=vlan.display_name,
                    value=str(vlan.id),
                )
            )
        elif len(vlan.name) > VLAN_NAME_MAX:
            definition_errors.append(
                AddressError(
                    error_code=ErrorCodes.INVALID_DEFINITION,
                    message=f'VLAN name longer than {VLAN_NAME_MAX} characters',
                    label=vlan.display_name,
                    value=vlan.name,
                    suggestion='Most switches truncate or reject longer names',
                )
            )
        if vlan.id in seen:
            definition_errors.append(
                AddressError(
                    error_code=ErrorCodes.INVALID_DEFINITION,
                    message=f'VLAN ID {vlan.id} already exists ({seen[vlan.id].name})',
                    label=vlan.display_name,
                    value=str(vlan.id),
                )
            )
        else:
            seen[vlan.id] = vlan

    definitions = [(vlan.display_name, cidr) for vlan in vlans for cidr in vlan.subnets if cidr.strip()]
    report = validate_cidrs(definitions)

    # Subnets of the same VLAN may legitimately nest (secondary addressing)
    overlaps = [o for o in report.overlaps if o.a.label != o.b.label]
    return OverlapReport(
        entries=report.entries,
        overlaps=overlaps,
        errors=definition_errors + report.errors,
    )
