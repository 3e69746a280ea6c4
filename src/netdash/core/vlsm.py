"""VLSM planning: carve host-count requests out of one supernet.

Requests are placed largest first, each in the lowest free block that is
aligned on its own size. Largest-first keeps fragmentation low when block
sizes are powers of two; it is not guaranteed optimal for every mix of
requests.
"""

import re
from collections.abc import Sequence
from loguru import logger
from netdash.models.address import IPV4_BITS, IPv4Address, Subnet
from netdash.models.vlsm import VLSMAllocation, VLSMPlan, VLSMRequest
from netdash.utils.errors import AddressError, ErrorCodes


_REQUEST_RE = re.compile(r'\s*(?P<label>[^=:]+?)\s*[=:]\s*(?P<hosts>[0-9]+)\s*')

# Smallest prefix handed out when point-to-point blocks are disabled
MAX_STANDARD_PREFIX = 30


def prefix_for_hosts(hosts_needed: int, allow_point_to_point: bool = False) -> int | None:
    """Longest prefix whose usable host count covers ``hosts_needed``.

    Blocks up to /30 reserve network and broadcast. With
    ``allow_point_to_point`` a request for one or two hosts gets a /31.
    Returns None when even a /0 is too small.
    """
    if allow_point_to_point and hosts_needed <= 2:
        return 31
    for prefix in range(MAX_STANDARD_PREFIX, -1, -1):
        if (1 << (IPV4_BITS - prefix)) - 2 >= hosts_needed:
            return prefix
    return None


def usable_hosts(prefix: int) -> int:
    total = 1 << (IPV4_BITS - prefix)
    return total if prefix >= 31 else total - 2


class _FreeSpace:
    """Sorted, non-overlapping free ranges of a supernet."""

    def __init__(self, supernet: Subnet):
        self.ranges: list[tuple[int, int]] = [(supernet.first, supernet.last)]

    def take(self, size: int) -> int | None:
        """Reserve the lowest ``size``-aligned block of ``size`` addresses."""
        for index, (start, end) in enumerate(self.ranges):
            aligned = -(-start // size) * size
            if aligned + size - 1 > end:
                continue

            remainder = []
            if aligned > start:
                remainder.append((start, aligned - 1))
            if aligned + size <= end:
                remainder.append((aligned + size, end))
            self.ranges[index:index + 1] = remainder
            return aligned
        return None

    @property
    def free_addresses(self) -> int:
        return sum(end - start + 1 for start, end in self.ranges)


def plan_vlsm(
    supernet: Subnet,
    requests: Sequence[VLSMRequest],
    allow_point_to_point: bool = False,
) -> VLSMPlan | AddressError:
    """Allocate every request inside ``supernet`` or fail as a whole.

    Args:
        supernet: Block to carve
        requests: Requested subnets, in the order they should be reported
        allow_point_to_point: Permit /31 blocks for one- and two-host requests

    Returns:
        VLSMPlan with allocations in request order, or an INSUFFICIENT_SPACE
        error naming the first request that could not be placed
    """
    # Stable: equal host counts keep their input order
    ordered = sorted(enumerate(requests), key=lambda item: -item[1].hosts_needed)

    free = _FreeSpace(supernet)
    placed: dict[int, VLSMAllocation] = {}

    for index, request in ordered:
        prefix = prefix_for_hosts(request.hosts_needed, allow_point_to_point)
        start = None
        if prefix is not None and prefix >= supernet.prefix:
            start = free.take(1 << (IPV4_BITS - prefix))

        if start is None:
            logger.debug(
                f'VLSM: no room for {request.label!r} ({request.hosts_needed} hosts) in {supernet}'
            )
            return AddressError(
                error_code=ErrorCodes.INSUFFICIENT_SPACE,
                message=(
                    f'Cannot fit requirement "{request.label}" '
                    f'({request.hosts_needed} hosts) in {supernet.cidr}'
                ),
                label=request.label,
                value=str(request.hosts_needed),
                suggestion='Use a larger supernet or reduce the requested host counts',
            )

        available = usable_hosts(prefix)
        placed[index] = VLSMAllocation(
            label=request.label,
            subnet=Subnet(network=IPv4Address(value=start), prefix=prefix),
            hosts_needed=request.hosts_needed,
            hosts_available=available,
            wasted_hosts=available - request.hosts_needed,
        )
        logger.debug(f'VLSM: {request.label!r} -> {placed[index].subnet}')

    allocations = [placed[index] for index in range(len(requests))]
    allocated_addresses = sum(a.subnet.total_address_count for a in allocations)

    return VLSMPlan(
        supernet=supernet,
        allocations=allocations,
        total_addresses=supernet.total_address_count,
        allocated_addresses=allocated_addresses,
        unallocated_addresses=free.free_addresses,
        supernet_usable_hosts=supernet.usable_host_count,
        allocated_host_capacity=sum(a.hosts_available for a in allocations),
        hosts_requested=sum(a.hosts_needed for a in allocations),
        wasted_hosts=sum(a.wasted_hosts for a in allocations),
    )


def parse_vlsm_request(text: str) -> VLSMRequest | AddressError:
    """Parse ``label=hosts`` or ``label:hosts``."""
    match = _REQUEST_RE.fullmatch(text) if isinstance(text, str) else None
    if match is None or int(match.group('hosts')) < 1:
        return AddressError(
            error_code=ErrorCodes.INVALID_DEFINITION,
            message='Expected label=hosts with a positive host count',
            value=str(text),
            suggestion='Example: Sales=50',
        )
    return VLSMRequest(label=match.group('label'), hosts_needed=int(match.group('hosts')))
