"""Value types for addressing, planning and overlap results."""

from netdash.models.address import (
    AddressClass,
    AddressFormats,
    IPv4Address,
    IPv6Address,
    IPv6AddressClass,
    IPv6Subnet,
    IPv6SubnetFacts,
    Subnet,
    SubnetFacts,
)
from netdash.models.overlap import (
    NamedCIDR,
    NetworkStatement,
    OverlapRelation,
    OverlapReport,
    OverlapResult,
    StaticRoute,
)
from netdash.models.vlan import VLAN
from netdash.models.vlsm import VLSMAllocation, VLSMPlan, VLSMRequest


__all__ = [
    # Addresses
    'AddressClass',
    'AddressFormats',
    'IPv4Address',
    'IPv6Address',
    'IPv6AddressClass',
    'IPv6Subnet',
    'IPv6SubnetFacts',
    'Subnet',
    'SubnetFacts',
    # Overlap and routing
    'NamedCIDR',
    'NetworkStatement',
    'OverlapRelation',
    'OverlapReport',
    'OverlapResult',
    'StaticRoute',
    'VLAN',
    # VLSM
    'VLSMAllocation',
    'VLSMPlan',
    'VLSMRequest',
]
