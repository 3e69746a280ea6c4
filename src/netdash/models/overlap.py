"""Models for overlap checking and routing statement validation."""

from enum import Enum
from netdash.models.address import IPv4Address, IPv6Subnet, Subnet
from netdash.utils.errors import AddressError
from pydantic import BaseModel, ConfigDict, Field, computed_field


class NamedCIDR(BaseModel):
    """A labelled network (VLAN subnet, route destination, network statement)."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description='Name shown in reports')
    subnet: Subnet | IPv6Subnet = Field(description='The network')

    def __str__(self) -> str:
        return f'{self.label} ({self.subnet})'


class OverlapRelation(str, Enum):
    """How the first subnet of an overlapping pair relates to the second."""

    IDENTICAL = 'identical'
    CONTAINS = 'contains'
    CONTAINED_BY = 'contained-by'


class OverlapResult(BaseModel):
    """Two entries whose address ranges intersect."""

    model_config = ConfigDict(frozen=True)

    a: NamedCIDR = Field(description='Earlier entry in input order')
    b: NamedCIDR = Field(description='Later entry in input order')
    relation: OverlapRelation = Field(description='Relation of a to b')

    @computed_field
    @property
    def description(self) -> str:
        if self.relation == OverlapRelation.IDENTICAL:
            return f'{self.a.label} and {self.b.label} both use {self.a.subnet}'
        if self.relation == OverlapRelation.CONTAINS:
            return f'{self.a.label} ({self.a.subnet}) contains {self.b.label} ({self.b.subnet})'
        return f'{self.a.label} ({self.a.subnet}) is inside {self.b.label} ({self.b.subnet})'


class OverlapReport(BaseModel):
    """Result of validating a list of labelled CIDR definitions."""

    model_config = ConfigDict(frozen=True)

    entries: list[NamedCIDR] = Field(default_factory=list, description='Entries that parsed')
    overlaps: list[OverlapResult] = Field(default_factory=list, description='Overlapping pairs')
    errors: list[AddressError] = Field(default_factory=list, description='Per-entry problems')

    @computed_field
    @property
    def healthy(self) -> bool:
        return not self.overlaps and not self.errors

    def errors_for(self, label: str) -> list[AddressError]:
        return [e for e in self.errors if e.label == label]


class NetworkStatement(BaseModel):
    """A validated OSPF/EIGRP ``network <address> <wildcard>`` statement."""

    model_config = ConfigDict(frozen=True)

    subnet: Subnet = Field(description='Network the statement matches')
    area: str | None = Field(default=None, description='OSPF area, if any')
    warnings: list[str] = Field(default_factory=list, description='Normalizations applied')

    @computed_field
    @property
    def wildcard(self) -> IPv4Address:
        return self.subnet.wildcard

    def render(self) -> str:
        """Statement text as it appears under a router process."""
        line = f'network {self.subnet.network} {self.wildcard}'
        if self.area is not None:
            line += f' area {self.area}'
        return line


class StaticRoute(BaseModel):
    """A validated static route."""

    model_config = ConfigDict(frozen=True)

    destination: Subnet = Field(description='Destination network')
    next_hop: IPv4Address | None = Field(default=None, description='Next-hop address')
    exit_interface: str | None = Field(default=None, description='Outgoing interface')
    admin_distance: int | None = Field(default=None, description='Administrative distance (1-255)')
    warnings: list[str] = Field(default_factory=list, description='Normalizations applied')

    def render(self) -> str:
        """Cisco-style ``ip route`` line."""
        parts = ['ip route', str(self.destination.network), str(self.destination.netmask)]
        if self.exit_interface:
            parts.append(self.exit_interface)
        if self.next_hop is not None:
            parts.append(str(self.next_hop))
        if self.admin_distance is not None:
            parts.append(str(self.admin_distance))
        return ' '.join(parts)
