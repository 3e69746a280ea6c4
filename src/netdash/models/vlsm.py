"""VLSM planner models."""

from netdash.models.address import IPv4Address, Subnet
from pydantic import BaseModel, ConfigDict, Field, computed_field


class VLSMRequest(BaseModel):
    """One requested subnet: a label and the number of hosts it must hold."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description='Name of the requested subnet')
    hosts_needed: int = Field(gt=0, description='Hosts the subnet must accommodate')


class VLSMAllocation(BaseModel):
    """A request placed inside the supernet."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description='Label of the originating request')
    subnet: Subnet = Field(description='Allocated block')
    hosts_needed: int = Field(description='Hosts requested')
    hosts_available: int = Field(description='Usable hosts in the allocated block')
    wasted_hosts: int = Field(description='hosts_available - hosts_needed')

    @computed_field
    @property
    def cidr(self) -> str:
        return self.subnet.cidr

    @computed_field
    @property
    def netmask(self) -> IPv4Address:
        return self.subnet.netmask

    @computed_field
    @property
    def first_host(self) -> IPv4Address:
        return self.subnet.first_host

    @computed_field
    @property
    def last_host(self) -> IPv4Address:
        return self.subnet.last_host

    @computed_field
    @property
    def broadcast(self) -> IPv4Address:
        return self.subnet.broadcast


class VLSMPlan(BaseModel):
    """A complete allocation of every request, in the caller's order."""

    model_config = ConfigDict(frozen=True)

    supernet: Subnet = Field(description='Block the allocations were carved from')
    allocations: list[VLSMAllocation] = Field(description='One allocation per request')
    total_addresses: int = Field(description='Addresses in the supernet')
    allocated_addresses: int = Field(description='Addresses covered by allocations')
    unallocated_addresses: int = Field(description='Free remainder of the supernet')
    supernet_usable_hosts: int = Field(description='Usable hosts of the supernet as one block')
    allocated_host_capacity: int = Field(description='Sum of hosts_available')
    hosts_requested: int = Field(description='Sum of hosts_needed')
    wasted_hosts: int = Field(description='Sum of per-allocation waste')

    @computed_field
    @property
    def utilization_percent(self) -> float:
        if not self.total_addresses:
            return 0.0
        return round(self.allocated_addresses / self.total_addresses * 100, 2)

    def get_by_label(self, label: str) -> VLSMAllocation | None:
        """First allocation with the given label."""
        for allocation in self.allocations:
            if allocation.label == label:
                return allocation
        return None
