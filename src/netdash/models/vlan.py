"""VLAN model for subnet overlap checks."""

from pydantic import BaseModel, Field


class VLAN(BaseModel):
    """Virtual LAN with the subnets routed on it."""

    id: int = Field(ge=1, le=4094, description='VLAN ID (1-4094)')
    name: str = Field(description='VLAN name')
    subnets: list[str] = Field(
        default_factory=list,
        description='Subnet CIDRs (e.g., 192.168.1.0/24, 2001:db8:10::/64)',
    )
    purpose: str | None = Field(
        default=None,
        description='VLAN purpose (corporate, guest, iot, voip, etc.)',
    )

    @property
    def is_default(self) -> bool:
        """Check if this is the default VLAN."""
        return self.id == 1

    @property
    def display_name(self) -> str:
        """Get display name with VLAN ID."""
        return f'VLAN {self.id} ({self.name})'
