"""
Domain models for the client & contract service.

Two aggregates live here:
- Client: a closed tagged union of IndividualClient and OrganizationClient
- Contract: a time-bounded agreement with a cost, owned by one client

Design decisions:
- Using Pydantic for validation and serialization
- Models are frozen; a change is a new copy (model_copy) that gets saved
- Variants are told apart by their `kind` tag, never by isinstance checks
- Soft delete: clients carry an explicit `active` flag and are never removed
- The "active contract" predicate takes the reference date as a parameter
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Variant tags
# =============================================================================

INDIVIDUAL = "individual"
ORGANIZATION = "organization"

CLIENT_KINDS = (INDIVIDUAL, ORGANIZATION)


# =============================================================================
# Clients
# =============================================================================

class ClientBase(BaseModel):
    """
    Fields shared by both client variants.

    Only these fields (and `active`) change over a client's life.
    """
    id: Optional[int] = Field(default=None, description="Assigned by storage on first save")
    name: str = Field(..., description="Organization name or person's name")
    phone: str = Field(..., description="Contact phone number")
    email: str = Field(..., description="Contact email address")
    active: bool = Field(default=True, description="False once the client is deactivated")

    model_config = ConfigDict(frozen=True)


class IndividualClient(ClientBase):
    """A person holding contracts. `birthdate` is fixed at creation."""
    kind: Literal["individual"] = INDIVIDUAL
    birthdate: date = Field(..., description="Date of birth, never in the future")


class OrganizationClient(ClientBase):
    """
    A company holding contracts.

    `organization_identifier` is fixed at creation and unique among
    active organizations. A deactivated organization frees its identifier.
    """
    kind: Literal["organization"] = ORGANIZATION
    organization_identifier: str = Field(..., description="Business identifier")


Client = Annotated[
    Union[IndividualClient, OrganizationClient],
    Field(discriminator="kind"),
]


# =============================================================================
# Contracts
# =============================================================================

class Contract(BaseModel):
    """
    Contract entity.

    A contract is active at date D when it is open-ended or D is strictly
    before its end date; the end date itself already counts as closed.
    """
    id: Optional[int] = Field(default=None, description="Assigned by storage on first save")
    client_id: int = Field(..., description="Owning client, never changes")
    start_date: date = Field(..., description="First day of the contract")
    end_date: Optional[date] = Field(
        default=None,
        description="Closure date; None means open-ended"
    )
    cost_amount: Decimal = Field(..., ge=0, description="Contract cost")
    update_date: date = Field(..., description="Stamped on every mutation")

    model_config = ConfigDict(frozen=True)

    def is_active_at(self, at: date) -> bool:
        """Check whether the contract is still running on the given date."""
        return self.end_date is None or at < self.end_date

    def update_date_within(
        self,
        after: Optional[date] = None,
        before: Optional[date] = None,
    ) -> bool:
        """
        Check the update date against an inclusive window.
        A missing bound leaves that side open.
        """
        if after is not None and self.update_date < after:
            return False
        if before is not None and self.update_date > before:
            return False
        return True
