"""
Request and response shapes for the client & contract service.

These Pydantic models define the contract between callers (the HTTP API,
the demo, tests) and the lifecycle managers.

Design decisions:
- Requests carry the structural rules (required fields, phone/email shape,
  non-negative cost, birthdate not in the future). By the time a request
  reaches a manager it is structurally valid; managers only apply business rules.
- Client requests and responses are unions selected by their `kind` literal.
  `kind` may be omitted on requests; client requests forbid unknown fields,
  so a body carrying both variant fields matches neither variant.
- Responses never expose internal bookkeeping (contract update_date)
- Amounts are Decimal in Python and JSON numbers on the wire
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from shared.models import INDIVIDUAL, ORGANIZATION

PHONE_PATTERN = r"^\+?[0-9 ]+$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

CostAmount = Annotated[Decimal, Field(ge=0, max_digits=18, decimal_places=2)]

# Serialized as a JSON number
JsonAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# =============================================================================
# Client requests
# =============================================================================

class ClientRequestBase(BaseModel):
    """Common fields every client request carries."""
    name: str = Field(..., description="Organization name or person's name")
    phone: str = Field(..., pattern=PHONE_PATTERN, description="Digits and spaces, optional leading +")
    email: str = Field(..., pattern=EMAIL_PATTERN, description="Contact email address")

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class IndividualRequest(ClientRequestBase):
    """Create or update a person. `birthdate` is only read on create."""
    kind: Literal["individual"] = INDIVIDUAL
    birthdate: date = Field(..., description="Date of birth")

    # Checked against the system date here; the client manager checks it
    # again against the service's reference date.
    @field_validator("birthdate")
    @classmethod
    def birthdate_not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("must be a date in the past or in the present")
        return value


class OrganizationRequest(ClientRequestBase):
    """Create or update a company. The identifier is only read on create."""
    kind: Literal["organization"] = ORGANIZATION
    organization_identifier: str = Field(..., description="Business identifier")

    @field_validator("organization_identifier")
    @classmethod
    def identifier_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


# Used as the HTTP body type
ClientRequest = Union[IndividualRequest, OrganizationRequest]


# =============================================================================
# Contract requests
# =============================================================================

class ContractRequest(BaseModel):
    """
    Request to open a contract for a client.

    start_date defaults to today when omitted; end_date None means open-ended.
    """
    start_date: Optional[date] = Field(default=None, description="Defaults to today")
    end_date: Optional[date] = Field(default=None, description="None means open-ended")
    cost_amount: CostAmount = Field(..., description="Contract cost")


class CostUpdateRequest(BaseModel):
    """New cost for an active contract."""
    cost_amount: CostAmount = Field(..., description="New contract cost")


# =============================================================================
# Responses
# =============================================================================

class ClientResponseBase(BaseModel):
    """Common part of every client response."""
    id: int
    name: str
    phone: str
    email: str
    active: bool


class IndividualResponse(ClientResponseBase):
    kind: Literal["individual"] = INDIVIDUAL
    birthdate: date


class OrganizationResponse(ClientResponseBase):
    kind: Literal["organization"] = ORGANIZATION
    organization_identifier: str


ClientResponse = Union[IndividualResponse, OrganizationResponse]


class ContractResponse(BaseModel):
    id: int
    client_id: int
    start_date: date
    end_date: Optional[date] = None
    cost_amount: JsonAmount


class CostSumResponse(BaseModel):
    """Total cost of a client's active contracts."""
    client_id: int
    sum_cost: JsonAmount
