"""
FastAPI application for the client & contract service.

This application exposes the lifecycle managers over HTTP:
1. Client endpoints (/clients) - create, read, update, deactivate
2. Contract endpoints (/contracts) - create, list active, sum cost, update cost

Domain errors and request validation failures are both answered with
400 Bad Request and a {status, error, message} body.

Run with:
    uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, Optional

from fastapi import Depends, FastAPI, Path, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared import config

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format=config.LOG_FORMAT,
    datefmt=config.LOG_DATE_FORMAT,
)

from lifecycle.wiring import Managers, build_managers
from shared.clock import Clock, make_clock
from shared.data_store import DataStore, get_data_store
from shared.errors import DomainError
from shared.schemas import (
    ClientRequest,
    ClientResponse,
    ContractRequest,
    ContractResponse,
    CostSumResponse,
    CostUpdateRequest,
)

logger = logging.getLogger("contracts_api")


# Application lifespan
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    for problem in config.validate_config():
        logger.warning(f"Configuration problem: {problem}")
    logger.info(f"Starting {config.APP_NAME} {config.APP_VERSION}")
    yield
    logger.info("Shutting down")


# Create the FastAPI app
app = FastAPI(
    title=config.APP_NAME,
    description="""
    Registers individual and organization clients and tracks their contracts.

    ## Rules

    - Deactivating a client closes all of its active contracts
    - Deactivated clients cannot get new contracts or be updated
    - A contract is active until (excluding) its end date
    """,
    version=config.APP_VERSION,
    lifespan=lifespan,
)

# Module-level instances (tests swap them through reset_api_state)
_managers: Optional[Managers] = None


def get_managers() -> Managers:
    """Get the wired lifecycle managers."""
    global _managers
    if _managers is None:
        _managers = build_managers(get_data_store(), make_clock(config.pinned_today()))
    return _managers


def reset_api_state(
    store: Optional[DataStore] = None,
    clock: Optional[Clock] = None,
) -> None:
    """Reset API state (for testing). Passing nothing falls back to the defaults."""
    global _managers
    _managers = build_managers(store, clock) if store is not None else None


# =============================================================================
# Error translation
# =============================================================================

def _error_body(status_code: int, error: str, message: str) -> dict[str, Any]:
    return {"status": status_code, "error": error, "message": message}


@app.exception_handler(DomainError)
async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Report a business rule violation as 400 Bad Request."""
    logger.info(f"Bad Request at [{request.method} {request.url.path}]. {exc}")
    body = _error_body(status.HTTP_400_BAD_REQUEST, "Bad Request", exc.user_message)
    body["kind"] = exc.kind.value
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input as 400 Bad Request with one entry per failed field."""
    violations = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Validation failed"),
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Bad Request at [{request.method} {request.url.path}]. Validation failed for arguments: "
        + ", ".join(f"[{v['field']}] {v['message']}" for v in violations)
    )
    body = _error_body(status.HTTP_400_BAD_REQUEST, "Bad Request", "Validation failed")
    body["violations"] = violations
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=jsonable_encoder(body))


# =============================================================================
# Health Check
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "client-contract-service"}


# =============================================================================
# Client Endpoints
# =============================================================================

@app.post(
    "/clients",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Clients"],
)
def create_client(
    request: ClientRequest,
    response: Response,
    managers: Managers = Depends(get_managers),
):
    """Register an individual or an organization."""
    client = managers.clients.create(request)
    response.headers["Location"] = f"/clients/{client.id}"
    return managers.clients.to_response(client)


@app.get(
    "/clients/{client_id}",
    response_model=ClientResponse,
    responses={404: {"description": "No active client with this id"}},
    tags=["Clients"],
)
def find_active_client(
    client_id: int = Path(..., gt=0),
    managers: Managers = Depends(get_managers),
):
    """Get an active client. Deactivated and unknown clients are not found."""
    client = managers.clients.find_active(client_id)
    if client is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return managers.clients.to_response(client)


@app.put("/clients/{client_id}", response_model=ClientResponse, tags=["Clients"])
def update_client(
    request: ClientRequest,
    client_id: int = Path(..., gt=0),
    managers: Managers = Depends(get_managers),
):
    """Update name, phone and email of an active client."""
    client = managers.clients.update(client_id, request)
    return managers.clients.to_response(client)


@app.delete(
    "/clients/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Clients"],
)
def deactivate_client(
    client_id: int = Path(..., gt=0),
    managers: Managers = Depends(get_managers),
):
    """Deactivate a client and close all of its active contracts."""
    managers.clients.deactivate(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Contract Endpoints
# =============================================================================

@app.post(
    "/contracts/{client_id}",
    response_model=ContractResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Contracts"],
)
def create_contract(
    request: ContractRequest,
    response: Response,
    client_id: int = Path(..., gt=0),
    managers: Managers = Depends(get_managers),
):
    """Open a contract for an active client."""
    contract = managers.contracts.create(client_id, request)
    response.headers["Location"] = f"/contracts/{contract.id}"
    return managers.contracts.to_response(contract)


@app.get(
    "/contracts/{client_id}",
    response_model=list[ContractResponse],
    tags=["Contracts"],
)
def find_active_contracts(
    client_id: int = Path(..., gt=0),
    updated_after: Optional[date] = None,
    updated_before: Optional[date] = None,
    managers: Managers = Depends(get_managers),
):
    """List a client's active contracts, optionally within an update-date window."""
    contracts = managers.contracts.find_active_for_client(
        client_id, updated_after, updated_before
    )
    return managers.contracts.to_response_list(contracts)


@app.get(
    "/contracts/{client_id}/sum-cost",
    response_model=CostSumResponse,
    tags=["Contracts"],
)
def sum_active_contracts_cost(
    client_id: int = Path(..., gt=0),
    managers: Managers = Depends(get_managers),
):
    """Sum the cost of a client's active contracts."""
    total = managers.contracts.sum_active_cost(client_id)
    return CostSumResponse(client_id=client_id, sum_cost=total)


@app.put(
    "/contracts/{contract_id}/cost",
    response_model=ContractResponse,
    tags=["Contracts"],
)
def update_contract_cost(
    request: CostUpdateRequest,
    contract_id: int = Path(..., gt=0),
    managers: Managers = Depends(get_managers),
):
    """Change the cost of an active contract."""
    contract = managers.contracts.update_cost(contract_id, request.cost_amount)
    return managers.contracts.to_response(contract)
