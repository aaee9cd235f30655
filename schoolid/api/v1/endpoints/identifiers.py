from typing import Any, Dict, List
from fastapi import APIRouter, Depends, Query

from schoolid.api import deps
from schoolid.models.enums import EntityKind
from schoolid.schemas.identifiers import (
    AllocationRequest,
    FormatRequest,
    IdentifierResult,
    IdentifierScopeConfig,
    KindInfo,
    ValidationResult,
)
from schoolid.schemas.responses import SuccessResponse
from schoolid.services import id_grammar
from schoolid.services.id_service import IdentifierService, allocation_strategy

router = APIRouter()
school_router = APIRouter()


@router.get("/kinds", response_model=SuccessResponse[List[KindInfo]])
async def list_kinds() -> Any:
    """
    List identifier kinds with their allocation strategy.
    """
    kinds = [
        KindInfo(
            kind=kind,
            strategy=allocation_strategy(kind),
            reversible=kind in id_grammar.REVERSIBLE_KINDS,
        )
        for kind in EntityKind
    ]
    return SuccessResponse(data=kinds)


@router.get("/{kind}/validate", response_model=SuccessResponse[ValidationResult])
async def validate_identifier(
    kind: EntityKind,
    value: str = Query(..., min_length=1),
) -> Any:
    """
    Check an identifier's shape without raising.
    """
    result = ValidationResult(kind=kind, identifier=value, valid=id_grammar.validate_id(kind, value))
    return SuccessResponse(data=result)


@router.get("/{kind}/parse", response_model=SuccessResponse[Dict[str, Any]])
async def parse_identifier(
    kind: EntityKind,
    value: str = Query(..., min_length=1),
) -> Any:
    """
    Split an identifier into its components. 400 if it is malformed.
    """
    parsed = id_grammar.parse_id(kind, value)
    return SuccessResponse(data=parsed.model_dump(mode="json"))


@router.post("/{kind}/format", response_model=SuccessResponse[IdentifierResult])
async def format_identifier(kind: EntityKind, body: FormatRequest) -> Any:
    """
    Render an identifier from explicit components. 400 if a component is out of shape.
    """
    identifier = id_grammar.format_id(kind, body.components)
    return SuccessResponse(data=IdentifierResult(kind=kind, identifier=identifier))


@school_router.post(
    "/{school_id}/identifiers/{kind}/allocate",
    response_model=SuccessResponse[IdentifierResult],
)
async def allocate_identifier(
    kind: EntityKind,
    body: AllocationRequest,
    config: IdentifierScopeConfig = Depends(deps.get_scope_config),
) -> Any:
    """
    Compute the next free identifier for the school's scope.

    Nothing is reserved: the caller claims the identifier by persisting the
    entity, and retries with a fresh ``existing`` list if that write hits a
    uniqueness conflict.
    """
    service = IdentifierService(config)
    identifier = service.allocate(kind, body.scope, body.existing)
    return SuccessResponse(
        data=IdentifierResult(kind=kind, identifier=identifier),
        message="Identifier allocated",
    )
