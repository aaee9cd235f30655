"""API V1 Router"""

from fastapi import APIRouter

# Import endpoint routers
from schoolid.api.v1.endpoints import identifiers

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(identifiers.router, prefix="/identifiers", tags=["Identifiers"])
api_router.include_router(identifiers.school_router, prefix="/schools", tags=["Identifier Allocation"])
