"""Request-scoped dependencies shared by the API routers."""
from dependency_injector.wiring import Provide, inject
from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel

from src.app.config import Settings
from src.app.containers import Container
from src.app.logging import get_logger

logger = get_logger(__name__)


class AuthenticatedPrincipal(BaseModel):
    """Caller identity as asserted by the upstream identity provider."""
    id: str
    role: str

    model_config = {"frozen": True}


@inject
async def get_current_admin(
    request: Request,
    config: Settings = Depends(Provide[Container.config]),
) -> AuthenticatedPrincipal:
    """
    Resolve the calling principal and require the admin role.

    Raises:
        HTTPException: 401 when no identity is asserted, 403 when the role is not admin
    """
    principal_id = request.headers.get(config.auth.admin_id_header)
    if not principal_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    role = request.headers.get(config.auth.role_header, "")
    if role != config.auth.admin_role:
        logger.warning(f"Principal {principal_id} with role '{role}' denied access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Required role: {config.auth.admin_role}",
        )

    return AuthenticatedPrincipal(id=principal_id, role=role)
