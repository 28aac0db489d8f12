"""FastAPI dependencies producing the authenticated Principal.

Usage in any protected router:
    from src.sf_gateway.auth.dependencies import require_customer

    @router.get("/orders")
    async def list_orders(principal: Principal = Depends(require_customer)):
        ...
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.sf_common.enums import AdminRole, UserType
from src.sf_common.errors import InvalidCredentialsError, PermissionDeniedError
from src.sf_gateway.auth.jwt_handler import decode_token

bearer_scheme = HTTPBearer(auto_error=False)

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)

ORDER_EDITOR_ROLES = frozenset(
    {AdminRole.ADMIN.value, AdminRole.MANAGER.value, AdminRole.OPERATOR.value}
)


@dataclass(frozen=True)
class Principal:
    subject: str
    user_type: str
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN

    @property
    def can_edit_orders(self) -> bool:
        return self.is_admin and self.role in ORDER_EDITOR_ROLES


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Principal:
    """Validate the Bearer token and return who is calling.

    Raises HTTP 401 if the token is missing, invalid, expired or malformed.
    """
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        payload = decode_token(credentials.credentials)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    subject = payload.get("sub")
    user_type = payload.get("user_type")
    if not subject or user_type not in (UserType.CUSTOMER, UserType.ADMIN):
        raise _CREDENTIALS_EXCEPTION
    role = payload.get("role") if user_type == UserType.ADMIN else None
    return Principal(subject=str(subject), user_type=str(user_type), role=role)


async def require_customer(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if principal.user_type != UserType.CUSTOMER:
        raise PermissionDeniedError("Customer account required")
    return principal


async def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Any admin role, including read-only VIEWER."""
    if not principal.is_admin:
        raise PermissionDeniedError("Administrator account required")
    return principal


async def require_order_editor(
    principal: Principal = Depends(require_admin),
) -> Principal:
    if not principal.can_edit_orders:
        raise PermissionDeniedError(f"Role {principal.role} cannot modify orders")
    return principal
