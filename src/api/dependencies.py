"""FastAPI dependencies for authentication and database."""

from collections.abc import Awaitable, Callable
from typing import Annotated, TypeVar

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.database import get_db
from src.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from src.models.user import User
from src.services.auth import TokenIdentity, TokenService, authorize
from src.services.users import get_user_by_id

security = HTTPBearer(auto_error=False)

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_token_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenService:
    """Get token service bound to the configured signing secret."""
    return TokenService.from_settings(settings)


def get_token_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenIdentity:
    """Verify the bearer token from the Authorization header or the auth cookie."""
    if credentials is not None:
        token = credentials.credentials
    else:
        token = request.cookies.get(settings.auth_cookie_name)

    if not token:
        raise UnauthorizedError("No authorization token was found")

    return token_service.verify(token)


def get_current_user(
    identity: Annotated[TokenIdentity, Depends(get_token_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    user = get_user_by_id(db, identity.user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def load_target_user(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Load the user addressed by the route before any token check runs."""
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_owned_user(
    target: Annotated[User, Depends(load_target_user)],
    identity: Annotated[TokenIdentity, Depends(get_token_identity)],
) -> User:
    """Resolve the target user and require that the caller owns it."""
    if not authorize(identity.user_id, target.id):
        raise ForbiddenError("User is not authorized")
    return target


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def request_body(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """Build a dependency parsing a JSON or form-encoded body into ``model``.

    Validation failures surface as RequestValidationError, the same as a
    regular FastAPI body parameter.
    """

    async def parse(request: Request) -> ModelT:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            data = dict(await request.form())
        else:
            try:
                data = await request.json()
            except ValueError:
                raise RequestValidationError(
                    [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
                ) from None

        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise RequestValidationError(
                [{**error, "loc": ("body", *error["loc"])} for error in e.errors(include_url=False)]
            ) from None

    return parse
