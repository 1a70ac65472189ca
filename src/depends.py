from typing import Optional

from fastapi import BackgroundTasks, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from libs.result import Error
from src.adapter.services.background_notifier import BackgroundNotifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError, to_http_error
from src.app.services.notifier import INotifier
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import AuthorizePrincipalUseCase, Principal
from src.domain.entities import RoleType

# Missing credentials are reported through ClientError like every other failure
security = HTTPBearer(auto_error=False)


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_config(request: Request):
    return request.app.state.config


def get_token_issuer(request: Request) -> ITokenIssuer:
    return request.app.state.token_issuer


def get_password_hasher(request: Request) -> IPasswordHasher:
    return request.app.state.password_hasher


def get_notifier(request: Request) -> INotifier:
    return request.app.state.notifier


def get_deferred_notifier(
    background_tasks: BackgroundTasks, notifier: INotifier = Depends(get_notifier)
) -> INotifier:
    """Notifier whose deliveries run after the response is sent"""
    return BackgroundNotifier(notifier, background_tasks)


async def get_current_principal(
    role: RoleType,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
) -> Principal:
    """
    Authorization gate for /auth/{role} routes.

    Decodes the bearer token, then re-checks the caller's live role grant,
    account state and session on every call.

    Raises:
        ClientError 401: missing, invalid or expired token, or inactive session
        ClientError 403: token for another role, or role/account no longer live
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Missing bearer token"), status_code=401
        )

    claims = token_issuer.decode_access_token(credentials.credentials)
    if claims is None:
        raise ClientError(
            Error("UNAUTHORIZED", "Invalid or expired token"), status_code=401
        )

    result = await AuthorizePrincipalUseCase(uow).execute(claims, role)
    if result.is_err():
        raise to_http_error(result.error)

    return result.value
