from fastapi import APIRouter, Depends, HTTPException, Query, status

from gasmeter.api.dependencies import get_activity_logger, get_current_identity, get_identity_service
from gasmeter.schemas.auth import (
    ChangePasswordRequest,
    IdentityCandidate,
    IdentityPublic,
    LoginRequest,
    RegisterRequest,
)
from gasmeter.schemas.event import ActivityEventResponse
from gasmeter.services.identity_service import IdentityService
from gasmeter.services.logging_service import ActivityLogger


router = APIRouter(prefix="/auth", tags=["autoryzacja"])


@router.post("/login", response_model=IdentityPublic)
def login(
    payload: LoginRequest,
    service: IdentityService = Depends(get_identity_service),
) -> IdentityPublic:
    """Logowanie i otwarcie sesji."""
    identity = service.login(payload.email, payload.password)
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Email ou senha incorretos")
    return identity


@router.post("/register", response_model=IdentityPublic, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    service: IdentityService = Depends(get_identity_service),
) -> IdentityPublic:
    """Rejestruje konto w planie darmowym i od razu je loguje."""
    candidate = IdentityCandidate(
        email=payload.email,
        password=payload.password,
        name=payload.name,
        company_name=payload.company_name,
        max_units=service.settings.free_plan_max_units,
    )
    identity = service.register(candidate)
    if identity is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email já cadastrado")
    return identity


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(service: IdentityService = Depends(get_identity_service)) -> None:
    """Zamyka aktywną sesję."""
    service.logout()


@router.get("/me", response_model=IdentityPublic)
def me(identity: IdentityPublic = Depends(get_current_identity)) -> IdentityPublic:
    return identity


@router.get("/activity", response_model=list[ActivityEventResponse])
def activity(
    limit: int = Query(default=50, gt=0, le=500),
    identity: IdentityPublic = Depends(get_current_identity),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
) -> list[ActivityEventResponse]:
    """Ostatnie zdarzenia aktywnego konta."""
    events = activity_logger.recent(identity_id=identity.id, limit=limit)
    return [ActivityEventResponse.model_validate(event) for event in events]


@router.post("/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: ChangePasswordRequest,
    identity: IdentityPublic = Depends(get_current_identity),
    service: IdentityService = Depends(get_identity_service),
) -> None:
    """Zmienia hasło aktywnego konta."""
    if not service.change_password(identity.id, payload.old_password, payload.new_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Senha atual incorreta")
