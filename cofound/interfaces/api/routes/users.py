"""Routes managing member device registration."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from cofound.application.use_cases.users import register_push_token
from cofound.domain.exceptions import DomainException
from cofound.infrastructure.database import get_db
from cofound.interfaces.api.schemas import PushTokenUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.put("/{user_id}/push-token", status_code=status.HTTP_204_NO_CONTENT)
def update_push_token(
    user_id: str,
    payload: PushTokenUpdate,
    db: Session = Depends(get_db),
):
    """Register (or clear) the device token used for offline notifications."""

    try:
        register_push_token(db, user_id, payload.push_token)
    except DomainException as exc:
        raise exc.to_http_exception() from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
