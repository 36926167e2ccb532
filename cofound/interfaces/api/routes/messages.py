"""HTTP endpoints for message history and housekeeping."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from cofound.application.use_cases.conversations import (
    delete_message as delete_message_uc,
    get_history as get_history_uc,
    list_unseen_grouped as list_unseen_grouped_uc,
    mark_conversation_seen as mark_conversation_seen_uc,
)
from cofound.application.use_cases.messaging import (
    MessagingContext,
    notify_seen,
    unread_by_sender,
)
from cofound.application.use_cases.users import get_user as get_user_uc
from cofound.domain.entities import Message
from cofound.domain.exceptions import DomainException
from cofound.infrastructure.database import get_db
from cofound.interfaces.api.dependencies import get_messaging_context
from cofound.interfaces.api.schemas import (
    ConversationSeenRequest,
    ConversationSeenResponse,
    MessageHistoryResponse,
    MessageRead,
    OnlineUsersRead,
    UnreadSummaryRead,
    UnseenGroupRead,
    UnseenMessageRead,
    UserStatusRead,
)

router = APIRouter(prefix="/messages", tags=["messages"])
logger = logging.getLogger(__name__)


def _to_read_model(message: Message) -> MessageRead:
    return MessageRead.model_validate(message)


@router.get("/history", response_model=MessageHistoryResponse)
def read_history(
    user1: str | None = Query(None),
    user2: str | None = Query(None),
    db: Session = Depends(get_db),
) -> MessageHistoryResponse:
    """Return the conversation between two members, oldest message first."""

    try:
        messages = get_history_uc(db, user1, user2)
    except DomainException as exc:
        raise exc.to_http_exception() from exc
    return MessageHistoryResponse(messages=[_to_read_model(message) for message in messages])


@router.get("/status", response_model=UserStatusRead)
def read_user_status(
    user_id: str | None = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    context: MessagingContext = Depends(get_messaging_context),
) -> UserStatusRead:
    """Return the stored presence of a member plus its live registry state."""

    try:
        user = get_user_uc(db, user_id)
    except DomainException as exc:
        raise exc.to_http_exception() from exc
    return UserStatusRead(
        status=user.status,
        last_seen=user.last_seen,
        is_online=context.registry.is_online(user.id),
    )


@router.get("/online", response_model=OnlineUsersRead)
def list_online_users(
    context: MessagingContext = Depends(get_messaging_context),
) -> OnlineUsersRead:
    """Return the identities holding at least one live chat connection."""

    return OnlineUsersRead(user_ids=sorted(context.registry.online_users()))


@router.get("/unseen/{user_id}", response_model=list[UnseenGroupRead])
def list_unseen_messages(user_id: str, db: Session = Depends(get_db)) -> list[UnseenGroupRead]:
    """Return every unseen message addressed to ``user_id`` grouped by sender."""

    return [
        UnseenGroupRead(
            sender_id=group.sender_id,
            message_count=group.message_count,
            messages=[UnseenMessageRead.model_validate(message) for message in group.messages],
        )
        for group in list_unseen_grouped_uc(db, user_id)
    ]


@router.get("/unread/{user_id}", response_model=list[UnreadSummaryRead])
def list_unread_summaries(
    user_id: str, db: Session = Depends(get_db)
) -> list[UnreadSummaryRead]:
    return [UnreadSummaryRead.model_validate(summary) for summary in unread_by_sender(db, user_id)]


@router.put("/seen", response_model=ConversationSeenResponse)
async def mark_conversation_seen(
    payload: ConversationSeenRequest,
    context: MessagingContext = Depends(get_messaging_context),
) -> ConversationSeenResponse:
    """Mark every delivered, unseen message of a conversation as seen."""

    try:
        updated = await context.run_db(
            lambda session: mark_conversation_seen_uc(
                session, sender_id=payload.sender_id, recipient_id=payload.recipient_id
            )
        )
    except DomainException as exc:
        raise exc.to_http_exception() from exc

    await notify_seen(
        context,
        sender_id=payload.sender_id,
        recipient_id=payload.recipient_id,
        message_ids=updated,
    )
    logger.info(
        "Marked %s messages from %s to %s as seen",
        len(updated),
        payload.sender_id,
        payload.recipient_id,
    )
    return ConversationSeenResponse(updated_message_count=len(updated), message_ids=updated)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_message(
    message_id: int,
    user_id: str | None = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    """Delete a message on behalf of its sender."""

    if not user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="userId is required")
    try:
        delete_message_uc(db, message_id, user_id=user_id)
    except DomainException as exc:
        raise exc.to_http_exception() from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
