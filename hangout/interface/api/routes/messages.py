"""Invite chat routes.

Messages are posted over HTTP and pushed to open WebSocket connections on
the same invite.
"""

import asyncio
from typing import Optional
from uuid import UUID

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka, inject
from fastapi import (
    APIRouter,
    Cookie,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from pydantic import BaseModel, Field

from hangout.adapter.realtime import MessageHub
from hangout.application.usecase.message import (
    ListMessagesRequest,
    ListMessagesResponse,
    ListMessagesUseCase,
    MessageResponse,
    SendMessageRequest,
    SendMessageUseCase,
)
from hangout.domain.error import DomainError
from hangout.domain.model import Message
from hangout.domain.service import JWTService
from hangout.domain.value import InviteId
from hangout.interface.api.errors import to_http_exception
from hangout.interface.api.routes.auth import require_user_id

router = APIRouter(
    prefix="/invites/{invite_id}/messages",
    tags=["messages"],
    route_class=DishkaRoute,
)


class SendMessageAPIRequest(BaseModel):
    """API request for posting a chat message."""

    text: str = Field(..., max_length=2000)


@router.get("", response_model=ListMessagesResponse)
async def list_messages(
    invite_id: str,
    list_messages_use_case: FromDishka[ListMessagesUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ListMessagesResponse:
    """Get an invite's chat thread, oldest first. Participants only."""
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await list_messages_use_case.execute(
            ListMessagesRequest(invite_id=invite_id, user_id=user_id)
        )
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )


@router.post(
    "", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
async def send_message(
    invite_id: str,
    request: SendMessageAPIRequest,
    send_message_use_case: FromDishka[SendMessageUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> MessageResponse:
    """Post a message to an invite's chat thread. Participants only."""
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await send_message_use_case.execute(
            SendMessageRequest(
                invite_id=invite_id, sender_id=user_id, text=request.text
            )
        )
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )


@router.websocket("/ws")
@inject
async def message_stream(
    websocket: WebSocket,
    invite_id: str,
    message_hub: FromDishka[MessageHub],
    token: Optional[str] = Query(default=None),
    auth_token: str | None = Cookie(default=None),
) -> None:
    """Live feed of new messages on an invite.

    Authenticates with the session cookie, or a ``token`` query parameter
    for clients that cannot send cookies on the upgrade request. Outsiders
    are closed with 1008 before the handshake completes.
    """
    # Services are request-scoped; a WebSocket only opens a session scope
    async with websocket.state.dishka_container() as request_container:
        jwt_service = await request_container.get(JWTService)
        user_id = jwt_service.get_user_id_from_token(auth_token or token)
        if not user_id:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        list_messages_use_case = await request_container.get(ListMessagesUseCase)
        try:
            await list_messages_use_case.execute(
                ListMessagesRequest(invite_id=invite_id, user_id=user_id)
            )
        except (DomainError, ValueError) as e:
            logfire.warn(
                "Rejected message stream",
                invite_id=invite_id,
                user_id=user_id,
                reason=str(e),
            )
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

    # Subscribe before accepting so nothing posted after the handshake is missed
    async with message_hub.subscribe(InviteId(UUID(invite_id))) as queue:
        await websocket.accept()
        await relay_messages(websocket, queue)
    logfire.info("Message stream closed", invite_id=invite_id, user_id=user_id)


async def relay_messages(
    websocket: WebSocket, queue: asyncio.Queue[Message]
) -> None:
    """Forward queued messages to the socket until either side stops.

    Clients only listen, so reading exists to surface the disconnect. When
    sending fails the read loop is stopped too, and the other way round.
    """

    async def forward() -> None:
        while True:
            message = await queue.get()
            await websocket.send_json(
                MessageResponse.from_message(message).model_dump(mode="json")
            )

    async def listen() -> None:
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass

    forwarder = asyncio.create_task(forward())
    listener = asyncio.create_task(listen())
    try:
        await asyncio.wait(
            {forwarder, listener}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        forwarder.cancel()
        listener.cancel()
        results = await asyncio.gather(forwarder, listener, return_exceptions=True)

    for result in results:
        if isinstance(result, Exception):
            logfire.warn("Message stream failed", error=str(result))
