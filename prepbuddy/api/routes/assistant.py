"""
AI assistant relay: POST a message (plus optional history/context) and get either one JSON answer
or a streamed text/plain body of `data: ...` events ending in `data: [DONE]`.

Only a missing/blank message is an error (400 {error}). Anything else that goes wrong is answered
with a canned fallback (200, fallback: true).
"""
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from prepbuddy.api.deps import get_relay, get_user_id
from prepbuddy.core.constants import STREAM_HEADERS, STREAM_MEDIA_TYPE
from prepbuddy.core.errors import PersistenceError, ValidationError
from prepbuddy.db.session import get_db
from prepbuddy.services.ai.fallback import canned_answer
from prepbuddy.services.ai.relay import ChatRelay, enhance_message
from prepbuddy.services.ai.types import ChatTurn
from prepbuddy.services.chat_history_service import list_chat_history, save_chat_message

router = APIRouter()
logger = logging.getLogger(__name__)


class HistoryEntry(BaseModel):
    role: str = "user"
    content: str = ""
    timestamp: str | None = None


class AssistantRequest(BaseModel):
    message: str | None = None
    context: str | None = None
    userId: str | None = None
    stream: bool = False
    conversationHistory: list[HistoryEntry] = Field(default_factory=list)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _answer(text: str, fallback: bool = False) -> dict[str, Any]:
    body: dict[str, Any] = {"response": text, "timestamp": _timestamp()}
    if fallback:
        body["fallback"] = True
    return body


def _history(body: AssistantRequest) -> list[ChatTurn]:
    return [ChatTurn(role=h.role, content=h.content, timestamp=h.timestamp) for h in body.conversationHistory]


def _save_history(db: Session, user_id: str, message: str, response: str) -> None:
    try:
        save_chat_message(db, user_id, message, response)
    except PersistenceError as e:
        logger.warning("Saving chat history for %s failed: %s", user_id, e, exc_info=True)


@router.post("")
async def ai_assistant(
    request: Request,
    db: Session = Depends(get_db),
    relay: ChatRelay = Depends(get_relay),
):
    """
    Relay a chat message to the first available provider (primary, then secondary, then canned answer).
    Body: { message, context?, userId?, stream?, conversationHistory? }.
    """
    try:
        body = AssistantRequest.model_validate(await request.json())
        message = body.message or ""
        if not message.strip():
            raise ValidationError("Message is required")
        prompt = enhance_message(message, body.context)
        history = _history(body)

        if body.stream:
            chunks = await relay.open_stream(prompt, history)
            return StreamingResponse(chunks, media_type=STREAM_MEDIA_TYPE, headers=STREAM_HEADERS)

        answer = await relay.respond(prompt, history)
        if body.userId:
            _save_history(db, body.userId, message, answer.response)
        return _answer(answer.response, fallback=answer.fallback)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception as e:  # noqa: BLE001
        logger.exception("AI assistant request failed; answering with fallback")
        return _answer(canned_answer(str(e) or "general help"), fallback=True)


@router.get("/history")
def chat_history(
    limit: int = 50,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Saved (message, answer) pairs for this user, newest first."""
    return {"history": list_chat_history(db, user_id, limit=min(limit, 200))}
