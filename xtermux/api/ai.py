"""
FastAPI Router: AI assistant

- ``/api/ai/chat/completions``: raw pass-through to the completion provider
- ``/api/ai/models``: the curated model list of the model picker
- ``/api/ai/chat``: chat mode, persisted into the caller's sessions
- ``/api/ai/architect``: architect mode, returns a parsed script blueprint
"""

import json
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from openai import OpenAIError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from xtermux.api.ai_proxy import AVAILABLE_MODELS, AIProxy, AIUnavailableError, ArchitectFormatError
from xtermux.api.deps import get_ai_proxy, get_current_user, get_db
from xtermux.api.models import (
    AIModel,
    ArchitectBlueprint,
    ArchitectRequest,
    ChatReply,
    ChatRequest,
    CompletionRequest,
    Message,
)
from xtermux.database.core.funcs import create_message, create_session, get_owned_session
from xtermux.database.entities import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", dependencies=[Depends(get_current_user)])

SESSION_TITLE_LENGTH = 40


def require_configured(ai: AIProxy) -> None:
    if not ai.configured:
        raise HTTPException(status_code=503, detail="AI provider is not configured")


def provider_role(role: str) -> str:
    """Stored ``model`` turns are replayed as ``assistant`` turns."""
    return "assistant" if role == "model" else role


@router.post("/chat/completions")
async def completions(data: CompletionRequest, ai: AIProxy = Depends(get_ai_proxy)):
    """
    Forward a chat-completion request to the provider.

    Request Body
    ------------
    CompletionRequest {messages: list[dict], model: str|None, max_tokens: int|None, stream: bool}

    Returns
    -------
    JSONResponse
        The provider response unchanged.
    StreamingResponse
        Server-Sent Events when ``stream`` is true.
    """
    require_configured(ai)
    messages = [m.model_dump() for m in data.messages]

    if data.stream:
        async def generate():
            try:
                async for delta in ai.stream(messages, model=data.model, max_tokens=data.max_tokens):
                    yield f"data: {json.dumps({'response': delta, 'status': 200})}\n\n"
            except Exception:
                logger.exception("AI Proxy Error during streaming")
                yield f"data: {json.dumps({'response': '', 'status': 500, 'error': 'AI Processing Failed'})}\n\n"

        return StreamingResponse(generate(), media_type="text/event-stream")

    try:
        return await ai.complete(messages, model=data.model, max_tokens=data.max_tokens)
    except (OpenAIError, AIUnavailableError):
        logger.exception("AI Proxy Error")
        raise HTTPException(status_code=500, detail="AI Processing Failed")


@router.get("/models", response_model=List[AIModel])
def models():
    return AVAILABLE_MODELS


@router.post("/chat", response_model=ChatReply)
async def chat(
    data: ChatRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    ai: AIProxy = Depends(get_ai_proxy),
):
    """
    Chat mode: send a message within a session and store the reply.

    Without ``session_id`` a new session is opened, titled with the start of
    the message. The user's message is stored before the provider is called.

    Returns
    -------
    ChatReply
        {'session_id': int, 'message': Message} holding the assistant reply.
    """
    require_configured(ai)
    try:
        if data.session_id is None:
            session = create_session(db, user.id, title=data.message.strip()[:SESSION_TITLE_LENGTH])
        else:
            session = get_owned_session(db, data.session_id, user.id)
        history = [{"role": provider_role(m.role), "content": m.content} for m in session.messages]
        create_message(db, user.id, session_id=session.id, role="user", content=data.message)
    except SQLAlchemyError:
        logger.exception("Error preparing chat session")
        raise HTTPException(status_code=500, detail="Failed to add message")

    history.append({"role": "user", "content": data.message})
    try:
        reply = await ai.chat(history, model=data.model)
    except (OpenAIError, AIUnavailableError):
        logger.exception("AI Link Failed")
        raise HTTPException(status_code=500, detail="AI Processing Failed")

    try:
        message = create_message(db, user.id, session_id=session.id, role="assistant", content=reply)
    except SQLAlchemyError:
        logger.exception("Error storing assistant reply")
        raise HTTPException(status_code=500, detail="Failed to add message")
    return ChatReply(session_id=session.id, message=Message.model_validate(message))


@router.post("/architect", response_model=ArchitectBlueprint)
async def architect(data: ArchitectRequest, ai: AIProxy = Depends(get_ai_proxy)):
    """
    Architect mode: ask for a Termux script blueprint.

    Raises
    ------
    HTTPException 502
        If the reply does not contain a JSON object.
    """
    require_configured(ai)
    try:
        blueprint = await ai.architect(data.prompt, model=data.model)
    except (OpenAIError, AIUnavailableError):
        logger.exception("AI Proxy Error")
        raise HTTPException(status_code=500, detail="AI Processing Failed")
    except ArchitectFormatError as exc:
        logger.warning("Architect reply rejected: %s", exc)
        raise HTTPException(status_code=502, detail="Build sequence failed.")
    try:
        return ArchitectBlueprint.model_validate(blueprint)
    except ValueError:
        logger.warning("Architect reply has unexpected field types")
        raise HTTPException(status_code=502, detail="Build sequence failed.")
