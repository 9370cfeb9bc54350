"""Session endpoints driving the capture and conversation lifecycle."""

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Request, status

from artwork_agent.api.models import CaptureRequest, SessionResponse
from artwork_agent.domain.images import ImagePayload
from artwork_agent.domain.session import SessionState
from artwork_agent.services.session import ArtworkSession

if TYPE_CHECKING:
    from artwork_agent.containers import AppContainer

router = APIRouter(prefix="/session", tags=["session"])


def _get_session(request: Request) -> ArtworkSession:
    container: AppContainer = request.app.state.container
    return container.artwork_session


def _conflict(operation: str, session: ArtworkSession) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Cannot {operation} while {session.state}",
    )


@router.get("")
async def get_session(
    session: ArtworkSession = Depends(_get_session),
) -> dict[str, object]:
    """Return the current session snapshot."""
    return SessionResponse.from_snapshot(session.snapshot()).to_json_dict()


@router.post("/capture")
async def capture(
    body: CaptureRequest | None = None,
    session: ArtworkSession = Depends(_get_session),
) -> dict[str, object]:
    """Capture an uploaded image, or the current camera frame, and analyze it."""
    if not session.begin_capture():
        raise _conflict("capture", session)
    payload = None
    if body is not None and body.image_data:
        payload = ImagePayload.from_base64(body.image_data)
    await session.analyze(payload)
    return SessionResponse.from_snapshot(session.snapshot()).to_json_dict()


@router.post("/conversation")
async def start_conversation(
    session: ArtworkSession = Depends(_get_session),
) -> dict[str, object]:
    """Start a voice session about the identified artwork."""
    if session.state is not SessionState.IDENTIFIED:
        raise _conflict("start a conversation", session)
    if not await session.start_conversation() and session.error is None:
        raise _conflict("start a conversation", session)
    return SessionResponse.from_snapshot(session.snapshot()).to_json_dict()


@router.delete("/conversation")
async def end_conversation(
    session: ArtworkSession = Depends(_get_session),
) -> dict[str, object]:
    """End the voice session and keep the artwork."""
    if not await session.end_conversation():
        raise _conflict("end the conversation", session)
    return SessionResponse.from_snapshot(session.snapshot()).to_json_dict()


@router.post("/reset")
async def reset(
    session: ArtworkSession = Depends(_get_session),
) -> dict[str, object]:
    """Tear down the voice session and forget the artwork."""
    if not await session.reset():
        raise _conflict("reset", session)
    return SessionResponse.from_snapshot(session.snapshot()).to_json_dict()
