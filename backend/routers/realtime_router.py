# backend/routers/realtime_router.py
import json
import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from queries import admin_queries
from services.auth_service import authenticate_admin, AuthError, PermissionDenied
from services.broadcaster import Broadcaster, ADMIN_GROUP

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


def _check_admin(session_factory, token: Optional[str]) -> int:
    db = session_factory()
    try:
        return authenticate_admin(db, token).id
    finally:
        db.close()


def _load_stats(session_factory):
    db = session_factory()
    try:
        return admin_queries.get_realtime_stats(db)
    finally:
        db.close()


@router.websocket("/ws/admin")
async def admin_socket(websocket: WebSocket, token: Optional[str] = Query(default=None)):
    broadcaster: Broadcaster = websocket.app.state.broadcaster
    session_factory = websocket.app.state.session_factory

    try:
        admin_id = await run_in_threadpool(_check_admin, session_factory, token)
    except (AuthError, PermissionDenied) as e:
        logger.warning(f"Rejected admin socket: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    broadcaster.join(ADMIN_GROUP, websocket)
    logger.info(f"Admin {admin_id} connected ({broadcaster.group_size(ADMIN_GROUP)} in '{ADMIN_GROUP}')")

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", status.WS_1000_NORMAL_CLOSURE))
            if frame.get("text") is None:
                logger.debug(f"Ignoring binary socket frame from admin {admin_id}")
                continue
            try:
                message = json.loads(frame["text"])
            except ValueError:
                logger.debug(f"Ignoring malformed socket message from admin {admin_id}")
                continue
            event = message.get("event") if isinstance(message, dict) else None
            if event != "requestStats":
                logger.debug(f"Ignoring socket event {event!r} from admin {admin_id}")
                continue
            try:
                stats = await run_in_threadpool(_load_stats, session_factory)
            except Exception:
                logger.exception("Error sending stats")
                await broadcaster.send(websocket, "statsError", {"error": "Unable to load stats"})
                continue
            await broadcaster.send(websocket, "statsUpdate", stats)
    except WebSocketDisconnect as e:
        logger.debug(f"Admin {admin_id} socket closed with code {e.code}")
    finally:
        broadcaster.leave(ADMIN_GROUP, websocket)
        logger.info(f"Admin {admin_id} disconnected")
