import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from app.core.dependencies import get_auth_service
from app.modules.auth.service import AuthService
from app.modules.realtime.manager import manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws/changes")
async def changes(
    websocket: WebSocket,
    token: str = Query(...),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Push {type: "refetch", table, event} whenever a chat list changes"""
    try:
        user_data = auth_service.get_current_user(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    user_id = user_data["id"]
    await manager.connect(user_id, websocket)
    try:
        while True:
            text = await websocket.receive_text()
            if text == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.debug(f"Realtime client disconnected for user {user_id}")
    finally:
        manager.disconnect(user_id, websocket)
