from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter(tags=["Notifications"])


@router.websocket("/ws/notifications")
async def notifications(websocket: WebSocket):
    notifier = websocket.app.state.notifier
    await notifier.connect(websocket)
    try:
        # Clients only listen; reading keeps the socket open until they leave
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        notifier.disconnect(websocket)
