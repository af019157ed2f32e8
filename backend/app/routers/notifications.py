"""Push notification router."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from app.services.notification_service import notification_service

router = APIRouter()


class PushRequest(BaseModel):
    subscription: dict | None = None
    message: str | None = None


@router.post("/push-notification")
async def push_notification(req: PushRequest):
    try:
        payload = await notification_service.send(req.subscription or {}, req.message or "")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "payload": payload}
