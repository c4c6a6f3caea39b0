from fastapi import APIRouter

from scheduler.api.v1 import health, meetings, rooms, video_accounts


api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(meetings.router, prefix="/meetings", tags=["meetings"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
api_router.include_router(video_accounts.router, prefix="/video-accounts", tags=["video-accounts"])
