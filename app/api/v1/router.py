"""Main API router combining all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import chat

api_router = APIRouter()

# Conversation endpoint
api_router.include_router(chat.router, tags=["Chat"])
