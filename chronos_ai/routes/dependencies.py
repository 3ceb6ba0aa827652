from fastapi import Request

from ..services import NarrativeAIService


def get_service(request: Request) -> NarrativeAIService:
    return request.app.state.service
