"""FastAPI routes for the shared dark/light flag."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(prefix="/theme", tags=["theme"])


class ThemePayload(BaseModel):
	is_dark: bool


@router.get("")
async def get_theme_route(request: Request):
	return request.app.state.theme.to_dict()


@router.post("/toggle")
async def toggle_theme_route(request: Request):
	theme = request.app.state.theme
	theme.toggle()
	return theme.to_dict()


@router.put("")
async def set_theme_route(request: Request, payload: ThemePayload):
	theme = request.app.state.theme
	theme.set(payload.is_dark)
	return theme.to_dict()
