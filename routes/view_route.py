"""FastAPI routes for upload views."""

from typing import List

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from controllers.view_controller import (
	clear_notifications,
	close_view,
	get_view,
	open_view,
	replay_view,
	reset_view,
	speech_ended,
	toggle_speech,
	upload_image,
)

router = APIRouter(prefix="/views", tags=["views"])


@router.post("")
async def open_view_route(request: Request):
	try:
		return await open_view(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{view_id}")
async def get_view_route(request: Request, view_id: str):
	try:
		return await get_view(request, view_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{view_id}")
async def close_view_route(request: Request, view_id: str):
	try:
		return await close_view(request, view_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{view_id}/image")
async def upload_image_route(request: Request, view_id: str, files: List[UploadFile] = File(...)):
	"""Accept a drop or file-picker selection; only the first file is used."""
	try:
		return await upload_image(request, view_id, files)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{view_id}/reset")
async def reset_view_route(request: Request, view_id: str):
	try:
		return await reset_view(request, view_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{view_id}/replay")
async def replay_view_route(request: Request, view_id: str):
	try:
		return await replay_view(request, view_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{view_id}/speech")
async def toggle_speech_route(request: Request, view_id: str):
	try:
		return await toggle_speech(request, view_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{view_id}/speech/ended")
async def speech_ended_route(request: Request, view_id: str):
	try:
		return await speech_ended(request, view_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{view_id}/notifications/clear")
async def clear_notifications_route(request: Request, view_id: str):
	try:
		return await clear_notifications(request, view_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
