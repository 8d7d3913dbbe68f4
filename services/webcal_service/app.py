"""
FastAPI service for webcal operations.

Users manage their webcal through `/users/{user_id}/webcal`; calendar clients
subscribe to `/webcal/{guid}`, which is public: anyone holding the guid can read
the feed. Authentication of the management endpoints is left to the deployment.
"""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.shared.models import (
    Reminder,
    UpdateWebcalRequest,
    WebcalResponse,
)
from webcal_server import config
from webcal_server.errors import MissingRequiredDate, WebcalNotFound
from webcal_server.logging_setup import setup_logging
from webcal_server.models import Webcal
from webcal_server.renderer import render
from webcal_server.store import store

logger = logging.getLogger(__name__)

CALENDAR_MEDIA_TYPE = "text/calendar"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup and cleanup on shutdown."""
    setup_logging(config.LOG_LEVEL)

    if config.DATA_FILE:
        with open(config.DATA_FILE, "r", encoding="utf-8") as f:
            store.load_records(json.load(f))

    yield


app = FastAPI(
    title="Webcal Service",
    description="REST API for managing and serving per-user task calendars",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Reject malformed requests, such as a reminder without both time and unit,
    with 400 before any endpoint runs.
    """
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def _webcal_response(webcal: Webcal | None) -> WebcalResponse:
    if webcal is None:
        return WebcalResponse(enabled=False)

    reminder = None
    if webcal.reminder:
        reminder = Reminder(time=webcal.reminder_time, unit=webcal.reminder_unit)

    return WebcalResponse(
        enabled=True,
        guid=webcal.guid,
        include_start_dates=webcal.include_start_dates,
        reminder=reminder,
        unit_exclusions=sorted(webcal.unit_exclusions),
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "webcal-service"}


@app.get("/users/{user_id}/webcal", response_model=WebcalResponse)
async def get_webcal(user_id: int) -> WebcalResponse:
    """
    Get the user's webcal settings.

    Returns `enabled: false` when the user has no webcal.
    """
    return _webcal_response(store.get_webcal_for_user(user_id))


@app.put("/users/{user_id}/webcal", response_model=WebcalResponse)
async def update_webcal(user_id: int, request: UpdateWebcalRequest) -> WebcalResponse:
    """
    Update the user's webcal.

    `enabled` creates (with defaults) or deletes the webcal; the remaining fields
    require an existing webcal. A reminder must carry both time and unit, and a
    null reminder clears it. The request body is validated before anything changes.
    """
    changes = request.webcal

    if changes.enabled is False:
        store.disable_webcal(user_id)
        return _webcal_response(None)
    if changes.enabled:
        store.enable_webcal(user_id)

    try:
        store.require_webcal_for_user(user_id)

        if changes.should_change_guid:
            store.rotate_guid(user_id)

        if "reminder" in changes.model_fields_set:
            reminder = changes.reminder or Reminder()
            store.set_reminder(user_id, reminder.time, reminder.unit)

        webcal = store.update_webcal(
            user_id,
            include_start_dates=changes.include_start_dates,
            unit_exclusions=changes.unit_exclusions,
        )

    except WebcalNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return _webcal_response(webcal)


@app.get("/webcal/{guid}")
async def get_webcal_feed(guid: str) -> Response:
    """
    Serve the iCalendar feed of the webcal identified by `guid`.
    """
    try:
        webcal = store.get_webcal_by_guid(guid)
    except WebcalNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    now = datetime.now()

    try:
        task_definitions = store.task_definitions_for(webcal, now)
        body = render(task_definitions, webcal, config.PRODUCT_NAME)
    except MissingRequiredDate as e:
        logger.warning("Could not generate webcal %s: %s", webcal.id, e)
        raise HTTPException(status_code=500, detail=f"Error generating webcal: {str(e)}")

    logger.info("Served webcal %s with %d task definition(s)", webcal.id, len(task_definitions))
    # Set directly so no charset parameter is appended
    return Response(content=body, headers={"Content-Type": CALENDAR_MEDIA_TYPE})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.WEBCAL_SERVICE_PORT)
