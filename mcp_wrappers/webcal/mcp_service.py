"""
MCP wrapper for the webcal service.

This module exposes webcal management and feed retrieval as MCP tools that make
HTTP calls to the webcal service. Responses are validated with the shared
Pydantic models before being handed back to the caller.
"""
from __future__ import annotations

import typing as t

import httpx
from fastmcp import FastMCP

from services.shared.models import (
    Reminder,
    UpdateWebcalRequest,
    WebcalResponse,
    WebcalUpdate,
)
from webcal_server.config import WEBCAL_SERVICE_URL


mcp = FastMCP("WebcalMCPWrapper")

# Timeout settings for fast operations (in seconds)
STANDARD_TIMEOUT = 30.0


def _client() -> httpx.Client:
    """HTTP client bound to the webcal service."""
    return httpx.Client(base_url=WEBCAL_SERVICE_URL, timeout=STANDARD_TIMEOUT)


def _fetch_webcal_feed(guid: str) -> str:
    """
    Fetch the iCalendar feed of a webcal by its guid.
    """
    try:
        with _client() as client:
            response = client.get(f"/webcal/{guid}")
            response.raise_for_status()

        return response.text

    except httpx.TimeoutException:
        raise RuntimeError(f"Webcal feed retrieval timed out after {STANDARD_TIMEOUT} seconds")
    except httpx.HTTPStatusError as e:
        raise RuntimeError(f"HTTP error from webcal service: {e.response.status_code} {e.response.text}")
    except Exception as e:
        raise RuntimeError(f"Error calling webcal service: {str(e)}")


def _get_webcal_settings(user_id: int) -> WebcalResponse:
    """
    Get a user's webcal settings.
    """
    try:
        with _client() as client:
            response = client.get(f"/users/{user_id}/webcal")
            response.raise_for_status()

        return WebcalResponse(**response.json())

    except httpx.TimeoutException:
        raise RuntimeError(f"Webcal settings retrieval timed out after {STANDARD_TIMEOUT} seconds")
    except httpx.HTTPStatusError as e:
        raise RuntimeError(f"HTTP error from webcal service: {e.response.status_code} {e.response.text}")
    except Exception as e:
        raise RuntimeError(f"Error calling webcal service: {str(e)}")


def _update_webcal_settings(
    user_id: int,
    enabled: t.Optional[bool] = None,
    should_change_guid: t.Optional[bool] = None,
    include_start_dates: t.Optional[bool] = None,
    reminder_time: t.Optional[int] = None,
    reminder_unit: t.Optional[str] = None,
    unit_exclusions: t.Optional[list[int]] = None,
    clear_reminder: bool = False,
) -> WebcalResponse:
    """
    Update a user's webcal settings.

    Only the arguments that are given are sent. The reminder is sent when either
    of its time or unit is given, and must have both. `clear_reminder` sends a
    null reminder instead, removing it.
    """
    fields: dict[str, t.Any] = {
        "enabled": enabled,
        "should_change_guid": should_change_guid,
        "include_start_dates": include_start_dates,
        "unit_exclusions": unit_exclusions,
    }
    fields = {k: v for k, v in fields.items() if v is not None}

    try:
        if clear_reminder:
            fields["reminder"] = None
        elif reminder_time is not None or reminder_unit is not None:
            fields["reminder"] = Reminder(time=reminder_time, unit=reminder_unit)

        request = UpdateWebcalRequest(webcal=WebcalUpdate(**fields))

        with _client() as client:
            response = client.put(
                f"/users/{user_id}/webcal",
                json=request.model_dump(exclude_unset=True),
            )
            response.raise_for_status()

        return WebcalResponse(**response.json())

    except httpx.TimeoutException:
        raise RuntimeError(f"Webcal update timed out after {STANDARD_TIMEOUT} seconds")
    except httpx.HTTPStatusError as e:
        raise RuntimeError(f"HTTP error from webcal service: {e.response.status_code} {e.response.text}")
    except Exception as e:
        raise RuntimeError(f"Error calling webcal service: {str(e)}")


@mcp.tool()
def fetch_webcal_feed(guid: str) -> str:
    """Fetch the iCalendar feed of a webcal by its guid."""
    return _fetch_webcal_feed(guid)


@mcp.tool()
def get_webcal_settings(user_id: int) -> WebcalResponse:
    """Get a user's webcal settings."""
    return _get_webcal_settings(user_id)


@mcp.tool()
def update_webcal_settings(
    user_id: int,
    enabled: t.Optional[bool] = None,
    should_change_guid: t.Optional[bool] = None,
    include_start_dates: t.Optional[bool] = None,
    reminder_time: t.Optional[int] = None,
    reminder_unit: t.Optional[str] = None,
    unit_exclusions: t.Optional[list[int]] = None,
    clear_reminder: bool = False,
) -> WebcalResponse:
    """Update a user's webcal settings; reminder time and unit go together, or clear the reminder."""
    return _update_webcal_settings(
        user_id,
        enabled=enabled,
        should_change_guid=should_change_guid,
        include_start_dates=include_start_dates,
        reminder_time=reminder_time,
        reminder_unit=reminder_unit,
        unit_exclusions=unit_exclusions,
        clear_reminder=clear_reminder,
    )


def main() -> None:
    """Serve the wrapper tools over stdio."""
    mcp.run()


if __name__ == "__main__":
    main()
