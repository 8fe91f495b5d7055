"""Booking endpoints: calendar reads, submission, edit, delete."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel

from ferienhaus.api.auth import CurrentUser, get_current_user
from ferienhaus.api.errors import to_http_exception
from ferienhaus.api.state import get_service
from ferienhaus.domain.bookings import BookingService
from ferienhaus.domain.errors import BookingError
from ferienhaus.domain.segments import Status


class CreateBookingRequest(BaseModel):
    """Request body for a new booking. user_id is required for admins."""

    start_date: date | None = None
    end_date: date | None = None
    status: Status | None = None
    user_id: str | None = None


class UpdateBookingRequest(BaseModel):
    start_date: date | None = None
    end_date: date | None = None
    status: Status | None = None
    user_id: str | None = None


router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("")
def list_bookings(
    q: str | None = Query(None, description="Filter by user name or booking id"),
    status: Status | None = Query(None, description="Filter by status"),
    _user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_service),
) -> dict:
    """List bookings sorted by start date."""
    segments = service.store.list_bookings(search=q, status=status)
    return {"bookings": [s.to_dict() for s in segments]}


@router.get("/calendar")
def month_calendar(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    _user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_service),
) -> dict:
    """Per-day segment lists for one month."""
    days = service.store.month_calendar(year, month)
    return {
        "year": year,
        "month": month,
        "days": [
            {"date": day.isoformat(), "bookings": [s.to_dict() for s in segments]}
            for day, segments in days
        ],
    }


@router.get("/availability")
def availability(
    start: date = Query(...),
    end: date = Query(...),
    exclude_id: str | None = Query(None, description="Segment to ignore"),
    _user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_service),
) -> dict:
    """Whether [start, end] is free of committed bookings."""
    try:
        available = service.check_availability(start, end, exclude_id)
    except BookingError as exc:
        raise to_http_exception(exc)
    return {"start": start.isoformat(), "end": end.isoformat(), "available": available}


@router.get("/{booking_id}")
def get_booking(
    booking_id: str = Path(...),
    _user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_service),
) -> dict:
    segment = service.store.find(booking_id)
    if segment is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    result = segment.to_dict()
    if segment.original_request_id is not None:
        result["group"] = [s.id for s in service.store.group(segment.original_request_id)]
    return result


@router.post("", status_code=201)
def create_booking(
    body: CreateBookingRequest,
    user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_service),
) -> dict:
    """Submit a date range.

    Days already held by a committed booking come back as ``anfrage``
    segments instead of failing the request.
    """
    try:
        segments = service.submit(
            user,
            body.start_date,
            body.end_date,
            status=body.status,
            target_user_id=body.user_id,
        )
    except BookingError as exc:
        raise to_http_exception(exc)

    return {
        "request_id": segments[0].original_request_id,
        "bookings": [s.to_dict() for s in segments],
    }


@router.patch("/{booking_id}")
def update_booking(
    body: UpdateBookingRequest,
    booking_id: str = Path(...),
    user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_service),
) -> dict:
    try:
        segment = service.edit(
            user,
            booking_id,
            start_date=body.start_date,
            end_date=body.end_date,
            status=body.status,
            user_id=body.user_id,
        )
    except BookingError as exc:
        raise to_http_exception(exc)
    return segment.to_dict()


@router.delete("/{booking_id}")
def delete_booking(
    booking_id: str = Path(...),
    user: CurrentUser = Depends(get_current_user),
    service: BookingService = Depends(get_service),
) -> dict:
    """Delete a booking; grouped segments are deleted together."""
    try:
        removed = service.delete(user, booking_id)
    except BookingError as exc:
        raise to_http_exception(exc)
    return {"deleted": [s.id for s in removed]}
