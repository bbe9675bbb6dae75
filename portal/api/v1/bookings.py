from fastapi import APIRouter, Depends, Query

from portal.api.v1.presenters import booking_schema
from portal.api.v1.schemas import (
    BookingListSchema,
    BookingSchema,
    CancelRequestSchema,
    DateRangeSchema,
    ModificationPreviewSchema,
)
from portal.application.use_cases.bookings import BookingsUseCase
from portal.application.use_cases.modify_booking import ModifyBookingUseCase
from portal.core.config import settings
from portal.infrastructure.i18n.translator import Translator
from portal.wiring.dependencies import (
    get_bookings_use_case,
    get_modify_booking_use_case,
    get_translator,
)

router = APIRouter()


@router.get("/bookings", response_model=BookingListSchema)
async def list_bookings(
    customer_id: str = Query(..., alias="customerId"),
    uc: BookingsUseCase = Depends(get_bookings_use_case),
    tr: Translator = Depends(get_translator),
):
    overview = await uc.list_bookings(customer_id)
    return BookingListSchema(
        upcoming=[booking_schema(v, tr, settings.REFUND_WINDOW_HOURS) for v in overview.upcoming],
        past=[booking_schema(v, tr, settings.REFUND_WINDOW_HOURS) for v in overview.past],
    )


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
async def get_booking(
    booking_id: str,
    uc: BookingsUseCase = Depends(get_bookings_use_case),
    tr: Translator = Depends(get_translator),
):
    view = await uc.get_booking(booking_id)
    return booking_schema(view, tr, settings.REFUND_WINDOW_HOURS)


@router.post("/bookings/{booking_id}/modify/estimate", response_model=ModificationPreviewSchema)
async def estimate_modification(
    booking_id: str,
    req: DateRangeSchema,
    uc: ModifyBookingUseCase = Depends(get_modify_booking_use_case),
):
    result = await uc.estimate(booking_id, req.start_date, req.end_date, req.start_time, req.end_time)
    return ModificationPreviewSchema(
        original_days=result.original_days,
        new_days=result.new_days,
        estimated_price=result.estimated_price,
        has_changes=result.has_changes,
        is_valid=result.is_valid,
    )


@router.put("/bookings/{booking_id}/modify", response_model=BookingSchema)
async def modify_booking(
    booking_id: str,
    req: DateRangeSchema,
    uc: ModifyBookingUseCase = Depends(get_modify_booking_use_case),
    tr: Translator = Depends(get_translator),
):
    view = await uc.submit(booking_id, req.start_date, req.end_date, req.start_time, req.end_time)
    return booking_schema(view, tr, settings.REFUND_WINDOW_HOURS)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
async def cancel_booking(
    booking_id: str,
    req: CancelRequestSchema,
    uc: BookingsUseCase = Depends(get_bookings_use_case),
    tr: Translator = Depends(get_translator),
):
    view = await uc.cancel_booking(booking_id, confirmed=req.confirmed)
    return booking_schema(view, tr, settings.REFUND_WINDOW_HOURS)
