from fastapi import APIRouter, Depends, HTTPException, Response

from portal.api.v1.presenters import extension_schema
from portal.api.v1.schemas import ExtensionDatesSchema, ExtensionSessionSchema, PaymentMethodSchema
from portal.application.exceptions import PortalValidationError
from portal.application.ports.portal_api import PortalApiPort
from portal.application.ports.session_store import ExtensionSessionStorePort
from portal.application.use_cases.extend_booking import ExtensionWorkflow
from portal.application.utils.booking_state import evaluate
from portal.infrastructure.i18n.translator import Translator
from portal.wiring.dependencies import get_portal_api, get_session_store, get_translator

router = APIRouter()


def _workflow(session_id: str, store: ExtensionSessionStorePort, api: PortalApiPort) -> ExtensionWorkflow:
    record = store.get(session_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Extension session not found")
    booking, session = record
    return ExtensionWorkflow(api, booking, session, on_change=lambda s: store.save(session_id, s))


@router.post("/bookings/{booking_id}/extensions", response_model=ExtensionSessionSchema, status_code=201)
async def start_extension(
    booking_id: str,
    api: PortalApiPort = Depends(get_portal_api),
    store: ExtensionSessionStorePort = Depends(get_session_store),
    tr: Translator = Depends(get_translator),
):
    booking = await api.get_booking(booking_id)
    if not evaluate(booking).can_extend:
        raise PortalValidationError("This booking cannot be extended", code="extend.notAllowed")
    workflow = ExtensionWorkflow(api, booking)
    session_id = store.create(booking, workflow.session)
    return extension_schema(session_id, workflow, tr)


@router.get("/extensions/{session_id}", response_model=ExtensionSessionSchema)
async def get_extension(
    session_id: str,
    api: PortalApiPort = Depends(get_portal_api),
    store: ExtensionSessionStorePort = Depends(get_session_store),
    tr: Translator = Depends(get_translator),
):
    return extension_schema(session_id, _workflow(session_id, store, api), tr)


@router.put("/extensions/{session_id}/dates", response_model=ExtensionSessionSchema)
async def edit_dates(
    session_id: str,
    req: ExtensionDatesSchema,
    api: PortalApiPort = Depends(get_portal_api),
    store: ExtensionSessionStorePort = Depends(get_session_store),
    tr: Translator = Depends(get_translator),
):
    workflow = _workflow(session_id, store, api)
    workflow.edit(req.new_end_date, req.new_end_time)
    return extension_schema(session_id, workflow, tr)


@router.post("/extensions/{session_id}/check", response_model=ExtensionSessionSchema)
async def check_availability(
    session_id: str,
    api: PortalApiPort = Depends(get_portal_api),
    store: ExtensionSessionStorePort = Depends(get_session_store),
    tr: Translator = Depends(get_translator),
):
    workflow = _workflow(session_id, store, api)
    await workflow.check_availability()
    return extension_schema(session_id, workflow, tr)


@router.post("/extensions/{session_id}/other-dates", response_model=ExtensionSessionSchema)
async def choose_other_dates(
    session_id: str,
    api: PortalApiPort = Depends(get_portal_api),
    store: ExtensionSessionStorePort = Depends(get_session_store),
    tr: Translator = Depends(get_translator),
):
    workflow = _workflow(session_id, store, api)
    workflow.choose_other_dates()
    return extension_schema(session_id, workflow, tr)


@router.post("/extensions/{session_id}/payment-method", response_model=ExtensionSessionSchema)
async def select_payment_method(
    session_id: str,
    req: PaymentMethodSchema,
    api: PortalApiPort = Depends(get_portal_api),
    store: ExtensionSessionStorePort = Depends(get_session_store),
    tr: Translator = Depends(get_translator),
):
    workflow = _workflow(session_id, store, api)
    workflow.select_payment_method(req.method)
    return extension_schema(session_id, workflow, tr)


@router.post("/extensions/{session_id}/back", response_model=ExtensionSessionSchema)
async def back_to_payment_choice(
    session_id: str,
    api: PortalApiPort = Depends(get_portal_api),
    store: ExtensionSessionStorePort = Depends(get_session_store),
    tr: Translator = Depends(get_translator),
):
    workflow = _workflow(session_id, store, api)
    workflow.back()
    return extension_schema(session_id, workflow, tr)


@router.post("/extensions/{session_id}/confirm", response_model=ExtensionSessionSchema)
async def confirm_extension(
    session_id: str,
    api: PortalApiPort = Depends(get_portal_api),
    store: ExtensionSessionStorePort = Depends(get_session_store),
    tr: Translator = Depends(get_translator),
):
    workflow = _workflow(session_id, store, api)
    await workflow.confirm()
    return extension_schema(session_id, workflow, tr)


@router.delete("/extensions/{session_id}", status_code=204)
async def discard_extension(
    session_id: str,
    store: ExtensionSessionStorePort = Depends(get_session_store),
) -> Response:
    store.delete(session_id)
    return Response(status_code=204)
