from fastapi import APIRouter, Depends

from portal.api.v1.presenters import profile_schema
from portal.api.v1.schemas import (
    DeletionRequestSchema,
    DeletionResultSchema,
    ProfileSchema,
    ProfileUpdateSchema,
)
from portal.application.use_cases.profile import ProfileUseCase
from portal.infrastructure.i18n.translator import Translator
from portal.wiring.dependencies import get_profile_use_case, get_translator

router = APIRouter()

FIELD_NAMES = {
    "first_name": "firstName",
    "last_name": "lastName",
    "phone": "phone",
    "address": "address",
    "postal_code": "postalCode",
    "city": "city",
    "country": "country",
    "language": "language",
}


@router.get("/profile/{customer_id}", response_model=ProfileSchema)
async def get_profile(
    customer_id: str,
    uc: ProfileUseCase = Depends(get_profile_use_case),
    tr: Translator = Depends(get_translator),
):
    return profile_schema(await uc.get_profile(customer_id), tr)


@router.put("/profile/{customer_id}", response_model=ProfileSchema)
async def update_profile(
    customer_id: str,
    req: ProfileUpdateSchema,
    uc: ProfileUseCase = Depends(get_profile_use_case),
    tr: Translator = Depends(get_translator),
):
    changes = {FIELD_NAMES[k]: v for k, v in req.model_dump(exclude_unset=True).items()}
    view = await uc.update_profile(customer_id, changes)
    return profile_schema(view, tr, notice=tr.t("profile.saved"))


@router.post("/profile/{customer_id}/delete-request", response_model=DeletionResultSchema)
async def request_deletion(
    customer_id: str,
    req: DeletionRequestSchema,
    uc: ProfileUseCase = Depends(get_profile_use_case),
):
    flow = await uc.request_deletion(customer_id, confirmed=req.confirmed)
    return DeletionResultSchema(step=flow.step.value, message=flow.message, error=flow.error)
