from fastapi import APIRouter, Depends, Response

from portal.api.v1.schemas import CustomerSchema, LoginRequestSchema, VerifyCodeRequestSchema
from portal.application.use_cases.login import LoginUseCase
from portal.wiring.dependencies import get_login_use_case

router = APIRouter()


@router.post("/login", status_code=204)
async def request_code(
    req: LoginRequestSchema,
    uc: LoginUseCase = Depends(get_login_use_case),
) -> Response:
    await uc.request_code(req.email)
    return Response(status_code=204)


@router.post("/verify-code", response_model=CustomerSchema)
async def verify_code(
    req: VerifyCodeRequestSchema,
    uc: LoginUseCase = Depends(get_login_use_case),
):
    customer = await uc.verify_code(req.email, req.code)
    return CustomerSchema(
        id=customer.id,
        first_name=customer.first_name,
        last_name=customer.last_name,
        email=customer.email,
    )
