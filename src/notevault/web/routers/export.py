"""Data export API endpoint."""

from fastapi import APIRouter

from notevault.core.modules.export.models import ExportData
from notevault.web.deps import AppDep, AuthTokenDep
from notevault.web.openapi import ErrorResponse

router = APIRouter(tags=["export"])


@router.get(
    "/user/export",
    summary="Export account data",
    description="Export the profile and every note of the current user as JSON.",
    operation_id="exportUserData",
    responses={
        200: {"description": "Account data"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def export_user_data(app: AppDep, auth_token: AuthTokenDep) -> ExportData:
    return await app.export_user_data(auth_token)
