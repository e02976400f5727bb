"""
Public API routes - no authentication required
"""

from fastapi import APIRouter
from fastapi.responses import Response

from weddingplanner.services.excel_service import ExcelService
from weddingplanner.services.template_service import TemplateService
from weddingplanner.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/template/guest_list_template.xlsx")
async def download_general_template():
    """Download the blank guest list workbook"""
    template_bytes = ExcelService.create_template()

    return Response(
        content=template_bytes,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=guest_list_template.xlsx"}
    )

@router.get("/templates/variables")
async def list_template_variables():
    """Placeholders usable in email templates, grouped by category"""
    return success_response(
        message="Template variables retrieved",
        data=TemplateService.variable_catalogue()
    )
