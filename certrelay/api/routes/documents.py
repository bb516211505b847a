from fastapi import APIRouter, Depends

from certrelay.api.schemas import CreateDocRequest, CreateDocResponse, ErrorResponse
from certrelay.core.dependencies import get_translation_service
from certrelay.services.documents import TranslationDocumentService

router = APIRouter()


@router.post(
    "/create-doc",
    response_model=CreateDocResponse,
    tags=["documents"],
    responses={
        400: {"description": "Validation Error", "model": ErrorResponse},
        500: {"description": "Configuration or upstream error", "model": ErrorResponse},
    },
)
async def create_translation_doc(
    body: CreateDocRequest,
    service: TranslationDocumentService = Depends(get_translation_service),
):
    """Render a certified-translation draft from analysis output and store it as a Google Doc."""
    item = await service.create(body.folder_id, body.folder_name, body.document_data)
    return CreateDocResponse(doc_id=item.id, doc_name=item.name, web_view_link=item.web_view_link)
