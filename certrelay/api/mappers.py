from certrelay.api.schemas import AnalyzeResponse, ClassificationOut, DetailsOut, FileInfo
from certrelay.domain.models import PipelineResult
from certrelay.services.uploads import StoredUpload


def build_analyze_response(result: PipelineResult, upload: StoredUpload) -> AnalyzeResponse:
    """
    Map a pipeline result to the AnalyzeResponse DTO.
    Pure transformation, no side effects.
    """
    details = None
    if result.details is not None:
        details = DetailsOut(
            text=result.details.text,
            fields=result.details.fields,
            schema_version=result.details.schema_version,
        )
    return AnalyzeResponse(
        classification=ClassificationOut(
            text=result.classification.raw_text,
            parsed=result.classification.parsed,
        ),
        details=details,
        document_type=result.document_type.value,
        file_info=FileInfo(name=upload.original_name, size=upload.size, type=upload.mime_type),
    )
