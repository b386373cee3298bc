from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.features.qr.schemas.qr import ErrorResponse, GenerateQrRequest, GenerateQrResponse
from app.features.qr.services.pipeline import Failure, QrPipeline, get_pipeline
from app.platform.response import error_response

router = APIRouter(tags=["qr"])


def is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def read_generate_request(request: Request) -> GenerateQrRequest:
    """
    Parse a JSON body into GenerateQrRequest.

    Bodies sent with any other content type, and empty bodies, are ignored
    and read as a request without a url.
    """
    content_type = request.headers.get("content-type")
    if content_type and not is_json_content_type(content_type):
        return GenerateQrRequest()

    body = await request.body()
    if not body.strip():
        return GenerateQrRequest()

    try:
        return GenerateQrRequest.model_validate_json(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


@router.post(
    "/generate",
    response_model=GenerateQrResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": GenerateQrRequest.model_json_schema()}},
        }
    },
)
async def generate_qr(
    data: GenerateQrRequest = Depends(read_generate_request),
    pipeline: QrPipeline = Depends(get_pipeline),
):
    """
    Turn a link into a scannable QR code.

    **Process:**
    1. Normalizes the link (adds `https://` when no scheme is given)
    2. Validates its format and top-level domain
    3. Confirms the domain resolves
    4. Renders a 400x400 PNG QR code with high error correction

    **Returns:** `{"dataUrl": "data:image/png;base64,..."}`
    or `{"error": "..."}` with a 400/500 status.
    """
    result = await pipeline.run(data.url)

    if isinstance(result, Failure):
        return error_response(result.error.message, status_code=result.error.status_code)

    response = GenerateQrResponse(data_url=result.data_url)
    return JSONResponse(content=response.model_dump(by_alias=True))
