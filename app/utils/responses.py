from typing import Any, Dict

from fastapi.responses import JSONResponse

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def success_response(data: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, **data},
        headers=CORS_HEADERS,
    )


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message or "Upload failed"},
        headers=CORS_HEADERS,
    )
