# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                 import syncwatch_FastAPI, Request, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic             import ValidationError
from Libs                 import StorageError

@syncwatch_FastAPI.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@syncwatch_FastAPI.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Pydantic validation hatalarını JSON olarak döndür"""
    errors   = exc.errors()
    messages = [f"{'.'.join(map(str, e['loc'])) or 'body'}: {e['msg']}" for e in errors]

    return JSONResponse(
        status_code = 422,
        content     = {"success": False, "message": " | ".join(messages)}
    )

@syncwatch_FastAPI.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    """Kalıcı depo erişilemez"""
    return JSONResponse(
        status_code = 503,
        content     = {"success": False, "message": str(exc)}
    )
