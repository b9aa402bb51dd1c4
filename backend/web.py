from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apis.articles import router as articles_router
from apis.auth import router as auth_router
from apis.categories import router as categories_router
from apis.public import router as public_router
from core.common.app_settings import settings
from core.common.errors import WorkflowError, UpstreamFailure
from core.common.log import logger
from schemas import error_response


app = FastAPI(title=settings.web_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    if isinstance(exc, UpstreamFailure):
        logger.error(f"{request.method} {request.url.path} 外部服务失败: {exc.message}")
    return JSONResponse(
        status_code=exc.http_status,
        content=error_response(code=exc.http_status, message=exc.message, data=exc.to_dict()),
    )


for router in (auth_router, articles_router, public_router, categories_router):
    app.include_router(router, prefix=settings.api_base)
