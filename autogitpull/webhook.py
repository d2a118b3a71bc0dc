"""FastAPI application receiving deployment webhooks."""

from typing import Callable, Optional
from urllib.parse import parse_qsl

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel

from autogitpull.core.config_loader import AppConfig
from autogitpull.deployer import Deployer
from autogitpull.exceptions import HookError, ScriptExecutionError, UnauthorizedCaller
from autogitpull.models.request import RequestContext, headers_to_meta

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class DeployResponse(BaseModel):
    status: str
    exit_code: int


class HealthResponse(BaseModel):
    status: str
    service: str


async def build_request_context(request: Request) -> RequestContext:
    """Translate an incoming HTTP request into a networked RequestContext."""
    body = await request.body()

    form = {}
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPE) and body:
        form = dict(parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True))

    return RequestContext.networked(
        remote_addr=request.client.host if request.client else None,
        headers=headers_to_meta(request.headers),
        form=form,
        body=body,
    )


def create_app(
    config: AppConfig,
    deployer_factory: Optional[Callable[[], Deployer]] = None,
) -> FastAPI:
    """
    Create the webhook application.

    Args:
        config: Loaded configuration
        deployer_factory: Builds a Deployer per request (defaults to one from config)
    """
    if deployer_factory is None:

        def deployer_factory() -> Deployer:
            return Deployer(config.deployment, transport=config.build_transport())

    app = FastAPI(
        title="autogitpull",
        description="Pull the latest commits when a hosting provider calls",
        version="1.0.0",
    )

    @app.get("/health", response_model=HealthResponse)
    def health():
        """Health check."""
        return {"status": "ok", "service": "autogitpull"}

    @app.post(config.server.path, response_model=DeployResponse)
    def deploy(context: RequestContext = Depends(build_request_context)):
        """Run a deployment for an allow-listed caller."""
        deployer = deployer_factory()

        try:
            outcome = deployer.deploy(context)
        except UnauthorizedCaller as e:
            raise HTTPException(status_code=403, detail=e.message)
        except ScriptExecutionError as e:
            raise HTTPException(
                status_code=500,
                detail={"error": e.message, "exit_code": e.outcome.exit_code},
            )
        except HookError as e:
            raise HTTPException(status_code=500, detail={"error": e.message, "exit_code": 0})

        return {"status": "success", "exit_code": outcome.exit_code}

    return app


def start_server(config: AppConfig, host: Optional[str] = None, port: Optional[int] = None):
    """Start the webhook server."""
    app = create_app(config)
    uvicorn.run(
        app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level="info",
    )
