# services/chat/src/chat/app.py

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from libs.relay_shared.guardrails import (
    GuardrailViolation,
    handle_guardrail_violation,
    validate_input_length,
    validate_required_text,
)
from libs.relay_shared.logging import get_logger
from libs.relay_shared.middleware import CorrelationIdMiddleware, MetricsMiddleware

from .collaborators import UsersApiClient
from .config import ChatConfig
from .exceptions import ProviderError
from .models import ChatRequest
from .orchestrator import ChatOrchestrator
from .providers.factory import create_provider
from .tools import build_registry
from .transport import NDJSON_MEDIA_TYPE, STREAM_HEADERS, ndjson_stream

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


# --- Dependencies ----------------------------------------------------------------


def get_orchestrator(request: Request) -> ChatOrchestrator:
    return request.app.state.orchestrator


def get_config(request: Request) -> ChatConfig:
    return request.app.state.config


# --- Health Check Endpoint ------------------------------------------------------


@router.get("/health")
async def health(orchestrator: ChatOrchestrator = Depends(get_orchestrator)):
    """Report whether the model backend is reachable."""
    provider = orchestrator.provider
    try:
        details = await provider.health()
    except ProviderError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "error": str(e), **provider.endpoint_info()},
        )
    return {"status": "healthy", **details}


# --- Streaming Chat Endpoint ----------------------------------------------------


@router.post("/chat")
async def chat(
    req: ChatRequest,
    request: Request,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
    config: ChatConfig = Depends(get_config),
):
    """
    Stream the tool-calling conversation as newline-delimited JSON frames.
    """
    validate_required_text(req.message)
    validate_input_length(req.message, config.max_message_length)

    correlation_id = getattr(request.state, "correlation_id", None)
    logger.info(
        f"Chat request {correlation_id} with {len(req.conversation_history)} prior turns"
    )

    events = orchestrator.run(req.message, req.conversation_history)
    return StreamingResponse(
        ndjson_stream(events),
        media_type=NDJSON_MEDIA_TYPE,
        headers=STREAM_HEADERS,
    )


# --- Lifespan / Startup & Shutdown ------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield  # application is running

    # SHUTDOWN
    users_client: Optional[UsersApiClient] = app.state.users_client
    if users_client is not None:
        await users_client.aclose()
    await app.state.orchestrator.provider.aclose()


def build_orchestrator(config: ChatConfig, users_client: UsersApiClient) -> ChatOrchestrator:
    """Wire the registry, the selected provider and the orchestrator together."""
    registry = build_registry(users_client)
    provider = create_provider(config.llm_settings(), registry)
    logger.info(
        f"Using {provider.display_name} model {config.llm_settings().model} "
        f"with {len(registry)} tools"
    )
    return ChatOrchestrator(
        provider=provider,
        registry=registry,
        provider_timeout=config.provider_timeout,
    )


def create_app(
    config: Optional[ChatConfig] = None,
    orchestrator: Optional[ChatOrchestrator] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or ChatConfig()

    users_client = None
    if orchestrator is None:
        users_client = UsersApiClient(config.users_api_url, timeout=config.tool_timeout)
        orchestrator = build_orchestrator(config, users_client)

    app = FastAPI(
        title="Chat Relay Service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.orchestrator = orchestrator
    app.state.users_client = users_client

    app.add_middleware(MetricsMiddleware, exclude_paths=["/api/health"])
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GuardrailViolation)
    async def guardrail_exception_handler(request: Request, exc: GuardrailViolation):
        """Handle guardrail violations with proper error responses."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "GuardrailViolation",
                "detail": handle_guardrail_violation(exc),
            },
        )

    app.include_router(router)
    return app
