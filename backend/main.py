"""Main entry point for the coding assistant API."""
import json
import logging

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from config import PORT, CORS_ORIGINS, LOG_LEVEL, LOG_FORMAT
from logger import setup_logging
from models.api import FieldViolation
from models.envelope import envelope_to_payload
from services.assistant_orchestrator import AssistOrchestrator
from services.conversation_manager import ConversationManager
from services.errors import AssistError, RequestValidationError
from services.interaction_logger import InteractionLogger
from services.llm_client import LLMClient

# Initialize logging
setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Coding Assistant",
    description="Conversation-aware coding assistant backed by an LLM",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
conversation_manager: ConversationManager = None
llm_client: LLMClient = None
interaction_logger: InteractionLogger = None
orchestrator: AssistOrchestrator = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global conversation_manager, llm_client, interaction_logger, orchestrator

    logger.info("Initializing coding assistant services...")

    try:
        conversation_manager = ConversationManager()
        logger.info("Initialized ConversationManager")

        llm_client = LLMClient()
        logger.info("Initialized LLMClient")

        interaction_logger = InteractionLogger()
        logger.info("Initialized InteractionLogger")

        orchestrator = AssistOrchestrator(
            conversation_manager=conversation_manager,
            llm_client=llm_client,
            interaction_logger=interaction_logger
        )

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.on_event("shutdown")
async def shutdown_event():
    if interaction_logger is not None:
        interaction_logger.close()


@app.exception_handler(AssistError)
async def assist_error_handler(request: Request, exc: AssistError) -> JSONResponse:
    """Render pipeline errors without internal detail."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error processing {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Internal Server Error"}
    )


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Coding Assistant API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "coding-assistant",
        "version": "1.0.0"
    }


@app.post("/api/assist")
async def assist_endpoint(request: Request, background_tasks: BackgroundTasks) -> JSONResponse:
    """
    Answer a coding question in the context of the session's history.

    The body must carry userId, sessionId and input. The response is either
    {"type": "solution", "data": {...}} or {"type": "response", "text": ...}.
    The turn is written to history after the response has been sent; a
    failed write is logged and does not affect the response.

    Raises:
        RequestValidationError: 400, with per-field details
        StoreUnavailableError: 500, history could not be read
        UpstreamError: 500, the model call failed
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise RequestValidationError([FieldViolation(field="body", message="must be valid JSON")])

    answered = await run_in_threadpool(orchestrator.answer, payload)
    background_tasks.add_task(orchestrator.record, answered.turn)

    logger.info(
        f"Answered request with {answered.envelope.type} in {answered.llm_response.latency_ms}ms",
        extra={"user_id": answered.request.user_id, "session_id": answered.request.session_id}
    )
    return JSONResponse(status_code=200, content=envelope_to_payload(answered.envelope))


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Coding Assistant API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
