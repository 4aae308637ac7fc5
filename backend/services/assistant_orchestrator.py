"""Conversation-aware orchestration of a single assist request."""
import logging
from dataclasses import dataclass
from typing import Any, Optional

from models.api import AssistRequest
from models.conversation import Turn
from models.envelope import ResponseEnvelope
from services.errors import StoreUnavailableError, UpstreamError
from services.history_window import build_context_pairs
from services.llm_client import LLMClientError, LLMResponse
from services.request_validator import validate_request
from services.response_classifier import ResponseClassifier
from config import HISTORY_WINDOW

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnsweredRequest:
    """
    A request that has been answered but not yet recorded.

    Attributes:
        request: Validated request
        envelope: Classified response for the caller
        turn: Turn to persist, carrying the raw model output
        classification: Classifier rule that produced the envelope
        llm_response: Completion metadata
        history_turns: Number of context pairs sent to the model
    """
    request: AssistRequest
    envelope: ResponseEnvelope
    turn: Turn
    classification: str
    llm_response: LLMResponse
    history_turns: int


@dataclass(frozen=True)
class AssistOutcome:
    """
    Result of a full assist run.

    ``persisted`` is False when the answer was produced but the history
    write failed (degraded success); ``persist_error`` then holds the cause.
    """
    envelope: ResponseEnvelope
    persisted: bool
    persist_error: Optional[StoreUnavailableError] = None


def turn_from_completion(request: AssistRequest, raw_output: str) -> Turn:
    """Build the turn to persist from the raw, unclassified model output."""
    return Turn(
        user_id=request.user_id,
        session_id=request.session_id,
        user_input=request.input,
        assistant_raw=raw_output
    )


class AssistOrchestrator:
    """Validates, loads history, calls the model, classifies and records."""

    def __init__(
        self,
        conversation_manager,
        llm_client,
        interaction_logger=None,
        classifier: Optional[ResponseClassifier] = None,
        history_window: int = HISTORY_WINDOW
    ):
        """
        Args:
            conversation_manager: Store with fetch_recent() and append()
            llm_client: Model client with complete()
            interaction_logger: Optional InteractionLogger
            classifier: Response classifier (default ResponseClassifier())
            history_window: Number of recent turns used as context
        """
        self.conversation_manager = conversation_manager
        self.llm_client = llm_client
        self.interaction_logger = interaction_logger
        self.classifier = classifier or ResponseClassifier()
        self.history_window = history_window

    def answer(self, payload: Any) -> AnsweredRequest:
        """
        Produce the response for a request without recording it.

        Args:
            payload: Decoded request body

        Returns:
            AnsweredRequest with the envelope and the turn to record

        Raises:
            RequestValidationError: Payload is invalid; nothing else was called
            StoreUnavailableError: History could not be read; the model was not called
            UpstreamError: The model call failed
        """
        request = validate_request(payload)
        log_context = {"user_id": request.user_id, "session_id": request.session_id}

        # Read failures propagate: answering without memory is worse than failing
        turns = self.conversation_manager.fetch_recent(
            request.user_id, request.session_id, limit=self.history_window
        )
        history = build_context_pairs(turns)

        try:
            llm_response = self.llm_client.complete(request.input, history)
        except LLMClientError as e:
            logger.error(f"LLM call failed: {e.error.code}", extra={**log_context, "error_code": e.error.code})
            raise UpstreamError(e.error) from e

        classification = self.classifier.classify(llm_response.text)
        if classification.rule == ResponseClassifier.AMBIGUOUS:
            logger.warning("Model output matched neither response shape; returning it as text", extra=log_context)
        elif classification.rule == ResponseClassifier.UNPARSED:
            logger.info("Model output was not JSON; returning it as text", extra=log_context)

        self._log_interaction(request, classification, llm_response, len(history))

        return AnsweredRequest(
            request=request,
            envelope=classification.envelope,
            turn=turn_from_completion(request, llm_response.text),
            classification=classification.rule,
            llm_response=llm_response,
            history_turns=len(history)
        )

    def record(self, turn: Turn) -> Optional[StoreUnavailableError]:
        """
        Append a turn to history, best effort.

        Failures are logged and reported, never raised.

        Returns:
            None on success, otherwise the StoreUnavailableError
        """
        try:
            self.conversation_manager.append(turn)
            return None
        except StoreUnavailableError as e:
            logger.error(
                f"Failed to save conversation turn: {e.detail}",
                extra={"user_id": turn.user_id, "session_id": turn.session_id, "error_code": e.code}
            )
            self._log_persistence_failure(turn, e)
            return e

    def assist(self, payload: Any) -> AssistOutcome:
        """
        Answer a request and record it.

        Raises the same fatal errors as answer(); a failed write only marks
        the outcome as not persisted.
        """
        answered = self.answer(payload)
        error = self.record(answered.turn)
        return AssistOutcome(
            envelope=answered.envelope,
            persisted=error is None,
            persist_error=error
        )

    def _log_interaction(self, request, classification, llm_response, history_turns):
        if self.interaction_logger is None:
            return
        try:
            self.interaction_logger.log_interaction(
                user_id=request.user_id,
                session_id=request.session_id,
                response_type=classification.envelope.type,
                classification=classification.rule,
                model_used=llm_response.model_used,
                tokens_input=llm_response.tokens_input,
                tokens_output=llm_response.tokens_output,
                latency_ms=llm_response.latency_ms,
                history_turns=history_turns
            )
        except OSError as e:
            logger.warning(f"Could not write interaction log: {e}")

    def _log_persistence_failure(self, turn, error):
        if self.interaction_logger is None:
            return
        try:
            self.interaction_logger.log_persistence_failure(
                user_id=turn.user_id,
                session_id=turn.session_id,
                error_code=error.code,
                detail=error.detail
            )
        except OSError as e:
            logger.warning(f"Could not write interaction log: {e}")
