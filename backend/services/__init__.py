"""Services for the coding assistant orchestrator."""
from .errors import AssistError, RequestValidationError, StoreUnavailableError, UpstreamError
from .request_validator import validate_request
from .conversation_manager import ConversationManager
from .history_window import build_context_pairs
from .response_classifier import ResponseClassifier, Classification, classify_response
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError
from .interaction_logger import InteractionLogger
from .assistant_orchestrator import AssistOrchestrator, AssistOutcome, AnsweredRequest, turn_from_completion

__all__ = ['AssistError', 'RequestValidationError', 'StoreUnavailableError', 'UpstreamError', 'validate_request', 'ConversationManager', 'build_context_pairs', 'ResponseClassifier', 'Classification', 'classify_response', 'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'InteractionLogger', 'AssistOrchestrator', 'AssistOutcome', 'AnsweredRequest', 'turn_from_completion']
