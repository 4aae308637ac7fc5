"""LLM Client for Groq API integration."""
import time
from dataclasses import dataclass
from typing import List, Optional, Dict, Any
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError, BadRequestError
import logging

from models.conversation import ContextPair
from config import (
    GROQ_API_KEY,
    ASSISTANT_MODEL,
    ASSISTANT_TEMPERATURE,
    ASSISTANT_MAX_TOKENS,
    LLM_JSON_MODE,
)

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are an advanced coding assistant. Analyze the user's latest message in the context of the previous interactions.

1. If the message is a NEW coding problem, respond with a JSON object of the 'solution' type:
   - "type": "solution"
   - "problemStatement": A clear description of the problem.
   - "approach": Explanation of how to solve it.
   - "codeSnippet": A Python code example.
   - "timeComplexity": Time complexity analysis.
   - "spaceComplexity": Space complexity analysis.
   - "dryRun": Step-by-step execution with an example.
   - "testCases": At least two test cases, each an object with string "input" and "output" fields.

2. If the message is a follow-up question, a request for clarification, or a general query about the conversation, respond with a JSON object of the 'response' type:
   - "type": "response"
   - "answer": A helpful plain text answer that uses the previous interactions as context.

Respond with exactly one JSON object matching either the 'solution' or the 'response' type and nothing else."""


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class LLMClient:
    """Client for interfacing with Groq API for coding assistance."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = ASSISTANT_MODEL,
        temperature: float = ASSISTANT_TEMPERATURE,
        max_tokens: int = ASSISTANT_MAX_TOKENS,
        json_mode: bool = LLM_JSON_MODE
    ):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Chat model name
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            json_mode: Ask the provider to return a JSON object
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.json_mode = json_mode

        # One call per request; the SDK's own retries are disabled
        self.client = Groq(api_key=self.api_key, max_retries=0)
        logger.info(f"LLMClient initialized successfully (model={model})")

    def complete(self, current_input: str, history: List[ContextPair]) -> LLMResponse:
        """
        Ask the model to answer the current input given prior exchanges.

        Args:
            current_input: The user's latest message
            history: Prior exchanges, oldest first

        Returns:
            LLMResponse with raw text, token counts, and latency

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        start_time = time.time()
        model = self.model

        try:
            logger.debug(f"Generating response with model: {model}, history_pairs={len(history)}")

            request: Dict[str, Any] = {
                "model": model,
                "messages": self.build_messages(current_input, history),
                "max_tokens": self.max_tokens,
                "temperature": self.temperature,
            }
            if self.json_mode:
                request["response_format"] = {"type": "json_object"}

            response = self.client.chat.completions.create(**request)

            latency_ms = int((time.time() - start_time) * 1000)
            text = response.choices[0].message.content

            if not text or not text.strip():
                error = LLMError(
                    code="EMPTY_RESPONSE",
                    message="AI did not return a valid response.",
                    details={"model": model, "latency_ms": latency_ms}
                )
                logger.error(
                    f"Empty response: model={model}, latency={latency_ms}ms",
                    extra={"error_code": error.code, "error_details": error.details}
                )
                raise LLMClientError(error)

            tokens_input = response.usage.prompt_tokens
            tokens_output = response.usage.completion_tokens

            logger.info(
                f"Generated response: model={model}, "
                f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
                f"latency={latency_ms}ms"
            )

            return LLMResponse(
                text=text,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                latency_ms=latency_ms,
                model_used=model
            )

        except LLMClientError:
            raise

        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR",
                "Rate limit exceeded. Please try again in a few moments.",
                model, start_time, e,
                retry_after=60
            )

        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR",
                "Authentication failed. Please check your API key.",
                model, start_time, e
            )

        except APITimeoutError as e:
            raise self._error(
                "TIMEOUT_ERROR",
                "Request timed out. Please try again.",
                model, start_time, e
            )

        except BadRequestError as e:
            failed_generation = self._failed_generation(e)
            if failed_generation is None:
                raise self._error(
                    "API_ERROR",
                    f"Groq API error: {str(e)}",
                    model, start_time, e
                )

            # JSON mode rejected the output; hand it on for text classification
            latency_ms = int((time.time() - start_time) * 1000)
            logger.warning(
                f"Model output failed JSON validation: model={model}, latency={latency_ms}ms"
            )
            return LLMResponse(
                text=failed_generation,
                tokens_input=0,
                tokens_output=0,
                latency_ms=latency_ms,
                model_used=model
            )

        except APIError as e:
            raise self._error(
                "API_ERROR",
                f"Groq API error: {str(e)}",
                model, start_time, e
            )

        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR",
                f"Unexpected error during generation: {str(e)}",
                model, start_time, e,
                error_type=type(e).__name__
            )

    @staticmethod
    def _failed_generation(error: BadRequestError) -> Optional[str]:
        """Return the rejected text of a json_validate_failed error, if any."""
        body = error.body
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            body = body["error"]
        if not isinstance(body, dict) or body.get("code") != "json_validate_failed":
            return None

        text = body.get("failed_generation")
        if not isinstance(text, str) or not text.strip():
            return None
        return text

    @staticmethod
    def _error(
        code: str,
        message: str,
        model: str,
        start_time: float,
        original: Exception,
        **extra_details: Any
    ) -> LLMClientError:
        """Build and log a structured error for a failed call."""
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            "model": model,
            "latency_ms": latency_ms,
            "original_error": str(original),
            **extra_details
        }
        error = LLMError(code=code, message=message, details=details)
        logger.error(
            f"{code}: model={model}, latency={latency_ms}ms, error={original}",
            exc_info=True,
            extra={"error_code": error.code, "error_details": error.details}
        )
        return LLMClientError(error)

    @staticmethod
    def build_messages(current_input: str, history: Optional[List[ContextPair]] = None) -> List[Dict[str, str]]:
        """
        Build the chat messages for a request.

        Args:
            current_input: The user's latest message
            history: Prior exchanges, oldest first; assistant content is the
                raw stored model output

        Returns:
            System message, one user/assistant pair per exchange, then the
            current input
        """
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]

        for pair in history or []:
            messages.append({"role": "user", "content": pair.user})
            messages.append({"role": "assistant", "content": pair.assistant})

        messages.append({"role": "user", "content": current_input})
        return messages
