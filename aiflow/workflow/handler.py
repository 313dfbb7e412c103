"""Chat request orchestrator."""

from collections.abc import Sequence

from aiflow.books.store import BookStore
from aiflow.exceptions import ValidationError
from aiflow.languages import normalize_language
from aiflow.llm.models import ChatMessage
from aiflow.llm.prompts import build_book_chat_prompt, build_prompt
from aiflow.llm.resilient import ResilientCompletionClient
from aiflow.logging_config import get_logger
from aiflow.workflow.models import BookChatResult, Operation, WorkflowResult
from aiflow.workflow.normalizers import normalize_category, normalize_emotion

logger = get_logger(__name__)


class RequestHandler:
    """Orchestrates a single chat request.

    Normalizes the language, builds the prompt, calls the completion client
    and shapes the result. Holds no per-request state.
    """

    def __init__(
        self,
        client: ResilientCompletionClient,
        books: BookStore | None = None,
        book_chat_enabled: bool = True,
    ) -> None:
        """Initialize the handler.

        Args:
            client: Resilient completion client.
            books: Startup-loaded book content.
            book_chat_enabled: Serve book chat when no stepType is given.
        """
        self._client = client
        self._books = books or BookStore()
        self._book_chat_enabled = book_chat_enabled

    async def handle(
        self,
        text: str | None,
        language: str | None = "en",
        history: Sequence[ChatMessage] = (),
        step_type: str | None = None,
    ) -> WorkflowResult | BookChatResult:
        """Process a chat request.

        Args:
            text: Caller input; required.
            language: Language code or name.
            history: Prior turns, oldest first.
            step_type: Requested operation; absent means book chat.

        Returns:
            WorkflowResult or BookChatResult.

        Raises:
            ValidationError: If required input is missing.
            CompletionError: If the upstream call fails.
        """
        if not text:
            raise ValidationError("Text is required")

        is_book_chat = not step_type or step_type == Operation.BOOK_CHAT.value
        if not step_type and not self._book_chat_enabled:
            raise ValidationError("stepType is required")

        lang = normalize_language(language)

        if is_book_chat:
            return await self._book_chat(text, lang, history)
        return await self._workflow_step(step_type, text, lang, history)

    async def _book_chat(
        self,
        question: str,
        language: str,
        history: Sequence[ChatMessage],
    ) -> BookChatResult:
        content = self._books.get_content(language)
        logger.info(
            "Book chat request",
            extra={"language": language, "content_length": len(content)},
        )

        # History is rendered into the prompt, not sent as separate turns
        prompt = build_book_chat_prompt(content, question, language, history)
        answer = await self._client.complete(prompt, language, [])

        return BookChatResult(
            question=question,
            language=language,
            answer=answer,
            model=self._client.model_name,
        )

    async def _workflow_step(
        self,
        step_type: str,
        text: str,
        language: str,
        history: Sequence[ChatMessage],
    ) -> WorkflowResult:
        logger.info(
            "Workflow step request",
            extra={"step_type": step_type, "language": language},
        )

        prompt = build_prompt(step_type, text, language)
        response = await self._client.complete(prompt, language, history)

        operation = Operation.parse(step_type)
        if operation is Operation.DETECT_EMOTION:
            response = normalize_emotion(response)
        elif operation is Operation.CATEGORIZE_TEXT:
            response = normalize_category(response)

        return WorkflowResult(
            response=response,
            model=self._client.model_name,
            stepType=step_type,
            language=language,
        )
