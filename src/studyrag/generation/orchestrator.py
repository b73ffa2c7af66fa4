"""Generation orchestrator: context + task → provider call → typed output."""

from typing import Any

from loguru import logger

from ..config.credentials import ResolvedCredentials
from ..entities.generation import GenerationParams, GenerationResult, TaskKind
from ..entities.result import Result
from ..errors import InsufficientContextError, MissingAPIKeyError, StudyRAGError
from ..llm.client import ChatClient
from ..observability import trace_span
from ..retrieval.assembler import AssembledContext
from .parsing import parse_structured
from .prompts import TASK_COMPLETION_PARAMS, build_messages
from .usage import UsageReporter

NOTES_FALLBACK = """# Study notes unavailable

> **Fallback content**: the AI model returned no usable notes for this request.

Nothing has been lost. You can:
- Try generating the notes again
- Check that your uploaded documents were processed successfully
- Switch to a different AI provider in settings
"""


class GenerationOrchestrator:
    """
    Runs one generation task and returns a ``Result``.

    Every ``StudyRAGError`` raised below this point (missing key, provider
    failure, parse failure, missing grounding) is captured into
    ``Result.failure`` here, once; callers never see a raw provider
    exception or an unresolved request.

    Attributes:
        chat_client: Sends completions to the resolved provider
        usage_reporter: Receives token counts of successful calls
    """

    def __init__(self, chat_client: ChatClient, usage_reporter: UsageReporter | None = None):
        self.chat_client = chat_client
        self.usage_reporter = usage_reporter

    @trace_span("generation.generate")
    async def generate(
        self,
        task: TaskKind,
        context: AssembledContext | str,
        params: GenerationParams,
        credentials: ResolvedCredentials,
        user_id: str | None = None,
    ) -> Result[GenerationResult]:
        try:
            return Result.success(await self._run(task, context, params, credentials, user_id))
        except StudyRAGError as e:
            logger.warning(f"{task.value} generation failed: {type(e).__name__}: {e.message}")
            return Result.failure(e)

    async def _run(
        self,
        task: TaskKind,
        context: AssembledContext | str,
        params: GenerationParams,
        credentials: ResolvedCredentials,
        user_id: str | None,
    ) -> GenerationResult:
        if not credentials.api_key:
            raise MissingAPIKeyError(credentials.provider)

        if task is TaskKind.TUTOR_CHAT and params.last_user_message() is None:
            raise ValueError("tutor_chat needs at least one user message")

        if isinstance(context, AssembledContext):
            context_text, chunk_count = context.text, context.chunk_count
        else:
            context_text, chunk_count = context, int(bool(context.strip()))

        if not context_text.strip() and task is not TaskKind.TUTOR_CHAT:
            raise InsufficientContextError(
                "No documents found. Please upload documents first.",
                details={"task": task.value},
            )

        messages = build_messages(task, context_text, params)
        completion = await self.chat_client.complete(messages, TASK_COMPLETION_PARAMS[task], credentials)

        if self.usage_reporter is not None and user_id:
            self.usage_reporter.report_usage(user_id, completion.tokens_used)

        content, is_fallback = self._shape(task, completion.content, params)
        return GenerationResult(
            task=task,
            content=content,
            tokens_used=completion.tokens_used,
            is_fallback=is_fallback,
            context_chunk_count=chunk_count,
            provider=completion.provider,
            model=completion.model,
        )

    def _shape(self, task: TaskKind, raw: str, params: GenerationParams) -> tuple[Any, bool]:
        if task.is_structured:
            return parse_structured(task, raw, params), False
        if task is TaskKind.NOTES and not raw.strip():
            logger.warning("Model returned empty notes; using fallback stub")
            return NOTES_FALLBACK, True
        return raw, False
