"""StudyRAG engine: wires ingestion, retrieval and generation together.

This is the surface the surrounding application calls. Authentication
happens outside; every method takes the already-authenticated owner id.
"""

from loguru import logger

from .chunker import SlidingWindowChunker
from .config.credentials import UserPreferences, resolve_credentials
from .config.settings import Settings, settings as default_settings
from .embedder import BaseEmbedder, EmbedderFactory, EmbeddingGateway
from .entities.document import ContentKind
from .entities.generation import ChatTurn, GenerationParams, GenerationRequest, GenerationResult, TaskKind
from .entities.result import Result
from .errors import StudyRAGError
from .generation import GenerationOrchestrator, LoggingUsageReporter, UsageReporter
from .ingestion import CollectionStats, DocumentIngestionPipeline, IngestionResult, ReprocessSummary
from .llm import ChatClient
from .repository import BaseDocumentRepository, SQLDocumentRepository
from .retrieval import AssembledContext, ContextAssembler
from .vector_store import BaseVectorStore, VectorStoreFactory

TUTOR_CONTEXT_CHUNKS = 5
PAST_PAPER_CONTEXT_CHUNKS = 10


class StudyRAGEngine:
    """
    Facade over the whole pipeline.

    Components default to what ``settings`` describes; any of them can be
    injected instead (tests pass in-memory stores and a mock embedder).

    Example:
        engine = StudyRAGEngine()
        await engine.upload_document("42", "Cell biology", text, collection_id="bio")
        result = await engine.generate(GenerationRequest(
            task=TaskKind.FLASHCARDS, owner_id="42", collection_id="bio",
        ))
    """

    def __init__(
        self,
        settings: Settings | None = None,
        repository: BaseDocumentRepository | None = None,
        vector_store: BaseVectorStore | None = None,
        embedder: BaseEmbedder | None = None,
        chat_client: ChatClient | None = None,
        usage_reporter: UsageReporter | None = None,
    ):
        self.settings = settings or default_settings

        self.repository = repository or SQLDocumentRepository(self.settings.DATABASE_URL)
        self.gateway = EmbeddingGateway(embedder or self._create_embedder(), self.settings.EMBEDDING_DIMENSION)
        self.vector_store = vector_store or VectorStoreFactory.create(
            self.settings.VECTOR_STORE,
            **self._vector_store_params(),
        )
        self.chunker = SlidingWindowChunker(self.settings.CHUNK_SIZE, self.settings.CHUNK_OVERLAP)

        self.ingestion = DocumentIngestionPipeline(
            repository=self.repository,
            chunker=self.chunker,
            gateway=self.gateway,
            vector_store=self.vector_store,
            batch_size=self.settings.EMBEDDING_BATCH_SIZE,
        )
        self.assembler = ContextAssembler(
            gateway=self.gateway,
            vector_store=self.vector_store,
            repository=self.repository,
            max_chars=self.settings.CONTEXT_MAX_CHARS,
            collection_limit=self.settings.COLLECTION_CHUNK_LIMIT,
        )
        self.orchestrator = GenerationOrchestrator(
            chat_client or ChatClient(),
            usage_reporter or LoggingUsageReporter(),
        )
        logger.info(
            f"StudyRAGEngine ready: store={type(self.vector_store).__name__}, "
            f"embedder={self.gateway.model_name}, repository={type(self.repository).__name__}"
        )

    def _create_embedder(self) -> BaseEmbedder:
        if self.settings.EMBEDDING_PROVIDER == "mock":
            return EmbedderFactory.create("mock", dimension=self.settings.EMBEDDING_DIMENSION)
        return EmbedderFactory.create(
            self.settings.EMBEDDING_PROVIDER,
            api_key=self.settings.OPENAI_API_KEY,
            model=self.settings.EMBEDDING_MODEL,
            base_url=self.settings.EMBEDDING_BASE_URL,
            dimension=self.settings.EMBEDDING_DIMENSION,
            batch_size=self.settings.EMBEDDING_BATCH_SIZE,
        )

    def _vector_store_params(self) -> dict:
        params = {"dimension": self.settings.EMBEDDING_DIMENSION}
        if self.settings.VECTOR_STORE == "chroma":
            params["persist_directory"] = self.settings.CHROMA_DB_PATH
        return params

    # ==================== Documents ====================

    async def upload_document(
        self,
        owner_id: str,
        title: str,
        text: str,
        collection_id: str | None = None,
        content_kind: ContentKind = ContentKind.MATERIALS,
    ) -> IngestionResult:
        """Register, clean, chunk, embed and store a document in one call.

        Raises:
            ExtractionError: If the text is unusable; the document is kept as failed
            EmbeddingError: If processing stopped part-way; stored batches are kept
        """
        document = self.ingestion.register_document(owner_id, title, collection_id, content_kind)
        self.ingestion.record_extracted_text(document.id, owner_id, text)
        return await self.ingestion.process_document(document.id, owner_id)

    async def delete_document(self, owner_id: str, document_id: str) -> int:
        return await self.ingestion.delete_document(document_id, owner_id)

    async def reprocess_collection(self, owner_id: str, collection_id: str | None) -> ReprocessSummary:
        return await self.ingestion.reprocess_collection(owner_id, collection_id)

    def collection_stats(self, owner_id: str, collection_id: str | None) -> CollectionStats:
        return self.ingestion.collection_stats(owner_id, collection_id)

    async def search(
        self,
        owner_id: str,
        collection_id: str | None,
        query: str,
        limit: int = 5,
        content_kind: ContentKind = ContentKind.MATERIALS,
    ) -> AssembledContext:
        return await self.assembler.assemble_for_query(owner_id, collection_id, query, limit, content_kind)

    # ==================== Generation ====================

    async def generate(
        self,
        request: GenerationRequest,
        preferences: UserPreferences | None = None,
    ) -> Result[GenerationResult]:
        """Resolve credentials, assemble context and run the task.

        Credentials are resolved before retrieval, so a missing key fails
        without any embedding or completion call.
        """
        try:
            credentials = resolve_credentials(
                request.provider,
                request.api_key,
                preferences,
                self.settings,
            )
            context = await self._context_for(request)
        except StudyRAGError as e:
            logger.warning(f"{request.task.value} request rejected: {type(e).__name__}: {e.message}")
            return Result.failure(e)

        return await self.orchestrator.generate(
            request.task,
            context,
            request.params,
            credentials,
            user_id=request.owner_id,
        )

    async def _context_for(self, request: GenerationRequest) -> AssembledContext | str:
        if request.content:
            return request.content[: self.settings.CONTEXT_MAX_CHARS]

        if request.task is TaskKind.TUTOR_CHAT:
            query = request.params.last_user_message()
            if not query:
                return AssembledContext()
            return await self.assembler.assemble_for_query(
                request.owner_id, request.collection_id, query, TUTOR_CONTEXT_CHUNKS, request.content_kind,
            )

        if request.task is TaskKind.PAST_PAPER_ANALYSIS:
            if request.params.query:
                return await self.assembler.assemble_for_query(
                    request.owner_id, request.collection_id, request.params.query,
                    PAST_PAPER_CONTEXT_CHUNKS, ContentKind.PAST_PAPERS,
                )
            return await self.assembler.assemble_for_collection(
                request.owner_id, request.collection_id, content_kind=ContentKind.PAST_PAPERS,
            )

        return await self.assembler.assemble_for_collection(
            request.owner_id, request.collection_id, content_kind=request.content_kind,
        )

    async def chat_with_tutor(
        self,
        owner_id: str,
        messages: list[ChatTurn],
        collection_id: str | None = None,
        provider: str | None = None,
        api_key: str | None = None,
        preferences: UserPreferences | None = None,
    ) -> Result[GenerationResult]:
        return await self.generate(
            GenerationRequest(
                task=TaskKind.TUTOR_CHAT,
                owner_id=owner_id,
                collection_id=collection_id,
                params=GenerationParams(messages=messages),
                provider=provider,
                api_key=api_key,
            ),
            preferences,
        )

    async def analyze_past_papers(
        self,
        owner_id: str,
        query: str,
        collection_id: str | None = None,
        provider: str | None = None,
        api_key: str | None = None,
        preferences: UserPreferences | None = None,
    ) -> Result[GenerationResult]:
        return await self.generate(
            GenerationRequest(
                task=TaskKind.PAST_PAPER_ANALYSIS,
                owner_id=owner_id,
                collection_id=collection_id,
                content_kind=ContentKind.PAST_PAPERS,
                params=GenerationParams(query=query),
                provider=provider,
                api_key=api_key,
            ),
            preferences,
        )
