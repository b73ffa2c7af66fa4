"""Prompt builders for each generation task.

Each builder returns the full message list sent to the provider. The
assembled context is embedded verbatim.
"""

from collections.abc import Callable

from ..entities.generation import GenerationParams, TaskKind
from ..llm.types import ChatMessage, CompletionParams

TUTOR_PERSONA = """You are an intelligent, encouraging educational assistant named "Gizmo".

Your role:
- Help students understand concepts from their study materials
- Answer questions clearly and comprehensively
- Provide study guidance and learning strategies
- Reference the provided context from their documents when relevant
- Break down complex topics into understandable parts
- Encourage critical thinking"""

TASK_COMPLETION_PARAMS: dict[TaskKind, CompletionParams] = {
    TaskKind.NOTES: CompletionParams(temperature=0.7, max_tokens=3000),
    TaskKind.FLASHCARDS: CompletionParams(temperature=0.6, max_tokens=3000),
    TaskKind.QUIZ: CompletionParams(temperature=0.5, max_tokens=4000),
    TaskKind.PRACTICE_EXERCISES: CompletionParams(temperature=0.6, max_tokens=3000),
    TaskKind.TUTOR_CHAT: CompletionParams(temperature=0.8, max_tokens=2000),
    TaskKind.PAST_PAPER_ANALYSIS: CompletionParams(temperature=0.7, max_tokens=2500),
}


def _audience(params: GenerationParams) -> str:
    parts = []
    if params.subject:
        parts.append(f"Subject: {params.subject}")
    if params.academic_level:
        parts.append(f"Academic level: {params.academic_level}")
    return ("\n" + "\n".join(parts)) if parts else ""


def notes_prompt(context: str, params: GenerationParams) -> list[ChatMessage]:
    prompt = f"""Generate {params.style} study notes from the uploaded documents.{_audience(params)}

Available document context:
{context}

Create notes that:
1. Cover all key concepts from the documents
2. Include clear definitions and explanations
3. Organize information with proper headings and structure
4. Add summaries where appropriate
5. Highlight important points and relationships

Format in clear markdown with proper hierarchy."""
    return [ChatMessage(role="user", content=prompt)]


def flashcards_prompt(context: str, params: GenerationParams) -> list[ChatMessage]:
    prompt = f"""Create {params.count} educational flashcards from the following document content.{_audience(params)}

Document Content:
{context}

Difficulty level: {params.difficulty}

Generate flashcards that:
1. Focus on the most important concepts
2. Have clear, concise questions on the front
3. Provide comprehensive answers on the back
4. Test understanding, not just memorization
5. Are appropriate for the specified difficulty level

Return ONLY a JSON array with no markdown formatting, with this exact structure:
[
  {{"front": "Question 1", "back": "Answer 1"}},
  {{"front": "Question 2", "back": "Answer 2"}}
]"""
    return [ChatMessage(role="user", content=prompt)]


def quiz_prompt(context: str, params: GenerationParams) -> list[ChatMessage]:
    prompt = f"""Create {params.count} multiple-choice quiz questions from the following document content.{_audience(params)}

Document Content:
{context}

Difficulty: {params.difficulty}

Generate questions that:
1. Test understanding of key concepts
2. Have clear, unambiguous questions
3. Include 4 plausible answer options
4. Have one definitively correct answer
5. Provide detailed explanations

Return ONLY a JSON array with this structure:
[
  {{
    "question_id": "q1",
    "question": "Question text",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correct_answer": 0,
    "explanation": "Why this is correct",
    "difficulty": "{params.difficulty}"
  }}
]"""
    return [ChatMessage(role="user", content=prompt)]


def exercises_prompt(context: str, params: GenerationParams) -> list[ChatMessage]:
    prompt = f"""Create {params.count} practice exercises from the following document content.{_audience(params)}

Document Content:
{context}

Difficulty: {params.difficulty}

Generate exercises that:
1. Help students practice key concepts
2. Include clear problem statements
3. Provide step-by-step solutions
4. Offer progressive hints
5. Are based on document content

Return ONLY a JSON array with this structure:
[
  {{
    "title": "Short title",
    "question": "Problem statement",
    "solution": "Step-by-step solution",
    "hints": ["Hint 1", "Hint 2"],
    "difficulty": "{params.difficulty}",
    "topic": "Related topic"
  }}
]"""
    return [ChatMessage(role="user", content=prompt)]


def past_paper_prompt(context: str, params: GenerationParams) -> list[ChatMessage]:
    query = params.query or "recurring topics and question styles"
    prompt = f"""Analyze the following past papers and find similarities based on this query: {query}

Past Papers Content:
{context}

Provide analysis including:
1. Similar papers found and their relevance
2. Common topics and patterns
3. Difficulty analysis
4. Study recommendations
5. Key patterns to focus on

Format your analysis in clear markdown."""
    return [ChatMessage(role="user", content=prompt)]


def tutor_prompt(context: str, params: GenerationParams) -> list[ChatMessage]:
    system = TUTOR_PERSONA
    if context:
        system += f"\n\nRelevant context from student's materials:\n{context}"
    history = [ChatMessage(role=turn.role, content=turn.content) for turn in params.messages]
    return [ChatMessage(role="system", content=system), *history]


PROMPT_BUILDERS: dict[TaskKind, Callable[[str, GenerationParams], list[ChatMessage]]] = {
    TaskKind.NOTES: notes_prompt,
    TaskKind.FLASHCARDS: flashcards_prompt,
    TaskKind.QUIZ: quiz_prompt,
    TaskKind.PRACTICE_EXERCISES: exercises_prompt,
    TaskKind.TUTOR_CHAT: tutor_prompt,
    TaskKind.PAST_PAPER_ANALYSIS: past_paper_prompt,
}


def build_messages(task: TaskKind, context: str, params: GenerationParams) -> list[ChatMessage]:
    return PROMPT_BUILDERS[task](context, params)
