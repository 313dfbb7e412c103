"""Prompt templates for workflow steps and book chat."""

from collections.abc import Sequence

from aiflow.languages import display_name, native_label
from aiflow.llm.models import ChatMessage, Role
from aiflow.workflow.models import CATEGORIES, EMOTIONS, Operation

NO_CONTENT_MARKER = "No book content available."
NOT_FOUND_MESSAGE = "Sorry, I could not find this information in the book."

CLEAN_TEXT_TEMPLATE = """You are a text cleaning expert. Clean and normalize the following text by:
1. Removing extra whitespace and line breaks
2. Fixing common typos
3. Normalizing punctuation
4. Removing special characters that don't belong

Return ONLY the cleaned text without any explanations, prefixes, or additional text.

Text to clean:
{text}"""

EMOTION_TEMPLATE = """Analyze the emotional tone and sentiment of the following text.

You must respond with ONLY one word from this exact list:
{options}

Do not include any explanations, prefixes, or additional text. Just the emotion word.

Text to analyze:
{text}"""

CATEGORY_TEMPLATE = """Categorize the following text into one of these exact categories:

{options}

Respond with ONLY the exact category name from the list above. Do not include any explanations or additional text.

Text to categorize:
{text}"""

SUMMARY_TEMPLATE = """Provide a concise and informative summary of the following text in 2-3 sentences.
Capture the main points and key information. Write in {language}.

Text to summarize:
{text}"""

TRANSLATE_TEMPLATE = """Translate the following text to {language}.

Requirements:
- Maintain the original meaning and tone
- Keep proper grammar and natural phrasing
- Return ONLY the translated text without any explanations or prefixes

Text to translate:
{text}"""

BOOK_CHAT_TEMPLATE = """You are a helpful assistant that answers questions about a book.

BOOK CONTENT:
{content}
{history}
Rules:
- Answer ONLY using the book content above. Do not use outside knowledge.
- The user may write {language} phonetically, in Latin letters, or mix scripts. Understand the question either way.
- Answer in {language} using its native script ({native}) unless the user explicitly asks for another language.
- If the book content does not contain the answer, reply exactly: "{not_found}"
- Format any URL as a markdown link, for example [title](https://example.com).

USER QUESTION:
{question}

ANSWER:"""


def format_chat_history(history: Sequence[ChatMessage]) -> str:
    """Render prior turns as a transcript block.

    Returns an empty string when there is no history.
    """
    if not history:
        return ""

    lines = [
        f"{'User' if msg.role == Role.USER else 'Assistant'}: {msg.content}"
        for msg in history
    ]
    return "\nPREVIOUS CONVERSATION:\n" + "\n".join(lines) + "\n"


def build_book_chat_prompt(
    content: str,
    question: str,
    language: str,
    history: Sequence[ChatMessage] = (),
) -> str:
    """Build the grounded book chat prompt.

    Args:
        content: Retrieved book passages, possibly empty.
        question: The user's question.
        language: Canonical language code.
        history: Prior turns rendered into the prompt.

    Returns:
        Prompt text.
    """
    return BOOK_CHAT_TEMPLATE.format(
        content=content or NO_CONTENT_MARKER,
        history=format_chat_history(history),
        language=display_name(language),
        native=native_label(language),
        not_found=NOT_FOUND_MESSAGE,
        question=question,
    )


def build_prompt(
    operation: str | None,
    text: str,
    language: str,
    history: Sequence[ChatMessage] = (),
    context: str = "",
) -> str:
    """Render the prompt for an operation.

    Unrecognized operations return ``text`` unchanged.

    Args:
        operation: Operation name (stepType); None means book chat.
        text: Caller input.
        language: Canonical language code.
        history: Prior turns (book chat only).
        context: Retrieved book content (book chat only).

    Returns:
        Prompt text.
    """
    op = Operation.parse(operation)

    if op is Operation.CLEAN_TEXT:
        return CLEAN_TEXT_TEMPLATE.format(text=text)
    if op is Operation.DETECT_EMOTION:
        options = "\n".join(f"- {emotion}" for emotion in EMOTIONS)
        return EMOTION_TEMPLATE.format(options=options, text=text)
    if op is Operation.CATEGORIZE_TEXT:
        options = "\n".join(f"{i}. {cat}" for i, cat in enumerate(CATEGORIES, 1))
        return CATEGORY_TEMPLATE.format(options=options, text=text)
    if op is Operation.SUMMARIZE:
        return SUMMARY_TEMPLATE.format(language=display_name(language), text=text)
    if op is Operation.TRANSLATE:
        return TRANSLATE_TEMPLATE.format(language=display_name(language), text=text)
    if op is Operation.BOOK_CHAT:
        return build_book_chat_prompt(context, text, language, history)
    return text
