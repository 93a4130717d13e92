"""Prompt templates for module, quiz, and question-answering requests."""

MODULE_CONTEXT_WITH_SUMMARY = (
    "Previous content summary: {summary}\n\n"
    "Current chunk ({chunk_index}/{total_chunks}): {chunk}"
)

MODULE_CONTEXT_FIRST = (
    'First chunk ({chunk_index}/{total_chunks}) of the book "{book_title}" '
    "by {author}: {chunk}"
)

MODULE_PROMPT = """You are creating an educational module based on the following content from the book "{book_title}" by {author}.
{context}

Please generate:
1. A concise title for this section (without "Chapter" or numbering)
2. Educational content that explains the key concepts in this section
3. A brief summary of this section that will be used to maintain context for the next section

Format your response exactly as follows (keep the JSON format):
{{"title":"Section Title","content":"Educational content goes here...","summary":"Brief summary of this section..."}}"""

QUIZ_CONTEXT_WITH_SUMMARY = "Previous content summary: {summary}\n\nCurrent content: {chunk}"

QUIZ_CONTEXT_FIRST = 'Content from the book "{book_title}": {chunk}'

QUIZ_PROMPT = """Based on the following content from the book "{book_title}":
{context}

Generate {max_questions} multiple-choice quiz questions to test understanding of the key concepts.
Each question should have 4 options with only one correct answer.
Also provide a brief explanation for why the correct answer is right.

Format your response as a JSON array of questions, exactly like this (maintain this exact JSON format):
[
  {{
    "question": "Question text goes here?",
    "options": ["Option A", "Option B", "Option C", "Option D"],
    "correctAnswer": 0,
    "explanation": "Explanation of why Option A is correct"
  }}
]"""

MODULE_ASSISTANT_SUFFIX = (
    " You are specifically helping with the following module: {module_title}\n\n"
    "{module_content}"
)


def build_module_context(
    chunk: str,
    previous_summary: str,
    chunk_index: int,
    total_chunks: int,
    book_title: str,
    author: str,
) -> str:
    """Frame a chunk for module generation.

    Later chunks are preceded by the rolling summary; the first chunk is
    framed by the book title and author instead.
    """
    if previous_summary:
        return MODULE_CONTEXT_WITH_SUMMARY.format(
            summary=previous_summary,
            chunk_index=chunk_index,
            total_chunks=total_chunks,
            chunk=chunk,
        )
    return MODULE_CONTEXT_FIRST.format(
        chunk_index=chunk_index,
        total_chunks=total_chunks,
        book_title=book_title,
        author=author,
        chunk=chunk,
    )


def build_quiz_context(chunk: str, previous_summary: str, book_title: str) -> str:
    """Frame a chunk for quiz generation."""
    if previous_summary:
        return QUIZ_CONTEXT_WITH_SUMMARY.format(summary=previous_summary, chunk=chunk)
    return QUIZ_CONTEXT_FIRST.format(book_title=book_title, chunk=chunk)
