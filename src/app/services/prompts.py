"""
Prompt templates.

Pure string building; the only deterministic part of an AI call, so it is
tested exactly.
"""

from collections.abc import Sequence

from src.domain.schemas import FileContext

CONTEXT_HEADER = "Here are the relevant files for context:\n\n"
CONTEXT_FOOTER = "\nPlease use this context to answer the following question:\n"

IMAGE_TEXT_INSTRUCTION = (
    "Extract and format all text from this image. Return the text in a "
    "structured JSON format with two fields: 'raw_text' for the direct text "
    "extraction and 'formatted_text' for a clean, properly formatted version."
)


def build_file_analysis_prompt(content: str, file_name: str) -> str:
    return (
        f'Please analyze and summarize the following file content from "{file_name}":'
        f"\n\n{content}"
    )


def build_code_analysis_prompt(code: str, language: str) -> str:
    return (
        f"Analyze the following {language} code and provide suggestions for improvement:"
        f"\n\n{code}"
    )


def build_context_block(context: FileContext) -> str:
    return f"File: {context.name} ({context.type})\nContent:\n{context.content}\n---\n"


def build_chat_prompt(message: str, file_contexts: Sequence[FileContext]) -> str:
    """
    Chat prompt with optional file context.

    No contexts → the message itself, nothing prepended.
    """
    if not file_contexts:
        return message

    blocks = "".join(build_context_block(c) for c in file_contexts)
    return f"{CONTEXT_HEADER}{blocks}{CONTEXT_FOOTER}{message}"
