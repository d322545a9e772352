"""Prompt construction for autobiography generation."""

from typing import Dict, List

from errors import InvalidStyle
from schemas import SECTION_NAMES, WRITING_STYLES, Autobiography

SYSTEM_PROMPT = (
    "You are an expert autobiography writer who creates compelling, well-structured life stories."
)

PREAMBLE = (
    "You are a skilled autobiography writer. Create a compelling, well-structured "
    "autobiography based on the following information."
)

STYLE_INSTRUCTIONS: Dict[str, str] = {
    "emotional": (
        "Write in a deeply emotional and heartfelt tone, focusing on feelings, emotions, and "
        "personal connections. Use vivid imagery and expressive language."
    ),
    "professional": (
        "Write in a professional, polished tone suitable for formal publication. Use clear, "
        "articulate language while maintaining authenticity."
    ),
    "simple": (
        "Write in a simple, straightforward manner that is easy to read and understand. Use "
        "clear, conversational language."
    ),
    "poetic": (
        "Write in a poetic, lyrical style with beautiful imagery, metaphors, and artistic "
        "expression. Create a flowing, literary narrative."
    ),
}

if set(STYLE_INSTRUCTIONS) != set(WRITING_STYLES):
    raise RuntimeError("STYLE_INSTRUCTIONS must cover exactly the WritingStyle members")

CLOSING = (
    "Write a comprehensive, engaging autobiography (approximately 2000-3000 words) that weaves "
    "these elements together into a cohesive narrative. Include proper chapters and structure."
)


def style_instruction(style: str) -> str:
    try:
        return STYLE_INSTRUCTIONS[style]
    except (KeyError, TypeError):
        raise InvalidStyle(style) from None


def render_sections(record: Autobiography) -> str:
    """Labeled dump of every section field, empty values included."""
    blocks: List[str] = []
    for name in SECTION_NAMES:
        section = getattr(record, name)
        lines = [f"{type(section).model_config['title']}:"]
        for field_name, info in type(section).model_fields.items():
            lines.append(f"- {info.title}: {getattr(section, field_name)}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_autobiography_prompt(record: Autobiography, style: str) -> str:
    clause = style_instruction(style)
    return f"{PREAMBLE} {clause}\n\n{render_sections(record)}\n\n{CLOSING}"
