"""Single entry point for a user's story generation request."""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from errors import InvalidRequest
from narrative_client import NarrativeClient
from prompts import build_autobiography_prompt
from schemas import DEFAULT_STORY_TITLE, Autobiography

logger = logging.getLogger(__name__)


def _coerce_record(record: Union[Autobiography, Mapping[str, Any], None]) -> Autobiography:
    if record is None:
        raise InvalidRequest("Missing autobiography data")
    if isinstance(record, Autobiography):
        return record
    if not isinstance(record, Mapping):
        raise InvalidRequest("Autobiography data must be an object")
    try:
        return Autobiography.model_validate(dict(record))
    except ValidationError as exc:
        raise InvalidRequest(f"Invalid autobiography data: {exc.error_count()} error(s)") from exc


def generate_autobiography(
    record: Union[Autobiography, Mapping[str, Any], None],
    style: Optional[str],
    client: NarrativeClient,
) -> str:
    """Compile ``record`` into a prompt and ask ``client`` for the story.

    Raises InvalidRequest (or InvalidStyle) before any call is made when the
    input is incomplete. Errors from the client propagate unchanged; there is
    no retry and no fallback text.
    """
    autobiography = _coerce_record(record)
    if not style:
        raise InvalidRequest("Missing writing style")
    prompt = build_autobiography_prompt(autobiography, style)

    logger.info("Generating %s autobiography for user %s", style, autobiography.user_id or "-")
    return client.generate(prompt)


def default_story_title(record: Autobiography) -> str:
    name = record.personal_info.full_name.strip()
    if not name:
        return DEFAULT_STORY_TITLE
    return f"{name}'s Life Story"
