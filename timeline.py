"""Life timeline derived from a biography's sections."""

import re
from typing import List, Optional

from pydantic import BaseModel

from schemas import Autobiography

DEFAULT_BIRTH_YEAR = 2000
DESCRIPTION_LIMIT = 200

_YEAR_RE = re.compile(r"\b(\d{4})\b")


class TimelineEvent(BaseModel):
    year: str
    category: str
    title: str
    description: str
    icon: str


def birth_year(date_of_birth: str) -> Optional[int]:
    match = _YEAR_RE.search(date_of_birth or "")
    return int(match.group(1)) if match else None


def _excerpt(text: str) -> str:
    if len(text) <= DESCRIPTION_LIMIT:
        return text
    return text[:DESCRIPTION_LIMIT] + "..."


def build_timeline(record: Autobiography) -> List[TimelineEvent]:
    info = record.personal_info
    year = birth_year(info.date_of_birth)
    base = year if year is not None else DEFAULT_BIRTH_YEAR
    events: List[TimelineEvent] = []

    if year is not None:
        events.append(TimelineEvent(
            year=str(year), category="Birth", title="Born",
            description=f"Born in {info.birthplace}" if info.birthplace else "Born",
            icon="👶",
        ))

    # (year label, category, title, icon, source text)
    stages = [
        (str(base + 5), "Childhood", "Childhood Years", "🧸", record.childhood_memories.significant_events),
        (str(base + 12), "Education", "Education Journey", "🎓", record.education_journey.schools),
        (str(base + 22), "Career", "Career Path", "💼", record.career_achievements.career_path),
        ("Recent Years", "Family", "Relationships & Family", "❤️", record.family_relationships.relationships),
        ("Future", "Goals", "Dreams & Future", "⭐", record.dreams_beliefs_goals.future_goals),
    ]
    for label, category, title, icon, text in stages:
        if text:
            events.append(TimelineEvent(
                year=label, category=category, title=title, description=_excerpt(text), icon=icon,
            ))
    return events
