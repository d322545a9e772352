"""
Database Schemas

MongoDB collection schemas for the autobiography builder, as Pydantic models.
Model name is converted to lowercase for the collection name:
- Autobiography -> "autobiography" collection
- Story -> "story" collection

A biography is split into seven fixed sections. Every section field is a
free-form string defaulting to "", and carries the label used when the
biography is rendered into a prompt.
"""

from datetime import datetime
from typing import Any, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field

from errors import InvalidRequest

WritingStyle = Literal["emotional", "professional", "simple", "poetic"]
WRITING_STYLES: Tuple[str, ...] = get_args(WritingStyle)

DEFAULT_STORY_TITLE = "Untitled Story"


class PersonalInfo(BaseModel):
    model_config = ConfigDict(title="Personal Information", extra="forbid")

    full_name: str = Field("", title="Name")
    date_of_birth: str = Field("", title="Date of Birth")
    birthplace: str = Field("", title="Birthplace")
    current_location: str = Field("", title="Current Location")
    background: str = Field("", title="Background")


class ChildhoodMemories(BaseModel):
    model_config = ConfigDict(title="Childhood Memories", extra="forbid")

    early_memories: str = Field("", title="Early Memories")
    family_dynamics: str = Field("", title="Family Dynamics")
    significant_events: str = Field("", title="Significant Events")
    favorite_activities: str = Field("", title="Favorite Activities")


class EducationJourney(BaseModel):
    model_config = ConfigDict(title="Education Journey", extra="forbid")

    schools: str = Field("", title="Schools")
    favorite_subjects: str = Field("", title="Favorite Subjects")
    achievements: str = Field("", title="Achievements")
    challenges: str = Field("", title="Challenges")
    mentors: str = Field("", title="Mentors")


class CareerAchievements(BaseModel):
    model_config = ConfigDict(title="Career & Achievements", extra="forbid")

    career_path: str = Field("", title="Career Path")
    major_accomplishments: str = Field("", title="Major Accomplishments")
    work_experiences: str = Field("", title="Work Experiences")
    skills: str = Field("", title="Skills")


class FamilyRelationships(BaseModel):
    model_config = ConfigDict(title="Family & Relationships", extra="forbid")

    family: str = Field("", title="Family")
    important_people: str = Field("", title="Important People")
    relationships: str = Field("", title="Relationships")
    legacy: str = Field("", title="Legacy")


class LifeChallenges(BaseModel):
    model_config = ConfigDict(title="Life Challenges", extra="forbid")

    obstacles: str = Field("", title="Obstacles")
    lessons: str = Field("", title="Lessons")
    pivotal_moments: str = Field("", title="Pivotal Moments")
    growth: str = Field("", title="Growth")


class DreamsBeliefsGoals(BaseModel):
    model_config = ConfigDict(title="Dreams, Beliefs & Goals", extra="forbid")

    beliefs: str = Field("", title="Beliefs")
    values: str = Field("", title="Values")
    future_goals: str = Field("", title="Future Goals")
    legacy: str = Field("", title="Legacy")
    wisdom: str = Field("", title="Wisdom")


class Autobiography(BaseModel):
    """
    Autobiographies collection schema
    Collection name: "autobiography"
    """
    user_id: str = Field("", description="Owner id")
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    childhood_memories: ChildhoodMemories = Field(default_factory=ChildhoodMemories)
    education_journey: EducationJourney = Field(default_factory=EducationJourney)
    career_achievements: CareerAchievements = Field(default_factory=CareerAchievements)
    family_relationships: FamilyRelationships = Field(default_factory=FamilyRelationships)
    life_challenges: LifeChallenges = Field(default_factory=LifeChallenges)
    dreams_beliefs_goals: DreamsBeliefsGoals = Field(default_factory=DreamsBeliefsGoals)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Section order as shown to the user and rendered into prompts
SECTION_NAMES: Tuple[str, ...] = (
    "personal_info",
    "childhood_memories",
    "education_journey",
    "career_achievements",
    "family_relationships",
    "life_challenges",
    "dreams_beliefs_goals",
)


class Story(BaseModel):
    """
    Generated stories collection schema
    Collection name: "story"
    """
    user_id: str = Field(..., description="Owner id")
    autobiography_id: str = Field(..., description="Source autobiography id as string")
    style: WritingStyle = Field(..., description="emotional | professional | simple | poetic")
    content: str = Field(..., min_length=1, description="Generated story text")
    title: str = Field(DEFAULT_STORY_TITLE, description="Story title")
    created_at: Optional[datetime] = None


def section_fields(section: str) -> Tuple[str, ...]:
    """Field names of ``section`` in declaration order."""
    if section not in SECTION_NAMES:
        raise InvalidRequest(f"Unknown section: {section!r}")
    model = Autobiography.model_fields[section].annotation
    return tuple(model.model_fields)


def update_section_field(record: Autobiography, section: str, field: str, value: Any) -> Autobiography:
    """Return a copy of ``record`` with one section field replaced."""
    if field not in section_fields(section):
        raise InvalidRequest(f"Unknown field {field!r} in section {section!r}")
    if not isinstance(value, str):
        raise InvalidRequest(f"Field {section}.{field} must be a string")
    current = getattr(record, section)
    return record.model_copy(update={section: current.model_copy(update={field: value})})
