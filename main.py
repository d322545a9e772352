import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from config import load_settings
from database import connect
from errors import GenerationFailed, GenerationError, InvalidRequest, ServiceUnavailable
from export import ExportFormat, render_export
from generation import default_story_title, generate_autobiography
from narrative_client import NarrativeClient, build_narrative_client
from schemas import (
    DEFAULT_STORY_TITLE,
    SECTION_NAMES,
    WRITING_STYLES,
    Autobiography,
    CareerAchievements,
    ChildhoodMemories,
    DreamsBeliefsGoals,
    EducationJourney,
    FamilyRelationships,
    LifeChallenges,
    PersonalInfo,
    Story,
    WritingStyle,
    section_fields,
    update_section_field,
)
from store import RecordStore
from timeline import TimelineEvent, build_timeline

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = load_settings()
db = connect(settings)
narrative_client = build_narrative_client(settings)

app = FastAPI(title="Autobiography Builder")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------------
# Models
# -------------------------------

class AutobiographyRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    childhood_memories: ChildhoodMemories = Field(default_factory=ChildhoodMemories)
    education_journey: EducationJourney = Field(default_factory=EducationJourney)
    career_achievements: CareerAchievements = Field(default_factory=CareerAchievements)
    family_relationships: FamilyRelationships = Field(default_factory=FamilyRelationships)
    life_challenges: LifeChallenges = Field(default_factory=LifeChallenges)
    dreams_beliefs_goals: DreamsBeliefsGoals = Field(default_factory=DreamsBeliefsGoals)

    def to_record(self) -> Autobiography:
        return Autobiography.model_validate(self.model_dump())


class AutobiographyResponse(Autobiography):
    id: str


class UpdateFieldRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    field: str
    value: str


class GenerateRequest(BaseModel):
    autobiography: Optional[Dict[str, Any]] = None
    style: Optional[str] = None


class GenerateFromRecordRequest(BaseModel):
    style: Optional[str] = None


class GenerateResponse(BaseModel):
    content: str
    title: str
    style: WritingStyle


class CreateStoryRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    autobiography_id: str = Field(..., min_length=1)
    style: WritingStyle
    content: str = Field(..., min_length=1)
    title: str = ""


class StoryResponse(Story):
    id: str


class ExportRequest(BaseModel):
    title: str = ""
    content: str = Field(..., min_length=1)
    format: ExportFormat = "txt"

# -------------------------------
# Dependencies & helpers
# -------------------------------

def get_store() -> RecordStore:
    if db is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return RecordStore(db)


def get_narrative_client() -> NarrativeClient:
    return narrative_client


_ERROR_STATUS = (
    (InvalidRequest, 400),
    (ServiceUnavailable, 503),
    (GenerationFailed, 502),
)


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError):
    status_code = next((code for kind, code in _ERROR_STATUS if isinstance(exc, kind)), 500)
    if status_code >= 500:
        logger.warning("%s on %s: %s", exc.code, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"error_code": exc.code, "message": str(exc)})


def serialize_autobiography(doc: dict) -> AutobiographyResponse:
    data = {k: v for k, v in doc.items() if k != "_id"}
    return AutobiographyResponse(id=str(doc.get("_id")), **data)


def serialize_story(doc: dict) -> StoryResponse:
    data = {k: v for k, v in doc.items() if k not in ("_id", "updated_at")}
    return StoryResponse(id=str(doc.get("_id")), **data)


def _load_autobiography(store: RecordStore, autobiography_id: str) -> dict:
    doc = store.get_autobiography(autobiography_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Autobiography not found")
    return doc


def _record_from_doc(doc: dict) -> Autobiography:
    return Autobiography.model_validate({k: v for k, v in doc.items() if k != "_id"})


def _export_response(title: str, content: str, fmt: ExportFormat) -> Response:
    body, media_type, filename = render_export(title, content, fmt)
    return Response(
        content=body,
        media_type=media_type,
        headers={
            "Content-Disposition": (
                f'attachment; filename="{filename.encode("ascii", "replace").decode()}"; '
                f"filename*=UTF-8''{quote(filename)}"
            ),
        },
    )

# -------------------------------
# Routes
# -------------------------------
@app.get("/")
def read_root():
    return {"message": "Autobiography Builder backend running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "connection_status": "Not Connected",
        "collections": [],
    }
    if db is not None:
        response["database"] = "✅ Available"
        response["connection_status"] = "Connected"
        try:
            response["collections"] = db.list_collection_names()
            response["database"] = "✅ Connected & Working"
        except Exception as e:
            logger.warning("Database check failed: %s", e)
            response["database"] = f"⚠️ Connected but Error: {str(e)[:80]}"
    response["llm_enabled"] = narrative_client.enabled
    return response


@app.post("/api/autobiographies", response_model=AutobiographyResponse)
def create_autobiography(req: AutobiographyRequest, store: RecordStore = Depends(get_store)):
    new_id = store.upsert_autobiography(req.user_id, req.to_record())
    return serialize_autobiography(_load_autobiography(store, new_id))


@app.get("/api/autobiographies", response_model=List[AutobiographyResponse])
def list_autobiographies(user_id: str = Query(..., min_length=1), store: RecordStore = Depends(get_store)):
    return [serialize_autobiography(doc) for doc in store.list_autobiographies(user_id)]


@app.get("/api/autobiographies/{autobiography_id}", response_model=AutobiographyResponse)
def get_autobiography(autobiography_id: str, store: RecordStore = Depends(get_store)):
    return serialize_autobiography(_load_autobiography(store, autobiography_id))


@app.put("/api/autobiographies/{autobiography_id}", response_model=AutobiographyResponse)
def save_autobiography(
    autobiography_id: str, req: AutobiographyRequest, store: RecordStore = Depends(get_store)
):
    saved_id = store.upsert_autobiography(req.user_id, req.to_record(), autobiography_id)
    if saved_id is None:
        raise HTTPException(status_code=404, detail="Autobiography not found")
    return serialize_autobiography(_load_autobiography(store, saved_id))


@app.patch("/api/autobiographies/{autobiography_id}/sections/{section}", response_model=AutobiographyResponse)
def update_autobiography_field(
    autobiography_id: str,
    section: str,
    req: UpdateFieldRequest,
    store: RecordStore = Depends(get_store),
):
    doc = _load_autobiography(store, autobiography_id)
    if doc.get("user_id") != req.user_id:
        raise HTTPException(status_code=404, detail="Autobiography not found")
    record = update_section_field(_record_from_doc(doc), section, req.field, req.value)
    store.upsert_autobiography(req.user_id, record, autobiography_id)
    return serialize_autobiography(_load_autobiography(store, autobiography_id))


@app.get("/api/autobiographies/{autobiography_id}/timeline", response_model=List[TimelineEvent])
def get_timeline(autobiography_id: str, store: RecordStore = Depends(get_store)):
    return build_timeline(_record_from_doc(_load_autobiography(store, autobiography_id)))


@app.post("/api/generate", response_model=GenerateResponse)
def generate_story(req: GenerateRequest, client: NarrativeClient = Depends(get_narrative_client)):
    content = generate_autobiography(req.autobiography, req.style, client)
    title = default_story_title(Autobiography.model_validate(req.autobiography))
    return GenerateResponse(content=content, title=title, style=req.style)


@app.post("/api/autobiographies/{autobiography_id}/generate", response_model=GenerateResponse)
def generate_story_from_record(
    autobiography_id: str,
    req: GenerateFromRecordRequest,
    store: RecordStore = Depends(get_store),
    client: NarrativeClient = Depends(get_narrative_client),
):
    record = _record_from_doc(_load_autobiography(store, autobiography_id))
    content = generate_autobiography(record, req.style, client)
    return GenerateResponse(content=content, title=default_story_title(record), style=req.style)


@app.post("/api/stories", response_model=StoryResponse)
def create_story(req: CreateStoryRequest, store: RecordStore = Depends(get_store)):
    story = Story(
        user_id=req.user_id,
        autobiography_id=req.autobiography_id,
        style=req.style,
        content=req.content,
        title=req.title.strip() or DEFAULT_STORY_TITLE,
    )
    new_id = store.create_story(story)
    return serialize_story(store.get_story(new_id))


@app.get("/api/stories", response_model=List[StoryResponse])
def list_stories(user_id: str = Query(..., min_length=1), store: RecordStore = Depends(get_store)):
    return [serialize_story(doc) for doc in store.list_stories(user_id)]


@app.get("/api/stories/{story_id}", response_model=StoryResponse)
def get_story(story_id: str, store: RecordStore = Depends(get_store)):
    doc = store.get_story(story_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Story not found")
    return serialize_story(doc)


@app.get("/api/stories/{story_id}/export")
def export_story(story_id: str, format: ExportFormat = "txt", store: RecordStore = Depends(get_store)):
    doc = store.get_story(story_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Story not found")
    return _export_response(doc.get("title", ""), doc.get("content", ""), format)


@app.post("/api/export")
def export_content(req: ExportRequest):
    return _export_response(req.title, req.content, req.format)


# Endpoint to expose current schemas (for admin tooling)
@app.get("/schema")
def get_schema_index():
    return {
        "autobiography": {
            "fields": ["user_id", *SECTION_NAMES],
            "sections": {name: list(section_fields(name)) for name in SECTION_NAMES},
        },
        "story": {
            "fields": ["user_id", "autobiography_id", "style", "content", "title"],
            "styles": list(WRITING_STYLES),
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
