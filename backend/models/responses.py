from pydantic import BaseModel

from models.schemas.ai_score import AIScore
from models.schemas.batch import JudgeOutcome
from models.schemas.project import Project


class JudgeResponse(BaseModel):
    success: bool = True
    score: AIScore | None = None
    error: str | None = None


class BatchJudgeResponse(BaseModel):
    success: bool = True
    results: list[JudgeOutcome] = []
    errors: list[JudgeOutcome] = []
    total: int = 0
    successful: int = 0
    failed: int = 0


class ProjectsResponse(BaseModel):
    success: bool = True
    projects: list[Project] = []
    total: int = 0
    offset: int = 0
    size: int = 0
