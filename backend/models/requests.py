from pydantic import BaseModel, Field

from models.schemas.project import Project


class JudgeRequest(BaseModel):
    project: Project


class BatchJudgeRequest(BaseModel):
    projects: list[Project] = Field(..., max_length=500, description="Projects to judge, in order")
