"""Shared type definitions for oracle-backed agents."""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from interview.state import CandidateInfo, Difficulty, InterviewType, QuestionDifficulty


class QuestionContext(BaseModel):
    """Everything the question generator may condition on."""

    resume_text: Optional[str] = None
    job_description: Optional[str] = None
    interview_type: InterviewType = "technical"
    difficulty: Difficulty = "mid"
    previous_questions: List[str] = Field(default_factory=list)
    question_number: int = Field(default=1, ge=1)
    level: Optional[QuestionDifficulty] = None


class GeneratedQuestion(BaseModel):
    text: str
    difficulty: Optional[QuestionDifficulty] = None
    confidence: float = Field(ge=0.0, le=1.0)
    source: Literal["oracle", "fallback"] = "oracle"


class EvalResult(BaseModel):
    score: int = Field(ge=0, le=100)
    feedback: str
    strengths: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    source: Literal["oracle", "parsed", "fallback"] = "oracle"


class RawEvaluation(BaseModel):
    """Loose shape of the JSON the oracle is asked to return."""

    score: float = 0
    feedback: Optional[str] = None
    strengths: Optional[List[str]] = None
    suggestions: Optional[List[str]] = None


class SummaryResult(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    summary: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    recommendation: str
    source: Literal["oracle", "fallback"] = "oracle"


class ResumeFields(CandidateInfo):
    raw_text: str = ""


__all__ = [
    "EvalResult",
    "GeneratedQuestion",
    "QuestionContext",
    "RawEvaluation",
    "ResumeFields",
    "SummaryResult",
]
