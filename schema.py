from typing import List, Dict, Literal
from pydantic import BaseModel

Grade = Literal["3", "4", "5"]
Subject = Literal["TinHoc", "CongNghe"]
AssessmentType = Literal["rubric", "quiz"]


class LessonRequest(BaseModel):
    lesson_title: str = ""
    nls_codes: List[str] = []          # giữ thứ tự, cho phép trùng
    nls_database: Dict[str, str] = {}  # mã NLS -> mô tả
    grade: Grade
    subject: Subject = "TinHoc"


class SuggestionRequest(LessonRequest):
    pass


class LessonPlanRequest(LessonRequest):
    initial_suggestion: str = ""


class IntegrationRequest(LessonRequest):
    lesson_plan_content: str


class AssessmentRequest(LessonRequest):
    assessment_type: AssessmentType


class GeneratedText(BaseModel):
    content: str
