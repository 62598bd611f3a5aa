# schemas/progress_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

class ProgressStep(BaseModel):
    id: int
    name: str
    title: str
    description: str
    completed: bool
    locked: bool

class CourseProgressOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_id: str = Field(..., alias="courseId")
    course_slug: str = Field(..., alias="courseSlug")
    stage: str
    progress: int
    enrolled: bool
    completed: bool
    steps: List[ProgressStep]
    redirect_to: Optional[str] = None

class AssessmentIn(BaseModel):
    # metadata only; the media itself never reaches this service
    recording: Optional[Dict[str, Any]] = None

class DashboardCourseItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_id: str = Field(..., alias="courseId")
    course_slug: str = Field(..., alias="courseSlug")
    course_title: str = Field(..., alias="courseTitle")
    category: Optional[str] = None
    progress: int
    stage: str

class DashboardOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    enrolled_count: int = Field(..., alias="enrolledCount")
    completed_count: int = Field(..., alias="completedCount")
    certificate_count: int = Field(..., alias="certificateCount")
    average_progress: float = Field(..., alias="averageProgress")
    items: List[DashboardCourseItem]

class CertificateOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    certificate_id: str = Field(..., alias="certificateId")
    student_name: str = Field(..., alias="studentName")
    course_id: str = Field(..., alias="courseId")
    course_slug: str = Field(..., alias="courseSlug")
    course_title: str = Field(..., alias="courseTitle")
    category: Optional[str] = None
