# schemas/course_schema.py
from pydantic import BaseModel, ConfigDict, Field, conlist, constr
from typing import List, Literal, Optional

Category = Literal["Programming", "Web Development", "Data Science", "Cloud & IoT", "Mobile"]
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

class CourseCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: constr(strip_whitespace=True, min_length=1)
    slug: Optional[str] = Field(default=None, pattern=SLUG_PATTERN)
    description: constr(strip_whitespace=True, min_length=1)
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    pdf_url: Optional[str] = Field(default=None, alias="pdfUrl")
    category: Category

class CourseUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[constr(strip_whitespace=True, min_length=1)] = None
    slug: Optional[str] = Field(default=None, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    pdf_url: Optional[str] = Field(default=None, alias="pdfUrl")
    category: Optional[Category] = None

class CourseOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    slug: str
    description: str = ""
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    pdf_url: Optional[str] = Field(default=None, alias="pdfUrl")
    category: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    enrolled_count: int = Field(default=0, alias="enrolledCount")
    completed_count: int = Field(default=0, alias="completedCount")

class QuestionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    question: constr(strip_whitespace=True, min_length=1)
    options: conlist(str, min_length=4, max_length=4)
    correct_answer: int = Field(..., ge=0, le=3, alias="correctAnswer")
    explanation: str = ""

class QuizUpsert(BaseModel):
    questions: conlist(QuestionIn, min_length=1)

class QuizUpdate(BaseModel):
    questions: Optional[conlist(QuestionIn, min_length=1)] = None

class QuestionOut(QuestionIn):
    pass

class QuizOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_slug: str = Field(..., alias="courseSlug")
    questions: List[QuestionOut]
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    total_attempts: int = Field(default=0, alias="totalAttempts")
    average_score: float = Field(default=0, alias="averageScore")

class StudentQuestionOut(BaseModel):
    id: int
    question: str
    options: List[str]

class StudentQuizOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_slug: str = Field(..., alias="courseSlug")
    course_title: str = Field(..., alias="courseTitle")
    passing_score: int = Field(..., alias="passingScore")
    time_limit_seconds: int = Field(..., alias="timeLimitSeconds")
    questions: List[StudentQuestionOut]

class QuizSubmitIn(BaseModel):
    answers: List[int] = Field(default_factory=list)

class QuestionReview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: Optional[int] = Field(default=None, alias="questionId")
    selected: int
    correct_answer: Optional[int] = Field(default=None, alias="correctAnswer")
    is_correct: bool = Field(..., alias="isCorrect")
    explanation: str = ""

class QuizResultOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    correct: int
    total: int
    score: int
    passed: bool
    passing_score: int = Field(..., alias="passingScore")
    progress: int
    review: List[QuestionReview]
    redirect_to: Optional[str] = None

class StatsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_students: int = Field(0, alias="totalStudents")
    total_courses: int = Field(0, alias="totalCourses")
    total_certificates: int = Field(0, alias="totalCertificates")
    completion_rate: int = Field(0, alias="completionRate")
    total_quizzes: int = Field(0, alias="totalQuizzes")
    total_enrollments: int = Field(0, alias="totalEnrollments")
    active_users: int = Field(0, alias="activeUsers")
    new_users_this_month: int = Field(0, alias="newUsersThisMonth")
