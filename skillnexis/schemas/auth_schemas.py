# schemas/auth_schemas.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Dict, List, Literal, Optional

# Login/register bodies stay plain strings: the auth service owns the
# validation messages shown to the user.
class UserLogin(BaseModel):
    email: str = ""
    password: str = ""

class UserRegister(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""

class SessionUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    role: Literal["student", "admin"]
    enrolled_courses: List[str] = Field(default_factory=list, alias="enrolledCourses")
    completed_courses: List[str] = Field(default_factory=list, alias="completedCourses")
    certificates: List[str] = Field(default_factory=list)
    progress: Dict[str, int] = Field(default_factory=dict)

class SessionOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser
    redirect_to: str

class LogoutOut(BaseModel):
    message: str
    redirect_to: str

class UserOut(SessionUser):
    joined_date: Optional[str] = Field(default=None, alias="joinedDate")
    last_active: Optional[str] = Field(default=None, alias="lastActive")

class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str = Field(..., min_length=2)
    email: EmailStr
    role: Literal["student", "admin"] = "student"

class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    role: Optional[Literal["student", "admin"]] = None
    enrolled_courses: Optional[List[str]] = Field(default=None, alias="enrolledCourses")
    completed_courses: Optional[List[str]] = Field(default=None, alias="completedCourses")
    certificates: Optional[List[str]] = None
    progress: Optional[Dict[str, int]] = None
    last_active: Optional[str] = Field(default=None, alias="lastActive")
