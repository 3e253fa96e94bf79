from .courses import CourseCreate, CourseRead, CourseUpdate
from .errors import ErrorDetails, ErrorEnvelope, ValidationErrorItem
from .students import AverageGradeRead, StudentCreate, StudentRead, StudentUpdate
from .teachers import TeacherCreate, TeacherRead, TeacherUpdate

__all__ = [
    "AverageGradeRead",
    "CourseCreate",
    "CourseRead",
    "CourseUpdate",
    "ErrorDetails",
    "ErrorEnvelope",
    "StudentCreate",
    "StudentRead",
    "StudentUpdate",
    "TeacherCreate",
    "TeacherRead",
    "TeacherUpdate",
    "ValidationErrorItem",
]
