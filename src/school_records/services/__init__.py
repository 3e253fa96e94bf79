from .courses import CoursesService
from .students import StudentsService
from .teachers import TeachersService

__all__ = ["StudentsService", "TeachersService", "CoursesService"]
