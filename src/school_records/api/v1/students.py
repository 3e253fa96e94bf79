from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from ...core.dependencies import get_students_service
from ...schemas.courses import CourseRead
from ...schemas.students import AverageGradeRead, StudentCreate, StudentRead, StudentUpdate
from ...services.students import DEFAULT_PASSING_GRADE, StudentsService

router = APIRouter(prefix="/students", tags=["students"])


@router.post("", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
async def create_student(payload: StudentCreate, service: StudentsService = Depends(get_students_service)):
    return await service.create(payload)


@router.get("", response_model=list[StudentRead])
async def list_students(service: StudentsService = Depends(get_students_service)):
    return await service.find_all()


# static paths before /{student_id}
@router.get("/passed", response_model=list[StudentRead])
async def passed_students(
    min_grade: int = Query(DEFAULT_PASSING_GRADE, alias="minGrade", ge=0, le=100),
    service: StudentsService = Depends(get_students_service),
):
    return await service.passed(min_grade)


@router.get("/average-grade", response_model=AverageGradeRead)
async def average_grade(service: StudentsService = Depends(get_students_service)):
    return await service.average_grade()


@router.get("/{student_id}", response_model=StudentRead)
async def get_student(student_id: UUID, service: StudentsService = Depends(get_students_service)):
    return await service.find_by_id(student_id)


@router.patch("/{student_id}", response_model=StudentRead)
async def update_student(
    student_id: UUID,
    payload: StudentUpdate,
    service: StudentsService = Depends(get_students_service),
):
    return await service.update(student_id, payload)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(student_id: UUID, service: StudentsService = Depends(get_students_service)):
    await service.remove(student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{student_id}/courses", response_model=list[CourseRead])
async def student_courses(student_id: UUID, service: StudentsService = Depends(get_students_service)):
    return await service.courses(student_id)
