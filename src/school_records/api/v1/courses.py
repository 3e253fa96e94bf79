from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ...core.dependencies import get_courses_service
from ...schemas.courses import CourseCreate, CourseRead, CourseUpdate
from ...schemas.students import StudentRead
from ...services.courses import CoursesService

router = APIRouter(prefix="/courses", tags=["courses"])


@router.post("", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
async def create_course(payload: CourseCreate, service: CoursesService = Depends(get_courses_service)):
    return await service.create(payload)


@router.get("", response_model=list[CourseRead])
async def list_courses(service: CoursesService = Depends(get_courses_service)):
    return await service.find_all()


@router.get("/{course_id}", response_model=CourseRead)
async def get_course(course_id: UUID, service: CoursesService = Depends(get_courses_service)):
    return await service.find_by_id(course_id)


@router.patch("/{course_id}", response_model=CourseRead)
async def update_course(
    course_id: UUID,
    payload: CourseUpdate,
    service: CoursesService = Depends(get_courses_service),
):
    return await service.update(course_id, payload)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(course_id: UUID, service: CoursesService = Depends(get_courses_service)):
    await service.remove(course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{course_id}/students", response_model=list[StudentRead])
async def course_students(course_id: UUID, service: CoursesService = Depends(get_courses_service)):
    return await service.students_of(course_id)


@router.put("/{course_id}/students/{student_id}", response_model=list[StudentRead])
async def enroll_student(
    course_id: UUID,
    student_id: UUID,
    service: CoursesService = Depends(get_courses_service),
):
    return await service.enroll(course_id, student_id)


@router.delete("/{course_id}/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unenroll_student(
    course_id: UUID,
    student_id: UUID,
    service: CoursesService = Depends(get_courses_service),
):
    await service.unenroll(course_id, student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
