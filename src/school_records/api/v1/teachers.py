from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ...core.dependencies import get_teachers_service
from ...schemas.courses import CourseRead
from ...schemas.teachers import TeacherCreate, TeacherRead, TeacherUpdate
from ...services.teachers import TeachersService

router = APIRouter(prefix="/teachers", tags=["teachers"])


@router.post("", response_model=TeacherRead, status_code=status.HTTP_201_CREATED)
async def create_teacher(payload: TeacherCreate, service: TeachersService = Depends(get_teachers_service)):
    return await service.create(payload)


@router.get("", response_model=list[TeacherRead])
async def list_teachers(service: TeachersService = Depends(get_teachers_service)):
    return await service.find_all()


@router.get("/{teacher_id}", response_model=TeacherRead)
async def get_teacher(teacher_id: UUID, service: TeachersService = Depends(get_teachers_service)):
    return await service.find_by_id(teacher_id)


@router.patch("/{teacher_id}", response_model=TeacherRead)
async def update_teacher(
    teacher_id: UUID,
    payload: TeacherUpdate,
    service: TeachersService = Depends(get_teachers_service),
):
    return await service.update(teacher_id, payload)


@router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_teacher(teacher_id: UUID, service: TeachersService = Depends(get_teachers_service)):
    await service.remove(teacher_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{teacher_id}/courses", response_model=list[CourseRead])
async def teacher_courses(teacher_id: UUID, service: TeachersService = Depends(get_teachers_service)):
    return await service.courses(teacher_id)
