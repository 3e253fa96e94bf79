from fastapi import APIRouter

from .courses import router as courses_router
from .students import router as students_router
from .teachers import router as teachers_router

# resource routes, mounted under settings.API_PREFIX
router = APIRouter()
router.include_router(students_router)
router.include_router(teachers_router)
router.include_router(courses_router)

__all__ = ["router"]
