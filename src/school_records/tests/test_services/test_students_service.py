import logging
import uuid

import pytest

from school_records.core.tracing.context import trace_scope
from school_records.exceptions import NotFoundError
from school_records.schemas.students import StudentCreate, StudentUpdate
from school_records.services.students import StudentsService


@pytest.fixture
def service(db_session) -> StudentsService:
    return StudentsService(db_session)


@pytest.mark.asyncio
class TestStudentsService:

    async def test_create_commits(self, service, db_session):
        student = await service.create(StudentCreate(name="Ada", age=17, grade=88))
        # committed: a rollback does not undo it
        await db_session.rollback()
        assert (await service.find_by_id(student.id)).name == "Ada"

    async def test_find_by_id_missing_raises_not_found(self, service):
        missing = uuid.uuid4()
        with pytest.raises(NotFoundError) as exc_info:
            await service.find_by_id(missing)
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == f"Student {missing} not found"

    async def test_not_found_leaves_logging_to_the_normalizer(self, service, caplog):
        with caplog.at_level(logging.DEBUG, logger="school_records"):
            with trace_scope("t-svc"), pytest.raises(NotFoundError):
                await service.find_by_id(uuid.uuid4())
        assert not [r for r in caplog.records if r.name.startswith("school_records.services")]

    async def test_create_is_logged_with_trace_id(self, service, caplog):
        with caplog.at_level(logging.INFO, logger="school_records"):
            with trace_scope("t-svc"):
                await service.create(StudentCreate(name="Ada", age=17, grade=88))
        assert any(r.getMessage().startswith("[traceId=t-svc] Student created") for r in caplog.records)

    async def test_update_applies_only_given_fields(self, service):
        student = await service.create(StudentCreate(name="Ada", age=17, grade=88))
        updated = await service.update(student.id, StudentUpdate(grade=91))
        assert (updated.name, updated.grade) == ("Ada", 91)

    async def test_update_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.update(uuid.uuid4(), StudentUpdate(grade=91))

    async def test_remove(self, service):
        student = await service.create(StudentCreate(name="Ada", age=17, grade=88))
        await service.remove(student.id)
        with pytest.raises(NotFoundError):
            await service.remove(student.id)

    async def test_passed_and_average(self, service):
        for grade in (40, 50, 95):
            await service.create(StudentCreate(name=f"s{grade}", age=15, grade=grade))

        assert [s.grade for s in await service.passed()] == [95, 50]
        assert [s.grade for s in await service.passed(90)] == [95]

        average = await service.average_grade()
        assert average.average == pytest.approx(61.67)
        assert average.count == 3

    async def test_average_without_students(self, service):
        average = await service.average_grade()
        assert (average.average, average.count) == (0.0, 0)

    async def test_courses_of_missing_student(self, service):
        with pytest.raises(NotFoundError):
            await service.courses(uuid.uuid4())
