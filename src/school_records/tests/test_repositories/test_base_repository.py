import uuid

import pytest

from school_records.exceptions import PersistenceError


@pytest.mark.asyncio
class TestBaseRepositoryCreate:

    async def test_create_success(self, student_repository, sample_student_data):
        """
        Behavior:
                - Call BaseRepository.create(...) with valid data.
                - Assert the returned entity has expected fields and a generated id.

        Importance:
                - Confirms the basic happy-path of create(): object instantiation,
                        .add(), .flush(), .refresh() and return of a fully populated model.

        Fixtures:
                - student_repository: repository bound to a fresh in-memory database.
                - sample_student_data: dict used to populate required fields.
        """
        # Act
        student = await student_repository.create(**sample_student_data)

        # Assert: generated UUID primary key and timestamp
        assert isinstance(student.id, uuid.UUID)
        assert student.created_at is not None

        # Assert: the fields match the input data
        assert student.name == sample_student_data["name"]
        assert student.age == sample_student_data["age"]
        assert student.grade == sample_student_data["grade"]
        assert student.is_active is True

    async def test_create_missing_required_field_raises_error(self, student_repository, sample_student_data):
        """
        Behavior:
                - Attempt to create a record missing required fields (name, grade).
                - Expect a PersistenceError with not_null_violation (23502) listing every missing field.

        Importance:
                - Prevents saving incomplete data and reports all problems at once.
        """
        incomplete_data = sample_student_data.copy()
        incomplete_data.pop("name")
        incomplete_data.pop("grade")

        with pytest.raises(PersistenceError) as exc_info:
            await student_repository.create(**incomplete_data)

        assert "Missing required field" in str(exc_info.value)
        assert exc_info.value.vendor_code == "23502"
        assert exc_info.value.target == ["name", "grade"]

    async def test_create_with_extra_field_raises_error(self, student_repository, sample_student_data):
        """
        Behavior:
                - Attempt to create a record passing unexpected extra fields.
                - Expect a PersistenceError with undefined_column (42703).

        Importance:
                - Catches typos before they reach the database.
        """
        invalid_data = sample_student_data.copy()
        invalid_data["unknown_field"] = "bad"
        invalid_data["unknown_field2"] = "bad2"

        with pytest.raises(PersistenceError) as exc_info:
            await student_repository.create(**invalid_data)

        assert exc_info.value.vendor_code == "42703"
        assert exc_info.value.target == ["unknown_field", "unknown_field2"]


@pytest.mark.asyncio
class TestBaseRepositoryCreateDuplicates:

    async def test_create_duplicate_raises_unique_violation(self, teacher_repository):
        """
        Behavior:
                - Create a teacher successfully.
                - Attempt to create another teacher with the same email.
                - Expect a PersistenceError with unique_violation (23505) and target ["email"].

        Importance:
                - The vendor code and target are what the error normalizer turns into
                        409 "Duplicate value for field(s): email".
        """
        await teacher_repository.create(full_name="Ada", email="ada@school.test")

        with pytest.raises(PersistenceError) as exc_info:
            await teacher_repository.create(full_name="Other Ada", email="ada@school.test")

        assert "already exists" in str(exc_info.value)
        assert exc_info.value.vendor_code == "23505"
        assert exc_info.value.target == ["email"]

    async def test_update_to_existing_unique_value(self, teacher_repository):
        await teacher_repository.create(full_name="Ada", email="ada@school.test")
        grace = await teacher_repository.create(full_name="Grace", email="grace@school.test")

        with pytest.raises(PersistenceError) as exc_info:
            await teacher_repository.update(grace.id, email="ada@school.test")
        assert exc_info.value.vendor_code == "23505"

    async def test_update_keeping_own_unique_value(self, teacher_repository):
        grace = await teacher_repository.create(full_name="Grace", email="grace@school.test")
        updated = await teacher_repository.update(grace.id, email="grace@school.test", full_name="Grace H.")
        assert updated.full_name == "Grace H."


@pytest.mark.asyncio
class TestBaseRepositoryRead:

    async def test_get_by_id(self, student_repository, created_student):
        found = await student_repository.get_by_id(created_student.id)
        assert found is not None
        assert found.id == created_student.id

    async def test_get_by_id_missing_returns_none(self, student_repository):
        assert await student_repository.get_by_id(uuid.uuid4()) is None

    async def test_get_by_id_or_raise_missing(self, student_repository):
        """
        Behavior:
                - get_by_id_or_raise with an id that does not exist.
                - Expect PersistenceError with no_data_found (P0002).

        Importance:
                - Callers that treat a missing row as a failure get a vendor code the
                        normalizer maps to 404 "Record not found".
        """
        with pytest.raises(PersistenceError) as exc_info:
            await student_repository.get_by_id_or_raise(uuid.uuid4())
        assert exc_info.value.vendor_code == "P0002"

    async def test_find_many_orders_by_creation(self, student_repository, multiple_students):
        found = await student_repository.find_many()
        assert [s.id for s in found] == [s.id for s in multiple_students]

    async def test_find_many_filters_and_limit(self, student_repository, multiple_students):
        found = await student_repository.find_many(filters={"grade": 60})
        assert [s.name for s in found] == ["student_1"]

        page = await student_repository.find_many(order_by="grade", descending=True, offset=1, limit=1)
        assert [s.grade for s in page] == [60]

    async def test_find_many_unknown_filter(self, student_repository):
        with pytest.raises(PersistenceError) as exc_info:
            await student_repository.find_many(filters={"nickname": "x"})
        assert exc_info.value.vendor_code == "42703"

    async def test_exists_and_count(self, student_repository, multiple_students):
        assert await student_repository.exists(multiple_students[0].id)
        assert not await student_repository.exists(uuid.uuid4())
        assert await student_repository.count() == 3
        assert await student_repository.count(grade=90) == 1


@pytest.mark.asyncio
class TestBaseRepositoryAggregates:

    async def test_average_empty_table(self, student_repository):
        assert await student_repository.average("grade") == 0.0

    async def test_average(self, student_repository, multiple_students):
        assert await student_repository.average("grade") == pytest.approx(60.0)

    async def test_find_at_least_highest_first(self, student_repository, multiple_students):
        found = await student_repository.find_at_least("grade", 60)
        assert [s.grade for s in found] == [90, 60]


@pytest.mark.asyncio
class TestBaseRepositoryUpdateDelete:

    async def test_update(self, student_repository, created_student):
        updated = await student_repository.update(created_student.id, grade=95)
        assert updated.grade == 95
        assert (await student_repository.get_by_id(created_student.id)).grade == 95

    async def test_update_missing_returns_none(self, student_repository):
        assert await student_repository.update(uuid.uuid4(), grade=10) is None

    async def test_update_unknown_field(self, student_repository, created_student):
        with pytest.raises(PersistenceError):
            await student_repository.update(created_student.id, nickname="x")

    async def test_delete_returns_affected_rows(self, student_repository, created_student):
        assert await student_repository.delete(created_student.id) == 1
        assert await student_repository.delete(created_student.id) == 0
        assert await student_repository.get_by_id(created_student.id) is None
