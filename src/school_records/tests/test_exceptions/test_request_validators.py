from school_records.validators.request_validators import (
    field_name_from_loc,
    message_for_error,
    violations_from_errors,
)


def test_field_name_from_loc():
    assert field_name_from_loc(("body", "age")) == "age"
    assert field_name_from_loc(("query", "minGrade")) == "minGrade"
    assert field_name_from_loc(("body", "courses", 0, "code")) == "courses.0.code"
    assert field_name_from_loc(("body",)) == "body"
    assert field_name_from_loc(()) == "body"


def test_messages_for_common_error_types():
    assert message_for_error({"type": "missing"}, "name") == "name is required"
    assert message_for_error({"type": "greater_than_equal", "ctx": {"ge": 6}}, "age") == "age must be >= 6"
    assert message_for_error({"type": "less_than_equal", "ctx": {"le": 100}}, "grade") == "grade must be <= 100"
    assert message_for_error({"type": "uuid_parsing"}, "student_id") == "student_id must be a UUID"
    assert message_for_error({"type": "extra_forbidden"}, "nickname") == "nickname should not exist"


def test_value_error_text_used_verbatim():
    error = {"type": "value_error", "msg": "Value error, email must be an email", "ctx": {"error": ValueError("email must be an email")}}
    assert message_for_error(error, "email") == "email must be an email"


def test_unknown_type_falls_back_to_pydantic_message():
    assert message_for_error({"type": "something_new", "msg": "Input is odd"}, "x") == "Input is odd"
    assert message_for_error({"type": "something_new"}, "x") == "x is invalid"


def test_template_missing_context_falls_back():
    assert message_for_error({"type": "greater_than_equal", "msg": "too small"}, "age") == "too small"


def test_violations_keep_order():
    violations = violations_from_errors([
        {"type": "missing", "loc": ("body", "name")},
        {"type": "greater_than_equal", "loc": ("body", "age"), "ctx": {"ge": 6}},
    ])
    assert [(v.field, v.messages) for v in violations] == [
        ("name", ["name is required"]),
        ("age", ["age must be >= 6"]),
    ]
