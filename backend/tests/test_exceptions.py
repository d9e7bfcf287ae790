from app.core.exceptions import AppError, ConflictError, NotFoundError, ValidationError


def test_validation_error_structure():
    err = ValidationError(message="Bad periods", details={"periods_per_day": 0})
    assert err.status_code == 400
    assert err.message == "Bad periods"
    assert err.details == {"periods_per_day": 0}
    assert isinstance(err, AppError)


def test_not_found_error_message():
    err = NotFoundError("Class", 42)
    assert err.status_code == 404
    assert err.message == "Class with id 42 not found"
    assert err.resource_id == 42


def test_conflict_error_status():
    assert ConflictError("duplicate").status_code == 409


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}
