from timex.core.exceptions import (
    AppError,
    ConfigurationError,
    GenerationCancelledError,
    GenerationValidationError,
    ResourceNotFoundError,
)


def test_validation_error_structure():
    err = GenerationValidationError(message="Test error", details={"foo": "bar"})
    assert err.status_code == 400
    assert err.message == "Test error"
    assert err.details == {"foo": "bar"}
    assert isinstance(err, AppError)


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}
    assert str(err) == "Generic error"


def test_not_found_lists_every_missing_id():
    err = ResourceNotFoundError("Batch", ["b1", "b2"])
    assert err.status_code == 404
    assert err.message == "Batch with id b1, b2 not found"
    assert err.details == {"missing_ids": ["b1", "b2"]}

    single = ResourceNotFoundError("Batch", "b9")
    assert single.details == {"missing_ids": ["b9"]}


def test_cancelled_and_configuration_errors():
    assert GenerationCancelledError().message == "Timetable generation cancelled"
    assert ConfigurationError("bad").status_code == 500
