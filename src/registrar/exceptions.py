"""Exception hierarchy shared by the store, catalog, roster and API."""


class RegistrarError(Exception):
    """Base exception for Registrar errors."""


class NotFoundError(RegistrarError):
    """Referenced student, course or enrollment does not exist."""


class DuplicateError(RegistrarError):
    """Identifier collision on create, or duplicate enrollment."""


class CapacityExceededError(RegistrarError):
    """Enrollment attempted on a full course."""


class ValidationError(RegistrarError):
    """Out-of-range capacity or grade, or blank identifier/name."""


class StorageError(RegistrarError):
    """Persistence layer failure not otherwise categorized."""


class CourseNotFoundError(NotFoundError):
    """Course with given code does not exist in the requested state."""


class StudentNotFoundError(NotFoundError):
    """Student with given ID does not exist in the requested state."""


class NotEnrolledError(NotFoundError):
    """Student is not enrolled in the given course."""


class CourseExistsError(DuplicateError):
    """Course with given code already exists (active or deleted)."""


class StudentExistsError(DuplicateError):
    """Student with given ID already exists (active or deleted)."""


class AlreadyEnrolledError(DuplicateError):
    """Student already holds an enrollment for the given course."""
