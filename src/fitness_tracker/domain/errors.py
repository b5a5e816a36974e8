"""Domain errors raised by services and mapped to HTTP responses."""


class FitnessTrackerError(Exception):
    """Base class for fitness tracker errors."""


class InvalidInputError(FitnessTrackerError, ValueError):
    """Input has an invalid shape or value."""


class NotFoundError(FitnessTrackerError):
    """Requested entity does not exist."""


class ForbiddenError(FitnessTrackerError):
    """Entity belongs to another user."""


class ConflictError(FitnessTrackerError):
    """Operation conflicts with existing state."""


class CoachResponseError(FitnessTrackerError):
    """AI coach returned an unusable response."""
