"""Failure taxonomy shared by the core components."""


class StudyHubError(Exception):
    """Base class for every failure the core reports."""

    kind = "StudyHubError"
    fatal = False


class EmptyInput(StudyHubError):
    kind = "EmptyInput"


class InvalidCard(EmptyInput):
    """A flashcard was submitted without a front or a back."""

    kind = "InvalidCard"


class NoValidQuestions(StudyHubError):
    kind = "NoValidQuestions"


class NoQuizzesAvailable(StudyHubError):
    kind = "NoQuizzesAvailable"


class NoCardsAvailable(StudyHubError):
    kind = "NoCardsAvailable"


class EntityNotFound(StudyHubError):
    kind = "EntityNotFound"


class InvalidSessionEvent(StudyHubError):
    """An event was sent to a session in a state that cannot accept it."""

    kind = "InvalidSessionEvent"


class StorageFailure(StudyHubError):
    """Persisting the document failed; memory and disk may now disagree."""

    kind = "StorageFailure"
    fatal = True


class ImportFailed(StudyHubError):
    """A file could not be read or stored as study material."""

    kind = "ImportFailed"
