class ScoreError(Exception):
    """Base error for the scoring services. Carries the HTTP status to report."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ScoreError):
    """Malformed score or roster input. Nothing was appended."""

    status_code = 400


class SessionClosedError(ScoreError):
    """The session has already been completed."""

    status_code = 409


class NotFoundError(ScoreError):
    """Unknown game, session or player."""

    status_code = 404
