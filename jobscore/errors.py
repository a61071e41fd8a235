"""Error kinds surfaced to callers as the failure envelope."""


class JobScoreError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(JobScoreError):
    pass


class UpstreamAuthError(JobScoreError):
    """The identity provider could not be reached or answered with a server error."""


class BadRequest(JobScoreError):
    pass


class PersistenceError(JobScoreError):
    pass


class RecordNotFound(JobScoreError):
    status_code = 404
