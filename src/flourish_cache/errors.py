"""Application-level exceptions.

The query cache never raises; everything here comes from the remote
stores or from the orchestration on top of them.
"""


class FlourishError(Exception):
    """Base class for all application-level errors."""


class FetchError(FlourishError):
    """A remote read failed; the page load is reported as failed."""


class ContentFetchError(FetchError):
    def __init__(self, media_type: str, detail: str = ""):
        self.media_type = media_type
        self.message = f"Failed to fetch '{media_type}' content: {detail}"
        super().__init__(self.message)


class InteractionFetchError(FetchError):
    def __init__(self, user_id: str, detail: str = ""):
        self.user_id = user_id
        self.message = f"Failed to fetch interactions for user '{user_id}': {detail}"
        super().__init__(self.message)


class InteractionWriteError(FlourishError):
    def __init__(self, action: str, detail: str = ""):
        self.action = action
        self.message = f"Failed to {action}: {detail}"
        super().__init__(self.message)
