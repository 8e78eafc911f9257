"""Error taxonomy for the refinement engine."""


class GrouperError(Exception):
    """Base class for all engine errors."""


class MalformedInput(GrouperError, ValueError):
    """Ratings that do not line up with the panel or the scale."""


class CollaboratorFailure(GrouperError):
    """A generation or evaluation call failed or timed out."""

    def __init__(self, collaborator: str, message: str):
        super().__init__(f"{collaborator}: {message}")
        self.collaborator = collaborator


class ActionFailed(GrouperError):
    """An action effect failed; the run was aborted.

    ``state`` is the last installed state, i.e. the state as it was before
    the failing cycle started.
    """

    def __init__(self, action: str, state, cause: BaseException):
        super().__init__(f"Action '{action}' failed: {cause}")
        self.action = action
        self.state = state
