"""Domain errors raised by repositories and services.

Repositories never let raw Firestore errors escape; they log the cause and
raise one of these instead. ``main.py`` maps each family to an HTTP status.
"""


class DomainError(Exception):
    """Base class for errors that are safe to show to the end user"""

    status_code = 400
    default_message = "Request could not be completed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# Expected, non-fatal conditions that callers branch on
class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found."


class TeamNotFound(NotFoundError):
    default_message = "Team not found."


class ClientNotFound(NotFoundError):
    default_message = "Client not found."


class InviteeNotFound(NotFoundError):
    default_message = "No user exists with that email address."


# Store or network failures; the user is only told to retry
class UnavailableError(DomainError):
    status_code = 503
    default_message = "The service is temporarily unavailable. Please try again."


class SettingsUnavailable(UnavailableError):
    default_message = "Could not access user settings. Please try again."


class TeamUnavailable(UnavailableError):
    default_message = "Could not access team information. Please try again."


class ClientUnavailable(UnavailableError):
    default_message = "Could not access clients. Please try again."


class FeedbackUnavailable(UnavailableError):
    default_message = "Could not save feedback. Please try again."


class NotificationUnavailable(UnavailableError):
    default_message = "Could not queue the email. Please try again."


class ConflictError(DomainError):
    status_code = 409
    default_message = "The request conflicts with the current state."


class InviteRejected(ConflictError):
    default_message = "This user cannot be added to the team."


class TeamOwnershipError(ConflictError):
    default_message = "The team owner cannot be removed."


class PermissionDeniedError(DomainError):
    status_code = 403
    default_message = "You do not have permission to perform this action."


class NotTeamOwner(PermissionDeniedError):
    default_message = "Only the team owner can manage members."


class NotAdmin(PermissionDeniedError):
    default_message = "Only the administrator can view feedback."
