"""Error types raised by the ACM Online Judge client."""


class AcmOJError(Exception):
    """Base class for every error the CLI reports to the user."""

    default_message = "something went wrong"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class WrongCredentials(AcmOJError):
    """The judge rejected the username/password pair."""

    default_message = "wrong credentials."


class NotAuthenticated(AcmOJError):
    """The session was invalidated between two requests."""

    default_message = "it seems you are logged out during submission. please retry."


class LoginRequired(AcmOJError):
    """No valid session and no stored password to re-login with."""

    default_message = "you are not logged in. use 'acmoj login' to sign in."


class NetworkError(AcmOJError):
    """Unexpected HTTP status or transport failure."""

    default_message = "network error"


class ProtocolError(NetworkError):
    """The judge answered with a body we do not recognize."""

    default_message = "unexpected response from the judge"


class ParseError(AcmOJError):
    """An expected HTML fragment is missing or malformed."""

    default_message = "cannot parse judge page"


class StorageError(AcmOJError):
    """Configuration file is missing, corrupt or not writable."""

    default_message = "cannot access configuration file"


class RepositoryError(AcmOJError):
    """No enclosing git repository, or it has no usable remote."""

    default_message = "not in a git repository"


class PollCancelled(AcmOJError):
    """Waiting for judge results was stopped by a deadline or signal."""

    default_message = "stopped waiting for judge results"
