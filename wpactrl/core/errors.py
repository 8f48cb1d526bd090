"""Domain-specific errors for wpactrl."""


class WpaCtrlError(Exception):
    """Base error for wpactrl."""


class TransportError(WpaCtrlError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the control socket cannot be created or bound."""


class TransportSendError(TransportError):
    """Raised when writing a datagram fails."""


class TransportReceiveError(TransportError):
    """Raised when reading fails or the connection is closed."""


class CommandTimeoutError(WpaCtrlError):
    """Raised when no reply arrives within the command timeout."""


class ConnectionClosedError(WpaCtrlError):
    """Raised when the control connection went away while waiting."""


class CommandFailedError(WpaCtrlError):
    """Raised when the daemon answers a command with an unexpected reply.

    The message is the reply text, verbatim.
    """

    def __init__(self, reply: str) -> None:
        super().__init__(reply)
        self.reply = reply


class NetworkParseError(WpaCtrlError):
    """Raised when a LIST_NETWORKS reply cannot be parsed."""


class ConfigError(WpaCtrlError):
    """Base configuration error."""


class ConfigLoadError(ConfigError):
    """Raised when the configuration file cannot be read."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration file does not conform to the schema."""
