class DSBaseException(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DSSecretUnavailableException(DSBaseException):
    """The database secret is missing or could not be parsed"""


class DSConnectionException(DSBaseException):
    """The database could not be reached after all connection attempts"""


class DSResourceNotFoundException(DSBaseException):
    """An expected stack resource or replication task does not exist"""


class DSStatusTimeoutException(DSBaseException):
    """The replication task never reached the requested status"""

    def __init__(self, message: str, last_status: str | None):
        self.last_status = last_status
        super().__init__(message)


class DSInvalidRecordException(DSBaseException):
    """A change event record from the stream could not be processed"""


class DSDecodeException(DSInvalidRecordException):
    """The record payload is not valid base64-encoded UTF-8"""


class DSParseException(DSInvalidRecordException):
    """The decoded record payload is not valid JSON"""
