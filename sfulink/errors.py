class Error(Exception):
    """Base class for exceptions in this module."""
    def __init__(self, message: str = ''):
        super(Error, self).__init__(message)
        self.message = message

# Operation not supported by this Transport (wrong direction, SCTP not
# negotiated, codec not consumable...).
class UnsupportedError(Error):
    pass

# Operation attempted on a closed entity, Transport or command queue.
class InvalidStateError(Error):
    pass
