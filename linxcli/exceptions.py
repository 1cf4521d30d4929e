"""Core exceptions raised by linx client"""


class LinxError(Exception):
    pass


class ConfigError(LinxError):
    pass


class ConnectionError(LinxError):
    pass


class ResponseError(LinxError):
    pass


class InvalidResponse(LinxError):
    pass


class MalformedResponse(InvalidResponse):
    pass


class DataError(LinxError):
    pass
