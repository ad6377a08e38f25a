class AvrogenError(Exception):
    """Base exception for all avrogen errors."""


class SchemaError(AvrogenError):
    """Exception raised when a schema graph cannot be built or traversed."""
    def __init__(self, message: str):
        super().__init__(message)


class AvscError(SchemaError):
    """Exception raised for errors in Avro JSON schema parsing."""
    def __init__(self, message: str):
        super().__init__(message)


class UnresolvedReferenceError(SchemaError):
    """Exception raised when a named reference has no target."""
    def __init__(self, message: str):
        super().__init__(message)


class CodeGenError(AvrogenError):
    """Exception raised while emitting code."""
    def __init__(self, message: str):
        super().__init__(message)


class UnsupportedSchemaNodeError(CodeGenError):
    """Exception raised when traversal reaches a node kind it cannot emit."""
    def __init__(self, message: str):
        super().__init__(message)
