from fastapi import status


class StringAnalyzerError(Exception):
    """Base error; every subclass maps to one fixed HTTP status"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidInput(StringAnalyzerError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request body or query parameters"


class InvalidValueType(InvalidInput):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "Invalid data type for 'value' (must be a string)"


class StringAlreadyExists(StringAnalyzerError):
    status_code = status.HTTP_409_CONFLICT
    message = "String already exists in the system"


class StringNotFound(StringAnalyzerError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "String does not exist in the system"


class QueryParseError(StringAnalyzerError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Unable to parse natural language query"


class ConflictingFilters(StringAnalyzerError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "Query parsed but resulted in conflicting filters"


class CorruptRecord(StringAnalyzerError):
    message = "Stored record failed validation"
