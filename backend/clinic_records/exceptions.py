class RecordsStoreError(Exception):
    def __init__(self, message: str, operation: str = None):
        self.operation = operation
        super().__init__(message)


class InvalidRecordError(RecordsStoreError):
    def __init__(self, message: str, errors: list = None, operation: str = None):
        self.errors = errors or []
        super().__init__(message, operation=operation)


class DatabaseUnavailableError(RecordsStoreError):
    pass


class IntegrityViolationError(RecordsStoreError):
    pass


class QueryError(RecordsStoreError):
    pass


class MultipleRecordsFoundError(RecordsStoreError):
    def __init__(self, table: str, key: str, value, operation: str = None):
        self.table = table
        self.key = key
        self.value = value
        super().__init__(f"More than one {table} row has {key}={value!r}", operation=operation)
