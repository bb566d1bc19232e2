class IssueClassifierError(Exception):
    pass


class SchemaError(IssueClassifierError, ValueError):
    pass


class DataNotLoadedError(IssueClassifierError, RuntimeError):
    pass


class ModelNotReadyError(IssueClassifierError, RuntimeError):
    pass


class ModelFormatError(IssueClassifierError, ValueError):
    pass
