import typing


class SQLFactoriesException(Exception):
    """
    Base exception class for all sqlfactories errors.

    Insert failures raised by SQLAlchemy are never wrapped into this hierarchy,
    they reach the caller unchanged. The classes below only describe problems
    with how factories are declared or used.
    """

    def __init__(
        self,
        *args: typing.Any,
        detail: str = "",
    ):
        """
        Initializes the SQLFactoriesException.

        Args:
            *args (typing.Any): Variable length argument list to be included
                in the exception message.
            detail (str, optional): A more detailed explanation of the exception.
                Defaults to an empty string.
        """
        self.detail = detail
        super().__init__(*(str(arg) for arg in args if arg), self.detail)

    def __repr__(self) -> str:
        if self.detail:
            return f"{type(self).__name__} - {self.detail}"
        return type(self).__name__

    def __str__(self) -> str:
        return "".join(self.args).strip()


class InvalidModelError(SQLFactoriesException):
    """
    Raised when a factory names no model or table, or names something that
    cannot be used as one (a model must be a class, a table must be a
    `sqlalchemy.Table`).
    """


class FactoryDefinitionError(SQLFactoriesException):
    """
    Raised for a badly declared factory: field names clashing with the factory
    API, fields without a matching table column, unknown keyword arguments or
    uncovered required columns when validation is set to `"error"`.
    """


class InvalidAssociationError(SQLFactoriesException, TypeError):
    """
    Raised when an association field receives a value that is neither a
    persisted parent record, a parent factory, an `Association` nor (for
    optional associations) `None`.
    """


class FactoryRecursionError(SQLFactoriesException, RecursionError):
    """
    Raised when building default associations nests deeper than
    `settings.max_association_depth`, which happens with required
    self-referencing or cyclic associations.
    """
