"""Centralized failure types for the summarizer.

Contracts fail fast, loud, and once. All contract violations raise the same
exception type, allowing callers to handle summarizer bugs uniformly. Bad
input is reported separately through InvalidConfiguration and MissingCategory.
"""


class ContractViolation(RuntimeError):
    """Raised when a summary stage contract is violated.

    This indicates a bug in summarizer logic, not bad user input. It means a
    stage did not produce the invariants it promised.

    Key distinction:
    - InvalidConfiguration: bad parameter or column (user/config error)
    - MissingCategory: a raw code nobody mapped or excluded (data error)
    - ContractViolation: summarizer bug (programmer error)
    """
    pass


class InvalidConfiguration(ValueError):
    """Raised for a parameter or column the summarizer cannot work with.

    Examples: non-positive class interval, empty measurement set before
    binning, a grouping key that names an unknown column.
    """
    pass


class MissingCategory(KeyError):
    """Raised when recoding meets values outside the expected category set.

    Values listed in the configured exclusion set are dropped instead;
    this error is reserved for codes that are neither mapped nor excluded.
    """

    def __init__(self, column: str, values):
        self.column = column
        self.values = sorted(str(v) for v in values)
        super().__init__(column, self.values)

    def __str__(self) -> str:
        return (
            f"Column '{self.column}' has unmapped values {self.values}; "
            f"map them or add them to categories.excluded['{self.column}']"
        )
