"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
It enforces semantic invariants of the summary stages.
"""

from fishbio.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a summary contract.

    This is called at stage boundaries to verify the preceding stage
    produced the guaranteed invariants. It is fail-fast: no recovery,
    no fallback, no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False. This indicates a bug in summarizer logic.

    Examples
    --------
    >>> require(len(dense) == expected, "Grid contract: missing combinations")
    >>> require((counts >= 0).all().all(), "Percent contract: negative counts")
    """
    if not condition:
        raise ContractViolation(message)
