"""
Error types raised by the learners and data helpers.
"""


class NotTrainedError(RuntimeError):
    """Raised when classify/confidence is called before train."""


class PreconditionError(ValueError):
    """
    Raised for malformed training input: empty dataset, empty feature index set,
    out-of-range MultiLR labels, or fewer than two classes for a reduction.
    """
