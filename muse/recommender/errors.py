class SelectionInvariantError(RuntimeError):
    """Raised when selection reaches a state that valid input cannot produce."""
