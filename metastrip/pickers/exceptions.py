class PickerError(Exception):
    """Raised when a file picker cannot produce the chosen file."""
