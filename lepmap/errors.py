class LepmapError(Exception):
    """Base class for errors raised by the analysis pipeline."""


class AcquisitionError(LepmapError):
    """Occurrence or boundary data could not be retrieved, or came back empty."""


class EmptyPointPatternError(LepmapError, ValueError):
    """Density estimation was requested for a pattern with no points in the window."""
