"""
Exceptions raised while splitting files into fragments and joining them back.
"""

# filefrag/errors.py


class FragmentationError(Exception):
    """Base class for every filefrag failure."""


class FragmentationImpossibleError(FragmentationError, ValueError):
    """The requested piece count or maximum block size cannot be honoured."""


class SourceUnavailableError(FragmentationError, IOError):
    """The source file is missing, unreadable or not a regular file."""


class DestinationConflictError(FragmentationError, FileExistsError):
    """A block's backing file already exists."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Could not create '{path}': file already exists")


class DestinationUnavailableError(FragmentationError, IOError):
    """The output file cannot be created or written."""


class BlockReadError(FragmentationError, IOError):
    """A populated block could not be read back."""


class FragmentNameError(FragmentationError, ValueError):
    """A file in a fragments directory has no numeric index suffix."""


class IdentityError(FragmentationError, RuntimeError):
    """The digest used to derive identifiers is not available."""
