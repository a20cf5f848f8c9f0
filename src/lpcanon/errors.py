"""Error types raised by the canonical-form pipeline."""


class LPCanonError(Exception):
    """Base class for all lpcanon failures."""


class ModelInvalidError(LPCanonError, ValueError):
    """Input model breaks a structural invariant (counts, empty variable list)."""


class TransformationError(LPCanonError):
    """Canonical-form post-condition failed after all rewriting steps.

    This points at a bug in the transformer rather than at bad input.
    """


class BuilderPreconditionError(LPCanonError):
    """Tableau requested before a canonical model exists."""
