"""Error kinds raised by the landmark transforms."""


class AHPError(ValueError):
    """Base class for landmark transform errors."""


class InvalidStateError(AHPError):
    """A precondition on the input state is violated.

    Raised for negative or non-finite inverse depth, zero inverse depth
    passed to the Euclidean reparametrization, a zero observed direction,
    or an input vector of the wrong length.
    """


class DegenerateGeometryError(AHPError):
    """A vector whose norm is required is numerically zero."""


class ShapeMismatchError(AHPError):
    """A caller-provided Jacobian buffer does not have the required shape or a float dtype."""
