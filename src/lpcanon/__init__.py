from .errors import LPCanonError, ModelInvalidError, TransformationError, BuilderPreconditionError
from .model import (
    Variable, Constraint, LPModel,
    VariableType, ConstraintType, ObjectiveSense, SolutionStatus,
)
from .transform import StandardFormTransformer, TransformationMetadata, CanonicalForm, to_canonical
from .tableau import TableauBuilder, InitialTableau, format_tableau, print_tableau
from .backmap import OriginalSolution, to_original, apply_solution, OBJECTIVE_KEY

__version__ = "0.1.0"
