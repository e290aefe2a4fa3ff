class ScoringPipelineError(Exception):
    """Base class for every error that ends a scoring report run."""


class EmptyInputError(ScoringPipelineError):
    """Raised when there are no game log rows to aggregate."""


class DivisionUndefinedError(ScoringPipelineError):
    """Raised in strict mode when a player's share is taken over zero total points."""


class DataIntegrityError(ScoringPipelineError):
    """Raised when game log rows fail validation at ingestion."""


class FetchError(ScoringPipelineError):
    """Raised when game logs could not be retrieved from the data source."""
