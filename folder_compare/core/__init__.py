"""Core comparison engine: models, errors and folder comparison."""
