"""Output layer: human, quiet and JSON rendering of ServiceResult."""
