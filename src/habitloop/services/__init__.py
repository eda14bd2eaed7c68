"""Service layer: the streak engine and the orchestration around it."""
