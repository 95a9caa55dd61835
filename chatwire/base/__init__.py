"""Foundation layer: models, errors, streaming state machines, resilience and logging."""
