"""Domain layer: entities, errors, collaborator protocols and services."""
