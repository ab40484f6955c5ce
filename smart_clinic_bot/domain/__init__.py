"""Domain layer: entities, value objects, repositories, pure services."""
