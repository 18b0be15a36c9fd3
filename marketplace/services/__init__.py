"""Business logic over the entity store."""
