from .task import Category, Priority, Task

# Export all models for easy importing
__all__ = ["Task", "Category", "Priority"]
