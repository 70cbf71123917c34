"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority, TaskFilters)
- task_store.py: in-memory store with AI-enriched creation
"""
