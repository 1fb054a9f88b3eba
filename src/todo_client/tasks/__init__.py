"""
Task subsystem.

Components:
- task_models.py: Task data structure
- task_store.py: server-backed local task collection
- optimistic.py: optimistic update + rollback helper
"""
