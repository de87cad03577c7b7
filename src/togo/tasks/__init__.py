"""
Task subsystem.

Components:
- task_models.py: data structures (User, Task, QuotaStatus)
- task_store.py: SQLite-backed storage for users and tasks, unit of work
- quota.py: daily quota admission control on top of the store
- task_api.py: small high-level helpers used by the CLI
"""
