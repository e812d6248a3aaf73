"""Push notification dispatch, badge synchronization and event reminders.

The package is split in the usual layers: ``domain`` (entities and errors),
``application`` (use cases), ``infrastructure`` (store and push transport
adapters) and ``interfaces`` (trigger registry, HTTP receiver and scheduler).
"""
