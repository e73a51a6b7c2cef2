"""
Transaction helpers for the service layer.

Contents
--------
- transactionManagement
    * `SessionFactory` bound to the shared engine
    * `db_session_context`, the session of the unit of work in progress
    * `@transactional`: outermost call opens, commits or rolls back the
      session; nested calls join it
"""
