# Local store key: dr-help-tasks
# Tasks never reach Supabase; the whole list is one JSON string in the
# local key-value store (portal/database/local_store.py), newest first.

"""
Stored item structure:
- id: text - epoch milliseconds at creation
- title: text
- description: text
- status: text - pending | in_progress | completed
- priority: text - high | medium | low
- assignee: text (nullable) - free-form name
- due_date: text (nullable) - YYYY-MM-DD
- category: text - development | planning | maintenance | design | other
- created_at: text - ISO 8601 timestamp
- updated_at: text - ISO 8601 timestamp
"""
