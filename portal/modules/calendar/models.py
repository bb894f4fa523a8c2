# Local store key: dr-help-events
# Calendar events live next to tasks in the local key-value store.
# Ticket and task due dates are merged in at read time as "deadline" entries.

"""
Stored item structure:
- id: text (uuid4)
- title: text
- date: text - YYYY-MM-DD
- start_time: text (nullable) - HH:MM[:SS]
- end_time: text (nullable) - HH:MM[:SS]
- type: text - meeting | inspection | training | client | review | other
- location: text (nullable)
- participants: text[] - free-form names
- description: text (nullable)
"""
