"""
User annotation storage.

Responsibilities:
- Keep the visited / want-to-visit / rating / comment state per restaurant.
- Serialise the whole mapping under a single well-known key of a
  key-value backend after every change.
- Recover from unreadable persisted data by starting from an empty mapping.
"""
