"""
Tracker controller.

Responsibilities:
- Hold the selected tab and filter criteria for the single local user.
- Derive the displayed list from catalog, annotations, tab, filters and
  recommendations through pure functions over an explicit context.
- Apply user intents (visited, want-to-visit, rating, comment) to the
  annotation store while keeping visited and want-to-visit exclusive.
- Report summary statistics.
"""
