"""
Filter, sort and recommendation engine.

Responsibilities:
- Narrow the restaurant frame with the user's search and filter criteria.
- Order it by name, distance, personal rating or price tier.
- Score unvisited restaurants against the user's highly rated visits.
- Return structured recommendations with human-readable reasons.
"""
