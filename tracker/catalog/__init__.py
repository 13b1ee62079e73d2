"""
Restaurant catalog package.

Responsibilities:
- Read the static restaurant catalog (a JSON document with a ``restaurants`` list).
- Validate records into the canonical Restaurant schema.
- Hold the catalog in memory as an immutable pandas DataFrame for the filter,
  sort and recommendation stages.
"""
