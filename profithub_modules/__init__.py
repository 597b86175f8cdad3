"""
profithub_modules -- persistence-facing shell around the analytics engines.

Each sub-package (receivables, budget, projects, treasury) holds its ORM
tables, DTOs, read-only selectors and a service that runs an analysis and
records the result stamped with the acting user.
"""
