"""
Bibliotheca Test Suite

Tests are organized into:
- unit/: Query builders, stored entities and repositories against store doubles
- integration/: HTTP API against repository doubles
"""
