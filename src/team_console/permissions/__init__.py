"""
team_console.permissions

Permission resolution for the current principal.

Responsibilities:
- Answer "can the current principal do X" (fail-closed).
- Derive the navigation menu from the current capability set.
"""
