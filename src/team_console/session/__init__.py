"""
team_console.session

Session/identity package.

Responsibilities:
- Session provider (principal lifecycle).
- Persistence and credential-verification collaborators.
"""
