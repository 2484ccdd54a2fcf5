"""
team_console.clients

HTTP client boundary towards the team backend (members, teams, finance, inventory,
files, calendar).
"""
