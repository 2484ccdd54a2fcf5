"""
team_console.api.routers

HTTP routers for the console shell.
"""
