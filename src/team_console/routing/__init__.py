"""
team_console.routing

Navigation destinations and the route guard.
"""
