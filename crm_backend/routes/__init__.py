"""
CRM - API routers, one module per resource (mounted under /api by server.py)
"""
