"""
CRM Backend - API REST
Users, customers, sales, payments, revenues, targets, performances,
comments, audit logs, notifications, settings and dashboards.
"""

__version__ = "1.0.0"
