"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  CRM - Dashboard aggregation                                                 ║
║                                                                              ║
║  Read-only, best effort. Collections are fetched whole (or scoped to one     ║
║  agent) and filtered in memory by the resolved window.                       ║
║                                                                              ║
║  TRENDS: the current window is compared with the immediately preceding       ║
║  window of the same length. When that window has nothing, the fallback       ║
║  from DASHBOARD_TREND_FALLBACKS is reported instead.                         ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import math
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple, List, Dict

from crm_backend.config import (
    db,
    now_utc,
    parse_iso,
    DASHBOARD_TREND_FALLBACKS,
    DASHBOARD_PERIODS,
    DEFAULT_DASHBOARD_PERIOD,
    ROLE_AGENT,
)

logger = logging.getLogger("dashboard")

MAX_DOCS = 100000
RECENT_SALES_LIMIT = 5
TOP_PERFORMERS_LIMIT = 5


# ==================== WINDOWS ====================

def get_date_range(period: Optional[str] = None, now: Optional[datetime] = None) -> Tuple[datetime, datetime, str]:
    """
    Resolves a named period to a concrete [start, end] window (UTC).
    Unknown names fall back to current_month.
    Returns (start, end, resolved_period).
    """
    if period not in DASHBOARD_PERIODS:
        period = DEFAULT_DASHBOARD_PERIOD
    now = now or now_utc()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = now

    if period == "today":
        start = midnight
    elif period == "this_week":
        # Weeks start on Sunday
        start = midnight - timedelta(days=(now.weekday() + 1) % 7)
    elif period == "last_month":
        first_of_month = midnight.replace(day=1)
        end = first_of_month - timedelta(microseconds=1)
        start = end.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    elif period == "this_year":
        start = midnight.replace(month=1, day=1)
    else:
        start = midnight.replace(day=1)

    return start, end, period


def previous_window(start: datetime, end: datetime) -> Tuple[datetime, datetime]:
    """Same-length window ending where the current one starts (end exclusive)."""
    return start - (end - start), start


def record_date(doc: dict, *fields: str) -> Optional[datetime]:
    for field in fields:
        value = parse_iso(doc.get(field))
        if value:
            return value
    return None


def sale_date(sale: dict) -> Optional[datetime]:
    return record_date(sale, "date", "createdAt")


def in_window(when: Optional[datetime], start: datetime, end: datetime, include_end: bool = True) -> bool:
    if when is None:
        return False
    if include_end:
        return start <= when <= end
    return start <= when < end


# ==================== ARITHMETIC ====================

def percent(numerator: float, denominator: float) -> float:
    """numerator/denominator as a percentage, one decimal, halves rounded up"""
    return math.floor(numerator / denominator * 1000 + 0.5) / 10


def trend(current: float, previous: float, fallback_key: str) -> float:
    if previous > 0:
        return percent(current - previous, previous)
    return DASHBOARD_TREND_FALLBACKS[fallback_key]


def target_progress(targets: List[dict]) -> float:
    """Mean achieved/targetAmount over in-progress targets, as a percentage"""
    active = [
        t for t in targets
        if t.get("status") == "in_progress" and (t.get("targetAmount") or 0) > 0
    ]
    if not active:
        return 0
    total = sum(t.get("achieved", 0) / t["targetAmount"] * 100 for t in active)
    return math.floor(total / len(active) * 10 + 0.5) / 10


def display_name(user: Optional[dict], unknown: str = "Unknown") -> str:
    if not user:
        return unknown
    return user.get("name") or f"{user.get('firstName', '')} {user.get('lastName', '')}".strip() or unknown


def recent_sales(sales: List[dict], customers: Dict[str, dict], agents: Optional[Dict[str, dict]] = None) -> List[dict]:
    ordered = sorted(
        (s for s in sales if sale_date(s)),
        key=sale_date,
        reverse=True
    )[:RECENT_SALES_LIMIT]

    rows = []
    for sale in ordered:
        row = {
            "id": sale["id"],
            "customerName": (customers.get(sale.get("customerID")) or {}).get("name", "Unknown"),
            "amount": sale.get("amount", 0),
            "status": sale.get("status"),
            "date": sale.get("date") or sale.get("createdAt"),
        }
        if agents is not None:
            row["agentName"] = display_name(agents.get(sale.get("agentID")))
        rows.append(row)
    return rows


def top_performers(performances: List[dict], users: Dict[str, dict]) -> List[dict]:
    ordered = sorted(performances, key=lambda p: p.get("totalRevenue") or 0, reverse=True)
    return [
        {
            "id": perf["id"],
            "name": display_name(users.get(perf.get("userID")), "Unknown User"),
            "totalSales": perf.get("totalSales") or 0,
            "totalRevenue": perf.get("totalRevenue") or 0,
            "conversionRate": perf.get("conversionRate") or 0,
        }
        for perf in ordered[:TOP_PERFORMERS_LIMIT]
    ]


def _window_payload(start: datetime, end: datetime) -> dict:
    return {"startDate": start.isoformat(), "endDate": end.isoformat()}


# ==================== VIEWS ====================

async def build_admin_dashboard(period: Optional[str] = None, now: Optional[datetime] = None) -> dict:
    start, end, period = get_date_range(period, now)
    prev_start, prev_end = previous_window(start, end)

    customers = await db.customers.find({}, {"_id": 0}).to_list(MAX_DOCS)
    sales = await db.sales.find({}, {"_id": 0}).to_list(MAX_DOCS)
    targets = await db.targets.find({}, {"_id": 0}).to_list(MAX_DOCS)
    performances = await db.performances.find({}, {"_id": 0}).to_list(MAX_DOCS)
    users = await db.users.find({}, {"_id": 0, "password": 0}).to_list(MAX_DOCS)

    sales_in_period = [s for s in sales if in_window(sale_date(s), start, end)]
    customers_in_period = [
        c for c in customers if in_window(record_date(c, "createdAt"), start, end)
    ]
    prev_sales = [s for s in sales if in_window(sale_date(s), prev_start, prev_end, include_end=False)]
    prev_customers = [
        c for c in customers
        if in_window(record_date(c, "createdAt"), prev_start, prev_end, include_end=False)
    ]

    total_sales = len(sales_in_period)
    total_revenue = sum(s.get("amount") or 0 for s in sales_in_period)
    prev_revenue = sum(s.get("amount") or 0 for s in prev_sales)
    completed = len([s for s in sales_in_period if s.get("status") == "completed"])
    agents = [u for u in users if u.get("role") == ROLE_AGENT]

    users_by_id = {u["id"]: u for u in users}
    customers_by_id = {c["id"]: c for c in customers}

    return {
        "stats": {
            "totalCustomers": len(customers),
            "totalSales": total_sales,
            "totalRevenue": total_revenue,
            "totalAgents": len(agents),
            "activeAgents": len([u for u in agents if u.get("status") == "active"]),
            "conversionRate": percent(completed, len(customers_in_period)) if customers_in_period else 0,
            "targetProgress": target_progress(targets),
        },
        "trends": {
            "customersTrend": trend(len(customers_in_period), len(prev_customers), "admin.customersTrend"),
            "salesTrend": trend(total_sales, len(prev_sales), "admin.salesTrend"),
            "revenueTrend": trend(total_revenue, prev_revenue, "admin.revenueTrend"),
            "agentsTrend": DASHBOARD_TREND_FALLBACKS["admin.agentsTrend"],
            "conversionTrend": DASHBOARD_TREND_FALLBACKS["admin.conversionTrend"],
            "targetTrend": DASHBOARD_TREND_FALLBACKS["admin.targetTrend"],
        },
        "recentSales": recent_sales(sales_in_period, customers_by_id, users_by_id),
        "topPerformers": top_performers(performances, users_by_id),
        "period": period,
        "dateRange": _window_payload(start, end),
    }


async def build_agent_dashboard(user: dict, period: Optional[str] = None, now: Optional[datetime] = None) -> dict:
    """Same statistics restricted to the caller's own records"""
    start, end, period = get_date_range(period, now)
    prev_start, prev_end = previous_window(start, end)
    user_id = user["id"]

    customers = await db.customers.find({"agentID": user_id}, {"_id": 0}).to_list(MAX_DOCS)
    sales = await db.sales.find({"agentID": user_id}, {"_id": 0}).to_list(MAX_DOCS)
    targets = await db.targets.find({"userID": user_id}, {"_id": 0}).to_list(MAX_DOCS)

    sales_in_period = [s for s in sales if in_window(sale_date(s), start, end)]
    prev_sales = [s for s in sales if in_window(sale_date(s), prev_start, prev_end, include_end=False)]

    total_sales = len(sales_in_period)
    total_revenue = sum(s.get("amount") or 0 for s in sales_in_period)
    prev_revenue = sum(s.get("amount") or 0 for s in prev_sales)
    completed = len([s for s in sales_in_period if s.get("status") == "completed"])

    return {
        "stats": {
            "totalCustomers": len(customers),
            "totalSales": total_sales,
            "totalRevenue": total_revenue,
            "conversionRate": percent(completed, len(customers)) if customers else 0,
            "targetProgress": target_progress(targets),
        },
        "trends": {
            "salesTrend": trend(total_sales, len(prev_sales), "agent.salesTrend"),
            "revenueTrend": trend(total_revenue, prev_revenue, "agent.revenueTrend"),
            "conversionTrend": DASHBOARD_TREND_FALLBACKS["agent.conversionTrend"],
            "targetTrend": DASHBOARD_TREND_FALLBACKS["agent.targetTrend"],
        },
        "recentSales": recent_sales(sales_in_period, {c["id"]: c for c in customers}),
        "userInfo": {
            "id": user_id,
            "name": display_name(user),
            "email": user.get("email"),
            "role": user.get("role"),
        },
        "period": period,
        "dateRange": _window_payload(start, end),
    }


async def build_summary() -> dict:
    total_customers = await db.customers.count_documents({})
    amounts = await db.sales.find({}, {"_id": 0, "amount": 1}).to_list(MAX_DOCS)
    total_agents = await db.users.count_documents({"role": ROLE_AGENT})
    active_targets = await db.targets.count_documents({"status": "in_progress"})

    return {
        "totalCustomers": total_customers,
        "totalSales": len(amounts),
        "totalRevenue": sum(s.get("amount") or 0 for s in amounts),
        "totalAgents": total_agents,
        "activeTargets": active_targets,
        "lastUpdated": now_utc().isoformat(),
    }


async def get_agent_stats(agent_id: str) -> dict:
    """Lifetime totals for one agent (admin agent view)"""
    total_customers = await db.customers.count_documents({"agentID": agent_id})
    sales = await db.sales.find({"agentID": agent_id}, {"_id": 0, "amount": 1, "status": 1}).to_list(MAX_DOCS)
    return {
        "totalCustomers": total_customers,
        "totalSales": len(sales),
        "totalRevenue": sum(s.get("amount") or 0 for s in sales),
        "completedSales": len([s for s in sales if s.get("status") == "completed"]),
    }
