"""Mission Control Streamlit UI.

Task board and daily news dashboard backed by the Mission Control API.
"""

import os
import random
from datetime import date, datetime, timezone
from math import ceil
from pathlib import Path

import requests
import streamlit as st
from dotenv import load_dotenv

from mission_control.fallback import sample_news

# Load .env file from project root
load_dotenv(Path(__file__).parent.parent / ".env")

# Configuration
API_BASE_URL = os.environ.get("MISSION_CONTROL_API_URL", "http://localhost:3000").rstrip("/")
REQUEST_TIMEOUT = 15

TASK_COLUMNS = ("pending", "in-progress", "success")
TASK_COLUMN_TITLES = {
    "pending": "○ Pending",
    "in-progress": "⟳ In Progress",
    "success": "✓ Completed",
}
TAG_TYPES = {
    "core": "core",
    "phase": "proc",
    "skill": "comms",
    "ui": "grid",
    "api": "core",
    "git": "proc",
    "deploy": "proc",
    "maint": "maint",
    "nexos": "core",
}

NEWS_PAGE_SIZE = 3
NEWS_COLUMNS = (
    ("global", "Global Intelligence", "REPORTS"),
    ("tech", "Local Tech", "LOCAL"),
    ("ai", "AI Trending", "TRENDING"),
)


def fetch_tasks() -> dict:
    """Fetch task records from the API.

    Returns:
        {"tasks": [...]} on success, or {"tasks": [], "error": message}
    """
    try:
        response = requests.get(f"{API_BASE_URL}/api/tasks", timeout=REQUEST_TIMEOUT)
        if response.status_code != 200:
            try:
                message = response.json().get("error", f"HTTP {response.status_code}")
            except ValueError:
                message = f"HTTP {response.status_code}"
            return {"tasks": [], "error": message}
        return {"tasks": response.json()}
    except Exception as e:
        return {"tasks": [], "error": str(e)}


def organize_tasks(tasks: list[dict]) -> dict[str, list[dict]]:
    """Group tasks into board columns by status.

    "completed" is shown as "success"; other unknown statuses are dropped.
    """
    columns: dict[str, list[dict]] = {status: [] for status in TASK_COLUMNS}
    for task in tasks:
        status = task.get("status")
        if status == "completed":
            status = "success"
        if status in columns:
            columns[status].append(task)
    return columns


def get_tag_type(code: str | None) -> str:
    """Map a task code prefix (e.g. "API-204") to its tag type."""
    if not code:
        return "maint"
    prefix = code.split("-")[0].lower()
    return TAG_TYPES.get(prefix, "maint")


def fetch_news(news_date: date, force_refresh: bool = False) -> tuple[dict, bool]:
    """Fetch the news payload for a date.

    Args:
        news_date: Day to load
        force_refresh: Bypass the API cache

    Returns:
        Tuple of (payload, connected). The sample payload is returned with
        connected=False when the API cannot be reached.
    """
    params = {"date": news_date.isoformat()}
    if force_refresh:
        params["refresh"] = "true"

    try:
        response = requests.get(f"{API_BASE_URL}/api/news", params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json(), True
    except Exception:
        return sample_news().to_dict(), False


def paginate(items: list, page: int, limit: int = NEWS_PAGE_SIZE) -> tuple[list, int]:
    """Slice one page out of items.

    Returns:
        Tuple of (page_items, total_pages); total_pages is at least 1 and
        page is clamped into range.
    """
    total_pages = max(1, ceil(len(items) / limit))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * limit
    return items[start : start + limit], total_pages


def get_viral_class(score: float) -> str:
    if score >= 9:
        return "high"
    if score >= 7:
        return "medium"
    return ""


def format_timestamp(value: str | None) -> str:
    """Format an ISO timestamp as "HH:MM UTC"."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return f"{parsed:%H:%M} UTC"


def init_session_state():
    """Initialize session state variables."""
    if "news_pages" not in st.session_state:
        st.session_state.news_pages = {name: 1 for name, _, _ in NEWS_COLUMNS}
    if "velocity" not in st.session_state:
        st.session_state.velocity = 85 + random.random() * 15


def render_task_card(task: dict, status: str):
    """Render a single task card."""
    with st.container(border=True):
        tag_type = task.get("tagType") or get_tag_type(task.get("code"))
        st.caption(f"`{task.get('code', '')}` · {tag_type}")
        st.markdown(f"**{task.get('title', '')}**")
        if task.get("description"):
            st.write(task["description"])

        if status == "pending":
            priority = (task.get("priority") or "medium").upper()
            estimate = f" · EST. {task['estimate']}" if task.get("estimate") else ""
            st.caption(f"{priority}{estimate}")
        elif status == "in-progress":
            if task.get("progress") is not None:
                st.progress(
                    min(max(int(task["progress"]), 0), 100),
                    text=f"{task.get('progressLabel') or 'PROCESSING..'} {task['progress']}%",
                )
            else:
                warning = f"{task['warning']} · " if task.get("warning") else ""
                st.caption(f"{warning}ACTIVE")
        else:
            completed = f" · {task['completedAt'][:10]}" if task.get("completedAt") else ""
            st.caption(f"✓ COMPLETED{completed}")


def display_task_board(tasks_response: dict):
    """Display the three task columns."""
    st.subheader("Task Board")
    if "error" in tasks_response:
        st.warning(f"Task data unavailable: {tasks_response['error']}")

    columns = organize_tasks(tasks_response["tasks"])
    for status, column in zip(TASK_COLUMNS, st.columns(len(TASK_COLUMNS))):
        with column:
            st.markdown(f"#### {TASK_COLUMN_TITLES[status]} ({len(columns[status])})")
            if not columns[status]:
                st.caption(f"No {'completed' if status == 'success' else status} tasks")
            for task in columns[status]:
                render_task_card(task, status)


def render_news_card(item: dict, show_thumbnail: bool = False):
    """Render a single news card."""
    with st.container(border=True):
        meta = item.get("viewers") and f"{item['viewers']} WATCHING"
        st.caption(f"{item.get('category', '')} · {meta or format_timestamp(item.get('timestamp'))}")
        st.markdown(f"**{item.get('headline', '')}**")
        if show_thumbnail and item.get("thumbnail"):
            st.image(item["thumbnail"])
        score = item.get("viralScore", 0)
        viral_class = get_viral_class(score)
        label = f"VIRAL SCORE {score}/10" + (f" ({viral_class})" if viral_class else "")
        url = item.get("url") or "#"
        if url != "#":
            st.markdown(f"{label} · [Open article]({url})")
        else:
            st.caption(label)


def display_news(payload: dict):
    """Display the three news columns."""
    st.subheader("Daily News")
    for (name, title, suffix), column in zip(NEWS_COLUMNS, st.columns(len(NEWS_COLUMNS))):
        items = payload.get(name) or []
        with column:
            st.markdown(f"#### {title}")
            st.caption(f"{len(items)} {suffix}")
            if not items:
                st.caption(f"No {name} news available")
                continue

            # The trending feed is shown in full
            if name == "ai":
                for item in items:
                    render_news_card(item, show_thumbnail=True)
                continue

            page_items, total_pages = paginate(items, st.session_state.news_pages[name])
            for item in page_items:
                render_news_card(item)
            if total_pages > 1:
                page = min(st.session_state.news_pages[name], total_pages)
                prev_col, info_col, next_col = st.columns([1, 2, 1])
                if prev_col.button("←", key=f"{name}_prev", disabled=page == 1):
                    st.session_state.news_pages[name] = page - 1
                    st.rerun()
                info_col.caption(f"PAGE {page} / {total_pages}")
                if next_col.button("→", key=f"{name}_next", disabled=page == total_pages):
                    st.session_state.news_pages[name] = page + 1
                    st.rerun()


def main():
    """Main application entry point."""
    st.set_page_config(
        page_title="Mission Control",
        page_icon="🛰️",
        layout="wide",
    )
    init_session_state()

    today = datetime.now(timezone.utc).date()

    with st.sidebar:
        st.title("🛰️ Mission Control")
        st.caption("Tasks and daily intelligence")

        st.divider()

        news_date = st.date_input("News date", value=today, max_value=today)
        force_refresh = st.button("Sync news")

    if force_refresh or st.session_state.get("news_date") != news_date:
        st.session_state.news_pages = {name: 1 for name, _, _ in NEWS_COLUMNS}
    st.session_state.news_date = news_date

    payload, connected = fetch_news(news_date, force_refresh=force_refresh)

    # Cosmetic velocity meter
    st.session_state.velocity = max(
        70.0, min(99.0, st.session_state.velocity + (random.random() - 0.5) * 5)
    )

    with st.sidebar:
        if connected:
            st.success("API: Connected")
        else:
            st.error("API: Disconnected (showing sample news)")
        st.metric("Velocity", f"{round(st.session_state.velocity)}%")

    display_task_board(fetch_tasks())
    st.divider()
    display_news(payload)


if __name__ == "__main__":
    main()
