"""
Streamlit Frontend for the Installment Tracker

This is the user interface people interact with daily.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before deleting anything
3. Clear error messages in simple language
4. Visual feedback for all operations
5. No hidden actions

The UI only reads projections from the query service and sends every
change through the AccountFlow. It never edits accounts itself.
"""

import html
from datetime import date

import pandas as pd
import streamlit as st

from src.ledger import AccountNotFoundError, ScheduleShrinkError
from src.models.account import Account
from src.orchestrator import AccountFlow, MutationOutcome, create_app_components
from src.queries import LedgerQueryService
from src.services.preferences import Theme, ThemePreferences


# Page configuration
st.set_page_config(
    page_title="Installment Tracker",
    page_icon="💳",
    layout="wide",
    initial_sidebar_state="expanded",
)

LIGHT_CSS = """
<style>
    .stButton>button {
        width: 100%;
    }
    .tag-header {
        font-weight: bold;
        font-size: 1.1em;
        margin-top: 10px;
        border-bottom: 1px solid #e2e8f0;
    }
</style>
"""

DARK_CSS = """
<style>
    .stApp {
        background-color: #0f172a;
        color: #f1f5f9;
    }
    .stButton>button {
        width: 100%;
    }
    .tag-header {
        font-weight: bold;
        font-size: 1.1em;
        margin-top: 10px;
        border-bottom: 1px solid #475569;
    }
</style>
"""

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def format_money(value) -> str:
    return f"{value:,.2f}"


def show_outcome(outcome: MutationOutcome, success: str) -> None:
    """Queue feedback so it survives the st.rerun() that follows a change."""
    if outcome.persisted:
        st.toast(success)
    else:
        queue_warning(outcome.warning)


def queue_warning(message: str) -> None:
    st.session_state.setdefault("pending_warnings", []).append(message)


def render_pending_warnings() -> None:
    for message in st.session_state.pop("pending_warnings", []):
        st.warning(message)


def main():
    """Main application entry point."""
    flow, queries, theme = get_components()

    current_theme = theme.load()
    st.markdown(DARK_CSS if current_theme is Theme.DARK else LIGHT_CSS, unsafe_allow_html=True)

    render_pending_warnings()
    if flow.ledger.degraded_reason:
        st.error(f"⚠️ {flow.ledger.degraded_reason}. Changes will not be saved.")

    # Sidebar navigation
    st.sidebar.title("💳 Installment Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📋 Accounts", "📊 Statistics", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    theme_label = "☀️ Light theme" if current_theme is Theme.DARK else "🌙 Dark theme"
    if st.sidebar.button(theme_label):
        theme.toggle()
        st.rerun()

    if page == "📋 Accounts":
        render_accounts_page(flow, queries)
    elif page == "📊 Statistics":
        render_stats_page(queries)
    elif page == "⚙️ Settings":
        render_settings_page(flow, theme)


def render_account_form(flow: AccountFlow, account: Account | None = None) -> None:
    """Create form, or edit form when `account` is given."""
    key = f"form_{account.id}" if account else "form_new"
    with st.form(key, clear_on_submit=account is None):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name *", value=account.name if account else "")
            total_value = st.number_input(
                "Total Value *",
                value=float(account.total_value) if account else 0.0,
                min_value=0.0,
                step=0.01,
                format="%.2f",
            )
            tag = st.text_input(
                "Tag *",
                value=account.tag if account else "",
                help="Category used for grouping, e.g. home, car, school",
            )
        with col2:
            due_date = st.date_input(
                "First Due Date *",
                value=account.due_date if account else date.today(),
            )
            installment_count = st.number_input(
                "Installments *",
                value=account.installment_count if account else 1,
                min_value=1,
                step=1,
            )
        submitted = st.form_submit_button("💾 Save", type="primary")

    if not submitted:
        return

    result, draft, message = flow.validate_form(
        name, total_value, due_date, tag, int(installment_count)
    )
    if draft is None:
        st.error(message)
        return
    if result.warnings:
        queue_warning(message)

    try:
        if account:
            outcome = flow.update(account.id, draft)
            show_outcome(outcome, f"Updated {draft.name}")
        else:
            outcome = flow.create(draft)
            show_outcome(outcome, f"Added {draft.name}")
    except AccountNotFoundError:
        st.error("This account no longer exists. It may have been deleted.")
        return
    except ScheduleShrinkError as e:
        st.error(
            f"Installments {e.dropped_paid} are already paid. "
            "Unmark them or keep at least that many installments."
        )
        return
    st.rerun()


def render_account_card(flow: AccountFlow, queries: LedgerQueryService, account: Account) -> None:
    summary = queries.summary(account)
    with st.expander(f"{account.name}  ·  {summary.paid_count}/{summary.installment_count} paid"):
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Total Value", format_money(account.total_value))
        col2.metric("Installments", f"{summary.paid_count}/{summary.installment_count}")
        col3.metric("Paid", format_money(summary.paid_amount))
        col4.metric("Remaining", format_money(summary.remaining_amount))

        for inst in account.installments:
            c1, c2, c3, c4 = st.columns([1, 1, 1, 1])
            c1.write(f"Installment {inst.number}")
            c2.write(format_money(inst.value))
            c3.write(f"{'✅ Paid' if inst.is_paid else '⏳ Pending'} · due {inst.due_date:%d/%m/%Y}")
            label = "Unmark" if inst.is_paid else "Mark as paid"
            if c4.button(label, key=f"toggle_{account.id}_{inst.number}"):
                outcome = flow.toggle(account.id, inst.number)
                show_outcome(outcome, f"Installment {inst.number} updated")
                st.rerun()

        st.markdown("---")
        if st.toggle("✏️ Edit", key=f"edit_{account.id}"):
            render_account_form(flow, account)

        confirm_key = f"confirm_delete_{account.id}"
        if st.session_state.get(confirm_key):
            st.warning(f'Are you sure you want to delete "{account.name}"?')
            yes, no = st.columns(2)
            if yes.button("🗑️ Delete", key=f"yes_{account.id}", type="primary"):
                outcome = flow.delete(account.id)
                st.session_state[confirm_key] = False
                show_outcome(outcome, f"Deleted {account.name}")
                st.rerun()
            if no.button("Cancel", key=f"no_{account.id}"):
                st.session_state[confirm_key] = False
                st.rerun()
        elif st.button("Delete", key=f"delete_{account.id}"):
            st.session_state[confirm_key] = True
            st.rerun()


def render_section(
    flow: AccountFlow,
    queries: LedgerQueryService,
    title: str,
    accounts: list[Account],
) -> None:
    st.subheader(f"{title} ({len(accounts)})")
    if not accounts:
        st.info("No accounts found")
        return
    for tag, group in queries.grouped(accounts):
        st.markdown(
            f'<div class="tag-header">{html.escape(tag)}</div>',
            unsafe_allow_html=True,
        )
        for account in group:
            render_account_card(flow, queries, account)


def render_accounts_page(flow: AccountFlow, queries: LedgerQueryService):
    """Render the accounts page."""
    st.title("📋 Accounts")

    with st.expander("➕ Add Account"):
        render_account_form(flow)

    term = st.text_input("🔍 Search by tag", placeholder="e.g. home")

    sections = queries.list_by_section(term)
    render_section(flow, queries, "⚠️ Overdue", sections.overdue)
    render_section(flow, queries, "⏳ Pending", sections.pending)
    render_section(flow, queries, "✅ Paid", sections.paid)


def render_stats_page(queries: LedgerQueryService):
    """Render the statistics page."""
    st.title("📊 Statistics")

    today = date.today()
    col1, col2 = st.columns(2)
    with col1:
        month = st.selectbox(
            "Month",
            options=list(range(1, 13)),
            index=today.month - 1,
            format_func=lambda m: MONTH_NAMES[m - 1],
        )
    with col2:
        years = queries.available_years()
        year = st.selectbox(
            "Year",
            options=years,
            index=years.index(today.year) if today.year in years else 0,
        )

    report = queries.stats_for(month, year)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Paid", format_money(report.stats.total_paid))
    c2.metric("Total Pending", format_money(report.stats.total_pending))
    c3.metric("Total Overdue", format_money(report.stats.total_overdue))
    c4.metric("Remaining To Pay", format_money(report.stats.total_saved))

    st.markdown("### Monthly Spending")
    monthly = pd.DataFrame(
        {"Paid": [float(point.amount) for point in report.monthly]},
        index=[point.label for point in report.monthly],
    )
    st.bar_chart(monthly)

    st.markdown("### By Category")
    if report.categories:
        categories = pd.DataFrame(
            {"Paid": [float(v) for v in report.categories.values()]},
            index=list(report.categories.keys()),
        )
        st.bar_chart(categories)
    else:
        st.info("Nothing paid for accounts created in this month.")


def render_settings_page(flow: AccountFlow, theme: ThemePreferences):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    from src.config import validate_all_settings

    status = validate_all_settings()

    for name, key in [("Storage", "storage"), ("Google Sheets", "google_sheets"), ("Application", "app")]:
        if key not in status:
            continue
        if status[key]:
            st.success(f"✅ {name} - OK")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    degraded = flow.ledger.degraded_reason
    if degraded:
        st.error(f"❌ Storage - {degraded}. Running in memory only.")

    error = flow.ledger.last_persistence_error
    if error is not None:
        st.warning(f"Last save failed: {error}")

    st.markdown(f"**Theme:** {theme.load().value}")
    st.markdown(f"**Accounts:** {len(flow.ledger)}")

    st.markdown("### Recent Activity")
    events = flow.recent_activity()
    if not events:
        st.info("No activity yet.")
    for event in events:
        st.markdown(f"- `{event.timestamp:%Y-%m-%d %H:%M}` {event.description}")

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
