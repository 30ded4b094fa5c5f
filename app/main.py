import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
import logging
from datetime import date

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from fintrack.client import BackendClient
from fintrack.config import configure_logging, get_settings
from fintrack.domain import ACCOUNT_TYPES, DEFAULT_COLOR, DEFAULT_ICON, TRANSACTION_TYPES
from fintrack.errors import FintrackError
from fintrack.events import BUDGET_EXCEEDED, BUDGET_WARNING, BudgetNotifier, EventBus, register_default_handlers
from fintrack.functional import Err, find_category
from fintrack.goals import days_remaining, goal_progress
from fintrack.loaders import current_month, load_budget_page, load_dashboard, load_goals, load_report
from fintrack.reports import CUSTOM, LAST_MONTH, THIS_MONTH, THIS_YEAR, date_range
from fintrack.services import Services
from fintrack.transforms import total_balance
from fintrack.validation import (
    is_valid_month,
    validate_bank_account_form,
    validate_budget_form,
    validate_category_form,
    validate_contribution_form,
    validate_goal_form,
    validate_transaction_form,
)

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("fintrack.app")
CUR = settings.currency_symbol

st.set_page_config(page_title="Finance Tracker", layout="wide")


@st.cache_resource
def get_services() -> Services:
    # one configured client for the whole process
    client = BackendClient.from_settings(settings)
    return Services(client, page_size=settings.page_size)


services = get_services()


def toast_alert(event, payload) -> dict:
    icon = "🚨" if event.name == BUDGET_EXCEEDED else "🔔"
    st.toast(payload["message"], icon=icon)
    return {"shown": True}


if "notifier" not in st.session_state:
    bus = EventBus()
    register_default_handlers(bus)
    bus.subscribe(BUDGET_WARNING, toast_alert)
    bus.subscribe(BUDGET_EXCEEDED, toast_alert)
    st.session_state.notifier = BudgetNotifier(bus, dedupe=settings.dedupe_budget_alerts, currency=CUR)


def money(value: float) -> str:
    return f"{CUR}{value:,.2f}"


def as_date(value: str) -> date:
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return date.today()


def option_index(options, value, default: int = 0) -> int:
    options = list(options)
    return options.index(value) if value in options else default


def run_write(action, success_message: str) -> bool:
    """Run a service write and turn the outcome into a toast."""
    try:
        action()
    except FintrackError as e:
        st.toast(str(e) or "Something went wrong", icon="❌")
        return False
    except Exception:
        logger.exception("Unexpected error")
        st.toast("Something went wrong. Please try again.", icon="❌")
        return False
    st.toast(success_message, icon="✅")
    return True


# Edit state: the id of the record whose form is open, per page

def editing(kind: str, items):
    record_id = st.session_state.get(f"editing_{kind}")
    return next((i for i in items if i.id == record_id), None)


def edit_button(column, kind: str, record_id) -> None:
    if column.button("Edit", key=f"edit_{kind}_{record_id}"):
        st.session_state[f"editing_{kind}"] = record_id
        st.rerun()


def cancel_button(kind: str, current) -> None:
    if current is not None and st.button("Cancel edit", key=f"cancel_{kind}"):
        st.session_state.pop(f"editing_{kind}", None)
        st.rerun()


def save(service, current):
    """``create`` for a new record, ``update`` of ``current`` otherwise."""
    if current is None:
        return service.create
    return lambda obj: service.update(current.id, obj)


def submit(result, action, success_message: str, kind: str = None) -> None:
    if isinstance(result, Err):
        for field, message in result.details.items():
            st.error(f"**{field.replace('_', ' ').title()}**: {message}")
        return
    if run_write(lambda: action(result.value), success_message):
        if kind:
            st.session_state.pop(f"editing_{kind}", None)
        st.rerun()


def form_key(kind: str, current) -> str:
    return f"{kind}_form_{current.id if current is not None else 'new'}"


def category_options(categories, tx_type=None):
    return {c.name: c.id for c in categories if tx_type is None or c.type == tx_type}


menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "🧾 Transactions", "🗂 Categories", "💰 Budget", "🎯 Goals", "🏦 Bank Accounts", "📑 Reports"]
)

if menu == "🏠 Dashboard":
    month = current_month()
    data = asyncio.run(load_dashboard(services, month))
    summary = data["summary"]

    st.title("🏠 Dashboard")
    k1, k2, k3 = st.columns(3)
    k1.metric("Total Income", money(summary["income"]))
    k2.metric("Total Expenses", money(summary["expenses"]))
    k3.metric("Balance", money(summary["balance"]))

    st.subheader("Recent Transactions")
    if data["recent"]:
        st.table(pd.DataFrame([
            {"Date": t.date, "Title": t.title, "Category": t.category, "Type": t.type, "Amount": money(t.amount)}
            for t in data["recent"]
        ]))
    else:
        st.info("No transactions yet. Add your first one on the Transactions page.")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")
    transactions = services.transactions.get_all()
    categories = services.categories.get_all()
    current = editing("transaction", transactions)

    st.subheader("Edit Transaction" if current else "Add Transaction")
    with st.form(form_key("transaction", current), clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            tx_type = st.selectbox("Type", TRANSACTION_TYPES,
                                   index=option_index(TRANSACTION_TYPES, current and current.type, 1))
            title = st.text_input("Title", value=current.title if current else "")
            amount = st.number_input("Amount", min_value=0.0, step=10.0, format="%.2f",
                                     value=float(current.amount) if current else 0.0)
        with col2:
            options = category_options(categories)
            names = [""] + list(options)
            category = st.selectbox("Category", names, index=option_index(names, current and current.category))
            tx_date = st.date_input("Date", value=as_date(current.date) if current else date.today())
        description = st.text_input("Description (optional)", value=current.description if current else "")
        submitted = st.form_submit_button("Save Changes" if current else "Add Transaction")

    if submitted:
        result = validate_transaction_form({
            "title": title, "amount": amount, "type": tx_type, "category": category,
            "category_id": options.get(category), "date": tx_date, "description": description,
        }, current)
        message = "Transaction updated successfully!" if current else "Transaction added successfully!"
        submit(result, save(services.transactions, current), message, "transaction")
    cancel_button("transaction", current)

    type_filter = st.selectbox("Show", ["all", *TRANSACTION_TYPES])
    shown = [t for t in transactions if type_filter == "all" or t.type == type_filter]
    if not shown:
        st.info("No transactions found")
    for t in shown:
        c1, c2, c3, c4 = st.columns([4, 2, 1, 1])
        c1.write(f"**{t.title or t.category}** · {t.category} · {t.date}")
        sign = "+" if t.type == "income" else "-"
        c2.write(f"{sign}{money(t.amount)}")
        edit_button(c3, "transaction", t.id)
        if c4.button("Delete", key=f"del_tx_{t.id}"):
            if run_write(lambda: services.transactions.delete(t.id), "Transaction deleted successfully!"):
                st.rerun()

elif menu == "🗂 Categories":
    st.title("🗂 Categories")
    categories = services.categories.get_all()
    current = editing("category", categories)

    st.subheader("Edit Category" if current else "Add Category")
    with st.form(form_key("category", current), clear_on_submit=True):
        name = st.text_input("Name", value=current.name if current else "")
        cat_type = st.selectbox("Type", TRANSACTION_TYPES,
                                index=option_index(TRANSACTION_TYPES, current and current.type, 1))
        icon = st.text_input("Icon", value=current.icon if current else DEFAULT_ICON)
        color = st.color_picker("Color", value=current.color if current else "#3b82f6")
        submitted = st.form_submit_button("Save Changes" if current else "Add Category")

    if submitted:
        result = validate_category_form({"name": name, "type": cat_type, "icon": icon, "color": color}, current)
        message = "Category updated successfully!" if current else "Category created successfully!"
        submit(result, save(services.categories, current), message, "category")
    cancel_button("category", current)

    for kind in TRANSACTION_TYPES:
        st.subheader(kind.title())
        rows = [c for c in categories if c.type == kind]
        if not rows:
            st.caption("No categories")
        for c in rows:
            c1, c2, c3 = st.columns([5, 1, 1])
            badge = "custom" if c.is_custom else "default"
            c1.markdown(f"<span style='color:{c.color}'>●</span> **{c.name}** · {c.icon} · {badge}",
                        unsafe_allow_html=True)
            edit_button(c2, "category", c.id)
            # default categories cannot be deleted
            if c.is_custom and c3.button("Delete", key=f"del_cat_{c.id}"):
                if run_write(lambda: services.categories.delete(c.id), "Category deleted successfully!"):
                    st.rerun()

elif menu == "💰 Budget":
    month = st.text_input("Month (YYYY-MM)", value=current_month())
    if not is_valid_month(month):
        st.error("Please enter the month as YYYY-MM, for example 2024-06")
        st.stop()
    data = asyncio.run(load_budget_page(services, month, st.session_state.notifier))
    totals = data["totals"]
    current = editing("budget", [p.budget for p in data["progress"]])

    st.title("💰 Budget")
    k1, k2, k3 = st.columns(3)
    k1.metric("Total Budget", money(totals["total_budget"]))
    k2.metric("Total Spent", money(totals["total_spent"]))
    k3.metric("Remaining", money(totals["total_remaining"]))

    st.subheader("Edit Budget" if current else "Add Budget")
    with st.form(form_key("budget", current), clear_on_submit=True):
        options = category_options(data["categories"], "expense")
        names = [""] + list(options)
        title = st.text_input("Title", value=current.title if current else "")
        category = st.selectbox("Category", names, index=option_index(names, current and current.category))
        limit = st.number_input("Limit", min_value=0.0, step=50.0, format="%.2f",
                                value=float(current.limit) if current else 0.0)
        budget_month = st.text_input("Budget month", value=current.month if current else month)
        submitted = st.form_submit_button("Save Changes" if current else "Add Budget")

    if submitted:
        result = validate_budget_form({
            "title": title, "category": category, "category_id": options.get(category),
            "limit": limit, "month": budget_month,
        }, current)
        message = "Budget updated successfully!" if current else "Budget created successfully!"
        submit(result, save(services.budgets, current), message, "budget")
    cancel_button("budget", current)

    if not data["progress"]:
        st.info("No budgets for this month")
    for p in data["progress"]:
        color = find_category(tuple(data["categories"]), p.budget.category).map(lambda c: c.color)
        st.markdown(
            f"<span style='color:{color.get_or_else(DEFAULT_COLOR)}'>●</span> "
            f"**{p.budget.title or p.budget.category}** · {p.status}",
            unsafe_allow_html=True,
        )
        st.write(f"{money(p.spent)} / {money(p.budget.limit)} · {money(p.remaining)} remaining")
        st.progress(min(100, int(p.percentage)) / 100)
        c1, c2, _ = st.columns([1, 1, 6])
        edit_button(c1, "budget", p.budget.id)
        if c2.button("Delete", key=f"del_budget_{p.budget.id}"):
            if run_write(lambda: services.budgets.delete(p.budget.id), "Budget deleted successfully!"):
                st.rerun()

elif menu == "🎯 Goals":
    st.title("🎯 Savings Goals")
    data = asyncio.run(load_goals(services))
    summary = data["summary"]
    current = editing("goal", data["goals"])
    k1, k2, k3 = st.columns(3)
    k1.metric("Total Target", money(summary["total_target"]))
    k2.metric("Total Saved", money(summary["total_saved"]))
    k3.metric("Overall Progress", f"{summary['overall_progress']:.0f}%")

    st.subheader("Edit Goal" if current else "Add Goal")
    with st.form(form_key("goal", current), clear_on_submit=True):
        name = st.text_input("Goal name", value=current.name if current else "")
        target_amount = st.number_input("Target amount", min_value=0.0, step=100.0, format="%.2f",
                                        value=float(current.target_amount) if current else 0.0)
        target_date = st.date_input("Target date", value=as_date(current.target_date) if current else date.today())
        submitted = st.form_submit_button("Save Changes" if current else "Add Goal")

    if submitted:
        result = validate_goal_form({"name": name, "target_amount": target_amount, "target_date": target_date},
                                    current)
        message = "Savings goal updated successfully!" if current else "Savings goal created successfully!"
        submit(result, save(services.goals, current), message, "goal")
    cancel_button("goal", current)

    if not data["goals"]:
        st.info("No savings goals yet")
    for g in data["goals"]:
        progress = goal_progress(g)
        left = days_remaining(g.target_date)
        st.subheader(g.name)
        st.write(f"{money(g.current_amount)} of {money(g.target_amount)} · "
                 + (f"{left} days remaining" if left > 0 else "Target date reached"))
        st.progress(progress / 100)
        c1, c2, _ = st.columns([1, 1, 6])
        edit_button(c1, "goal", g.id)
        if c2.button("Delete", key=f"del_goal_{g.id}"):
            if run_write(lambda: services.goals.delete(g.id), "Savings goal deleted successfully!"):
                st.rerun()
        if progress >= 100:
            st.success("Goal Achieved!")
            continue
        with st.form(f"contribute_{g.id}", clear_on_submit=True):
            contribution = st.number_input("Contribution", min_value=0.0, step=10.0, key=f"amt_{g.id}")
            if st.form_submit_button("Add Contribution"):
                result = validate_contribution_form({"contribution": contribution})
                submit(result, lambda amount: services.goals.add_contribution(g.id, amount),
                       "Contribution added successfully!")

elif menu == "🏦 Bank Accounts":
    st.title("🏦 Bank Accounts")
    accounts = services.accounts.get_all()
    current = editing("account", accounts)
    st.metric("Total Balance", money(total_balance(accounts)))

    st.subheader("Edit Account" if current else "Add Account")
    with st.form(form_key("account", current), clear_on_submit=True):
        account_name = st.text_input("Account name", value=current.account_name if current else "")
        account_type = st.selectbox("Account type", ACCOUNT_TYPES,
                                    index=option_index(ACCOUNT_TYPES, current and current.account_type))
        balance = st.number_input("Balance", step=100.0, format="%.2f",
                                  value=float(current.balance) if current else 0.0)
        submitted = st.form_submit_button("Save Changes" if current else "Add Account")

    if submitted:
        result = validate_bank_account_form({
            "account_name": account_name, "account_type": account_type, "balance": balance,
        }, current)
        message = "Bank account updated successfully!" if current else "Bank account created successfully!"
        submit(result, save(services.accounts, current), message, "account")
    cancel_button("account", current)

    if not accounts:
        st.info("No bank accounts yet")
    for a in accounts:
        c1, c2, c3, c4 = st.columns([4, 2, 1, 1])
        c1.write(f"**{a.account_name}** · {a.account_type}")
        c2.write(money(a.balance))
        edit_button(c3, "account", a.id)
        if c4.button("Delete", key=f"del_account_{a.id}"):
            if run_write(lambda: services.accounts.delete(a.id), "Bank account deleted successfully!"):
                st.rerun()

elif menu == "📑 Reports":
    st.title("📑 Reports")
    labels = {"This month": THIS_MONTH, "Last month": LAST_MONTH, "This year": THIS_YEAR, "Custom": CUSTOM}
    preset = labels[st.selectbox("Date range", list(labels))]
    custom_start = custom_end = None
    if preset == CUSTOM:
        c1, c2 = st.columns(2)
        custom_start = c1.date_input("Start", value=date.today().replace(day=1)).isoformat()
        custom_end = c2.date_input("End", value=date.today()).isoformat()
    start, end = date_range(preset, date.today(), custom_start, custom_end)
    data = asyncio.run(load_report(services, start, end))
    totals = data["totals"]

    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Income", money(totals.income))
    k2.metric("Expenses", money(totals.expenses))
    k3.metric("Net Savings", money(totals.savings))
    k4.metric("Budget Used", f"{totals.budget_utilization:.1f}%")

    st.subheader("Spending by Category")
    if data["breakdown"]:
        df_cat = pd.DataFrame([{"Category": s.name, "Amount": s.amount, "Share": s.percentage}
                               for s in data["breakdown"]])
        st.plotly_chart(px.pie(df_cat, values="Amount", names="Category"), use_container_width=True)
        st.table(df_cat.assign(Amount=df_cat["Amount"].map(money), Share=df_cat["Share"].map("{:.1f}%".format)))
    else:
        st.info("No expense data available for this period")

    st.subheader("Monthly Trends")
    if data["trend"]:
        months = [m.month for m in data["trend"]]
        fig = go.Figure()
        fig.add_trace(go.Scatter(x=months, y=[m.income for m in data["trend"]], mode="lines+markers", name="Income"))
        fig.add_trace(go.Scatter(x=months, y=[m.expenses for m in data["trend"]], mode="lines+markers", name="Expenses"))
        fig.update_layout(margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No transaction data available for trend analysis")

    st.subheader("Budget Performance")
    if data["performance"]:
        df_perf = pd.DataFrame(data["performance"])
        st.dataframe(df_perf, use_container_width=True)
    else:
        st.info("No budgets for this period")

    st.caption(f"Accounts: {len(data['accounts'])} · Total balance {money(data['total_balance'])}")
