"""
Financial reports for a company over a date range.

Transfers between the company's own accounts move money but are neither
income nor expense, so every report leaves them out.
"""

from datetime import date
from decimal import Decimal

import pandas as pd
from django.db.models import Sum

from .models import EXPENSE, INCOME, FinancialAccount, FinancialTransaction


def _transactions(company, start, end):
    return FinancialTransaction.objects.filter(
        company=company,
        transaction_date__gte=start,
        transaction_date__lte=end,
    ).exclude(reference_type="transfer")


def _money(value):
    return float(round(Decimal(value or 0), 2))


def financial_summary(company, start: date, end: date):
    qs = _transactions(company, start, end)
    income = qs.filter(transaction_type=INCOME).aggregate(v=Sum("amount"))["v"] or Decimal("0")
    expenses = qs.filter(transaction_type=EXPENSE).aggregate(v=Sum("amount"))["v"] or Decimal("0")
    total_balance = sum(
        (acc.balance for acc in FinancialAccount.objects.filter(company=company, is_active=True).with_balance()),
        Decimal("0"),
    )

    return {
        "total_income": _money(income),
        "total_expenses": _money(expenses),
        "net_profit": _money(income - expenses),
        "total_balance": _money(total_balance),
        "period_start": start.isoformat(),
        "period_end": end.isoformat(),
    }


def monthly_report(company, start: date, end: date):
    """One row per calendar month in [start, end]: income, expenses and profit."""
    df = pd.DataFrame(list(
        _transactions(company, start, end).values("transaction_date", "transaction_type", "amount")
    ))

    months = pd.period_range(start=pd.Timestamp(start), end=pd.Timestamp(end), freq="M")
    if df.empty:
        table = pd.DataFrame(0.0, index=months, columns=[INCOME, EXPENSE])
    else:
        df["amount"] = df["amount"].astype(float)
        df["month"] = pd.to_datetime(df["transaction_date"]).dt.to_period("M")
        table = df.pivot_table(
            index="month", columns="transaction_type", values="amount", aggfunc="sum", fill_value=0.0
        )
        table = table.reindex(index=months, columns=[INCOME, EXPENSE], fill_value=0.0)

    table["profit"] = table[INCOME] - table[EXPENSE]

    return [
        {
            "month": str(month),
            "income": round(float(row[INCOME]), 2),
            "expenses": round(float(row[EXPENSE]), 2),
            "profit": round(float(row["profit"]), 2),
        }
        for month, row in table.iterrows()
    ]


def category_report(company, start: date, end: date, transaction_type=None):
    """Totals per category, largest first, with each category's share of its type."""
    qs = _transactions(company, start, end).exclude(category=None)
    if transaction_type:
        qs = qs.filter(transaction_type=transaction_type)

    df = pd.DataFrame(list(qs.values(
        "category_id", "category__name", "category__color", "transaction_type", "amount",
    )))
    if df.empty:
        return []

    df["amount"] = df["amount"].astype(float)
    grouped = (
        df.groupby(["category_id", "category__name", "category__color", "transaction_type"])["amount"]
        .agg(total_amount="sum", transaction_count="count")
        .reset_index()
    )
    type_totals = grouped.groupby("transaction_type")["total_amount"].transform("sum")
    grouped["percentage"] = (grouped["total_amount"] / type_totals * 100).round(1)
    grouped = grouped.sort_values(["transaction_type", "total_amount"], ascending=[False, False])

    return [
        {
            "category_id": int(row["category_id"]),
            "category_name": row["category__name"],
            "category_color": row["category__color"],
            "category_type": row["transaction_type"],
            "total_amount": round(float(row["total_amount"]), 2),
            "transaction_count": int(row["transaction_count"]),
            "percentage": float(row["percentage"]),
        }
        for _, row in grouped.iterrows()
    ]
