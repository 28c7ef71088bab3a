from decimal import Decimal

import pytest
from django.utils import timezone

from financial.models import FinancialAccount, FinancialCategory, FinancialTransaction


@pytest.fixture
def accounts(company):
    cash = FinancialAccount.objects.create(company=company, name="Caixa", account_type="cash", initial_balance=Decimal("100.00"))
    bank = FinancialAccount.objects.create(company=company, name="Banco", account_type="bank")
    return cash, bank


@pytest.fixture
def categories(company):
    income = FinancialCategory.objects.create(company=company, name="Serviços", category_type="income")
    expense = FinancialCategory.objects.create(company=company, name="Produtos", category_type="expense")
    return income, expense


def add_transaction(api, account, category, transaction_type, amount):
    return api.post(
        "/api/financial/transactions/",
        {
            "account": account.id,
            "category": category.id,
            "transaction_type": transaction_type,
            "amount": amount,
            "transaction_date": timezone.localdate().isoformat(),
        },
        format="json",
    )


def test_category_type_must_match(client_for, owner, accounts, categories):
    cash, _ = accounts
    income, _ = categories

    response = add_transaction(client_for(owner), cash, income, "expense", "10.00")

    assert response.status_code == 400
    assert "category" in response.json()


def test_balance_follows_transactions(client_for, owner, accounts, categories):
    cash, _ = accounts
    income, expense = categories
    api = client_for(owner)

    assert add_transaction(api, cash, income, "income", "50.00").status_code == 201
    assert add_transaction(api, cash, expense, "expense", "30.00").status_code == 201

    assert cash.current_balance() == Decimal("120.00")
    assert api.get(f"/api/financial/accounts/{cash.id}/").json()["balance"] == "120.00"


def test_amount_must_be_positive(client_for, owner, accounts, categories):
    cash, _ = accounts
    income, _ = categories
    assert add_transaction(client_for(owner), cash, income, "income", "0").status_code == 400


def test_transfer_writes_both_legs(client_for, owner, accounts):
    cash, bank = accounts
    api = client_for(owner)

    response = api.post(
        "/api/financial/transfers/",
        {"from_account": cash.id, "to_account": bank.id, "amount": "40.00", "transfer_date": timezone.localdate().isoformat()},
        format="json",
    )

    assert response.status_code == 201
    assert cash.current_balance() == Decimal("60.00")
    assert bank.current_balance() == Decimal("40.00")
    legs = FinancialTransaction.objects.filter(transfer_id=response.json()["id"])
    assert sorted(legs.values_list("transaction_type", flat=True)) == ["expense", "income"]

    leg = legs.first()
    assert api.delete(f"/api/financial/transactions/{leg.id}/").status_code == 400

    assert api.delete(f"/api/financial/transfers/{response.json()['id']}/").status_code == 204
    assert not FinancialTransaction.objects.filter(reference_type="transfer").exists()
    assert cash.current_balance() == Decimal("100.00")


def test_transfer_needs_funds_and_distinct_accounts(client_for, owner, accounts):
    cash, bank = accounts
    api = client_for(owner)
    today = timezone.localdate().isoformat()

    too_much = api.post(
        "/api/financial/transfers/",
        {"from_account": cash.id, "to_account": bank.id, "amount": "500.00", "transfer_date": today},
        format="json",
    )
    same = api.post(
        "/api/financial/transfers/",
        {"from_account": cash.id, "to_account": cash.id, "amount": "5.00", "transfer_date": today},
        format="json",
    )

    assert too_much.status_code == 400
    assert same.status_code == 400
    assert not FinancialTransaction.objects.exists()


def test_summary_report_excludes_transfers(client_for, owner, accounts, categories):
    cash, bank = accounts
    income, expense = categories
    api = client_for(owner)
    add_transaction(api, cash, income, "income", "200.00")
    add_transaction(api, cash, expense, "expense", "50.00")
    api.post(
        "/api/financial/transfers/",
        {"from_account": cash.id, "to_account": bank.id, "amount": "100.00", "transfer_date": timezone.localdate().isoformat()},
        format="json",
    )

    data = api.get("/api/financial/reports/summary/").json()

    assert data["total_income"] == 200.0
    assert data["total_expenses"] == 50.0
    assert data["net_profit"] == 150.0
    assert data["total_balance"] == 250.0


def test_advanced_reports_need_premium(client_for, owner):
    response = client_for(owner).get("/api/financial/reports/monthly/")
    assert response.status_code == 403
    assert response.json()["code"] == "feature_not_available"


def test_monthly_and_category_reports(client_for, premium_owner):
    company = premium_owner.company
    account = FinancialAccount.objects.create(company=company, name="Caixa")
    grooming = FinancialCategory.objects.create(company=company, name="Banho", category_type="income")
    vet = FinancialCategory.objects.create(company=company, name="Consultas", category_type="income")
    api = client_for(premium_owner)
    add_transaction(api, account, grooming, "income", "300.00")
    add_transaction(api, account, vet, "income", "100.00")

    monthly = api.get("/api/financial/reports/monthly/").json()
    assert len(monthly) == 12
    assert monthly[-1]["income"] == 400.0
    assert monthly[-1]["profit"] == 400.0
    assert monthly[0]["income"] == 0.0

    by_category = api.get("/api/financial/reports/categories/", {"type": "income"}).json()
    assert [(c["category_name"], c["percentage"]) for c in by_category] == [("Banho", 75.0), ("Consultas", 25.0)]


def test_report_period_validation(client_for, owner):
    response = client_for(owner).get("/api/financial/reports/summary/", {"start": "2024-05-01", "end": "2024-04-01"})
    assert response.status_code == 400
