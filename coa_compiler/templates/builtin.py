"""
Built-in Templates

A universal base chart of accounts, industry overlays and country overlays
for the combinations most businesses start from.

Account codes are 7-digit and follow the global numbering structure:
1 assets, 2 liabilities, 3 equity, 4 revenue, 5-9 expenses.
"""

from decimal import Decimal
from typing import Optional

from coa_compiler.models.coa import (
    Account,
    AccountType,
    NormalBalance,
    PostingRule,
    PostingType,
    SmartCodeMapping,
    Template,
    TemplateCategory,
)
from coa_compiler.templates.memory import InMemoryTemplateRepository


A = AccountType.ASSETS
L = AccountType.LIABILITIES
E = AccountType.EQUITY
R = AccountType.REVENUE
X = AccountType.EXPENSES


def _account(
    code: str,
    name: str,
    account_type: AccountType,
    subtype: str,
    required: bool = False,
    parent_code: Optional[str] = None,
    smart_code: Optional[str] = None,
    normal_balance: Optional[NormalBalance] = None,
) -> Account:
    return Account(
        code=code,
        name=name,
        type=account_type,
        subtype=subtype,
        required=required,
        parent_code=parent_code,
        smart_code=smart_code,
        normal_balance=normal_balance,
    )


def _rule(pattern: str, name: str, debit: list[str], credit: list[str], **kwargs) -> PostingRule:
    return PostingRule(pattern=pattern, name=name, debit=debit, credit=credit, **kwargs)


# =============================================================================
# BASE
# =============================================================================

UNIVERSAL_BASE = Template(
    id="universal",
    name="Universal Base Chart of Accounts",
    version="1.0.0",
    category=TemplateCategory.BASE,
    description="Accounts every business needs regardless of industry or country",
    accounts=(
        _account("1100000", "Cash and Cash Equivalents", A, "cash", required=True),
        _account("1110000", "Petty Cash", A, "cash", parent_code="1100000"),
        _account("1120000", "Bank Accounts", A, "bank", required=True, parent_code="1100000"),
        _account("1200000", "Accounts Receivable", A, "receivables", required=True),
        _account("1300000", "Inventory", A, "inventory"),
        _account("1400000", "Prepaid Expenses", A, "prepaid"),
        _account("1500000", "Property, Plant and Equipment", A, "fixed_assets", required=True),
        _account(
            "1510000", "Accumulated Depreciation", A, "contra_asset",
            parent_code="1500000", normal_balance=NormalBalance.CREDIT,
        ),
        _account("2100000", "Accounts Payable", L, "payables", required=True),
        _account("2200000", "Accrued Liabilities", L, "accrued"),
        _account("2300000", "Sales Tax Payable", L, "tax", required=True),
        _account("2400000", "Payroll Liabilities", L, "payroll"),
        _account("2500000", "Long-term Debt", L, "long_term_debt"),
        _account("3100000", "Owner's Capital", E, "capital", required=True),
        _account(
            "3200000", "Retained Earnings", E, "retained_earnings", required=True,
            smart_code="HERA.GL.EQUITY.RETAINED.EARNINGS.v1",
        ),
        _account("4100000", "Sales Revenue", R, "operating_revenue", required=True),
        _account("4200000", "Service Revenue", R, "operating_revenue"),
        _account("4900000", "Other Income", R, "other_income"),
        _account("5100000", "Cost of Goods Sold", X, "cost_of_sales", required=True),
        _account("6100000", "Salaries and Wages", X, "payroll", required=True),
        _account("6200000", "Rent Expense", X, "occupancy"),
        _account("6300000", "Utilities", X, "occupancy"),
        _account("6400000", "Marketing and Advertising", X, "marketing"),
        _account("6500000", "Depreciation Expense", X, "depreciation"),
        _account("6900000", "Bank Charges", X, "financial"),
    ),
)


# Generic rules shared by every business. "*" becomes the industry short code.
GLOBAL_POSTING_RULES = (
    _rule(
        "HERA.*.SALE.CASH.v1", "Cash sale", ["1100000"], ["4100000"],
        conditions=[{"field": "payment_method", "value": "cash"}],
    ),
    _rule(
        "HERA.*.SALE.CREDIT.v1", "Sale on account", ["1200000"], ["4100000"],
        conditions=[{"field": "payment_method", "value": "credit"}],
    ),
    _rule("HERA.*.RECEIPT.CUSTOMER.v1", "Customer payment received", ["1120000"], ["1200000"]),
    _rule("HERA.*.PURCHASE.INVENTORY.v1", "Inventory purchase", ["1300000"], ["2100000"]),
    _rule("HERA.*.PAYMENT.SUPPLIER.v1", "Supplier payment", ["2100000"], ["1120000"]),
    _rule("HERA.*.PAYROLL.RUN.v1", "Payroll run", ["6100000"], ["2400000"]),
    _rule("HERA.*.EXPENSE.RENT.v1", "Rent payment", ["6200000"], ["1120000"]),
    _rule("HERA.*.DEPRECIATION.MONTHLY.v1", "Monthly depreciation", ["6500000"], ["1510000"]),
)


# =============================================================================
# INDUSTRIES
# =============================================================================

RESTAURANT = Template(
    id="restaurant",
    name="Restaurant & Food Service",
    category=TemplateCategory.INDUSTRIES,
    description="Food service, hospitality, multi-location dining",
    accounts=(
        _account("1310000", "Food Inventory", A, "inventory", parent_code="1300000"),
        _account("1320000", "Beverage Inventory", A, "inventory", parent_code="1300000"),
        _account("1520000", "Kitchen Equipment", A, "fixed_assets", parent_code="1500000"),
        _account("4100000", "Food Sales Revenue", R, "operating_revenue", required=True),
        _account("4110000", "Beverage Sales Revenue", R, "operating_revenue", parent_code="4100000"),
        _account("5110000", "Food Costs", X, "cost_of_sales", parent_code="5100000"),
        _account("5120000", "Beverage Costs", X, "cost_of_sales", parent_code="5100000"),
        _account("6110000", "Kitchen Staff Wages", X, "payroll", parent_code="6100000"),
    ),
    posting_rules=(
        _rule("HERA.*.SALE.BEVERAGE.v1", "Beverage sale", ["1100000"], ["4110000"]),
        _rule("HERA.*.INVENTORY.FOOD.WASTE.v1", "Food waste write-off", ["5110000"], ["1310000"]),
    ),
)

RETAIL = Template(
    id="retail",
    name="Retail & E-commerce",
    category=TemplateCategory.INDUSTRIES,
    description="Retail stores, online commerce, merchandise",
    accounts=(
        _account("1300000", "Merchandise Inventory", A, "inventory"),
        _account("1530000", "Store Equipment", A, "fixed_assets", parent_code="1500000"),
        _account("4120000", "Online Sales Revenue", R, "operating_revenue", parent_code="4100000"),
        _account(
            "4190000", "Sales Returns and Allowances", R, "contra_revenue",
            parent_code="4100000", normal_balance=NormalBalance.DEBIT,
        ),
        _account("6410000", "Point of Sale Fees", X, "financial"),
    ),
    posting_rules=(
        _rule("HERA.*.SALE.RETURN.v1", "Customer return", ["4190000"], ["1100000"]),
    ),
)

SALON = Template(
    id="salon",
    name="Salon & Beauty Services",
    category=TemplateCategory.INDUSTRIES,
    description="Hair, beauty and wellness services with retail products",
    accounts=(
        _account("1330000", "Beauty Products Inventory", A, "inventory", parent_code="1300000"),
        _account("1540000", "Salon Equipment", A, "fixed_assets", parent_code="1500000"),
        _account("4120000", "Retail Product Sales", R, "operating_revenue", parent_code="4100000"),
        _account("4200000", "Hair Services Revenue", R, "operating_revenue", required=True),
        _account("4210000", "Beauty Treatment Revenue", R, "operating_revenue", parent_code="4200000"),
        _account("6120000", "Stylist Commissions", X, "payroll", parent_code="6100000"),
    ),
    posting_rules=(
        _rule("HERA.*.SERVICE.COMPLETED.v1", "Service completed", ["1100000"], ["4200000"]),
        _rule("HERA.*.COMMISSION.STYLIST.v1", "Stylist commission", ["6120000"], ["2400000"]),
    ),
)

HEALTHCARE = Template(
    id="healthcare",
    name="Healthcare & Medical",
    category=TemplateCategory.INDUSTRIES,
    description="Medical practices, clinics and healthcare facilities",
    accounts=(
        _account("1210000", "Insurance Receivables", A, "receivables", parent_code="1200000"),
        _account("1340000", "Medical Supplies Inventory", A, "inventory", parent_code="1300000"),
        _account("1550000", "Medical Equipment", A, "fixed_assets", parent_code="1500000"),
        _account("4200000", "Patient Services Revenue", R, "operating_revenue", required=True),
        _account("5130000", "Pharmaceutical Costs", X, "cost_of_sales", parent_code="5100000"),
    ),
    posting_rules=(
        _rule("HERA.*.CLAIM.INSURANCE.v1", "Insurance claim billed", ["1210000"], ["4200000"]),
    ),
)

MANUFACTURING = Template(
    id="manufacturing",
    name="Manufacturing & Industrial",
    category=TemplateCategory.INDUSTRIES,
    description="Production, assembly, industrial manufacturing",
    accounts=(
        _account("1300000", "Finished Goods Inventory", A, "inventory"),
        _account("1350000", "Raw Materials Inventory", A, "inventory", parent_code="1300000"),
        _account("1360000", "Work in Process", A, "inventory", parent_code="1300000"),
        _account("1560000", "Manufacturing Equipment", A, "fixed_assets", parent_code="1500000"),
        _account("5140000", "Direct Labor", X, "cost_of_sales", parent_code="5100000"),
        _account("5150000", "Manufacturing Overhead", X, "cost_of_sales", parent_code="5100000"),
    ),
    posting_rules=(
        _rule("HERA.*.PRODUCTION.ISSUE.v1", "Materials issued to production", ["1360000"], ["1350000"]),
        _rule("HERA.*.PRODUCTION.COMPLETE.v1", "Production completed", ["1300000"], ["1360000"]),
    ),
)

PROFESSIONAL = Template(
    id="professional",
    name="Professional Services",
    category=TemplateCategory.INDUSTRIES,
    description="Consulting, legal, accounting and other professional services",
    accounts=(
        _account("1220000", "Unbilled Receivables", A, "receivables", parent_code="1200000"),
        _account("2600000", "Client Retainers", L, "deferred_revenue"),
        _account("4200000", "Professional Fees Revenue", R, "operating_revenue", required=True),
        _account("6130000", "Subcontractor Fees", X, "contractors"),
    ),
    posting_rules=(
        _rule("HERA.*.RETAINER.RECEIVED.v1", "Client retainer received", ["1120000"], ["2600000"]),
    ),
)


# =============================================================================
# COUNTRIES
# =============================================================================

USA = Template(
    id="usa",
    name="United States",
    category=TemplateCategory.COUNTRIES,
    description="US-GAAP with federal payroll taxes and state sales tax",
    currency="USD",
    tax_rate=Decimal("0"),
    accounts=(
        _account("2300000", "Sales Tax Payable", L, "tax", required=True),
        _account("2310000", "Federal Income Tax Payable", L, "tax", parent_code="2300000"),
        _account("2410000", "FICA Payable", L, "payroll", parent_code="2400000"),
        _account("6150000", "Payroll Tax Expense", X, "payroll", parent_code="6100000"),
    ),
)

UK = Template(
    id="uk",
    name="United Kingdom",
    category=TemplateCategory.COUNTRIES,
    description="UK-GAAP with VAT, PAYE and corporation tax",
    currency="GBP",
    tax_rate=Decimal("0.20"),
    accounts=(
        _account("1230000", "VAT Recoverable", A, "tax", parent_code="1200000"),
        _account("2300000", "VAT Payable", L, "tax", required=True),
        _account("2320000", "Corporation Tax Payable", L, "tax", parent_code="2300000"),
        _account("2420000", "PAYE and NIC Payable", L, "payroll", parent_code="2400000"),
    ),
    posting_rules=(
        _rule("HERA.*.TAX.VAT.RETURN.v1", "VAT return settlement", ["2300000"], ["1120000"]),
    ),
)

INDIA = Template(
    id="india",
    name="India",
    category=TemplateCategory.COUNTRIES,
    description="Indian GAAP with GST and TDS",
    currency="INR",
    tax_rate=Decimal("0.18"),
    accounts=(
        _account("1240000", "GST Input Credit", A, "tax", parent_code="1200000"),
        _account("2300000", "GST Output Payable", L, "tax", required=True),
        _account("2330000", "TDS Payable", L, "tax", parent_code="2300000"),
        _account("2340000", "Professional Tax Payable", L, "tax", parent_code="2300000"),
    ),
    smart_code_mappings=(
        SmartCodeMapping(
            smart_code="HERA.TAX.GST.INPUT.CREDIT.v1",
            account_code="1240000",
            posting_type=PostingType.DEBIT,
        ),
        SmartCodeMapping(
            smart_code="HERA.TAX.GST.OUTPUT.v1",
            account_code="2300000",
            posting_type=PostingType.CREDIT,
        ),
    ),
)

UAE = Template(
    id="uae",
    name="United Arab Emirates",
    category=TemplateCategory.COUNTRIES,
    description="IFRS with 5% VAT and end-of-service benefits",
    currency="AED",
    tax_rate=Decimal("0.05"),
    accounts=(
        _account("1250000", "VAT Recoverable", A, "tax", parent_code="1200000"),
        _account("2300000", "VAT Payable", L, "tax", required=True),
        _account("2430000", "End of Service Benefits Provision", L, "payroll", parent_code="2400000"),
    ),
)


BUILTIN_TEMPLATES = (
    UNIVERSAL_BASE,
    RESTAURANT,
    RETAIL,
    SALON,
    HEALTHCARE,
    MANUFACTURING,
    PROFESSIONAL,
    USA,
    UK,
    INDIA,
    UAE,
)


def create_default_repository() -> InMemoryTemplateRepository:
    """
    Build a repository holding the built-in templates and global rules.

    Each call returns a new repository; the templates themselves are
    frozen and shared.
    """
    return InMemoryTemplateRepository(BUILTIN_TEMPLATES, GLOBAL_POSTING_RULES)
