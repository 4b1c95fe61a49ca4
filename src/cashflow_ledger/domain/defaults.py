from cashflow_ledger.models import CategoryKind, CategoryRegistry, MainCategory, SubCategory

_MAIN_CATEGORIES: tuple[tuple[str, str, CategoryKind], ...] = (
    ("INCOME", "Income", CategoryKind.INCOME),
    ("CARD_SALES", "Card sales", CategoryKind.INCOME),
    ("CASH_DEPOSIT", "Cash deposit", CategoryKind.INCOME),
    ("OTHER_INCOME", "Other income", CategoryKind.INCOME),
    ("EXPENSE", "Expense", CategoryKind.EXPENSE),
    ("LABOR", "Labor", CategoryKind.EXPENSE),
    ("ADMIN", "Administration", CategoryKind.EXPENSE),
    ("TAX", "Taxes", CategoryKind.EXPENSE),
    ("FINANCE", "Financial expense", CategoryKind.EXPENSE),
    ("FIXED_CHARGE", "Public charges", CategoryKind.EXPENSE),
    ("MEMBERSHIP", "Membership cards", CategoryKind.EXPENSE),
    ("RETAIL", "Selling and admin", CategoryKind.EXPENSE),
    ("INVESTMENT", "Other withdrawals", CategoryKind.EXPENSE),
)

_SUB_CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("INCOME", "SALES", "Sales"),
    ("CARD_SALES", "CARD_KB", "Card sales - KB"),
    ("CARD_SALES", "CARD_NH", "Card sales - NH"),
    ("CARD_SALES", "CARD_LOTTE", "Card sales - Lotte"),
    ("CARD_SALES", "CARD_HANA", "Card sales - Hana"),
    ("CARD_SALES", "CARD_SAMSUNG", "Card sales - Samsung"),
    ("CARD_SALES", "CARD_SHINHAN", "Card sales - Shinhan"),
    ("CARD_SALES", "CARD_HYUNDAI", "Card sales - Hyundai"),
    ("CARD_SALES", "CARD_BC", "Card sales - BC"),
    ("ADMIN", "RENT", "Rent"),
    ("ADMIN", "UTILITY", "Utilities and telecom"),
    ("ADMIN", "CLEANING", "Cleaning"),
    ("ADMIN", "SUPPLY", "Electronics and supplies"),
    ("ADMIN", "VEHICLE", "Vehicle upkeep"),
    ("TAX", "VAT", "Value added tax"),
    ("TAX", "INCOME_TAX", "Withholding tax"),
    ("TAX", "LOCAL_TAX", "Local tax"),
    ("FIXED_CHARGE", "POSTAL", "Postal and similar"),
    ("MEMBERSHIP", "MEMBER_CARD", "Membership card"),
    ("RETAIL", "TRANSIT", "Freight"),
    ("RETAIL", "SECURITY", "Security service"),
    ("RETAIL", "POS", "Tax agent"),
    ("INVESTMENT", "TRANSFER", "Transfers"),
    ("INVESTMENT", "HOME_LOAN", "Home loan"),
    ("INVESTMENT", "OFFICE_LOAN", "Loan repayment"),
)


def default_registry() -> CategoryRegistry:
    return CategoryRegistry(
        main=[MainCategory(code=code, name=name, kind=kind) for code, name, kind in _MAIN_CATEGORIES],
        sub=[SubCategory(main_code=main, code=code, name=name) for main, code, name in _SUB_CATEGORIES],
    )
