LANDLORD = "landlord"
TENANT = "tenant"

PAYMENT_PENDING = "pending"
PAYMENT_PAID = "paid"
PAYMENT_OVERDUE = "overdue"

DEFAULT_PAYMENT_METHOD = "Credit Card"

# Dashboard windows
TENANT_ACTIVITY_LIMIT = 10
MONTHLY_INCOME_MONTHS = 6

CORS_ALLOW_ORIGINS = [
    "https://app.rentaltrust.io",
    "https://rentaltrust.io",
]
