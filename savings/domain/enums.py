from enum import Enum

class AllocationType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

class DeductionType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"

class GoalEventType(str, Enum):
    CREATED = "goal.created"
    CHANGED = "goal.changed"
    DEPOSITED = "goal.deposited"
    DEDUCTED = "goal.deducted"
    DELETED = "goal.deleted"
    RESET = "goal.reset"
    ACHIEVED = "goal.achieved"

class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    BILL_PAYMENT = "bill_payment"
    INVESTMENT = "investment"

class ReferenceType(str, Enum):
    CONTROL = "control"
    PHONE = "phone"
    LIPA = "lipa"

class BillerCategory(str, Enum):
    UTILITY = "Utility"
    INTERNET = "Internet"
    MOBILE = "Mobile"
    ENTERTAINMENT = "Entertainment"
    OTHER = "Other"

class AssetType(str, Enum):
    STOCK = "stock"
    UTT = "utt"
    BOND = "bond"
