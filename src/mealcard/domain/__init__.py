"""Domain layer for mealcard application."""

from mealcard.domain.settlement import SettlementService
from mealcard.domain.card import CardService
from mealcard.domain.card_import import CardImportService
from mealcard.domain.recharge import RechargeService
from mealcard.domain.purchase import PurchaseService
from mealcard.domain.meal import MealService
from mealcard.domain.analytics import AnalyticsService
from mealcard.domain.reconciliation import ReconciliationService

__all__ = [
    "SettlementService",
    "CardService",
    "CardImportService",
    "RechargeService",
    "PurchaseService",
    "MealService",
    "AnalyticsService",
    "ReconciliationService",
]
