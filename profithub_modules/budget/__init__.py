"""Budget: budget lines, actual cost lines, budget-vs-actual."""

from profithub_modules.budget.service import BudgetService

__all__ = ["BudgetService"]
