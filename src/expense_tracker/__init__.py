"""Expense tracker API: authenticated income/expense tracking with admin management."""
