"""
Installment Tracker - Source Package

Tracks bills split into monthly installments: which are paid,
which are pending and which are already overdue.

DESIGN PRINCIPLES:
1. Validate first, mutate second, never partially
2. Status is derived from dates, never stored
3. A failed save is reported, never hidden
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Installment Tracker Team"
