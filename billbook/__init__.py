"""
billbook - Source Package

The import/export and reconciliation core of a personal household-bill
tracker. One user keeps a ledger of months, each holding the bills paid
in that period.

DESIGN PRINCIPLES:
1. One month record per calendar month, always
2. Salvage what can be salvaged from imported files
3. Parsing is pure, persistence is explicit
4. Every import and export is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "billbook Team"
