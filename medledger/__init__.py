"""Django project package for the medical record access ledger."""
