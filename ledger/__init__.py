"""Medical record access ledger.

This application holds the identity registry, the per-patient permission
roster, the append-only report ledger and the audit event log, together
with the guards, serializers and views exposing them over HTTP.
"""
