"""
Companies module.

- Company audit records and their checklist (frozen values, pure transitions)
- Durable store with snapshot fan-out, and the in-memory board that owns state
- JSON routes for creating, editing, closing and deleting audits
- Every write is recorded to the append-only audit trail
"""
