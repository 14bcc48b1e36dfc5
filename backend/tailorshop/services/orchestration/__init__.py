"""Service orchestration layer: keeps bills and workflow jobs consistent.

Modules:
- stages: canonical stage order and single-step helpers.
- order_service: bill/job spawn and cascade rules plus stage transitions.
"""
