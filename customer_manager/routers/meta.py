from __future__ import annotations

from fastapi import APIRouter

from customer_manager.core.config import API_PREFIX
from customer_manager.core.metrics import request_metrics
from customer_manager.services.validation import rules_as_dict

router = APIRouter(tags=["meta"])


@router.get(f"{API_PREFIX}/validation-rules")
def validation_rules():
    return {"message": "Success", "data": rules_as_dict()}


@router.get("/internal/metrics")
def internal_metrics():
    return {"endpoints": request_metrics.snapshot()}
