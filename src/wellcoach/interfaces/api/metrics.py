from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import APIRouter, Response

router = APIRouter(prefix="/metrics", tags=["metrics"])

REQUESTS = Counter("wc_requests_total", "Total API requests", ["method", "status"])
LATENCY = Histogram("wc_request_latency_seconds", "Request latency")

EVENTS_CREATED = Counter("wc_events_created_total", "Module events stored", ["module"])
RECOMMENDATIONS_GENERATED = Counter(
    "wc_recommendations_generated_total", "Recommendations created by the rule engine", ["module"]
)
RECOMMENDATION_FAILURES = Counter(
    "wc_recommendation_failures_total", "Rule engine runs that failed after the event was stored", ["module"]
)
WEBHOOK_EVENTS = Counter("wc_billing_webhook_events_total", "Billing webhook deliveries", ["type"])


@router.get("")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
