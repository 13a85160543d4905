"""
Prometheus metrics registry and helpers.
Defines all metrics used by the conversation engine and the API.
"""
from prometheus_client import Counter, Histogram
import logging

logger = logging.getLogger(__name__)

# Define bucket ranges for latency histograms
LATENCY_BUCKETS = [0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0]

# ============================================================================
# CONVERSATION METRICS
# ============================================================================

chat_messages_total = Counter(
    'chat_messages_total',
    'Inbound user messages by the route that handled them',
    ['route']
)

classifier_intent_total = Counter(
    'classifier_intent_total',
    'Fallback classifications by intent',
    ['intent']
)

intake_transitions_total = Counter(
    'intake_transitions_total',
    'Intake state machine transitions',
    ['from_step', 'to_step']
)

turn_error_count_total = Counter(
    'turn_error_count_total',
    'Unexpected errors absorbed while handling a chat turn',
    ['error_type']
)

# ============================================================================
# REMOTE CALL METRICS
# ============================================================================

remote_assistant_calls_total = Counter(
    'remote_assistant_calls_total',
    'Remote assistant calls by outcome',
    ['status']
)

remote_assistant_latency_seconds = Histogram(
    'remote_assistant_latency_seconds',
    'Remote assistant call latency in seconds',
    buckets=LATENCY_BUCKETS
)

ticket_submissions_total = Counter(
    'ticket_submissions_total',
    'Ticket submissions by outcome',
    ['status']
)

# ============================================================================
# HTTP METRICS
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['path', 'method', 'status']
)

http_request_latency_seconds = Histogram(
    'http_request_latency_seconds',
    'HTTP request latency in seconds',
    ['path', 'method'],
    buckets=LATENCY_BUCKETS
)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def record_remote_call(status: str, latency: float):
    """
    Record a remote assistant call.
    
    Args:
        status: success, error or timeout
        latency: Call latency in seconds
    """
    remote_assistant_calls_total.labels(status=status).inc()
    remote_assistant_latency_seconds.observe(latency)


def record_intake_transition(from_step: int, to_step: int):
    """Record an intake step change."""
    intake_transitions_total.labels(from_step=str(from_step), to_step=str(to_step)).inc()


logger.info("Prometheus metrics initialized")
