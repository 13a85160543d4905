"""
FastAPI middleware for HTTP request metrics.
"""
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from stackit_assistant.observability.metrics import http_requests_total, http_request_latency_seconds


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track HTTP request metrics.
    
    Chat routes are labelled by their route template so session ids do not
    explode the label cardinality.
    """
    
    async def dispatch(self, request: Request, call_next):
        """Process request and record metrics."""
        start_time = time.time()
        
        response = await call_next(request)
        
        latency = time.time() - start_time
        
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)
        method = request.method
        
        http_requests_total.labels(
            path=path,
            method=method,
            status=response.status_code
        ).inc()
        
        http_request_latency_seconds.labels(
            path=path,
            method=method
        ).observe(latency)
        
        return response
