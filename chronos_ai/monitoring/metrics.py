from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Define metrics
provider_requests = Counter(
    'chronos_provider_requests_total',
    'Provider attempts by outcome',
    ['provider', 'outcome']
)

provider_latency = Histogram(
    'chronos_provider_latency_seconds',
    'Provider round-trip latency',
    ['provider'],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0]
)

circuit_skips = Counter(
    'chronos_circuit_skips_total',
    'Attempts skipped because the circuit was open',
    ['provider']
)

circuit_opened = Counter(
    'chronos_circuit_opened_total',
    'Times a provider circuit transitioned to open',
    ['provider']
)

cache_hits = Counter(
    'chronos_cache_hits_total',
    'Response cache hits',
    ['feature']
)

cache_misses = Counter(
    'chronos_cache_misses_total',
    'Response cache misses',
    ['feature']
)

enum_defaulted = Counter(
    'chronos_enum_defaulted_total',
    'Structured output enum values replaced by their default',
    ['field']
)

# Metrics endpoint
async def metrics_endpoint():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
