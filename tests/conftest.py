from hypothesis import HealthCheck, settings

# Strategy warm-up (regex compilation) can trip the timing-based health check on cold runs.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")
