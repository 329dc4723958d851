"""Backend entrypoint for local runs and integrations."""

from backend.factory import BackendServices, build_in_memory_services


def create_backend_services(*, seed: bool = True) -> BackendServices:
    """Factory for in-memory backend services used by scripts and smoke checks."""
    return build_in_memory_services(seed=seed)
