"""Infrastructure layer — env store, docker engine, host probes.

This layer depends on the stdlib and wraps external processes.
It must never import from domain, services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
