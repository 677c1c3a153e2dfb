"""
Application Layer

This layer contains use cases (application logic) and DTOs (data transfer objects).
It orchestrates domain logic without containing business rules itself.

- Use cases coordinate the benchmark flows
- DTOs define request/response and worker contracts
- Interfaces define dependencies (inverted)
"""
