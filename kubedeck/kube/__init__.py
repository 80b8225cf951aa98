"""Kubernetes resource access for the per-tab content panes.

- `clients`: per-context API clients
- `resources`: namespaces/nodes/pods/deployments/services/events listers
"""

__all__ = [
	"clients",
	"resources",
]
