"""
Discovery and in-memory registries for generated message packages.

This package is responsible for:
* Scanning the ordered workspace search path for generated packages.
* Caching package locations and lazily loaded package handles.
* Holding handlers that are linked into the running program (fast registry).
"""
