"""Adapters (infrastructure) for STURDY.

Concrete implementations of the interfaces in `sturdy.interfaces`, backed by
the operating system (subprocesses, systemctl).

Dependency rule: may import `sturdy.interfaces`; nothing in
`sturdy.interfaces` or `sturdy.domain` may import this package.
"""
