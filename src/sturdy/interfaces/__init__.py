"""Interfaces (application boundary) for STURDY.

Framework-free contracts (ABCs and small DTOs) for the things the example
code talks to: a shell and a service manager.

Dependency rule: this package is independent; do not import from any
`sturdy.*` modules. It may be imported by `sturdy.examples` and
`sturdy.adapters`.
"""
