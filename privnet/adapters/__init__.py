"""Adapter package for external I/O implementations.

Purpose:
    Concrete implementations of the domain ports: the ``requests``-based
    ``ApiSession`` executor, the ``NetworkRestAdapter`` that maps network
    operations onto ``/v1/network/*``, and the offline ``NetworkRestMock``.

Call context:
    Imported by ``privnet.app.factory`` for runtime wiring and by tests.
"""
